# =============================================================================
#  EMERGENCY UNIT DISPATCH SIMULATION (EUDS)
#  Product Signature: EUDS
# ------------------------------------------------------------------------------
#  File: Core/Errors.py
#  Purpose: Define the error taxonomy raised by the dispatch core.
#  Author: Muhammet Ali Ozturk
#  Generated: 2026-10-19
#  Environment: Python 3.9.13
# =============================================================================


class Dispatch_Error(Exception):
    """
    Base class for every precondition / invariant violation in the dispatch core.
    None of these are recoverable at runtime: they surface to the caller immediately.
    """


class Invalid_Configuration(Dispatch_Error, ValueError):
    pass


class Invalid_Incident(Dispatch_Error, ValueError):
    pass


class Empty_Queue(Dispatch_Error, IndexError):
    pass


class Invalid_Unit(Dispatch_Error, ValueError):
    pass
