# =============================================================================
#  EMERGENCY UNIT DISPATCH SIMULATION (EUDS)
#  Product Signature: EUDS
# ------------------------------------------------------------------------------
#  File: tests/conftest.py
#  Purpose: Shared pytest fixtures for the dispatch simulation suite.
#  Author: Muhammet Ali Ozturk
#  Generated: 2026-10-19
#  Environment: Python 3.9.13
# =============================================================================

import matplotlib

matplotlib.use("Agg")

from typing import List

import pytest
from loguru import logger

from Core.Events import Notification


class Recording_Listener:
    """Keeps every notification it receives, in emission order."""

    def __init__(self) -> None:
        self.notifications_list_notification: List[Notification] = []

    def On_Notification(self, notification: Notification) -> None:
        self.notifications_list_notification.append(notification)


@pytest.fixture
def recorder():
    return Recording_Listener()


@pytest.fixture(autouse=True)
def _drop_loguru_sinks():
    # the CLI adds a sink bound to the captured stderr; drop it once the test ends
    yield
    logger.remove()
