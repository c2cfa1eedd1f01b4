# =============================================================================
#  EMERGENCY UNIT DISPATCH SIMULATION (EUDS)
#  Product Signature: EUDS
# ------------------------------------------------------------------------------
#  File: Core/Priority_Queue.py
#  Purpose: Generic min-priority queue used for the timeline and triage queue.
#  Author: Muhammet Ali Ozturk
#  Generated: 2026-10-19
#  Environment: Python 3.9.13
# =============================================================================

import heapq
from typing import Any, Generic, List, Tuple, TypeVar, Union

from Core.Errors import Empty_Queue


Priority_Key = Union[int, Tuple[int, ...]]

T = TypeVar("T")


class Min_Priority_Queue(Generic[T]):
    """
    Binary min-heap of (key, seq, payload) entries.

    Keys only need to be mutually comparable (ints, or tuples of ints for composite
    orderings). seq makes equal keys come out in insertion order and keeps payloads
    out of the comparison.
    """

    def __init__(self) -> None:
        self._heap_list_tuple_key_i32_any : List[Tuple[Any, int, T]] = []
        self._seq_i32                     : int = 0

    def Insert(self, payload_any: T, key_priority_key: Priority_Key) -> None:
        self._seq_i32 += 1
        heapq.heappush(self._heap_list_tuple_key_i32_any, (key_priority_key, self._seq_i32, payload_any))

    def Extract_Min(self) -> T:
        if not self._heap_list_tuple_key_i32_any:
            raise Empty_Queue("Extract_Min() called on an empty priority queue.")
        return heapq.heappop(self._heap_list_tuple_key_i32_any)[2]

    def Peek_Min(self) -> T:
        if not self._heap_list_tuple_key_i32_any:
            raise Empty_Queue("Peek_Min() called on an empty priority queue.")
        return self._heap_list_tuple_key_i32_any[0][2]

    def Peek_Key(self) -> Priority_Key:
        if not self._heap_list_tuple_key_i32_any:
            raise Empty_Queue("Peek_Key() called on an empty priority queue.")
        return self._heap_list_tuple_key_i32_any[0][0]

    def Is_Empty(self) -> bool:
        return not self._heap_list_tuple_key_i32_any

    def Size(self) -> int:
        return len(self._heap_list_tuple_key_i32_any)

    def Items(self) -> List[Tuple[Priority_Key, T]]:
        # extraction order, queue untouched
        return [(key_any, payload_any) for key_any, _, payload_any in sorted(self._heap_list_tuple_key_i32_any, key=lambda e: (e[0], e[1]))]

    def __len__(self) -> int:
        return len(self._heap_list_tuple_key_i32_any)

    def __bool__(self) -> bool:
        return bool(self._heap_list_tuple_key_i32_any)
