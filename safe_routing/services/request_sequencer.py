"""
Latest-request-wins bookkeeping for repeated routing triggers.

Live location updates can start a new computation before the previous one
finishes. Each computation takes a ticket; only the result carrying the
newest ticket is applied and older ones are dropped, never merged.
"""

import threading
from typing import Any, Optional


class RequestSequencer:
    """Monotonic request numbering with stale-result rejection."""

    def __init__(self):
        self._lock = threading.Lock()
        self._issued = 0
        self._applied = 0
        self._result: Optional[Any] = None

    def next_request(self) -> int:
        """Issue a new request number, superseding all earlier ones."""
        with self._lock:
            self._issued += 1
            return self._issued

    def is_current(self, request_id: int) -> bool:
        with self._lock:
            return request_id == self._issued

    def apply(self, request_id: int, result: Any) -> bool:
        """
        Store a result if it belongs to the newest request.

        Returns:
            True if applied, False if the result was stale and discarded
        """
        with self._lock:
            if request_id != self._issued or request_id <= self._applied:
                return False
            self._applied = request_id
            self._result = result
            return True

    @property
    def latest_result(self) -> Optional[Any]:
        with self._lock:
            return self._result

    @property
    def latest_request(self) -> int:
        with self._lock:
            return self._issued
