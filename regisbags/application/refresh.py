"""Last-write-wins bookkeeping for periodically refreshed reports."""
from __future__ import annotations

import logging
import threading
from typing import Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ReportRefresher(Generic[T]):
    """Tracks refresh requests so a slow, stale fetch never replaces a newer one.

    Every request gets a token from :meth:`begin`. A completed result is kept
    only if no result carrying a newer token has been applied already.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._issued = 0
        self._applied = 0
        self._current: T | None = None

    @property
    def current(self) -> T | None:
        return self._current

    @property
    def applied_token(self) -> int:
        return self._applied

    def begin(self) -> int:
        with self._lock:
            self._issued += 1
            return self._issued

    def complete(self, token: int, result: T) -> bool:
        with self._lock:
            if token <= self._applied:
                logger.debug("Discarding stale refresh %d (applied %d)", token, self._applied)
                return False
            self._applied = token
            self._current = result
            return True

    def refresh(self, load: Callable[[], T]) -> bool:
        token = self.begin()
        return self.complete(token, load())
