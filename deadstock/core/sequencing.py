from __future__ import annotations

import logging
import threading
from typing import Callable

logger = logging.getLogger(__name__)


class LatestResultGate:
    """Lets only the most recently started fetch publish its result.

    Each fetch takes a ticket from ``begin``. A result is applied through
    ``commit`` only while its ticket is still the newest one issued;
    ``cancel`` invalidates every outstanding ticket.
    """

    def __init__(self, name: str = "fetch"):
        self._name = name
        self._lock = threading.Lock()
        self._latest = 0

    def begin(self) -> int:
        with self._lock:
            self._latest += 1
            return self._latest

    def is_current(self, ticket: int) -> bool:
        with self._lock:
            return ticket == self._latest

    def commit(self, ticket: int, apply: Callable[[], None]) -> bool:
        with self._lock:
            if ticket != self._latest:
                logger.debug(
                    "Discarding stale %s result (ticket %s, latest %s)",
                    self._name,
                    ticket,
                    self._latest,
                )
                return False
            apply()
            return True

    def cancel(self) -> None:
        with self._lock:
            self._latest += 1
