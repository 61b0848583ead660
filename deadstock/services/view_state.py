"""Fetch-and-commit plumbing shared by the screen views.

A view keeps the last committed snapshot of one screen (its data, a
loading flag and an error message). Every refresh takes a ticket from a
``LatestResultGate`` so a slow, older response can never overwrite the
result of a newer one.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional, Tuple

from deadstock.config import get_settings
from deadstock.core.sequencing import LatestResultGate
from deadstock.services.session_service import MissingSessionError
from deadstock.services.store_client import StoreError

logger = logging.getLogger(__name__)

FAILED_TO_LOAD = "failed_to_load"


@dataclass
class ViewState:
    data: Any = None
    loading: bool = False
    error: Optional[str] = None
    loaded_at: Optional[datetime] = None


class FetchingView:
    name = "view"
    requires_pharmacy = True

    def __init__(self, settings=None):
        self._settings = settings or get_settings()
        self._gate = LatestResultGate(self.name)
        self.state = ViewState(data=self.empty())

    def empty(self):
        return []

    def fetch(self, store, context):
        raise NotImplementedError

    def refresh(self, store, context) -> bool:
        """Fetch a fresh snapshot; True when this call's result was committed."""
        if self.requires_pharmacy:
            context.require_pharmacy_id()

        ticket = self._gate.begin()
        self.state.loading = True
        try:
            result = self.fetch(store, context)
        except MissingSessionError:
            self.state.loading = False
            raise
        except StoreError as exc:
            logger.warning(
                "Fetch %s failed: %s", self.name, exc, extra={"session_key": context.session_key}
            )
            return self._gate.commit(ticket, self._fail)
        except Exception:
            logger.exception(
                "Fetch %s failed unexpectedly", self.name, extra={"session_key": context.session_key}
            )
            return self._gate.commit(ticket, self._fail)
        return self._gate.commit(ticket, lambda: self._succeed(result))

    def _succeed(self, result):
        self.state.data = result
        self.state.error = None
        self.state.loading = False
        self.state.loaded_at = datetime.now(timezone.utc)

    def _fail(self):
        self.state.data = self.empty()
        self.state.error = FAILED_TO_LOAD
        self.state.loading = False

    def teardown(self):
        self._gate.cancel()
        self.state.loading = False


class ViewRegistry:
    """One view instance per (session key, screen)."""

    def __init__(self):
        self._lock = threading.Lock()
        self._views: Dict[Tuple[str, str], FetchingView] = {}

    def get(self, session_key: str, name: str, factory: Callable[[], FetchingView]):
        with self._lock:
            view = self._views.get((session_key, name))
            if view is None:
                view = factory()
                self._views[(session_key, name)] = view
            return view

    def __len__(self):
        with self._lock:
            return len(self._views)

    def teardown(self, session_key: str) -> int:
        with self._lock:
            keys = [key for key in self._views if key[0] == session_key]
            views = [self._views.pop(key) for key in keys]
        for view in views:
            view.teardown()
        return len(views)

    def teardown_all(self) -> int:
        with self._lock:
            views = list(self._views.values())
            self._views.clear()
        for view in views:
            view.teardown()
        return len(views)
