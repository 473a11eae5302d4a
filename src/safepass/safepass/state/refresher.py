from __future__ import annotations

import logging
import threading
from typing import Optional

from ..core.exceptions import DomainError
from .app_state import AppState

logger = logging.getLogger(__name__)


class RefreshScheduler:
    """Background thread re-running AppState.refresh() on a fixed interval.

    Picks up scans recorded by other devices. Failures are logged and the
    loop keeps going until stop().
    """

    def __init__(self, state: AppState, *, interval_seconds: float):
        self._state = state
        self._interval = float(interval_seconds)
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self._interval <= 0 or self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="safepass-refresh", daemon=True)
        self._thread.start()
        logger.info("Refresh scheduler started (every %ss)", self._interval)

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def run_once(self) -> bool:
        try:
            self._state.refresh()
            return True
        except DomainError as e:
            logger.warning("Scheduled refresh failed: %s", e)
        except Exception:
            logger.exception("Unexpected error during scheduled refresh")
        return False

    def _run(self) -> None:
        while not self._stop.wait(self._interval):
            self.run_once()
