"""Periodic refresh of schema definitions."""

import logging
import threading
from typing import Optional

from schemadefs.errors import RefreshError

logger = logging.getLogger(__name__)


class SchemaRefresher:
    """
    Calls handler.refresh() on a background thread every `interval` seconds

    Failed refreshes are logged and retried on the next tick only; an
    unexpected error never stops the background thread.
    """

    def __init__(self, handler, interval: float = 600):
        if interval <= 0:
            raise ValueError("refresh interval must be positive")
        self.handler = handler
        self.interval = interval
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def refresh_now(self) -> bool:
        """Run one refresh, returning True if it completed without error"""
        try:
            self.handler.refresh()
        except RefreshError as e:
            logger.warning(f"Schema definition refresh failed: {e}")
            return False
        return True

    def start(self) -> None:
        """Start refreshing in the background (first refresh runs immediately)"""
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="schema-definition-refresher", daemon=True)
        self._thread.start()
        logger.info(f"Started schema definition refresher (every {self.interval}s)")

    def stop(self, timeout: Optional[float] = None) -> None:
        """Stop the background thread and wait for it to exit"""
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def _run(self) -> None:
        while not self._stop.is_set():
            try:
                self.refresh_now()
            except Exception:
                logger.exception("Unexpected error while refreshing schema definitions")
            self._stop.wait(self.interval)
