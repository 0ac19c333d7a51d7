"""
Runs the ingestion loop on a background thread.

    handle = start(connection, forwarder)
    ...
    handle.stop()   # sets the stop event, joins, re-raises a serial failure
"""

import logging
import threading
from typing import Any, Dict, Optional

from .ingest import DEFAULT_SIGNAL_QUALITY_THRESHOLD, IngestionLoop, LoopState


logger = logging.getLogger(__name__)


class BridgeHandle:
    """Handle on a running ingestion thread."""

    def __init__(self, loop: IngestionLoop):
        self.loop = loop
        self.stop_event = loop.stop_event
        self.error: Optional[Exception] = None
        self._error_reported = False
        self._stop_lock = threading.Lock()
        self._thread = threading.Thread(
            target=self._run, name="zone-bridge-ingest", daemon=True
        )

    def start(self) -> "BridgeHandle":
        self._thread.start()
        return self

    def _run(self) -> None:
        try:
            self.loop.run()
        except Exception as e:
            # Kept for the owner, surfaced by stop()
            self.error = e

    @property
    def state(self) -> LoopState:
        return self.loop.state

    @property
    def is_running(self) -> bool:
        return self._thread.is_alive()

    def get_stats(self) -> Dict[str, Any]:
        return self.loop.get_stats()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the thread exits or timeout. Returns True once it has exited."""
        self._thread.join(timeout)
        return not self._thread.is_alive()

    def stop(self) -> None:
        """
        Request the loop to stop and join its thread.

        Safe to call more than once. A failure captured from the loop is
        raised by the first call only.
        """
        self.stop_event.set()
        with self._stop_lock:
            self._thread.join()
            if self.error is not None and not self._error_reported:
                self._error_reported = True
                raise self.error


def start(
    source,
    forwarder,
    signal_quality_threshold: int = DEFAULT_SIGNAL_QUALITY_THRESHOLD,
) -> BridgeHandle:
    """Start ingesting from source on a new thread. Does not block."""
    loop = IngestionLoop(
        source,
        forwarder,
        stop_event=threading.Event(),
        signal_quality_threshold=signal_quality_threshold,
    )
    handle = BridgeHandle(loop).start()
    logger.info("Ingestion thread started")
    return handle
