"""Background polling of memory statistics for the watch view."""

import logging
import threading
from queue import Queue
from typing import Protocol

from pyfree.errors import FreeError
from pyfree.meminfo import LINUX_PROFILE, FieldProfile, derive
from pyfree.models import MemInfo, RawStats

logger = logging.getLogger(__name__)


class StatsSource(Protocol):
    """Anything that can produce raw memory statistics."""

    def read(self) -> RawStats:
        """Return field name -> bytes, raising FreeError on failure."""
        ...


class MemoryMonitor:
    """
    Memory monitor that periodically reads a statistics source.

    Runs in a separate daemon thread and pushes MemInfo snapshots to a
    thread-safe Queue. A failed poll is logged and skipped.
    """

    def __init__(
        self,
        update_queue: Queue[MemInfo],
        source: StatsSource,
        poll_rate: float = 2.0,
        profile: FieldProfile = LINUX_PROFILE,
    ) -> None:
        """
        Initialize the MemoryMonitor.

        Args:
            update_queue: Thread-safe queue to push updates to.
            source: Where the raw statistics are read from.
            poll_rate: How often to poll (in seconds). Default 2.0s.
            profile: Field names used to derive the records.
        """
        self._queue = update_queue
        self._source = source
        self._profile = profile
        self._poll_rate = max(0.1, poll_rate)
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def poll_rate(self) -> float:
        """Get the current poll rate."""
        return self._poll_rate

    @poll_rate.setter
    def poll_rate(self, value: float) -> None:
        """Set the poll rate."""
        self._poll_rate = max(0.1, value)  # Minimum 0.1 seconds

    @property
    def is_running(self) -> bool:
        """Check if the monitor thread is running."""
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the monitoring thread."""
        if self.is_running:
            return

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._poll_loop,
            daemon=True,
            name="MemoryMonitor",
        )
        self._thread.start()

    def stop(self, timeout: float | None = 5.0) -> None:
        """
        Stop the monitoring thread.

        Args:
            timeout: How long to wait for thread to stop (seconds).
        """
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            self._thread = None

    def collect(self) -> MemInfo:
        """Read the source once and derive a snapshot."""
        return derive(self._source.read(), self._profile)

    def _poll_loop(self) -> None:
        """Main polling loop running in the background thread."""
        while not self._stop_event.is_set():
            try:
                self._queue.put(self.collect())
            except FreeError as e:
                logger.debug("Poll failed: %s", e)

            # Wait for poll_rate seconds or until stop is requested
            self._stop_event.wait(timeout=self._poll_rate)
