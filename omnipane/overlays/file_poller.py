"""
File Poller
===========

Background thread that keeps the latest content of a file in memory.
"""

import threading
import time
from pathlib import Path
from typing import Optional, Union

from omnipane.logging_utils import RepeatGate, get_component_logger

logger = get_component_logger(__name__, "file_poller")


class PollError(OSError):
    """Reading the polled file failed."""
    pass


class FilePoller:
    """
    Periodically re-reads a file into a lock-guarded cache.

    The polling thread is the only writer. The lock is held only while the
    cached string is swapped or copied, never during file I/O. A failed read
    is logged and leaves the previous content in place. Between reads the
    thread sleeps on the cancel event it was started with; stop() sets it.

    Args:
        path: File to poll
        poll_interval: Seconds between two reads

    Usage:
        >>> poller = FilePoller("/sys/bus/w1/devices/28-0316a2795fff/w1_slave", 5.0)
        >>> poller.start(cancel_event)  # background thread
        >>> poller.content()            # latest content ("" until the first read)
        >>> poller.stop()
    """

    def __init__(self, path: Union[str, Path], poll_interval: float):
        self.path = Path(path)
        self.poll_interval = poll_interval

        self._lock = threading.Lock()
        self._content = ""
        self._last_update: Optional[float] = None

        self._thread: Optional[threading.Thread] = None
        self._cancel_event: Optional[threading.Event] = None
        self._failures = RepeatGate()

    def start(self, cancel_event: threading.Event) -> None:
        """Start polling in a daemon thread until `cancel_event` or stop()."""
        if self._thread is not None and self._thread.is_alive():
            return

        self._cancel_event = cancel_event
        self._thread = threading.Thread(
            target=self._poll_loop,
            args=(cancel_event,),
            daemon=True,
            name=f"FilePoller[{self.path.name}]",
        )
        self._thread.start()

        logger.info(
            f"Polling {self.path} every {self.poll_interval}s",
            extra={"event": "poller_started", "path": str(self.path)},
        )

    def stop(self, timeout: float = 5.0) -> None:
        """Set the cancel event the thread was started with and join it."""
        if self._thread:
            self._cancel_event.set()
            self._thread.join(timeout=timeout)
            self._thread = None
            logger.info("Poller stopped", extra={"event": "poller_stopped", "path": str(self.path)})

    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def poll_once(self) -> bool:
        """
        Read the file once and publish its content.

        Returns:
            True if the cache was refreshed
        """
        try:
            content = self._read()
        except PollError as e:
            if self._failures.open(str(e)):
                logger.warning(str(e), extra={"event": "poll_failed", "path": str(self.path)})
            return False

        with self._lock:
            self._content = content
            self._last_update = time.monotonic()

        if self._failures.clear():
            logger.info("Poll recovered", extra={"event": "poll_recovered", "path": str(self.path)})
        return True

    def content(self) -> str:
        with self._lock:
            return self._content

    @property
    def last_update(self) -> Optional[float]:
        """Monotonic instant of the last successful read, None before it."""
        with self._lock:
            return self._last_update

    # ========================================================================
    # Private
    # ========================================================================

    def _read(self) -> str:
        try:
            return self.path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            raise PollError(f"Failed to read {self.path}: {e}") from e

    def _poll_loop(self, cancel_event: threading.Event) -> None:
        while not cancel_event.is_set():
            try:
                self.poll_once()
            except Exception as e:
                logger.error(
                    f"Error in file poller: {e}",
                    extra={"event": "poller_error", "path": str(self.path)},
                    exc_info=True,
                )

            if cancel_event.wait(timeout=self.poll_interval):
                break
