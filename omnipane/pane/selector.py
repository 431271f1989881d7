"""
Channel Selector
================

Background timer rotating the channel on screen.
"""

import threading
from typing import Optional

from omnipane.logging_utils import get_component_logger
from omnipane.pane.shared_state import ActiveChannelIndex

logger = get_component_logger(__name__, "selector")


class ChannelSelector:
    """
    Rotates the active channel index every `interval` seconds.

    Never waits on the render loop: the only shared state is the
    ActiveChannelIndex. The thread sleeps on the cancel event it was started
    with, so setting that event (or calling stop()) ends it immediately.

    Args:
        index: Shared ActiveChannelIndex (this selector is its only writer)
        channel_count: Number of channels to rotate through
        interval: Seconds between rotations

    Usage:
        >>> selector = ChannelSelector(index, channel_count=2, interval=10.0)
        >>> selector.start(cancel_event)  # background thread
        >>> # ... later ...
        >>> selector.stop()
    """

    def __init__(self, index: ActiveChannelIndex, channel_count: int, interval: float = 10.0):
        if channel_count < 1:
            raise ValueError(f"channel_count must be >= 1, got {channel_count}")
        if interval <= 0:
            raise ValueError(f"interval must be > 0, got {interval}")

        self.index = index
        self.channel_count = channel_count
        self.interval = interval

        self._thread: Optional[threading.Thread] = None
        self._cancel_event: Optional[threading.Event] = None

    def start(self, cancel_event: threading.Event) -> None:
        """Start rotating in a daemon thread until `cancel_event` or stop()."""
        if self.channel_count < 2:
            logger.info(
                "Single channel, rotation disabled",
                extra={"event": "rotation_disabled"},
            )
            return

        self._cancel_event = cancel_event
        self._thread = threading.Thread(
            target=self._rotation_loop,
            args=(cancel_event,),
            daemon=True,
            name="ChannelSelector",
        )
        self._thread.start()

        logger.info(
            f"Rotating {self.channel_count} channels every {self.interval}s",
            extra={
                "event": "rotation_started",
                "channel_count": self.channel_count,
                "interval": self.interval,
            },
        )

    def stop(self, timeout: float = 5.0) -> None:
        """Set the cancel event the thread was started with and join it."""
        if self._thread:
            self._cancel_event.set()
            self._thread.join(timeout=timeout)
            self._thread = None
            logger.info("Rotation stopped", extra={"event": "rotation_stopped"})

    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def advance(self) -> int:
        """
        Move to the next channel.

        Returns:
            The new index
        """
        new_index = (self.index.load() + 1) % self.channel_count
        self.index.store(new_index)

        logger.debug(
            f"Active channel -> {new_index}",
            extra={"event": "channel_rotated", "index": new_index},
        )
        return new_index

    # ========================================================================
    # Private
    # ========================================================================

    def _rotation_loop(self, cancel_event: threading.Event) -> None:
        while not cancel_event.wait(timeout=self.interval):
            self.advance()
