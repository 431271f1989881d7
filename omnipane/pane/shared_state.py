"""
Shared State
============

State shared between the render loop and background services.
"""

from threading import Lock


class ActiveChannelIndex:
    """
    Index of the channel on screen.

    Written by the ChannelSelector thread, read by the render loop. Only
    plain load/store are offered; the single writer does its own
    read-modify-write.

    Example:
        >>> index = ActiveChannelIndex()
        >>> index.store(2)
        >>> index.load()
        2
    """

    def __init__(self, initial: int = 0):
        self._value = initial
        self._lock = Lock()

    def load(self) -> int:
        with self._lock:
            return self._value

    def store(self, value: int) -> None:
        with self._lock:
            self._value = value

    def __repr__(self) -> str:
        return f"ActiveChannelIndex({self.load()})"
