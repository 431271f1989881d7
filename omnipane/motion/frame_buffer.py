"""
Frame Buffer
============

Rolling window of timestamped comparison frames for one channel.
"""

from collections import deque
from dataclasses import dataclass
from typing import Any, Deque, List, Optional


@dataclass(frozen=True)
class TimestampedFrame:
    """Immutable buffered frame"""

    image: Any
    """Comparison-form image (grayscale + blur)"""

    captured_at: float
    """Monotonic capture instant in seconds"""


class FrameBuffer:
    """
    FIFO of TimestampedFrame in capture order.

    Timestamps are non-decreasing; a push older than the newest frame is
    rejected. Frames leave the buffer only through select_background().

    Example:
        >>> buffer = FrameBuffer()
        >>> buffer.push(TimestampedFrame(image=None, captured_at=0.0))
        >>> buffer.push(TimestampedFrame(image=None, captured_at=1.0))
        >>> buffer.select_background(now=1.0, lag=0.5).captured_at
        0.0
        >>> len(buffer)
        1
    """

    def __init__(self):
        self._frames: Deque[TimestampedFrame] = deque()

    def push(self, frame: TimestampedFrame) -> None:
        """
        Append a frame at the back.

        Raises:
            ValueError: If the frame is older than the newest buffered frame
        """
        if self._frames and frame.captured_at < self._frames[-1].captured_at:
            raise ValueError(
                f"Frame captured at {frame.captured_at} is older than the newest "
                f"buffered frame ({self._frames[-1].captured_at})"
            )
        self._frames.append(frame)

    def select_background(self, now: float, lag: float) -> Optional[TimestampedFrame]:
        """
        Pop every frame at least `lag` seconds old and return the newest of them.

        Frames older than the chosen background are discarded with it. When
        no frame is old enough yet, nothing is popped and None is returned.

        Args:
            now: Current monotonic instant
            lag: Minimum age of the background frame

        Returns:
            Background frame, or None if no buffered frame is old enough
        """
        cutoff = now - lag
        background = None
        while self._frames and self._frames[0].captured_at <= cutoff:
            background = self._frames.popleft()
        return background

    def timestamps(self) -> List[float]:
        return [frame.captured_at for frame in self._frames]

    def __len__(self) -> int:
        return len(self._frames)
