"""
Fake Implementations for Unit Tests
===================================

Stand-ins for the protocols in omnipane/interfaces.py: no camera, no window,
no OpenCV calls. Each fake records what it was asked to do.
"""

from typing import List, Optional, Sequence, Tuple

import numpy as np

from omnipane.interfaces import ImageProcessingError
from omnipane.video.capture import CaptureError


def blank_frame(width: int = 64, height: int = 48, value: int = 0) -> np.ndarray:
    return np.full((height, width, 3), value, dtype=np.uint8)


class FakeCaptureDevice:
    """
    Capture device serving `frame_count` frames, then failing.

    frame_count=None never runs out.
    """

    def __init__(self, source: str = "fake://0", frame_count: Optional[int] = None, frame: Optional[np.ndarray] = None):
        self.source = source
        self.frame_count = frame_count
        self.frame = frame if frame is not None else blank_frame()

        self.reads = 0
        self.buffer_size: Optional[int] = None
        self.released = False

    def read(self) -> np.ndarray:
        if self.frame_count is not None and self.reads >= self.frame_count:
            raise CaptureError(f"No more frames from {self.source}")
        self.reads += 1
        return self.frame.copy()

    def set_buffer_size(self, frames: int) -> bool:
        self.buffer_size = frames
        return True

    def release(self) -> None:
        self.released = True


class FakeDisplaySurface:
    """
    Display recording presented frames.

    Reports the quit key once `quit_after` frames were displayed.
    """

    def __init__(self, quit_after: Optional[int] = None):
        self.quit_after = quit_after

        self.frames: List[np.ndarray] = []
        self.timeouts: List[float] = []
        self.close_calls = 0

    def display_frame(self, image: np.ndarray) -> None:
        self.frames.append(image)

    def stop_key_pressed(self, timeout: float) -> bool:
        self.timeouts.append(timeout)
        return self.quit_after is not None and len(self.frames) >= self.quit_after

    def close(self) -> None:
        self.close_calls += 1


class FakeImageProcessor:
    """
    ImageProcessor with scripted contours and fixed-size glyphs.

    Contours are (x, y, width, height, area) tuples handed out by
    find_external_contours(). Text measures 10 px per character, 20 px high,
    baseline 5.
    """

    CHAR_WIDTH = 10
    TEXT_HEIGHT = 20
    BASELINE = 5

    def __init__(self, contours: Sequence[Tuple[int, int, int, int, float]] = ()):
        self.contours = list(contours)
        self.fail = False

        self.drawn_regions: List[list] = []
        self.texts: List[Tuple[str, Tuple[int, int]]] = []

    def to_comparison_form(self, image: np.ndarray) -> np.ndarray:
        return image[..., 0].copy()

    def abs_diff(self, image: np.ndarray, background: np.ndarray) -> np.ndarray:
        if self.fail:
            raise ImageProcessingError("abs_diff failed: scripted failure")
        return np.abs(image.astype(np.int16) - background.astype(np.int16)).astype(np.uint8)

    def threshold(self, diff: np.ndarray, level: float) -> np.ndarray:
        return np.where(diff > level, 255, 0).astype(np.uint8)

    def dilate(self, mask: np.ndarray, iterations: int) -> np.ndarray:
        return mask

    def find_external_contours(self, mask: np.ndarray) -> list:
        return list(self.contours)

    def contour_area(self, contour) -> float:
        return contour[4]

    def bounding_rect(self, contour) -> Tuple[int, int, int, int]:
        return contour[0], contour[1], contour[2], contour[3]

    def draw_regions(self, image: np.ndarray, regions) -> np.ndarray:
        self.drawn_regions.append(list(regions))
        return image

    def put_text(self, image: np.ndarray, text: str, origin: Tuple[int, int]) -> None:
        self.texts.append((text, origin))

    def text_size(self, text: str) -> Tuple[Tuple[int, int], int]:
        return (len(text) * self.CHAR_WIDTH, self.TEXT_HEIGHT), self.BASELINE
