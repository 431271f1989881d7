"""
Interfaces for Dependency Injection
====================================

Protocols for the collaborators the viewer core talks to.

This allows:
- Testing with fake implementations (no camera, no window, no OpenCV calls)
- Swapping implementations (e.g. a GStreamer capture instead of cv2.VideoCapture)
- Clear contracts (documented interface methods)

Concrete implementations live in omnipane.video.
"""

from typing import TYPE_CHECKING, List, Protocol, Sequence, Tuple

import numpy as np

if TYPE_CHECKING:
    from omnipane.motion.schema import MotionRegion


Contour = np.ndarray
"""OpenCV contour: array of points, shape (N, 1, 2)"""


class ImageProcessingError(RuntimeError):
    """An ImageProcessor operation failed on the given image."""
    pass


class CaptureDevice(Protocol):
    """
    Protocol for a video capture device.

    Concrete implementation: omnipane.video.capture.OpenCVCaptureDevice
    Test implementation: FakeCaptureDevice (see tests/unit/fakes.py)
    """

    source: str
    """Source identifier the device was opened with"""

    def read(self) -> np.ndarray:
        """
        Read the next raw frame (may block on device I/O).

        Returns:
            BGR frame

        Raises:
            CaptureError: End of stream or device failure
        """
        ...

    def set_buffer_size(self, frames: int) -> bool:
        """
        Ask the device to keep at most `frames` frames of read-ahead.

        Returns:
            True if the backend accepted the hint
        """
        ...

    def release(self) -> None:
        """Release the underlying device."""
        ...


class DisplaySurface(Protocol):
    """
    Protocol for the full-screen display surface.

    Concrete implementation: omnipane.video.display.DisplayWindow
    Test implementation: FakeDisplaySurface (see tests/unit/fakes.py)
    """

    def display_frame(self, image: np.ndarray) -> None:
        """Present a frame."""
        ...

    def stop_key_pressed(self, timeout: float) -> bool:
        """
        Wait up to `timeout` seconds for a key press.

        Returns:
            True if the quit key was pressed
        """
        ...

    def close(self) -> None:
        """Destroy the window."""
        ...


class ImageProcessor(Protocol):
    """
    Protocol for the image processing primitives used by motion detection
    and overlay composition. All operations are pure on their inputs except
    the draw_* / put_text family, which draw in place.

    Concrete implementation: omnipane.video.image_processor.OpenCVImageProcessor
    Test implementation: FakeImageProcessor (see tests/unit/fakes.py)
    """

    def to_comparison_form(self, image: np.ndarray) -> np.ndarray:
        """Grayscale + blur, the form frames are buffered and compared in."""
        ...

    def abs_diff(self, image: np.ndarray, background: np.ndarray) -> np.ndarray:
        ...

    def threshold(self, diff: np.ndarray, level: float) -> np.ndarray:
        """Binary mask: 255 where diff > level, else 0."""
        ...

    def dilate(self, mask: np.ndarray, iterations: int) -> np.ndarray:
        ...

    def find_external_contours(self, mask: np.ndarray) -> List[Contour]:
        ...

    def contour_area(self, contour: Contour) -> float:
        ...

    def bounding_rect(self, contour: Contour) -> Tuple[int, int, int, int]:
        """(x, y, width, height)"""
        ...

    def draw_regions(self, image: np.ndarray, regions: Sequence["MotionRegion"]) -> np.ndarray:
        ...

    def put_text(self, image: np.ndarray, text: str, origin: Tuple[int, int]) -> None:
        ...

    def text_size(self, text: str) -> Tuple[Tuple[int, int], int]:
        """((width, height), baseline) of `text` in the overlay font."""
        ...

