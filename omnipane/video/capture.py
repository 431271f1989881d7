"""
Capture Device
==============

cv2.VideoCapture adapter for files, stream URLs and local cameras.
"""

import cv2
import numpy as np

from omnipane.logging_utils import get_component_logger

logger = get_component_logger(__name__, "capture")


class DeviceError(RuntimeError):
    """Capture device could not be opened or used."""
    pass


class CaptureError(DeviceError):
    """Frame read failed: end of stream or device disconnect."""
    pass


def parse_source(source: str):
    """
    Turn a source identifier into what cv2.VideoCapture expects.

    Examples:
        >>> parse_source("0")
        0
        >>> parse_source("rtsp://camera.local/stream1")
        'rtsp://camera.local/stream1'
    """
    source = source.strip()
    if source.isdigit():
        return int(source)
    return source


class OpenCVCaptureDevice:
    """
    Capture device backed by cv2.VideoCapture.

    Args:
        source: File path, stream URL or camera index as a string

    Raises:
        DeviceError: If the source cannot be opened

    Example:
        >>> device = OpenCVCaptureDevice("rtsp://camera.local/stream1")
        >>> device.set_buffer_size(1)
        >>> frame = device.read()
    """

    def __init__(self, source: str):
        self.source = source

        try:
            self._capture = cv2.VideoCapture(parse_source(source), cv2.CAP_ANY)
        except cv2.error as e:
            raise DeviceError(f"Failed to open video source {source}: {e}") from e

        if not self._capture.isOpened():
            self._capture.release()
            raise DeviceError(f"Failed to open video source {source}")

        logger.info(
            f"Opened video source {source}",
            extra={"event": "device_opened", "source": source},
        )

    def read(self) -> np.ndarray:
        """
        Read the next frame.

        Raises:
            CaptureError: End of stream or read failure
        """
        try:
            ok, frame = self._capture.read()
        except cv2.error as e:
            raise CaptureError(f"Read failed on {self.source}: {e}") from e

        if not ok or frame is None:
            raise CaptureError(f"No more frames from {self.source}")
        return frame

    def set_buffer_size(self, frames: int) -> bool:
        """
        Ask the backend to keep at most `frames` frames queued so reads
        return the latest capture instead of a stale one.
        """
        accepted = bool(self._capture.set(cv2.CAP_PROP_BUFFERSIZE, frames))
        if not accepted:
            logger.debug(
                f"Backend ignored buffer size hint for {self.source}",
                extra={"event": "buffer_hint_ignored", "source": self.source},
            )
        return accepted

    def release(self) -> None:
        self._capture.release()
