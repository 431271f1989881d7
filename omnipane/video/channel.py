"""
Video Channel
=============

One capture source with its own motion detection state.
"""

import time
from typing import Optional

import numpy as np

from omnipane.config import ChannelSettings
from omnipane.interfaces import CaptureDevice, ImageProcessor
from omnipane.logging_utils import get_component_logger
from omnipane.motion.detector import MotionDetector
from omnipane.motion.schema import MotionState


class VideoChannel:
    """
    Capture device + MotionDetector + settings.

    Exclusively owned by the render thread.

    Args:
        camera: CaptureDevice (already opened)
        settings: ChannelSettings
        processor: ImageProcessor used by motion detection
        name: Channel name for logs (default: the camera source)
        buffer_size: Read-ahead depth requested from the camera

    Example:
        >>> channel = VideoChannel(OpenCVCaptureDevice("0"), ChannelSettings(), processor)
        >>> image = channel.create_frame_image()  # raises CaptureError at end of stream
    """

    def __init__(
        self,
        camera: CaptureDevice,
        settings: ChannelSettings,
        processor: ImageProcessor,
        name: Optional[str] = None,
        buffer_size: int = 1,
    ):
        self.camera = camera
        self.settings = settings
        self.name = name or camera.source
        self.failed = False
        self.last_motion_count = 0

        self.logger = get_component_logger(__name__, "video_channel").bind(channel=self.name)
        self.detector = MotionDetector(settings, processor, logger=self.logger)

        camera.set_buffer_size(buffer_size)

    @property
    def motion_state(self) -> MotionState:
        return self.detector.state

    def create_frame_image(self) -> np.ndarray:
        """
        Read one frame and annotate it with the current motion regions.

        Returns:
            BGR frame with motion rectangles drawn

        Raises:
            CaptureError: The camera read failed; not retried here
        """
        image = self.camera.read()
        self.last_motion_count = self.detector.on_tick(image, time.monotonic())
        return image

    def release(self) -> None:
        self.camera.release()

    def __repr__(self) -> str:
        return f"VideoChannel(name={self.name!r}, failed={self.failed})"
