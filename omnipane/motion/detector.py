"""
Motion Detector
===============

Per-channel motion detection against a time-lagged background frame.

Each channel keeps a FrameBuffer of grayscale+blurred frames. On a fixed
cadence (ChannelSettings.motion_check_interval, independent of the achieved
display frame rate) the current frame is pushed, the newest buffered frame at
least background_lag seconds old is taken as background, and the
diff → threshold → dilate → contours pipeline produces the motion regions.
Regions are drawn on every frame until the next successful check.
"""

import time
from typing import List, Optional

import numpy as np

from omnipane.config import ChannelSettings
from omnipane.interfaces import ImageProcessingError, ImageProcessor
from omnipane.logging_utils import ComponentLogger, get_component_logger
from omnipane.motion.frame_buffer import FrameBuffer, TimestampedFrame
from omnipane.motion.schema import MotionRegion, MotionState


class MotionDetector:
    """
    Motion detection state machine for one channel.

    Owned and mutated by the render thread only.

    Args:
        settings: ChannelSettings of the owning channel
        processor: ImageProcessor implementation
        logger: Optional logger (defaults to a "motion_detector" component logger)

    Example:
        >>> detector = MotionDetector(ChannelSettings(), OpenCVImageProcessor())
        >>> moving_parts = detector.on_tick(frame)  # draws boxes on frame in place
    """

    def __init__(
        self,
        settings: ChannelSettings,
        processor: ImageProcessor,
        logger: Optional[ComponentLogger] = None,
    ):
        self.settings = settings
        self.processor = processor
        self.logger = logger or get_component_logger(__name__, "motion_detector")

        self.buffer = FrameBuffer()
        self.state = MotionState()
        self.last_check_at: Optional[float] = None

    def on_tick(self, raw_frame: np.ndarray, now: Optional[float] = None) -> int:
        """
        Process one captured frame.

        Runs the motion check when the check interval has elapsed, then draws
        the current motion regions onto `raw_frame` in place.

        Args:
            raw_frame: Original BGR frame (annotated in place)
            now: Monotonic instant of the capture (default: time.monotonic())

        Returns:
            Number of motion regions drawn on the frame
        """
        if now is None:
            now = time.monotonic()

        if self.is_check_due(now):
            self.check_motion(raw_frame, now)

        return self.draw(raw_frame)

    def is_check_due(self, now: float) -> bool:
        if self.last_check_at is None:
            return True
        return (now - self.last_check_at) >= self.settings.motion_check_interval

    def check_motion(self, raw_frame: np.ndarray, now: float) -> None:
        """
        Buffer the frame and refresh the motion state against the background.

        When the frame cannot be normalized, no buffered frame is old enough,
        or the diff pipeline fails, the previous motion state is kept.
        """
        self.last_check_at = now
        try:
            normalized = self.processor.to_comparison_form(raw_frame)
        except ImageProcessingError as e:
            self.logger.warning(
                f"Frame not usable for motion detection, skipping check: {e}",
                extra={"event": "frame_normalize_failed", "frame_shape": list(raw_frame.shape)},
            )
            return

        self.buffer.push(TimestampedFrame(image=normalized, captured_at=now))

        background = self.buffer.select_background(now, self.settings.background_lag)
        if background is None:
            self.logger.debug(
                "No background frame old enough yet",
                extra={
                    "event": "background_missing",
                    "buffer_size": len(self.buffer),
                    "oldest_frame_age": round(now - self.buffer.timestamps()[0], 3),
                },
            )
            return

        try:
            regions = self.find_motion_regions(normalized, background.image)
        except ImageProcessingError as e:
            self.logger.warning(
                f"Motion check failed, keeping previous regions: {e}",
                extra={"event": "motion_check_failed"},
            )
            return

        if len(regions) != len(self.state.regions):
            self.logger.debug(
                f"Moving parts: {len(regions)}",
                extra={
                    "event": "motion_changed",
                    "moving_parts": len(regions),
                    "background_age": round(now - background.captured_at, 3),
                },
            )

        self.state = MotionState(regions=regions, last_update_at=now)

    def find_motion_regions(
        self, normalized: np.ndarray, background: np.ndarray
    ) -> List[MotionRegion]:
        """
        Diff a comparison-form frame against a background frame.

        Returns:
            Bounding rectangles of the changed areas of at least
            settings.min_contour_area pixels
        """
        diff = self.processor.abs_diff(normalized, background)
        mask = self.processor.threshold(diff, self.settings.diff_threshold)
        mask = self.processor.dilate(mask, self.settings.dilate_iterations)

        regions = []
        for contour in self.processor.find_external_contours(mask):
            if self.processor.contour_area(contour) < self.settings.min_contour_area:
                continue
            x, y, width, height = self.processor.bounding_rect(contour)
            regions.append(
                MotionRegion(x=int(x), y=int(y), width=int(width), height=int(height))
            )
        return regions

    def draw(self, raw_frame: np.ndarray) -> int:
        regions = self.state.regions
        if regions:
            self.processor.draw_regions(raw_frame, regions)
        return len(regions)
