"""
Motion Detection
================

Time-lagged background differencing for video channels.
"""

from omnipane.motion.schema import MotionRegion, MotionState
from omnipane.motion.frame_buffer import FrameBuffer, TimestampedFrame
from omnipane.motion.detector import MotionDetector

__all__ = [
    "MotionDetector",
    "FrameBuffer",
    "TimestampedFrame",
    "MotionRegion",
    "MotionState",
]
