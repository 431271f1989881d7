"""
Video
=====

Capture devices, display window, image primitives and video channels.
"""

from omnipane.video.capture import CaptureError, DeviceError, OpenCVCaptureDevice
from omnipane.video.channel import VideoChannel
from omnipane.video.display import DisplaySurfaceError, DisplayWindow
from omnipane.video.image_processor import OpenCVImageProcessor
from omnipane.video.overlay_layout import MAX_OVERLAY_LINES, OverlayLayout

__all__ = [
    "VideoChannel",
    "OpenCVCaptureDevice",
    "OpenCVImageProcessor",
    "DisplayWindow",
    "OverlayLayout",
    "MAX_OVERLAY_LINES",
    "CaptureError",
    "DeviceError",
    "DisplaySurfaceError",
]
