"""
OmniPane - Multi-Camera Live Monitor
====================================

Full-screen viewer cycling through several video sources, boxing moving
areas and drawing overlay lines (clock, 1-Wire temperature sensors).

Usage:
    # Command line
    $ omnipane rtsp://cam1/stream 0 --overlay:time --overlay:temperature=28-0316a2795fff

    # Library
    from omnipane import OmniPane, OmniPaneConfig

    config = OmniPaneConfig(
        sources=["rtsp://cam1/stream", "0"],
        overlay_time=True,
        temperature_sensors=["28-0316a2795fff"],
    )
    pane = OmniPane.from_config(config)
    pane.start_services()
    pane.run()
"""

from omnipane.config import ChannelSettings, ConfigValidationError, OmniPaneConfig, TextPosition
from omnipane.motion import MotionDetector, MotionRegion, MotionState

__version__ = "0.1.0"


# The display loop pulls in OpenCV and supervision; import it on first use
def __getattr__(name):
    if name in ("OmniPane", "StopReason"):
        from omnipane import pane
        return getattr(pane, name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")


__all__ = [
    "OmniPane",
    "StopReason",
    "OmniPaneConfig",
    "ChannelSettings",
    "ConfigValidationError",
    "TextPosition",
    "MotionDetector",
    "MotionRegion",
    "MotionState",
]
