"""
OmniPane - Display Loop
=======================

Top-level loop, channel rotation and the state they share.
"""

from omnipane.pane.omni_pane import OmniPane, StopReason
from omnipane.pane.selector import ChannelSelector
from omnipane.pane.shared_state import ActiveChannelIndex

__all__ = [
    "OmniPane",
    "StopReason",
    "ChannelSelector",
    "ActiveChannelIndex",
]
