"""
OmniPane
========

Full-screen display loop over several video channels.

Per iteration: pick the active channel, capture and annotate one frame,
draw the overlay lines, present it, then wait out the rest of the frame
budget while polling for the quit key. Channel rotation and sensor polling
run in their own threads and are only read from here.
"""

import signal
import threading
import time
from enum import Enum
from typing import Dict, List, Optional, Sequence

import numpy as np

from omnipane.config import OmniPaneConfig, TextPosition
from omnipane.interfaces import DisplaySurface, ImageProcessor
from omnipane.logging_utils import get_component_logger
from omnipane.overlays import OverlayTextProvider, build_overlay_providers
from omnipane.pane.selector import ChannelSelector
from omnipane.pane.shared_state import ActiveChannelIndex
from omnipane.video.capture import CaptureError, OpenCVCaptureDevice
from omnipane.video.channel import VideoChannel
from omnipane.video.display import DisplayWindow
from omnipane.video.image_processor import OpenCVImageProcessor
from omnipane.video.overlay_layout import MAX_OVERLAY_LINES, OverlayLayout

logger = get_component_logger(__name__, "omni_pane")

PLACEHOLDER_TEXT = "--"


class StopReason(Enum):
    QUIT_KEY = "quit_key"
    CANCELLED = "cancelled"
    CHANNELS_EXHAUSTED = "channels_exhausted"


class OmniPane:
    """
    Display loop multiplexing video channels onto one full-screen surface.

    Args:
        channels: Video channels, in rotation order
        overlay_providers: Overlay line providers, in display order
        display: DisplaySurface to present frames on
        processor: ImageProcessor used to draw overlay text
        text_position: Corner overlay lines are anchored to
        rotation_interval: Seconds between channel rotations
        cancel_event: Shared cancellation flag (created if None)
        active_index: Shared active channel index (created if None)

    Example:
        >>> pane = OmniPane.from_config(OmniPaneConfig(sources=["0", "1"], overlay_time=True))
        >>> pane.start_services()
        >>> reason = pane.run()  # blocks until quit key, cancellation or no channel left
    """

    def __init__(
        self,
        channels: Sequence[VideoChannel],
        overlay_providers: Sequence[OverlayTextProvider],
        display: DisplaySurface,
        processor: ImageProcessor,
        text_position: TextPosition = TextPosition.BOTTOM_RIGHT,
        rotation_interval: float = 10.0,
        cancel_event: Optional[threading.Event] = None,
        active_index: Optional[ActiveChannelIndex] = None,
    ):
        if not channels:
            raise ValueError("OmniPane needs at least one channel")

        self.channels: List[VideoChannel] = list(channels)
        self.overlay_providers: List[OverlayTextProvider] = list(overlay_providers)
        self.display = display
        self.layout = OverlayLayout(processor, text_position)

        self.cancel_event = cancel_event or threading.Event()
        self.active_index = active_index or ActiveChannelIndex()
        self.selector = ChannelSelector(self.active_index, len(self.channels), rotation_interval)

        self._last_texts: Dict[int, str] = {}
        self._closed = False

    @classmethod
    def from_config(cls, config: OmniPaneConfig) -> "OmniPane":
        """
        Open every capture device and the display window.

        Raises:
            DeviceError: A source could not be opened
            DisplaySurfaceError: The window could not be created

        Devices opened before a failure are released again, and no window
        is left open.
        """
        settings = config.channel_settings
        processor = OpenCVImageProcessor(blur_kernel_size=settings.blur_kernel_size)

        channels: List[VideoChannel] = []
        try:
            for source in config.sources:
                camera = OpenCVCaptureDevice(source)
                channels.append(
                    VideoChannel(
                        camera,
                        settings,
                        processor,
                        buffer_size=config.capture_buffer_size,
                    )
                )
            display = DisplayWindow(config.window_name, config.quit_key)
        except Exception:
            for channel in channels:
                channel.release()
            raise

        return cls(
            channels=channels,
            overlay_providers=build_overlay_providers(config),
            display=display,
            processor=processor,
            text_position=config.text_position,
            rotation_interval=config.rotation_interval,
        )

    # ========================================================================
    # Lifecycle
    # ========================================================================

    def install_signal_handlers(self) -> None:
        """Stop on SIGINT/SIGTERM (main thread only)."""
        signal.signal(signal.SIGINT, self._signal_handler)
        signal.signal(signal.SIGTERM, self._signal_handler)

    def start_services(self) -> None:
        """Start overlay refresh services and channel rotation."""
        for provider in self.overlay_providers:
            provider.start_service(self.cancel_event)
        self.selector.start(self.cancel_event)

    def stop(self) -> None:
        """Request the loop to stop at its next iteration."""
        self.cancel_event.set()

    def run(self) -> StopReason:
        """
        Run the display loop until it stops.

        Background services are cancelled and the display is closed on the
        way out, including when an exception escapes the loop.

        Returns:
            Why the loop stopped
        """
        logger.info(
            f"Starting display with {len(self.channels)} channels",
            extra={
                "event": "display_started",
                "channel_count": len(self.channels),
                "overlay_count": len(self.overlay_providers),
            },
        )

        reason = None
        try:
            while reason is None:
                reason = self.run_once()
        finally:
            self.shutdown()

        logger.info(
            f"Display stopped ({reason.value})",
            extra={"event": "display_stopped", "reason": reason.value},
        )
        return reason

    def run_once(self) -> Optional[StopReason]:
        """
        One display iteration.

        Returns:
            StopReason if the loop must stop, None to keep going
        """
        if self.cancel_event.is_set():
            return StopReason.CANCELLED

        channel = self._resolve_channel(self.get_safe_channel_index())
        if channel is None:
            return StopReason.CHANNELS_EXHAUSTED

        capture_start = time.monotonic()
        try:
            image = channel.create_frame_image()
        except CaptureError as e:
            return self._retire_channel(channel, e)

        self.draw_overlays(image)
        self.display.display_frame(image)

        elapsed = time.monotonic() - capture_start
        remaining = max(0.0, channel.settings.frame_duration - elapsed)
        if self.display.stop_key_pressed(remaining):
            return StopReason.QUIT_KEY
        return None

    def shutdown(self) -> None:
        """Cancel background services, close the display, release devices."""
        if self._closed:
            return
        self._closed = True

        self.cancel_event.set()
        self.selector.stop()
        for provider in self.overlay_providers:
            provider.stop_service()

        self.display.close()
        for channel in self.channels:
            channel.release()

    # ========================================================================
    # Channels
    # ========================================================================

    def get_safe_channel_index(self) -> int:
        """Active channel index, 0 if it is out of range."""
        index = self.active_index.load()
        if not 0 <= index < len(self.channels):
            logger.warning(
                f"Wrong camera index {index}, falling back to 0",
                extra={"event": "channel_index_out_of_range", "index": index},
            )
            return 0
        return index

    def healthy_channels(self) -> List[VideoChannel]:
        return [channel for channel in self.channels if not channel.failed]

    def _resolve_channel(self, index: int) -> Optional[VideoChannel]:
        """Channel at `index`, or the next healthy one after it."""
        count = len(self.channels)
        for offset in range(count):
            channel = self.channels[(index + offset) % count]
            if not channel.failed:
                return channel
        return None

    def _retire_channel(self, channel: VideoChannel, error: CaptureError) -> Optional[StopReason]:
        channel.failed = True
        remaining = len(self.healthy_channels())

        logger.error(
            f"Channel {channel.name} stopped: {error}",
            extra={
                "event": "channel_failed",
                "channel": channel.name,
                "healthy_channels": remaining,
            },
        )

        if remaining == 0:
            return StopReason.CHANNELS_EXHAUSTED
        return None

    # ========================================================================
    # Overlays
    # ========================================================================

    def draw_overlays(self, image: np.ndarray):
        """
        Draw one line per provider, in registration order.

        Returns:
            Origins of the drawn lines
        """
        lines = [
            self._provider_text(line_index, provider)
            for line_index, provider in enumerate(self.overlay_providers[:MAX_OVERLAY_LINES])
        ]
        return self.layout.compose(image, lines)

    def _provider_text(self, line_index: int, provider: OverlayTextProvider) -> str:
        try:
            text = provider.get_text()
        except Exception as e:
            logger.error(
                f"Overlay provider {provider.name} failed: {e}",
                extra={"event": "overlay_failed", "provider": provider.name},
                exc_info=True,
            )
            return self._last_texts.get(line_index, PLACEHOLDER_TEXT)

        self._last_texts[line_index] = text
        return text

    def _signal_handler(self, signum, frame):
        """Handle termination signals"""
        logger.info(
            f"Received signal {signum}, shutting down...",
            extra={"event": "signal_received", "signal": signum},
        )
        self.stop()
