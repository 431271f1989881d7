"""
OmniPane Configuration
======================

Configuration dataclasses for the viewer.

- ChannelSettings: per-channel timing and motion detection tuning (immutable)
- OmniPaneConfig: sources, overlays, rotation and display options

Both validate in __post_init__() and raise ConfigValidationError.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List


class ConfigValidationError(ValueError):
    """Error in configuration validation."""
    pass


class TextPosition(Enum):
    """Screen corner the overlay lines are anchored to."""

    TOP_LEFT = "top-left"
    TOP_RIGHT = "top-right"
    BOTTOM_LEFT = "bottom-left"
    BOTTOM_RIGHT = "bottom-right"

    @property
    def is_top(self) -> bool:
        return self in (TextPosition.TOP_LEFT, TextPosition.TOP_RIGHT)

    @property
    def is_left(self) -> bool:
        return self in (TextPosition.TOP_LEFT, TextPosition.BOTTOM_LEFT)


DEFAULT_FPS = 30
FRAMES_PER_MOTION_CHECK = 5
SENSOR_PATH_TEMPLATE = "/sys/bus/w1/devices/{sensor_id}/w1_slave"


@dataclass(frozen=True)
class ChannelSettings:
    """Timing and motion detection settings of one video channel"""

    frame_duration: float = 1.0 / DEFAULT_FPS
    """Display budget per frame in seconds"""

    motion_check_interval: float = FRAMES_PER_MOTION_CHECK / DEFAULT_FPS
    """Seconds between two runs of the motion pipeline"""

    background_lag: float = 0.5
    """How old (seconds) a buffered frame must be to serve as background"""

    diff_threshold: float = 10.0
    """Per-pixel difference (0-255) above which a pixel counts as changed"""

    min_contour_area: float = 10000.0
    """Minimum contour area (px²) for a change to count as motion"""

    blur_kernel_size: int = 19
    """Gaussian blur kernel (odd) applied before comparing frames"""

    dilate_iterations: int = 2
    """Dilation passes merging nearby changed pixels into regions"""

    def __post_init__(self):
        """Validate settings after initialization."""
        self._validate()

    def _validate(self):
        """
        Validate settings values.

        Raises:
            ConfigValidationError: If any validation fails
        """
        for name in ("frame_duration", "motion_check_interval", "background_lag"):
            value = getattr(self, name)
            if value <= 0:
                raise ConfigValidationError(f"{name} must be > 0, got {value}")

        if not (0 <= self.diff_threshold <= 255):
            raise ConfigValidationError(
                f"diff_threshold must be between 0 and 255, got {self.diff_threshold}"
            )

        if self.min_contour_area < 0:
            raise ConfigValidationError(
                f"min_contour_area cannot be negative, got {self.min_contour_area}"
            )

        if self.blur_kernel_size <= 0 or self.blur_kernel_size % 2 == 0:
            raise ConfigValidationError(
                f"blur_kernel_size must be a positive odd integer, got {self.blur_kernel_size}"
            )

        if self.dilate_iterations < 0:
            raise ConfigValidationError(
                f"dilate_iterations cannot be negative, got {self.dilate_iterations}"
            )

    @classmethod
    def for_fps(cls, fps: float, **overrides) -> "ChannelSettings":
        """
        Build settings for a target display frame rate.

        The motion check cadence keeps its default of one check every
        FRAMES_PER_MOTION_CHECK frames unless overridden.

        Example:
            >>> ChannelSettings.for_fps(10).motion_check_interval
            0.5
        """
        if fps <= 0:
            raise ConfigValidationError(f"fps must be > 0, got {fps}")

        overrides.setdefault("motion_check_interval", FRAMES_PER_MOTION_CHECK / fps)
        return cls(frame_duration=1.0 / fps, **overrides)


@dataclass
class OmniPaneConfig:
    """Configuration for the multi-camera viewer"""

    # Video sources
    sources: List[str]
    """Video source identifiers: file paths, stream URLs or camera indices ("0")"""

    channel_settings: ChannelSettings = field(default_factory=ChannelSettings)
    """Settings shared by every channel"""

    capture_buffer_size: int = 1
    """Read-ahead depth requested from capture devices"""

    # Rotation
    rotation_interval: float = 10.0
    """Seconds each channel stays on screen before rotating to the next"""

    # Display
    window_name: str = "Main Camera"
    """Title of the full-screen window"""

    quit_key: str = "q"
    """Key that stops the viewer"""

    text_position: TextPosition = TextPosition.BOTTOM_RIGHT
    """Corner the overlay lines are anchored to"""

    # Overlays
    overlay_time: bool = False
    """Show the clock overlay"""

    temperature_sensors: List[str] = field(default_factory=list)
    """1-Wire sensor IDs, one temperature overlay line each"""

    sensor_poll_interval: float = 5.0
    """Seconds between two reads of a sensor file"""

    sensor_path_template: str = SENSOR_PATH_TEMPLATE
    """Path of a sensor file, formatted with sensor_id"""

    temperature_unit: str = "C"
    """Temperature display unit: C or F"""

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self):
        """
        Validate configuration values.

        Raises:
            ConfigValidationError: If any validation fails
        """
        if not self.sources:
            raise ConfigValidationError("sources cannot be empty")

        for source in self.sources:
            if not isinstance(source, str) or not source.strip():
                raise ConfigValidationError(f"Invalid video source: {source!r}")

        if self.capture_buffer_size < 1:
            raise ConfigValidationError(
                f"capture_buffer_size must be >= 1, got {self.capture_buffer_size}"
            )

        if self.rotation_interval <= 0:
            raise ConfigValidationError(
                f"rotation_interval must be > 0, got {self.rotation_interval}"
            )

        if len(self.quit_key) != 1:
            raise ConfigValidationError(
                f"quit_key must be a single character, got {self.quit_key!r}"
            )

        if self.sensor_poll_interval <= 0:
            raise ConfigValidationError(
                f"sensor_poll_interval must be > 0, got {self.sensor_poll_interval}"
            )

        if "{sensor_id}" not in self.sensor_path_template:
            raise ConfigValidationError(
                "sensor_path_template must contain the {sensor_id} placeholder"
            )

        for sensor_id in self.temperature_sensors:
            if not sensor_id or "/" in sensor_id:
                raise ConfigValidationError(f"Invalid sensor id: {sensor_id!r}")

        if self.temperature_unit not in ("C", "F"):
            raise ConfigValidationError(
                f"temperature_unit must be C or F, got {self.temperature_unit!r}"
            )

    def sensor_path(self, sensor_id: str) -> str:
        """
        Build the sensor file path for a sensor ID.

        Example:
            >>> config = OmniPaneConfig(sources=["0"])
            >>> config.sensor_path("28-0316a2795fff")
            '/sys/bus/w1/devices/28-0316a2795fff/w1_slave'
        """
        return self.sensor_path_template.format(sensor_id=sensor_id)

    def to_status_dict(self) -> dict:
        """
        Summarize the configuration for the startup log line.

        Returns:
            Dict with the fields that matter when reading logs
        """
        return {
            "sources": self.sources,
            "frame_duration": round(self.channel_settings.frame_duration, 4),
            "motion_check_interval": round(self.channel_settings.motion_check_interval, 4),
            "background_lag": self.channel_settings.background_lag,
            "min_contour_area": self.channel_settings.min_contour_area,
            "rotation_interval": self.rotation_interval,
            "text_position": self.text_position.value,
            "overlay_time": self.overlay_time,
            "temperature_sensors": self.temperature_sensors,
        }
