"""
Overlay Text Providers
======================

Text lines drawn over the displayed frame (clock, sensor readings).
"""

from typing import List

from omnipane.config import OmniPaneConfig
from omnipane.overlays.base import OverlayTextProvider
from omnipane.overlays.clock import TimeOverlayTextProvider
from omnipane.overlays.file_poller import FilePoller, PollError
from omnipane.overlays.temperature import (
    SensorParseError,
    TemperatureOverlayTextProvider,
    parse_temperature,
)


def build_overlay_providers(config: OmniPaneConfig) -> List[OverlayTextProvider]:
    """
    Create the providers enabled in `config`, in display order:
    clock first, then one line per temperature sensor.
    """
    providers: List[OverlayTextProvider] = []

    if config.overlay_time:
        providers.append(TimeOverlayTextProvider())

    for sensor_id in config.temperature_sensors:
        providers.append(
            TemperatureOverlayTextProvider(
                config.sensor_path(sensor_id),
                poll_interval=config.sensor_poll_interval,
                unit=config.temperature_unit,
                sensor_id=sensor_id,
            )
        )

    return providers


__all__ = [
    "OverlayTextProvider",
    "TimeOverlayTextProvider",
    "TemperatureOverlayTextProvider",
    "FilePoller",
    "PollError",
    "SensorParseError",
    "parse_temperature",
    "build_overlay_providers",
]
