"""
Temperature Overlay
===================

Overlay line for a 1-Wire temperature sensor (DS18B20 style w1_slave file).

A w1_slave file looks like:

    72 01 4b 46 7f ff 0e 10 57 : crc=57 YES
    72 01 4b 46 7f ff 0e 10 57 t=23125

where t= is the temperature in millidegrees Celsius.
"""

import threading
from typing import Optional

from omnipane.logging_utils import RepeatGate, get_component_logger
from omnipane.overlays.base import OverlayTextProvider
from omnipane.overlays.file_poller import FilePoller

logger = get_component_logger(__name__, "temperature")

TEMPERATURE_TOKEN = "t="
NO_TEMPERATURE_TEXT = "No temperature found"
WAITING_TEXT = "Temp.: waiting for sensor"


class SensorParseError(ValueError):
    """
    Sensor content has no usable temperature.

    Attributes:
        value: Offending token after "t=", None when no token was found
    """

    def __init__(self, message: str, value: Optional[str] = None):
        super().__init__(message)
        self.value = value


def parse_temperature(content: str) -> float:
    """
    Extract the temperature in degrees Celsius from sensor content.

    Args:
        content: Raw sensor file content

    Returns:
        Temperature in °C

    Raises:
        SensorParseError: No "t=" token, or a non-numeric value after it

    Examples:
        >>> parse_temperature("72 01 4b 46 7f ff 0e 10 57 t=23625")
        23.625
        >>> parse_temperature("crc=57 YES")
        Traceback (most recent call last):
            ...
        SensorParseError: No temperature found
    """
    if TEMPERATURE_TOKEN not in content:
        raise SensorParseError(NO_TEMPERATURE_TEXT)

    tail = content.rsplit(TEMPERATURE_TOKEN, 1)[1].strip()
    value = tail.split()[0] if tail else ""

    try:
        return float(value) / 1000.0
    except ValueError:
        raise SensorParseError(f"Error parsing temperature {value}", value=value)


def format_temperature(celsius: float, unit: str = "C") -> str:
    """
    Examples:
        >>> format_temperature(23.625)
        'Temp.: 23.6 °C'
        >>> format_temperature(23.625, unit="F")
        'Temp.: 74.5 °F'
    """
    if unit == "F":
        return f"Temp.: {celsius * 9 / 5 + 32:.1f} °F"
    return f"Temp.: {celsius:.1f} °C"


class TemperatureOverlayTextProvider(OverlayTextProvider):
    """
    Renders the latest reading of a sensor file polled in the background.

    Never raises from get_text(): unreadable or malformed content degrades
    to a fallback line.

    Args:
        sensor_path: Path of the sensor file
        poll_interval: Seconds between two file reads
        unit: "C" or "F"
        sensor_id: Sensor name for logs (default: parent directory name)

    Example:
        >>> provider = TemperatureOverlayTextProvider(
        ...     "/sys/bus/w1/devices/28-0316a2795fff/w1_slave", poll_interval=5.0
        ... )
        >>> provider.start_service(cancel_event)
        >>> provider.get_text()
        'Temp.: 21.4 °C'
    """

    name = "temperature"

    def __init__(
        self,
        sensor_path: str,
        poll_interval: float = 5.0,
        unit: str = "C",
        sensor_id: Optional[str] = None,
    ):
        self.poller = FilePoller(sensor_path, poll_interval)
        self.unit = unit
        self.sensor_id = sensor_id or self.poller.path.parent.name
        self._failures = RepeatGate()

    def start_service(self, cancel_event: threading.Event) -> None:
        self.poller.start(cancel_event)

    def stop_service(self, timeout: float = 5.0) -> None:
        self.poller.stop(timeout=timeout)

    def get_text(self) -> str:
        if self.poller.last_update is None:
            return WAITING_TEXT

        try:
            celsius = parse_temperature(self.poller.content())
        except SensorParseError as e:
            self._log_parse_error(e)
            return str(e)

        self._failures.clear()
        return format_temperature(celsius, self.unit)

    def _log_parse_error(self, error: SensorParseError) -> None:
        # get_text() runs once per frame; only log when the failure changes
        message = str(error)
        if not self._failures.open(message):
            return
        logger.warning(
            f"Sensor {self.sensor_id}: {message}",
            extra={"event": "sensor_parse_error", "sensor_id": self.sensor_id},
        )
