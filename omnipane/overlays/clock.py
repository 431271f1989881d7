"""
Clock overlay: current date and time.
"""

from datetime import datetime, timezone

from omnipane.overlays.base import OverlayTextProvider

DEFAULT_TIME_FORMAT = "%d/%m/%Y %H:%M:%S"


class TimeOverlayTextProvider(OverlayTextProvider):
    """
    Formats the current time; no background service.

    Args:
        time_format: strftime format
        utc: Render UTC (default) or local time
    """

    name = "time"

    def __init__(self, time_format: str = DEFAULT_TIME_FORMAT, utc: bool = True):
        self.time_format = time_format
        self.utc = utc

    def get_text(self) -> str:
        now = datetime.now(timezone.utc) if self.utc else datetime.now()
        return now.strftime(self.time_format)
