"""
Structured Logging Utilities
=============================

Logging for the render loop and its background threads.

- setup_structured_logging: root logger with JSON or column output
- ComponentLogger: LoggerAdapter stamping 'component' (and bound fields such
  as 'channel') on every record
- RepeatGate: lets a per-frame or per-poll failure through once per change

Every record carries the thread name, since the render loop, the channel
selector and one poller per sensor all log concurrently.

Direct logger.info(msg, extra={...}) calls are preferred over helper wrappers.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from pythonjsonlogger import jsonlogger


# ============================================================================
# Formatters
# ============================================================================

class OmniPaneJsonFormatter(jsonlogger.JsonFormatter):
    """JSON lines with short field names for log aggregation."""

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)

        if 'levelname' in log_record:
            log_record['level'] = log_record.pop('levelname')
        if 'name' in log_record:
            log_record['logger'] = log_record.pop('name')
        if 'threadName' in log_record:
            log_record['thread'] = log_record.pop('threadName')


class HumanReadableFormatter(logging.Formatter):
    """
    Fixed columns for a terminal next to the viewer:

        12:00:01 | WARNING  | FilePoller[w1_slave] | file_poller | poll_failed | ...

    A bound channel name is put in front of the message.
    """

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s | %(levelname)-8s | %(threadName)-20s | %(component)-15s | %(event)-22s | %(channel_tag)s%(message)s",
            datefmt="%H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        if not hasattr(record, "component"):
            record.component = record.name.split(".")[-1]
        if not hasattr(record, "event"):
            record.event = "-"

        channel = getattr(record, "channel", None)
        record.channel_tag = f"[{channel}] " if channel else ""
        return super().format(record)


class AutoFlushStreamHandler(logging.StreamHandler):
    """StreamHandler that flushes after every emit."""

    def emit(self, record):
        super().emit(record)
        self.flush()


# ============================================================================
# Logger Setup
# ============================================================================

def setup_structured_logging(
    level: str = "INFO",
    json_format: bool = True,
    indent: Optional[int] = None,
    output_file: Optional[str] = None,
    max_bytes: int = 10 * 1024 * 1024,  # 10 MB
    backup_count: int = 5,
) -> None:
    """
    Configure the root logger. Calling it again replaces the previous setup,
    which is how --json-logs switches format after import-time setup.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_format: JSON lines if True, fixed columns otherwise
        indent: JSON indent for pretty-print (None = compact)
        output_file: Rotated log file instead of stdout
        max_bytes: Size at which the log file rotates
        backup_count: Rotated files to keep

    Usage:
        # Terminal next to the viewer
        setup_structured_logging(level="DEBUG", json_format=False)

        # Kiosk deployment
        setup_structured_logging(json_format=True, output_file="logs/omnipane.log")
    """
    if json_format:
        formatter = OmniPaneJsonFormatter(
            '%(timestamp)s %(levelname)s %(name)s %(threadName)s %(message)s',
            timestamp=True,
            json_indent=indent,
        )
    else:
        formatter = HumanReadableFormatter()

    handler = _build_handler(output_file, max_bytes, backup_count)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, level.upper()))


def _build_handler(output_file: Optional[str], max_bytes: int, backup_count: int) -> logging.Handler:
    if not output_file:
        # The render loop logs at frame rate; flush so lines are not held back
        return AutoFlushStreamHandler(sys.stdout)

    log_path = Path(output_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    return RotatingFileHandler(
        filename=str(log_path),
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding='utf-8',
    )


# ============================================================================
# ComponentLogger (LoggerAdapter for automatic component field)
# ============================================================================

class ComponentLogger(logging.LoggerAdapter):
    """
    Logger adapter that adds 'component' (and any bound field, e.g. 'channel')
    to every record.

    Usage:
        >>> logger = get_component_logger(__name__, "video_channel").bind(channel="cam-1")
        >>> logger.warning("Read failed", extra={"event": "capture_failed"})
        # {"message": "Read failed", "component": "video_channel", "channel": "cam-1", ...}

    Note:
        Per-call extra fields override bound ones.
    """

    def process(self, msg, kwargs):
        kwargs['extra'] = {**self.extra, **kwargs.get('extra', {})}
        return msg, kwargs

    def bind(self, **fields) -> "ComponentLogger":
        """Return a new adapter with extra fields merged into the defaults."""
        return ComponentLogger(self.logger, {**self.extra, **fields})


def get_component_logger(name: str, component: str) -> ComponentLogger:
    """
    Args:
        name: Logger name (usually __name__)
        component: Component name (e.g. "motion_detector", "file_poller")
    """
    return ComponentLogger(logging.getLogger(name), {"component": component})


# ============================================================================
# RepeatGate
# ============================================================================

class RepeatGate:
    """
    Remembers the last failure message of a polling or per-frame path.

    open() is True only when the message differs from the previous one, so a
    sensor that stays broken logs once instead of once per frame. clear()
    reports whether a failure was pending, for a single "recovered" line.

    Example:
        >>> gate = RepeatGate()
        >>> gate.open("No temperature found"), gate.open("No temperature found")
        (True, False)
        >>> gate.clear(), gate.clear()
        (True, False)
    """

    def __init__(self):
        self.last_message: Optional[str] = None

    def open(self, message: str) -> bool:
        if message == self.last_message:
            return False
        self.last_message = message
        return True

    def clear(self) -> bool:
        pending = self.last_message is not None
        self.last_message = None
        return pending


__all__ = [
    "setup_structured_logging",
    "OmniPaneJsonFormatter",
    "HumanReadableFormatter",
    "ComponentLogger",
    "get_component_logger",
    "RepeatGate",
]
