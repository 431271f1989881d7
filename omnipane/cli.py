"""
CLI entry point for omnipane
"""

import os
import sys

import click

from omnipane.config import (
    ChannelSettings,
    ConfigValidationError,
    SENSOR_PATH_TEMPLATE,
    OmniPaneConfig,
    TextPosition,
)
from omnipane.logging_utils import get_component_logger, setup_structured_logging

# Configure structured logging
# Use JSON format for production, human-readable for development
JSON_LOGS = os.getenv("JSON_LOGS", "false").lower() == "true"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE")

setup_structured_logging(
    level=LOG_LEVEL,
    json_format=JSON_LOGS,
    output_file=LOG_FILE,
)

logger = get_component_logger(__name__, "cli")


@click.command(context_settings={"token_normalize_func": str.lower})
@click.argument("sources", nargs=-1, required=True)
@click.option(
    "--overlay:time",
    "overlay_time",
    is_flag=True,
    default=False,
    help="Show the current date and time",
)
@click.option(
    "--overlay:temperature",
    "temperature_sensors",
    multiple=True,
    metavar="SENSOR_ID",
    help="Show the temperature of a 1-Wire sensor (e.g. --overlay:temperature=28-0316a2795fff). Repeatable.",
)
@click.option("--rotation-interval", type=float, default=10.0, show_default=True, help="Seconds each channel stays on screen")
@click.option("--fps", type=float, default=30.0, show_default=True, help="Display frame rate")
@click.option("--motion-interval", type=float, default=None, help="Seconds between motion checks (default: every 5 frames)")
@click.option("--background-lag", type=float, default=0.5, show_default=True, help="Age in seconds of the frame motion is compared against")
@click.option("--min-area", type=float, default=10000.0, show_default=True, help="Minimum changed area (px²) counted as motion")
@click.option(
    "--text-position",
    type=click.Choice([position.value for position in TextPosition]),
    default=TextPosition.BOTTOM_RIGHT.value,
    show_default=True,
    help="Screen corner overlay lines are anchored to",
)
@click.option("--temperature-unit", type=click.Choice(["C", "F"]), default="C", show_default=True)
@click.option("--sensor-interval", type=float, default=5.0, show_default=True, help="Seconds between two sensor reads")
@click.option(
    "--sensor-root",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory holding <SENSOR_ID>/w1_slave files (default: /sys/bus/w1/devices)",
)
@click.option("--window-name", default="Main Camera", show_default=True)
@click.option(
    "--json-logs",
    is_flag=True,
    default=False,
    help="Output logs in JSON format for log aggregation (Elasticsearch, Loki, etc.)",
)
def main(
    sources,
    overlay_time,
    temperature_sensors,
    rotation_interval,
    fps,
    motion_interval,
    background_lag,
    min_area,
    text_position,
    temperature_unit,
    sensor_interval,
    sensor_root,
    window_name,
    json_logs,
):
    """
    Show SOURCE... full-screen with motion boxes, rotating between sources.

    SOURCE is a video file, a stream URL or a local camera index (0, 1, ...).
    Press q in the window to quit.
    """
    from omnipane.pane import OmniPane, StopReason
    from omnipane.video import DeviceError, DisplaySurfaceError

    # Reconfigure logging based on --json-logs flag
    if json_logs:
        setup_structured_logging(level=LOG_LEVEL, json_format=True, output_file=LOG_FILE)

    settings_kwargs = {
        "background_lag": background_lag,
        "min_contour_area": min_area,
    }
    if motion_interval is not None:
        settings_kwargs["motion_check_interval"] = motion_interval

    if sensor_root is not None:
        sensor_path_template = os.path.join(sensor_root, "{sensor_id}", "w1_slave")
    else:
        sensor_path_template = SENSOR_PATH_TEMPLATE

    try:
        config = OmniPaneConfig(
            sources=list(sources),
            channel_settings=ChannelSettings.for_fps(fps, **settings_kwargs),
            rotation_interval=rotation_interval,
            window_name=window_name,
            text_position=TextPosition(text_position),
            overlay_time=overlay_time,
            temperature_sensors=list(temperature_sensors),
            sensor_poll_interval=sensor_interval,
            temperature_unit=temperature_unit,
            sensor_path_template=sensor_path_template,
        )
    except ConfigValidationError as e:
        raise click.UsageError(str(e))

    logger.info(
        "Starting video streaming...",
        extra={"event": "startup", "config": config.to_status_dict()},
    )

    try:
        pane = OmniPane.from_config(config)
    except (DeviceError, DisplaySurfaceError) as e:
        logger.error(
            f"Failed to initialize viewer: {e}",
            extra={"event": "startup_failed", "error_type": type(e).__name__},
        )
        raise click.ClickException(f"Failed to initialize viewer: {e}")

    pane.install_signal_handlers()
    pane.start_services()
    reason = pane.run()

    if reason is StopReason.CHANNELS_EXHAUSTED:
        click.echo("No video channel left to display", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
