"""
Unit tests for the command line

OmniPane is replaced by a recording stand-in so no device or window is opened.
"""

import pytest
from click.testing import CliRunner

from omnipane.cli import main
from omnipane.config import TextPosition
from omnipane.pane import StopReason
from omnipane.video import DeviceError


class RecordingPane:
    """Stand-in for OmniPane recording how the CLI drives it."""

    instances = []
    stop_reason = StopReason.QUIT_KEY
    open_error = None

    def __init__(self, config):
        self.config = config
        self.calls = []

    @classmethod
    def from_config(cls, config):
        if cls.open_error is not None:
            raise cls.open_error
        pane = cls(config)
        cls.instances.append(pane)
        return pane

    def install_signal_handlers(self):
        self.calls.append("install_signal_handlers")

    def start_services(self):
        self.calls.append("start_services")

    def run(self):
        self.calls.append("run")
        return self.stop_reason


@pytest.fixture
def pane_cls(monkeypatch):
    class Pane(RecordingPane):
        instances = []

    monkeypatch.setattr("omnipane.pane.OmniPane", Pane)
    return Pane


@pytest.fixture
def runner():
    return CliRunner()


class TestCli:
    def test_sources_required(self, runner, pane_cls):
        result = runner.invoke(main, [])

        assert result.exit_code == 2
        assert pane_cls.instances == []

    def test_unknown_option_rejected(self, runner, pane_cls):
        result = runner.invoke(main, ["0", "--overlay:humidity"])

        assert result.exit_code == 2
        assert "No such option" in result.output
        assert pane_cls.instances == []

    def test_defaults(self, runner, pane_cls):
        result = runner.invoke(main, ["video.mp4"])

        assert result.exit_code == 0, result.output
        pane = pane_cls.instances[0]
        assert pane.config.sources == ["video.mp4"]
        assert pane.config.overlay_time is False
        assert pane.config.temperature_sensors == []
        assert pane.calls == ["install_signal_handlers", "start_services", "run"]

    def test_overlay_options(self, runner, pane_cls):
        result = runner.invoke(
            main,
            [
                "0",
                "rtsp://cam/1",
                "--overlay:time",
                "--overlay:temperature=28-aaa",
                "--overlay:temperature",
                "28-bbb",
                "--text-position",
                "top-left",
                "--temperature-unit",
                "F",
            ],
        )

        assert result.exit_code == 0, result.output
        config = pane_cls.instances[0].config
        assert config.sources == ["0", "rtsp://cam/1"]
        assert config.overlay_time is True
        assert config.temperature_sensors == ["28-aaa", "28-bbb"]
        assert config.text_position is TextPosition.TOP_LEFT
        assert config.temperature_unit == "F"

    def test_option_names_case_insensitive(self, runner, pane_cls):
        result = runner.invoke(main, ["0", "--OVERLAY:TIME"])

        assert result.exit_code == 0, result.output
        assert pane_cls.instances[0].config.overlay_time is True

    def test_timing_options(self, runner, pane_cls):
        result = runner.invoke(
            main,
            ["0", "--fps", "10", "--background-lag", "1.5", "--min-area", "500", "--rotation-interval", "3"],
        )

        assert result.exit_code == 0, result.output
        config = pane_cls.instances[0].config
        assert config.channel_settings.frame_duration == pytest.approx(0.1)
        assert config.channel_settings.motion_check_interval == pytest.approx(0.5)
        assert config.channel_settings.background_lag == 1.5
        assert config.channel_settings.min_contour_area == 500
        assert config.rotation_interval == 3

    def test_invalid_value_is_usage_error(self, runner, pane_cls):
        result = runner.invoke(main, ["0", "--rotation-interval", "0"])

        assert result.exit_code == 2
        assert "rotation_interval" in result.output
        assert pane_cls.instances == []

    def test_device_error_exits_1(self, runner, pane_cls, monkeypatch):
        monkeypatch.setattr(pane_cls, "open_error", DeviceError("Failed to open video source nope"))

        result = runner.invoke(main, ["nope"])

        assert result.exit_code == 1
        assert "Failed to open video source nope" in result.output

    def test_all_channels_failed_exits_1(self, runner, pane_cls, monkeypatch):
        monkeypatch.setattr(pane_cls, "stop_reason", StopReason.CHANNELS_EXHAUSTED)

        result = runner.invoke(main, ["0"])

        assert result.exit_code == 1

    def test_sensor_root(self, runner, pane_cls, tmp_path):
        result = runner.invoke(
            main,
            ["0", "--overlay:temperature=28-aaa", "--sensor-root", str(tmp_path), "--sensor-interval", "1"],
        )

        assert result.exit_code == 0, result.output
        config = pane_cls.instances[0].config
        assert config.sensor_path("28-aaa") == str(tmp_path / "28-aaa" / "w1_slave")
        assert config.sensor_poll_interval == 1
