"""
Unit tests for the command-line interface.
"""

import json
import logging
import logging.handlers
from pathlib import Path

import pytest
from click.testing import CliRunner

from oscbridge.cli import cli
from oscbridge.cli.commands import ReplayError, replay_recording
from oscbridge.config import Config


def write_recording(path: Path, events) -> Path:
    path.write_text("\n".join(json.dumps(event) for event in events) + "\n", encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def reset_cli_logger():
    """Drop handlers the CLI attaches to the package logger."""
    yield
    logger = logging.getLogger("oscbridge")
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logger.propagate = True


@pytest.fixture
def recording(tmp_path: Path) -> Path:
    events = [{"type": "Orf", "id": "vagina", "key": "Version/4", "value": True}]
    for _ in range(3):
        events.append({"type": "Orf", "id": "vagina", "key": "PenOthersNewRoot", "value": 0.1})
        events.append({"type": "Orf", "id": "vagina", "key": "PenOthersNewTip", "value": 0.5})
    events += [
        {"type": "Orf", "id": "vagina", "key": "PenOthersNewRoot", "value": 0.8},
        {"type": "Orf", "id": "vagina", "key": "PenOthersNewTip", "value": 1.0},
        {"type": "Pen", "id": "pen1", "key": "TouchSelfClose", "value": True},
        {"type": "Pen", "id": "pen1", "key": "TouchSelf", "value": 0.25},
    ]
    return write_recording(tmp_path / "session.jsonl", events)


class TestReplay:
    """Test replaying recorded channel updates."""

    def test_replay_builds_devices(self, recording: Path) -> None:
        devices = replay_recording(recording, False, Config())

        orf = devices[("Orf", "vagina")]
        pen = devices[("Pen", "pen1")]
        assert orf.get_version() == 4
        assert orf.others_length_detector.get_length() == pytest.approx(0.40)
        assert orf.get_pen_amount(False) == pytest.approx(0.5)
        assert pen.get_version() is None
        assert {s.feature_name: s.value for s in pen.get_sources()}["touchSelf"] == 0.25

    def test_replay_rejects_bad_json(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.jsonl"
        path.write_text('{"type": "Orf"\n', encoding="utf-8")

        with pytest.raises(ReplayError):
            replay_recording(path, False, Config())

    def test_replay_rejects_missing_fields(self, tmp_path: Path) -> None:
        path = write_recording(tmp_path / "bad.jsonl", [{"type": "Orf", "key": "TouchSelf"}])

        with pytest.raises(ReplayError, match="missing id"):
            replay_recording(path, False, Config())


class TestCommands:
    """Test CLI commands."""

    def test_replay_command(self, recording: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["replay", str(recording), "--status"])

        assert result.exit_code == 0
        assert "penOthersNew" in result.output
        assert "Nearby penetrator length: 0.40m" in result.output
        assert "version=4" in result.output

    def test_replay_tps(self, recording: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["replay", str(recording), "--tps"])

        assert result.exit_code == 0
        assert "penOthersNew" not in result.output
        assert "penOthers" in result.output

    def test_replay_bad_file_exits(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.jsonl"
        path.write_text("not json\n", encoding="utf-8")

        runner = CliRunner()
        result = runner.invoke(cli, ["replay", str(path)])

        assert result.exit_code == 1
        assert "Replay failed" in result.output

    def test_config_command(self) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["config"])

        assert result.exit_code == 0
        assert "max_samples" in result.output
        assert "penetrating_threshold" in result.output

    def test_log_rotation_settings_applied(self, recording: Path, tmp_path: Path) -> None:
        log_file = tmp_path / "logs" / "oscbridge.log"
        env = {
            "LOG_FILE_PATH": str(log_file),
            "LOG_MAX_SIZE": "1KB",
            "LOG_BACKUP_COUNT": "1",
        }

        runner = CliRunner()
        result = runner.invoke(cli, ["replay", str(recording)], env=env)

        assert result.exit_code == 0
        file_handlers = [
            handler for handler in logging.getLogger("oscbridge").handlers
            if isinstance(handler, logging.handlers.RotatingFileHandler)
        ]
        assert len(file_handlers) == 1
        assert file_handlers[0].maxBytes == 1024
        assert file_handlers[0].backupCount == 1

        content = log_file.read_text(encoding="utf-8")
        assert content.count("[Orf:vagina] Detected device version 4") == 1
        assert "\x1b[" not in content
