"""Tests for command execution and the main entry point."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING
from unittest.mock import patch

import pytest

import main
from app.cli import CLI
from app.commands import COMMANDS, EXIT_NOT_EQUAL, EXIT_OK, run_command
from services.quality.quality_service import QualityService

if TYPE_CHECKING:
    from pathlib import Path

BASE = "http://jellyfin:8096/videos/5f1c/master.m3u8"


@pytest.fixture
def service() -> QualityService:
    """Create a QualityService with default configuration."""
    return QualityService()


def _run(argv: list[str], service: QualityService) -> int:
    return run_command(CLI().parse_args(argv), service)


class TestCommandTable:
    """Tests for the command dispatch table."""

    def test_aliases_share_runner(self) -> None:
        """Aliases should dispatch to the same runner."""
        assert COMMANDS["hash"] is COMMANDS["key"]
        assert COMMANDS["metrics"] is COMMANDS["describe"]


class TestRunCommands:
    """Tests for individual commands."""

    def test_extract(self, service: QualityService, scenario_url: str, capsys: pytest.CaptureFixture[str]) -> None:
        """Should print the descriptor as JSON."""
        assert _run(["extract", scenario_url], service) == EXIT_OK

        output = json.loads(capsys.readouterr().out)
        assert output["maxWidth"] == "1920"
        assert output["deviceId"] == "abc123"

    def test_key(self, service: QualityService, scenario_url: str, capsys: pytest.CaptureFixture[str]) -> None:
        """Should print only the key."""
        assert _run(["key", scenario_url], service) == EXIT_OK
        assert capsys.readouterr().out.strip() == service.cache_key_for_url(scenario_url)

    def test_key_explain(self, service: QualityService, scenario_url: str, capsys: pytest.CaptureFixture[str]) -> None:
        """Should print the fingerprint summary."""
        assert _run(["hash", "--explain", scenario_url], service) == EXIT_OK

        output = json.loads(capsys.readouterr().out)
        assert output["session_attributes_ignored"] == ["deviceId"]
        assert "deviceId" not in output["canonical"]
        assert output["cache_key"] == service.cache_key_for_url(scenario_url)

    def test_compare_equal(self, service: QualityService, scenario_url: str, capsys: pytest.CaptureFixture[str]) -> None:
        """Requests that differ only by device should compare equal."""
        other = scenario_url.replace("DeviceId=abc123", "DeviceId=tv")

        assert _run(["compare", scenario_url, other], service) == EXIT_OK

        output = json.loads(capsys.readouterr().out)
        assert output["equal"] is True
        assert output["first"] == output["second"]

    def test_compare_different(self, service: QualityService, capsys: pytest.CaptureFixture[str]) -> None:
        """Different qualities should exit with the not-equal status."""
        assert _run(["compare", f"{BASE}?maxWidth=1920", f"{BASE}?maxWidth=1280"], service) == EXIT_NOT_EQUAL
        assert json.loads(capsys.readouterr().out)["equal"] is False

    def test_describe(self, service: QualityService, scenario_url: str, capsys: pytest.CaptureFixture[str]) -> None:
        """Should print metrics with the estimatedSize field."""
        assert _run(["metrics", scenario_url], service) == EXIT_OK

        output = json.loads(capsys.readouterr().out)
        assert output["score"] == pytest.approx(10073.6)
        assert output["description"] == "1920x1080 8Mbps H264 AAC (eng) [Track 2]"
        assert output["estimatedSize"] == 7_200_000_000

    def test_rank(self, service: QualityService, capsys: pytest.CaptureFixture[str]) -> None:
        """Should print URLs best first."""
        sd = f"{BASE}?maxWidth=854&maxHeight=480"
        uhd = f"{BASE}?maxWidth=3840&maxHeight=2160"

        assert _run(["rank", sd, uhd], service) == EXIT_OK

        output = json.loads(capsys.readouterr().out)
        assert [entry["url"] for entry in output] == [uhd, sd]
        assert output[0]["description"] == "3840x2160"
        assert output[0]["score"] == pytest.approx(8294.4)
        assert len(output[0]["cache_key"]) == 12

    def test_rank_uses_service_ranking(self, service: QualityService, capsys: pytest.CaptureFixture[str]) -> None:
        """Should order through the service and keep input order on ties."""
        first = f"{BASE}?maxWidth=1280&maxHeight=720&videoCodec=h264"
        second = f"{BASE}?maxWidth=1280&maxHeight=720&videoCodec=hevc"

        with patch.object(service, "rank_scored", wraps=service.rank_scored) as rank_scored:
            assert _run(["rank", first, second], service) == EXIT_OK

        rank_scored.assert_called_once()
        assert [entry["url"] for entry in json.loads(capsys.readouterr().out)] == [first, second]


class TestMain:
    """Tests for the main entry point."""

    def test_key(self, scenario_url: str, capsys: pytest.CaptureFixture[str]) -> None:
        """Should run a command with default configuration."""
        assert main.main(["key", scenario_url]) == EXIT_OK
        assert capsys.readouterr().out.strip() == QualityService().cache_key_for_url(scenario_url)

    def test_compare_exit_status(self) -> None:
        """Should propagate the command's exit status."""
        assert main.main(["compare", f"{BASE}?maxWidth=1920", f"{BASE}?maxWidth=720"]) == EXIT_NOT_EQUAL

    def test_configuration_error(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Should exit with status 2 on a bad configuration."""
        monkeypatch.chdir(tmp_path)
        (tmp_path / "config.yaml").write_text("quality:\n  reference_duration_seconds: 0\n")

        assert main.main(["--config", "config.yaml", "describe", BASE]) == main.EXIT_CONFIG_ERROR
        assert "Configuration error" in capsys.readouterr().err

    def test_configured_duration(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Should apply the configured reference duration."""
        monkeypatch.chdir(tmp_path)
        (tmp_path / "config.yaml").write_text("quality:\n  reference_duration_seconds: 3600\n")

        assert main.main(["--config", "config.yaml", "describe", f"{BASE}?maxVideoBitrate=8000000"]) == EXIT_OK
        assert json.loads(capsys.readouterr().out)["estimatedSize"] == 3_600_000_000
