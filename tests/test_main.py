"""
Tests for the main entry point and CLI commands.
"""

import functools
import json
from pathlib import Path
from typing import Iterator
from unittest.mock import Mock, patch

import pytest
from typer.testing import CliRunner

from smart_shipping.application.startup import ApplicationStartup
from smart_shipping.core.domain.events import Event, EventNames
from smart_shipping.core.domain.notifications import Notification, NotificationLevel
from smart_shipping.core.exceptions import SessionUnavailable, TransmissionFailed
from smart_shipping.main import cli, main, render_notification

from conftest import FakeBackendClient


@pytest.fixture
def fake_backend() -> Iterator[FakeBackendClient]:
    """Route every command through a scripted backend client."""
    client = FakeBackendClient()
    with patch("smart_shipping.main.ApplicationStartup",
               functools.partial(ApplicationStartup, client=client)), \
            patch("smart_shipping.main.setup_logging"):
        yield client


class TestMainCLI:
    """Test cases for the CLI commands."""

    def setup_method(self) -> None:
        self.runner = CliRunner()

    def test_cli_help_command(self) -> None:
        result = self.runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        assert "Send files to a Smart Shipping upload session" in result.output

    def test_send_success(self, fake_backend: FakeBackendClient, tmp_path: Path) -> None:
        label = tmp_path / "label.pdf"
        label.write_bytes(b"%PDF-1.4")

        result = self.runner.invoke(cli, ["send", str(label)])

        assert result.exit_code == 0, result.output
        assert "Session: https://backend.test/session/abc123" in result.output
        assert "1 file(s) selected" in result.output
        assert "Upload succeeded!" in result.output
        assert [f.name for f in fake_backend.upload_calls[0][1]] == ["label.pdf"]

    def test_send_failure(self, fake_backend: FakeBackendClient, tmp_path: Path) -> None:
        fake_backend.upload_error = TransmissionFailed("disk full", status=500)
        label = tmp_path / "label.pdf"
        label.write_bytes(b"%PDF-1.4")

        result = self.runner.invoke(cli, ["send", str(label)])

        assert result.exit_code == 1
        assert "disk full" in result.output

    def test_send_without_session(self, fake_backend: FakeBackendClient,
                                  tmp_path: Path) -> None:
        fake_backend.session_error = SessionUnavailable()
        label = tmp_path / "label.pdf"
        label.write_bytes(b"%PDF-1.4")

        result = self.runner.invoke(cli, ["send", str(label)])

        assert result.exit_code == 1
        assert "Failed to connect to the server" in result.output
        assert fake_backend.upload_calls == []

    def test_send_missing_file(self, tmp_path: Path) -> None:
        result = self.runner.invoke(cli, ["send", str(tmp_path / "missing.pdf")])

        assert result.exit_code != 0

    def test_session_command(self, fake_backend: FakeBackendClient) -> None:
        result = self.runner.invoke(cli, ["session"])

        assert result.exit_code == 0, result.output
        assert "Session URL: https://backend.test/session/abc123" in result.output
        assert "Session ID: abc123" in result.output

    def test_preview_command(self, fake_backend: FakeBackendClient, tmp_path: Path) -> None:
        photo = tmp_path / "photo.png"
        photo.write_bytes(b"\x89PNG")

        result = self.runner.invoke(cli, ["preview", str(photo)])

        assert result.exit_code == 0, result.output
        assert "photo.png: image/png" in result.output
        assert "Preview: image (preview://" in result.output

    def test_init_config(self, tmp_path: Path) -> None:
        output = tmp_path / "config.json"

        result = self.runner.invoke(cli, ["init-config", "--output", str(output),
                                          "--format", "json"])

        assert result.exit_code == 0
        assert f"Default configuration saved to {output}" in result.output
        assert json.loads(output.read_text())["upload"]["max_file_size"] == 20 * 1024 * 1024

    def test_init_config_unsupported_format(self, tmp_path: Path) -> None:
        result = self.runner.invoke(cli, ["init-config", "--output",
                                          str(tmp_path / "c.ini"), "--format", "ini"])

        assert result.exit_code == 1
        assert "Unsupported format" in result.output

    def test_validate_config(self, tmp_path: Path) -> None:
        config_file = tmp_path / "config.yaml"
        config_file.write_text("backend:\n  base_url: http://127.0.0.1:3000\n")

        result = self.runner.invoke(cli, ["validate-config", str(config_file)])

        assert result.exit_code == 0
        assert f"Configuration file {config_file} is valid" in result.output
        assert "Backend: http://127.0.0.1:3000" in result.output

    def test_validate_config_invalid(self, tmp_path: Path) -> None:
        config_file = tmp_path / "config.yaml"
        config_file.write_text("upload:\n  max_file_size: -1\n")

        result = self.runner.invoke(cli, ["validate-config", str(config_file)])

        assert result.exit_code == 1
        assert "Configuration validation failed" in result.output


class TestRenderNotification:
    """Test cases for notification rendering."""

    def test_loading_notification(self, capsys: pytest.CaptureFixture) -> None:
        notification = Notification(message="Sending files...", loading=True, percent=42)

        render_notification(Event(name=EventNames.NOTIFICATION_UPDATED, data=notification))

        assert capsys.readouterr().out == "\rSending files...  42%"

    def test_result_notification(self, capsys: pytest.CaptureFixture) -> None:
        notification = Notification(message="Upload succeeded!", level=NotificationLevel.SUCCESS)

        render_notification(Event(name=EventNames.NOTIFICATION_UPDATED, data=notification))

        assert "Upload succeeded!" in capsys.readouterr().out

    def test_dismissed_notification_is_silent(self, capsys: pytest.CaptureFixture) -> None:
        notification = Notification(message="gone")

        render_notification(Event(name=EventNames.NOTIFICATION_DISMISSED, data=notification))

        assert capsys.readouterr().out == ""


class TestMainEntryPoint:
    """Test cases for main()."""

    @patch("smart_shipping.main.cli")
    def test_main_calls_cli(self, mock_cli: Mock) -> None:
        main()

        mock_cli.assert_called_once()

    @patch("smart_shipping.main.cli", side_effect=KeyboardInterrupt)
    def test_main_handles_interrupt(self, mock_cli: Mock) -> None:
        main()

        mock_cli.assert_called_once()
