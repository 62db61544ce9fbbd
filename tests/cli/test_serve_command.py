"""Tests for the ``user-directory`` command line."""

from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from user_directory import __version__
from user_directory.cli import app

runner = CliRunner()


@pytest.fixture
def uvicorn_run():
    with patch("uvicorn.run") as run, patch("user_directory.cli.serve.setup_logging") as logs:
        run.logs = logs
        yield run


class TestVersion:
    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestServe:
    """Test option handling for ``serve``."""

    def test_defaults(self, isolated_config, uvicorn_run):
        with patch("webbrowser.open"), patch("threading.Timer") as timer:
            result = runner.invoke(app, ["serve"])
        assert result.exit_code == 0, result.output
        kwargs = uvicorn_run.call_args.kwargs
        assert kwargs["host"] == "127.0.0.1"
        assert kwargs["port"] == 8765
        assert kwargs["log_level"] == "warning"
        timer.assert_called_once()
        assert "http://127.0.0.1:8765" in result.output

    def test_options(self, isolated_config, uvicorn_run, tmp_path):
        log_file = tmp_path / "ud.log"
        with patch("threading.Timer") as timer:
            result = runner.invoke(
                app,
                [
                    "serve",
                    "--host",
                    "0.0.0.0",
                    "--port",
                    "9100",
                    "--api-url",
                    "http://localhost:3000",
                    "--no-browser",
                    "-v",
                    "--log-file",
                    str(log_file),
                ],
            )
        assert result.exit_code == 0, result.output
        timer.assert_not_called()
        kwargs = uvicorn_run.call_args.kwargs
        assert (kwargs["host"], kwargs["port"], kwargs["log_level"]) == ("0.0.0.0", 9100, "info")
        asgi_app = uvicorn_run.call_args.args[0]
        assert asgi_app.state.config.api_base_url == "http://localhost:3000"
        uvicorn_run.logs.assert_called_once_with(
            verbose=True, quiet=False, log_file=str(log_file)
        )

    def test_config_file(self, isolated_config, uvicorn_run, tmp_path):
        config = tmp_path / "custom.toml"
        config.write_text("port = 9200\nopen_browser = false\n")
        result = runner.invoke(app, ["serve", "-c", str(config), "-q"])
        assert result.exit_code == 0, result.output
        assert uvicorn_run.call_args.kwargs["port"] == 9200
        uvicorn_run.logs.assert_called_once_with(verbose=False, quiet=True, log_file=None)

    def test_invalid_configuration_exits_1(self, isolated_config, uvicorn_run):
        result = runner.invoke(app, ["serve", "--port", "0", "--no-browser"])
        assert result.exit_code == 1
        assert "Configuration error" in result.output
        uvicorn_run.assert_not_called()

    def test_bad_environment_exits_1(self, isolated_config, uvicorn_run, monkeypatch):
        monkeypatch.setenv("USER_DIRECTORY_API_BASE_URL", "not-a-url")
        result = runner.invoke(app, ["serve", "--no-browser"])
        assert result.exit_code == 1
        uvicorn_run.assert_not_called()

    def test_keyboard_interrupt_stops_cleanly(self, isolated_config, uvicorn_run):
        uvicorn_run.side_effect = KeyboardInterrupt
        result = runner.invoke(app, ["serve", "--no-browser"])
        assert result.exit_code == 0
        assert "Stopped." in result.output
