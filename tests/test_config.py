"""Tests for configuration loading and validation."""

import pytest

from user_directory.config import DEFAULT_API_BASE_URL, DirectoryConfig, load_config
from user_directory.exceptions import ConfigurationError, InvalidConfigError


class TestDirectoryConfig:
    """Test defaults and validation."""

    def test_defaults(self):
        config = DirectoryConfig()
        assert config.api_base_url == DEFAULT_API_BASE_URL
        assert config.request_timeout_seconds is None
        assert config.server_url == "http://127.0.0.1:8765"
        assert config.verbosity == "normal"

    @pytest.mark.parametrize(
        "kwargs,key",
        [
            ({"api_base_url": "ftp://example.com"}, "api_base_url"),
            ({"port": 0}, "port"),
            ({"port": 70000}, "port"),
            ({"request_timeout_seconds": 0}, "request_timeout_seconds"),
            ({"toast_duration_seconds": -1}, "toast_duration_seconds"),
            ({"verbosity": "loud"}, "verbosity"),
        ],
    )
    def test_invalid_values(self, kwargs, key):
        with pytest.raises(InvalidConfigError) as exc_info:
            DirectoryConfig(**kwargs)
        assert exc_info.value.key == key

    def test_frozen(self):
        config = DirectoryConfig()
        with pytest.raises(AttributeError):
            config.port = 1  # type: ignore[misc]


class TestLoadConfig:
    """Test merging files, environment and overrides."""

    def test_defaults_when_nothing_configured(self, isolated_config):
        assert load_config() == DirectoryConfig()

    def test_project_file(self, isolated_config):
        (isolated_config / "user-directory.toml").write_text('port = 9001\nhost = "0.0.0.0"\n')
        config = load_config()
        assert config.port == 9001
        assert config.host == "0.0.0.0"

    def test_explicit_file_beats_project_file(self, isolated_config, tmp_path):
        (isolated_config / "user-directory.toml").write_text("port = 9001\n")
        explicit = tmp_path / "explicit.toml"
        explicit.write_text("port = 9002\n")
        assert load_config(config_file=explicit).port == 9002

    def test_env_beats_files(self, isolated_config, monkeypatch):
        (isolated_config / "user-directory.toml").write_text("port = 9001\n")
        monkeypatch.setenv("USER_DIRECTORY_PORT", "9003")
        monkeypatch.setenv("USER_DIRECTORY_OPEN_BROWSER", "no")
        monkeypatch.setenv("USER_DIRECTORY_REQUEST_TIMEOUT_SECONDS", "2.5")
        config = load_config()
        assert config.port == 9003
        assert config.open_browser is False
        assert config.request_timeout_seconds == 2.5

    def test_overrides_beat_env(self, isolated_config, monkeypatch):
        monkeypatch.setenv("USER_DIRECTORY_PORT", "9003")
        assert load_config(port=9004).port == 9004

    def test_none_overrides_ignored(self, isolated_config):
        assert load_config(port=None, host=None).port == 8765

    def test_verbosity_flags(self, isolated_config):
        assert load_config(verbose=True).verbosity == "verbose"
        assert load_config(quiet=True).verbosity == "quiet"

    def test_missing_explicit_file(self, isolated_config, tmp_path):
        with pytest.raises(ConfigurationError, match="Config file not found"):
            load_config(config_file=tmp_path / "nope.toml")

    def test_broken_toml(self, isolated_config):
        (isolated_config / "user-directory.toml").write_text("port = = 3\n")
        with pytest.raises(ConfigurationError, match="Invalid project config"):
            load_config()

    def test_unknown_key(self, isolated_config):
        (isolated_config / "user-directory.toml").write_text('colour = "blue"\n')
        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            load_config()

    def test_bad_env_value(self, isolated_config, monkeypatch):
        monkeypatch.setenv("USER_DIRECTORY_PORT", "eighty")
        with pytest.raises(ConfigurationError, match="USER_DIRECTORY_PORT"):
            load_config()
