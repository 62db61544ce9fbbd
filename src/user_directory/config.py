"""Configuration loading and management for the user directory console.

Configuration sources are merged in priority order:
    1. Defaults (defined in DirectoryConfig)
    2. Global config (~/.user-directory.toml)
    3. Project config (./user-directory.toml)
    4. Explicit config file
    5. Environment variables (USER_DIRECTORY_* prefix)
    6. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(port=9000, verbose=True)
    >>> config.port
    9000
    >>> config.verbosity
    'verbose'
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError

Verbosity = Literal["quiet", "normal", "verbose"]

DEFAULT_API_BASE_URL = "https://jsonplaceholder.typicode.com"
ENV_PREFIX = "USER_DIRECTORY_"
CONFIG_FILENAME = "user-directory.toml"


@dataclass(frozen=True)
class DirectoryConfig:
    """Settings for the console server and its remote client.

    Attributes:
        Remote service:
            api_base_url: Base address of the user REST API
            request_timeout_seconds: Per-request timeout (None = httpx default)

        Server:
            host: Interface to bind
            port: Port to listen on
            open_browser: Open a browser tab after startup

        Presentation:
            toast_duration_seconds: How long success/error toasts stay visible

        Output control:
            verbosity: Logging verbosity level
            log_file: Optional file that receives a copy of the log
    """

    # Remote service
    api_base_url: str = DEFAULT_API_BASE_URL
    request_timeout_seconds: Optional[float] = None

    # Server
    host: str = "127.0.0.1"
    port: int = 8765
    open_browser: bool = True

    # Presentation
    toast_duration_seconds: float = 4.0

    # Output control
    verbosity: Verbosity = "normal"
    log_file: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not self.api_base_url.startswith(("http://", "https://")):
            raise InvalidConfigError(
                "api_base_url", self.api_base_url, "must start with http:// or https://"
            )
        if self.request_timeout_seconds is not None and self.request_timeout_seconds <= 0:
            raise InvalidConfigError(
                "request_timeout_seconds", self.request_timeout_seconds, "must be positive"
            )
        if not 1 <= self.port <= 65535:
            raise InvalidConfigError("port", self.port, "must be between 1 and 65535")
        if self.toast_duration_seconds <= 0:
            raise InvalidConfigError(
                "toast_duration_seconds", self.toast_duration_seconds, "must be positive"
            )
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise InvalidConfigError(
                "verbosity", self.verbosity, "must be one of quiet, normal, verbose"
            )

    @property
    def server_url(self) -> str:
        return f"http://{self.host}:{self.port}"


def load_config(config_file: Optional[Path] = None, **overrides: Any) -> DirectoryConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags). ``None``
            values are ignored so unset CLI options fall through.

    Returns:
        Validated DirectoryConfig instance

    Raises:
        ConfigurationError: If a config file is invalid or missing, or a
            value fails validation
    """
    merged: dict[str, Any] = {}

    global_config = Path.home() / f".{CONFIG_FILENAME}"
    if global_config.exists():
        try:
            merged.update(_load_toml_file(global_config))
        except ConfigurationError:
            raise
        except Exception as e:
            raise ConfigurationError(f"Invalid global config '{global_config}': {e}")

    project_config = Path.cwd() / CONFIG_FILENAME
    if project_config.exists():
        try:
            merged.update(_load_toml_file(project_config))
        except ConfigurationError:
            raise
        except Exception as e:
            raise ConfigurationError(f"Invalid project config '{project_config}': {e}")

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        try:
            merged.update(_load_toml_file(config_file))
        except ConfigurationError:
            raise
        except Exception as e:
            raise ConfigurationError(f"Invalid config file '{config_file}': {e}")

    merged.update(_load_env_vars())

    # Verbosity flags from the CLI become the verbosity field
    if overrides.pop("verbose", False):
        overrides["verbosity"] = "verbose"
    if overrides.pop("quiet", False):
        overrides["verbosity"] = "quiet"

    merged.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return DirectoryConfig(**merged)
    except TypeError as e:
        # Unknown field in config
        raise ConfigurationError(f"Invalid configuration: {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from USER_DIRECTORY_* environment variables.

    Every DirectoryConfig field has a matching variable, e.g.
    ``USER_DIRECTORY_API_BASE_URL`` or ``USER_DIRECTORY_PORT``.
    """
    type_hints = get_type_hints(DirectoryConfig)

    result: dict[str, Any] = {}

    for field_name in DirectoryConfig.__dataclass_fields__:
        env_key = f"{ENV_PREFIX}{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
            if parsed is not None:
                result[field_name] = parsed
        except ValueError as e:
            raise ConfigurationError(f"Invalid {env_key}: {e}")

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the correct type.

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    # Optional[X] is Union[X, None]
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]
            origin = getattr(type_hint, "__origin__", None)

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    # String (including Literal types like Verbosity)
    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict.

    Raises:
        ConfigurationError: If no TOML parser is available
        Exception: If TOML parsing fails
    """
    try:
        # Python 3.11+ has tomllib in stdlib
        import tomllib
    except ModuleNotFoundError:
        try:
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise ConfigurationError(
                "TOML support requires Python 3.11+ or 'tomli' package. "
                "Install with: pip install tomli"
            )

    with open(path, "rb") as f:
        return tomllib.load(f)
