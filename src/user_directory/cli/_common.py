"""Shared CLI helpers."""

from pathlib import Path
from typing import Optional

from rich.console import Console

from ..config import DirectoryConfig, load_config

console = Console()


def resolve_config(
    config: Optional[Path] = None,
    host: Optional[str] = None,
    port: Optional[int] = None,
    api_url: Optional[str] = None,
    no_browser: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    log_file: Optional[Path] = None,
) -> DirectoryConfig:
    """Build settings from CLI options."""
    overrides = {}
    if host is not None:
        overrides["host"] = host
    if port is not None:
        overrides["port"] = port
    if api_url is not None:
        overrides["api_base_url"] = api_url
    if no_browser:
        overrides["open_browser"] = False
    if log_file is not None:
        overrides["log_file"] = str(log_file)
    return load_config(config_file=config, verbose=verbose, quiet=quiet, **overrides)
