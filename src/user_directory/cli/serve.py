"""``user-directory serve`` — run the live web console."""

import logging
import threading
import webbrowser
from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape

from ..exceptions import ConfigurationError
from ..logging_config import setup_logging
from . import app
from ._common import console, resolve_config

logger = logging.getLogger(__name__)


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, help="Host to bind to (default 127.0.0.1)"),
    port: Optional[int] = typer.Option(None, help="Port to listen on (default 8765)"),
    api_url: Optional[str] = typer.Option(
        None, "--api-url", help="Base URL of the user REST API"
    ),
    no_browser: bool = typer.Option(False, "--no-browser", help="Don't open browser"),
    config: Optional[Path] = typer.Option(
        None,
        "-c",
        "--config",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose logging"),
    quiet: bool = typer.Option(False, "-q", "--quiet", help="Only log errors"),
    log_file: Optional[Path] = typer.Option(
        None, "--log-file", help="Also write logs to this file", dir_okay=False
    ),
) -> None:
    """Start the web console and serve it until Ctrl+C."""
    try:
        settings = resolve_config(
            config=config,
            host=host,
            port=port,
            api_url=api_url,
            no_browser=no_browser,
            verbose=verbose,
            quiet=quiet,
            log_file=log_file,
        )
    except ConfigurationError as exc:
        console.print(f"[red]Configuration error:[/red] {escape(str(exc))}")
        raise typer.Exit(1)

    setup_logging(
        verbose=settings.verbosity == "verbose",
        quiet=settings.verbosity == "quiet",
        log_file=settings.log_file,
    )

    import uvicorn

    from ..server import create_app

    url = settings.server_url
    if settings.open_browser:
        threading.Timer(1.0, lambda: webbrowser.open(url)).start()

    console.print(f"[bold]User directory[/bold] backed by {escape(settings.api_base_url)}")
    console.print(f"[bold]Console[/bold] → [link={url}]{url}[/link]")
    console.print("[dim]Press Ctrl+C to stop[/dim]")
    logger.debug("Resolved configuration: %s", settings)

    # Start ASGI server (blocks until Ctrl+C)
    asgi_app = create_app(settings)
    try:
        uvicorn.run(
            asgi_app,
            host=settings.host,
            port=settings.port,
            log_level="info" if settings.verbosity == "verbose" else "warning",
        )
    except KeyboardInterrupt:
        pass
    finally:
        console.print("\n[dim]Stopped.[/dim]")
