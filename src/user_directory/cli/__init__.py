"""CLI entry point — registers all subcommands."""

import typer

from .. import __version__
from ._common import console

app = typer.Typer(
    name="user-directory",
    help="User Directory - live web console for a remote user database",
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"user-directory {__version__}")
        raise typer.Exit()


@app.callback()
def callback(
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """
    Browse and manage the users of a jsonplaceholder-style REST service.

    [bold]Examples:[/bold]

      user-directory serve

      user-directory serve --port 9000 --no-browser

      user-directory serve --api-url http://localhost:3000 -v
    """


# Import subcommands to register them
from .serve import serve as _serve  # noqa: F401, E402


def main() -> None:
    app()
