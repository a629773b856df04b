from __future__ import annotations

import typer

from ... import __version__
from .commands.discord import register_discord_commands
from .commands.utils import raise_exit

app = typer.Typer(add_completion=False)


def _version_callback(value: bool) -> None:
    if not value:
        return
    typer.echo(f"docbot {__version__}")
    raise typer.Exit(code=0)


@app.callback()
def _root(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    # Subcommands implement behavior; `--version` is handled eagerly.
    return


def main() -> None:
    """Entrypoint for CLI execution."""
    app()


register_discord_commands(app, raise_exit=raise_exit)


if __name__ == "__main__":
    app()
