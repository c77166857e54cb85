from __future__ import annotations

import typer

from relpatch import __version__
from relpatch.cli.commands.check import check_name, check_version
from relpatch.cli.commands.release import apply, run


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)


app.command()(run)
app.command()(apply)
app.command("check-name")(check_name)
app.command("check-version")(check_version)


def _print_version(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=0)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit.",
        callback=_print_version,
        is_eager=True,
    ),
) -> None:
    """Patch release notes into file-server archives and manifests."""


def main() -> None:
    app()
