from __future__ import annotations

import typer

from relpatch.cli.commands._helpers import exit_on_error
from relpatch.cli.context import build_context
from relpatch.output.console import Style
from relpatch.release.validation import validate_version_name, validate_version_number


def check_name(
    name: str = typer.Argument(..., help="Version name, e.g. DFNPRO11_SA_RETAIL_X_2.007.00.2"),
) -> None:
    """Validate a release version name."""
    ctx = build_context()
    parsed = exit_on_error(validate_version_name(name), ctx)
    ctx.console.success(parsed.raw)
    ctx.console.print(f"components: {' / '.join(parsed.components[:-1])}", Style.DIM)
    ctx.console.print(f"version: {'.'.join(str(p) for p in parsed.version)}", Style.DIM)


def check_version(
    number: str = typer.Argument(..., help="10-digit version number, e.g. 2007001064"),
) -> None:
    """Validate a release version number."""
    ctx = build_context()
    value = exit_on_error(validate_version_number(number), ctx)
    ctx.console.success(str(value))
