from __future__ import annotations

from pathlib import Path

import typer

from relpatch.cli.commands._helpers import exit_on_error, exit_with_code
from relpatch.cli.context import CLIContext, build_context
from relpatch.cli.prompts import TyperPromptIO, print_request, prompt_request
from relpatch.core.errors import ErrorCode
from relpatch.output.console import Style
from relpatch.release.collect import load_request_file
from relpatch.release.model import ReleaseRequest
from relpatch.release.workflow import ReleaseSummary, run_release


def _apply(ctx: CLIContext, request: ReleaseRequest, *, dry_run: bool) -> ReleaseSummary:
    summary = exit_on_error(
        run_release(request, console=ctx.console, config=ctx.config, dry_run=dry_run),
        ctx,
    )
    if summary.dry_run:
        ctx.console.info(f"dry run: {len(summary.archives)} archive(s) would be updated")
    return summary


def run(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation prompt"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show what would change"),
    config: Path | None = typer.Option(None, "--config", help="Path to relpatch.toml"),
) -> None:
    """Collect release notes interactively and patch the server tree."""
    ctx = build_context(config)
    request = prompt_request(TyperPromptIO(), ctx.console, base_dir=ctx.config.paths.base_dir)
    print_request(request, ctx.console)

    if not yes and not dry_run:
        ctx.console.print(
            "Archives and manifests are updated in place; a failure midway is not rolled back.",
            Style.WARNING,
        )
        if not typer.confirm("Apply this release?", default=False):
            ctx.console.warning("cancelled")
            exit_with_code(int(ErrorCode.USER_ERROR))

    _apply(ctx, request, dry_run=dry_run)


def apply(
    release_file: Path = typer.Argument(..., help="Release file (.toml or .json)"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show what would change"),
    config: Path | None = typer.Option(None, "--config", help="Path to relpatch.toml"),
) -> None:
    """Patch the server tree from a release file (non-interactive)."""
    ctx = build_context(config)
    request = exit_on_error(
        load_request_file(release_file, base_dir=ctx.config.paths.base_dir),
        ctx,
    )
    print_request(request, ctx.console)
    _apply(ctx, request, dry_run=dry_run)
