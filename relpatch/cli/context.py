from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from relpatch.core.config import Config, ConfigError, load_config_or_default
from relpatch.core.result import Err
from relpatch.output.console import ConsoleProtocol, RichConsole
from relpatch.output.errors import print_release_error, release_error_exit_code
from relpatch.release.errors import ReleaseError


@dataclass(frozen=True, slots=True)
class CLIContext:
    config: Config
    console: ConsoleProtocol


def config_release_error(error: ConfigError) -> ReleaseError:
    return ReleaseError(
        kind="config_invalid",
        message=error.message,
        hint=str(error.path) if error.path is not None else None,
    )


def build_context(config_path: Path | None = None) -> CLIContext:
    console = RichConsole()
    config_result = load_config_or_default(config_path)
    if isinstance(config_result, Err):
        error = config_release_error(config_result.error)
        print_release_error(error, console)
        raise typer.Exit(code=release_error_exit_code(error))

    return CLIContext(config=config_result.value, console=console)
