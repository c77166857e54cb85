"""Interactive collection of release data.

A thin adapter over ``relpatch.release.collect``: every answer goes through
the same validators, and an invalid answer is reported and asked again
instead of aborting the run.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

import typer

from relpatch.core.result import Err
from relpatch.output.console import ConsoleProtocol, Style
from relpatch.output.errors import print_release_error
from relpatch.release.collect import clean_lines, resolve_server_root
from relpatch.release.model import (
    CATEGORIES,
    LANGUAGES,
    ReleaseNote,
    ReleaseRequest,
    created_date_for,
    empty_notes,
)
from relpatch.release.validation import (
    VersionConform,
    accept_any_version,
    validate_version_name,
    validate_version_number,
)


class PromptIO(Protocol):
    def ask(self, text: str, *, default: str | None = None) -> str: ...


class TyperPromptIO:
    """Reads answers from the terminal via ``typer.prompt``."""

    def ask(self, text: str, *, default: str | None = None) -> str:
        if default is None:
            return str(typer.prompt(text))
        return str(typer.prompt(text, default=default, show_default=False))


def ask_server_root(io: PromptIO, console: ConsoleProtocol, *, base_dir: Path) -> Path:
    while True:
        answer = io.ask("Please enter server root folder name. (ex: ../pro11-file-server)")
        resolved = resolve_server_root(answer, base_dir=base_dir)
        if isinstance(resolved, Err):
            print_release_error(resolved.error, console)
            continue
        console.print(f"     server path: {resolved.value}", Style.DIM)
        return resolved.value


def ask_version_number(
    io: PromptIO, console: ConsoleProtocol, *, conform: VersionConform = accept_any_version
) -> int:
    while True:
        answer = io.ask("Enter version number (ex: 2007001064)")
        number = validate_version_number(answer, conform=conform)
        if isinstance(number, Err):
            print_release_error(number.error, console)
            continue
        return number.value


def ask_version_name(io: PromptIO, console: ConsoleProtocol) -> str:
    while True:
        answer = io.ask("Release Version Name")
        name = validate_version_name(answer)
        if isinstance(name, Err):
            print_release_error(name.error, console)
            continue
        return name.value.raw


def ask_lines(io: PromptIO, label: str) -> tuple[str, ...]:
    """Collect entries one per line until an empty answer."""
    lines: list[str] = []
    while True:
        answer = io.ask(f"{label} [{len(lines) + 1}] (empty to finish)", default="")
        if not answer.strip():
            return clean_lines(lines)
        lines.append(answer)


def prompt_request(
    io: PromptIO,
    console: ConsoleProtocol,
    *,
    base_dir: Path,
    conform: VersionConform = accept_any_version,
) -> ReleaseRequest:
    server_root = ask_server_root(io, console, base_dir=base_dir)
    version_number = ask_version_number(io, console, conform=conform)
    version_name = ask_version_name(io, console)

    notes = empty_notes()
    for lang in LANGUAGES:
        for category in CATEGORIES:
            notes[lang][category.key] = ask_lines(io, f"{category.description} ({lang})")

    return ReleaseRequest(
        server_root=server_root,
        version_number=version_number,
        release_note=ReleaseNote(
            version=version_number,
            version_name=version_name,
            created_date=created_date_for(),
            notes=notes,
        ),
    )


def print_request(request: ReleaseRequest, console: ConsoleProtocol) -> None:
    note = request.release_note
    console.header(f"Release {note.version_name}")
    console.print(f"server:  {request.server_root}", Style.DIM)
    console.print(f"version: {request.version_number}", Style.DIM)
    console.print(f"created: {note.created_date}", Style.DIM)

    if note.is_empty():
        console.warning("release note has no entries")
        return

    for lang in LANGUAGES:
        for category in CATEGORIES:
            lines = note.lines(lang, category.key)
            if not lines:
                continue
            console.print(f"{category.description} ({lang})", Style.INFO)
            for line in lines:
                console.print(f"  - {line}")
