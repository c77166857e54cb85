"""Assemble a ReleaseRequest from structured input.

The interactive prompts and the ``apply`` command both end up here, so the
same validation applies whichever way the release data arrives.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from datetime import date
from pathlib import Path

from relpatch.core.result import Err, Ok, Result
from relpatch.core.structured import StrDict, as_str_dict, get_str, get_table
from relpatch.release.errors import ReleaseError
from relpatch.release.model import (
    CATEGORY_KEYS,
    LANGUAGES,
    Language,
    LanguageNotes,
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

type RawNotes = Mapping[str, Mapping[str, Sequence[str]]]


def resolve_server_root(name: str, *, base_dir: Path) -> Result[Path, ReleaseError]:
    """Resolve the server folder name against ``base_dir``."""
    text = name.strip()
    if not text:
        return Err(
            ReleaseError(
                kind="invalid_input",
                message="server root folder name is required",
                hint="e.g. ../pro11-file-server",
            )
        )
    return Ok((base_dir / Path(text).expanduser()).resolve())


def clean_lines(lines: Sequence[str]) -> tuple[str, ...]:
    """Strip entries and drop blank ones, keeping order."""
    return tuple(s for s in (line.strip() for line in lines) if s)


def normalize_notes(raw: RawNotes) -> Result[dict[Language, LanguageNotes], ReleaseError]:
    notes = empty_notes()
    for lang, per_lang in raw.items():
        if lang not in LANGUAGES:
            return Err(
                ReleaseError(
                    kind="invalid_input",
                    message=f"unsupported release note language: {lang}",
                    hint=f"supported: {', '.join(LANGUAGES)}",
                )
            )
        for key, lines in per_lang.items():
            if key not in CATEGORY_KEYS:
                return Err(
                    ReleaseError(
                        kind="invalid_input",
                        message=f"unknown release note category: {lang}.{key}",
                        hint=f"supported: {', '.join(CATEGORY_KEYS)}",
                    )
                )
            if isinstance(lines, str):
                return Err(
                    ReleaseError(
                        kind="invalid_input",
                        message=f"release note {lang}.{key} must be a list of strings",
                    )
                )
            notes[lang][key] = clean_lines(lines)
    return Ok(notes)


def build_release_note(
    *,
    version_number: int,
    version_name: str,
    notes: RawNotes,
    today: date | None = None,
) -> Result[ReleaseNote, ReleaseError]:
    name = validate_version_name(version_name)
    if isinstance(name, Err):
        return name

    normalized = normalize_notes(notes)
    if isinstance(normalized, Err):
        return normalized

    return Ok(
        ReleaseNote(
            version=version_number,
            version_name=name.value.raw,
            created_date=created_date_for(today),
            notes=normalized.value,
        )
    )


def build_request(
    *,
    server: str,
    version_number: int | str,
    version_name: str,
    notes: RawNotes,
    base_dir: Path,
    conform: VersionConform = accept_any_version,
    today: date | None = None,
) -> Result[ReleaseRequest, ReleaseError]:
    server_root = resolve_server_root(server, base_dir=base_dir)
    if isinstance(server_root, Err):
        return server_root

    number = validate_version_number(version_number, conform=conform)
    if isinstance(number, Err):
        return number

    note = build_release_note(
        version_number=number.value,
        version_name=version_name,
        notes=notes,
        today=today,
    )
    if isinstance(note, Err):
        return note

    return Ok(
        ReleaseRequest(
            server_root=server_root.value,
            version_number=number.value,
            release_note=note.value,
        )
    )


def _read_release_file(path: Path) -> Result[StrDict, ReleaseError]:
    import tomllib

    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return Err(ReleaseError(kind="not_found", message=f"release file not found: {path}"))
    except (OSError, UnicodeDecodeError) as e:
        return Err(
            ReleaseError(kind="invalid_input", message=f"failed to read release file: {e}")
        )

    try:
        data: object = json.loads(text) if path.suffix == ".json" else tomllib.loads(text)
    except (json.JSONDecodeError, tomllib.TOMLDecodeError) as e:
        return Err(
            ReleaseError(
                kind="invalid_input",
                message=f"invalid release file: {e}",
                hint=str(path),
            )
        )

    table = as_str_dict(data)
    if table is None:
        return Err(
            ReleaseError(kind="invalid_input", message="release file root must be a table")
        )
    return Ok(table)


def _raw_notes(table: StrDict) -> Result[dict[str, dict[str, list[str]]], ReleaseError]:
    notes_table = get_table(table, "notes") or {}
    out: dict[str, dict[str, list[str]]] = {}
    for lang, per_lang_obj in notes_table.items():
        per_lang = as_str_dict(per_lang_obj)
        if per_lang is None:
            return Err(
                ReleaseError(
                    kind="invalid_input",
                    message=f"notes.{lang} must be a table of category lists",
                )
            )
        out[lang] = {}
        for key, lines in per_lang.items():
            if not isinstance(lines, list) or not all(isinstance(s, str) for s in lines):
                return Err(
                    ReleaseError(
                        kind="invalid_input",
                        message=f"notes.{lang}.{key} must be a list of strings",
                    )
                )
            out[lang][key] = [str(s) for s in lines]
    return Ok(out)


def load_request_file(
    path: Path,
    *,
    base_dir: Path,
    today: date | None = None,
) -> Result[ReleaseRequest, ReleaseError]:
    """Build a request from a TOML (or ``.json``) release file.

    Expected keys: ``server``, ``version_number``, ``version_name`` and an
    optional ``notes`` table keyed by language then category.
    """
    loaded = _read_release_file(path)
    if isinstance(loaded, Err):
        return loaded
    table = loaded.value

    server = get_str(table, "server")
    version_name = get_str(table, "version_name")
    version_number = table.get("version_number")
    if server is None or version_name is None or version_number is None:
        return Err(
            ReleaseError(
                kind="invalid_input",
                message="release file requires server, version_number and version_name",
                hint=str(path),
            )
        )
    if not isinstance(version_number, int | str):
        return Err(
            ReleaseError(kind="invalid_input", message="version_number must be an integer")
        )

    notes = _raw_notes(table)
    if isinstance(notes, Err):
        return notes

    return build_request(
        server=server,
        version_number=version_number,
        version_name=version_name,
        notes=notes.value,
        base_dir=base_dir,
        today=today,
    )
