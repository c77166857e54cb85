from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import UTC, date, datetime
from pathlib import Path

from relpatch.core.result import Err, Ok, Result
from relpatch.core.structured import StrDict, as_str_dict, get_int, get_str, get_str_list
from relpatch.release.errors import ReleaseError

type Language = str
type CategoryKey = str
type NoteLines = tuple[str, ...]
type LanguageNotes = dict[CategoryKey, NoteLines]


@dataclass(frozen=True, slots=True)
class Category:
    key: CategoryKey
    description: str


LANGUAGES: tuple[Language, ...] = ("EN", "AR")

CATEGORIES: tuple[Category, ...] = (
    Category(key="newFeatures", description="New Features"),
    Category(key="featureChanges", description="Feature Changes"),
    Category(key="bugFixes", description="Bug Fixes"),
    Category(key="removedFeatures", description="Removed Features"),
    Category(key="notes", description="Notes"),
)

CATEGORY_KEYS: tuple[CategoryKey, ...] = tuple(c.key for c in CATEGORIES)

BUNDLED_MSG_TYPE = 1


@dataclass(frozen=True, slots=True)
class ReleaseNote:
    """Release note for one version.

    ``notes`` always holds every supported language and category, in the
    canonical order; absent input becomes an empty tuple. Treat it as
    read-only.
    """

    version: int
    version_name: str
    created_date: str
    notes: dict[Language, LanguageNotes]

    def lines(self, lang: Language, category: CategoryKey) -> NoteLines:
        return self.notes[lang][category]

    def is_empty(self) -> bool:
        return not any(lines for per_lang in self.notes.values() for lines in per_lang.values())

    def to_dict(self) -> StrDict:
        """JSON shape stored in manifests and archives."""
        out: StrDict = {}
        for lang in LANGUAGES:
            out[lang] = {key: list(self.notes[lang][key]) for key in CATEGORY_KEYS}
        out["version"] = self.version
        out["versionName"] = self.version_name
        out["createdDate"] = self.created_date
        return out


@dataclass(frozen=True, slots=True)
class ReleaseRequest:
    """Everything a release run needs: where, which version, what to write."""

    server_root: Path
    version_number: int
    release_note: ReleaseNote


def created_date_for(today: date | None = None) -> str:
    """``YYYYMMDD`` for ``today`` (default: current UTC date)."""
    day = today if today is not None else datetime.now(UTC).date()
    return day.strftime("%Y%m%d")


def empty_notes() -> dict[Language, LanguageNotes]:
    return {lang: {key: () for key in CATEGORY_KEYS} for lang in LANGUAGES}


def bundled_payload(
    version_number: int, release_note: ReleaseNote, *, msg_type: int = BUNDLED_MSG_TYPE
) -> StrDict:
    return {
        "releases": {str(version_number): release_note.to_dict()},
        "msgType": msg_type,
    }


def dump_json(data: object) -> str:
    """Pretty JSON (2-space indent) as written to the file server."""
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def _invalid(message: str) -> Err[ReleaseError]:
    return Err(ReleaseError(kind="invalid_manifest", message=message))


def parse_release_note(data: object) -> Result[ReleaseNote, ReleaseError]:
    """Parse the JSON shape produced by ``ReleaseNote.to_dict``.

    Missing categories read back as empty lists; unknown keys are ignored.
    """
    table = as_str_dict(data)
    if table is None:
        return _invalid("release note must be a JSON object")

    version = get_int(table, "version")
    version_name = get_str(table, "versionName")
    created_date = get_str(table, "createdDate")
    if version is None or version_name is None or created_date is None:
        return _invalid("release note requires version, versionName and createdDate")

    notes = empty_notes()
    for lang in LANGUAGES:
        per_lang = as_str_dict(table.get(lang, {}))
        if per_lang is None:
            return _invalid(f"release note language {lang} must be an object")
        for key in CATEGORY_KEYS:
            if key not in per_lang:
                continue
            lines = get_str_list(per_lang, key)
            if lines is None:
                return _invalid(f"release note {lang}.{key} must be a list of strings")
            notes[lang][key] = tuple(lines)

    return Ok(
        ReleaseNote(
            version=version,
            version_name=version_name,
            created_date=created_date,
            notes=notes,
        )
    )
