from __future__ import annotations

import json
from pathlib import Path

from relpatch.core.result import Err, Ok, Result
from relpatch.core.structured import StrDict, as_str_dict
from relpatch.output.console import ConsoleProtocol
from relpatch.platform.files import atomic_write_text
from relpatch.release.errors import ReleaseError
from relpatch.release.model import ReleaseNote, dump_json

PREV_RELEASES_FILE = "prevReleases.json"
VERSION_INFO_FILE = "versionInfo.json"


def read_json_object(path: Path, *, label: str) -> Result[StrDict, ReleaseError]:
    """Load a manifest that must be a JSON object."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return Err(
            ReleaseError(
                kind="not_found",
                message=f"Error while updating {label} file: {path} not found",
                hint="check the server root folder name",
            )
        )
    except (OSError, UnicodeDecodeError) as e:
        return Err(
            ReleaseError(
                kind="manifest_failed",
                message=f"Error while updating {label} file: {e}",
                hint=str(path),
            )
        )

    try:
        data: object = json.loads(text)
    except json.JSONDecodeError as e:
        return Err(
            ReleaseError(
                kind="invalid_manifest",
                message=f"Error while updating {label} file: invalid JSON ({e})",
                hint=str(path),
            )
        )

    content = as_str_dict(data)
    if content is None:
        return Err(
            ReleaseError(
                kind="invalid_manifest",
                message=f"Error while updating {label} file: root must be a JSON object",
                hint=str(path),
            )
        )
    return Ok(content)


def write_json_object(path: Path, content: StrDict, *, label: str) -> Result[None, ReleaseError]:
    try:
        atomic_write_text(path, dump_json(content))
    except OSError as e:
        return Err(
            ReleaseError(
                kind="manifest_failed",
                message=f"Error while updating {label} file: {e}",
                hint=str(path),
            )
        )
    return Ok(None)


def update_prev_releases(
    *,
    static_dir: Path,
    version_number: int,
    release_note: ReleaseNote,
    console: ConsoleProtocol,
    file_name: str = PREV_RELEASES_FILE,
) -> Result[Path, ReleaseError]:
    """Insert or overwrite ``releases[<version>]`` in the previous releases index."""
    label = "prev releases"
    path = static_dir / file_name
    console.print(f"Updating {path}")

    loaded = read_json_object(path, label=label)
    if isinstance(loaded, Err):
        return loaded
    content = loaded.value

    releases = as_str_dict(content.get("releases"))
    if releases is None:
        return Err(
            ReleaseError(
                kind="invalid_manifest",
                message=f"Error while updating {label} file: missing 'releases' object",
                hint=str(path),
            )
        )

    key = str(version_number)
    if key in releases:
        console.warning(f"overwriting existing release {key}")
    releases[key] = release_note.to_dict()

    written = write_json_object(path, content, label=label)
    if isinstance(written, Err):
        return written

    console.success("Previous releases file updated successfully")
    return Ok(path)


def update_version_info(
    *,
    static_dir: Path,
    version_number: int,
    console: ConsoleProtocol,
    file_name: str = VERSION_INFO_FILE,
) -> Result[Path, ReleaseError]:
    """Point ``app`` at the new version, keeping every other field."""
    label = "version info"
    path = static_dir / file_name
    console.print(f"Updating {path}")

    loaded = read_json_object(path, label=label)
    if isinstance(loaded, Err):
        return loaded
    content = loaded.value
    content["app"] = version_number

    written = write_json_object(path, content, label=label)
    if isinstance(written, Err):
        return written

    console.success("Version info file updated successfully")
    return Ok(path)
