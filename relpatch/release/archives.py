"""Inject the bundled release note into distribution archives.

Every ``*.zip`` directly inside ``<static_dir>/<version>/`` is rebuilt entry by
entry into a temp file beside it, with ``releaseNote.json`` written into its
release folder, and the rebuilt copy replaces the original. Untouched entries
keep their bytes, dates and mode bits. Archives are processed one
at a time; the first failure stops the loop and archives already rewritten
stay rewritten.
"""

from __future__ import annotations

import os
import time
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from zipfile import ZIP_DEFLATED, BadZipFile, LargeZipFile, ZipFile, ZipInfo

from relpatch.core.result import Err, Ok, Result
from relpatch.output.console import ConsoleProtocol, Style
from relpatch.platform.files import sibling_temp_path
from relpatch.release.errors import ReleaseError
from relpatch.release.model import BUNDLED_MSG_TYPE, ReleaseNote, bundled_payload, dump_json

ARCHIVE_SUFFIX = ".zip"
DEFAULT_PAYLOAD_NAME = "releaseNote.json"
PAYLOAD_MODE = 0o644


@dataclass(frozen=True, slots=True)
class UpdatedArchive:
    path: Path
    member: str


def version_dir_for(static_dir: Path, version_number: int) -> Path:
    return static_dir / str(version_number)


def list_archives(version_dir: Path) -> Result[list[Path], ReleaseError]:
    """Regular files directly in ``version_dir`` ending in ``.zip`` (case-sensitive)."""
    try:
        entries = list(version_dir.iterdir())
        archives = [p for p in entries if p.name.endswith(ARCHIVE_SUFFIX) and p.is_file()]
    except OSError as e:
        return Err(
            ReleaseError(
                kind="archive_failed",
                message=f"Release update failed: cannot list {version_dir}: {e}",
                hint="check the server root and version number",
            )
        )
    return Ok(sorted(archives, key=lambda p: p.name))


def release_root(names: list[str], version_number: int) -> str:
    """Pick the folder inside an archive that receives the release note.

    Preference: a top-level folder named after the version, then the only
    top-level entry if it is a folder, then ``<version>/`` (created if needed).
    """
    version_folder = str(version_number)
    top_dirs: set[str] = set()
    top_files: set[str] = set()
    for name in names:
        parts = PurePosixPath(name).parts
        if not parts:
            continue
        if len(parts) > 1 or name.endswith("/"):
            top_dirs.add(parts[0])
        else:
            top_files.add(parts[0])

    if version_folder in top_dirs:
        return version_folder
    if len(top_dirs) == 1 and not top_files:
        return next(iter(top_dirs))
    return version_folder


def _payload_info(member: str, replaced: ZipInfo | None) -> ZipInfo:
    info = ZipInfo(member, date_time=time.localtime()[:6])
    info.compress_type = ZIP_DEFLATED
    info.external_attr = replaced.external_attr if replaced else PAYLOAD_MODE << 16
    return info


def _repack(source: ZipFile, zip_path: Path, member: str, payload: bytes) -> None:
    """Copy every entry of ``source`` except ``member``, then append the payload.

    Copied entries keep their ZipInfo (name, date, mode bits, compression).
    """
    replaced: ZipInfo | None = None
    with ZipFile(zip_path, "w") as out:
        for info in source.infolist():
            if info.filename == member:
                replaced = info
                continue
            out.writestr(info, source.read(info))
        out.writestr(_payload_info(member, replaced), payload)


def inject_release_note(
    archive: Path,
    *,
    payload_text: str,
    version_number: int,
    payload_name: str = DEFAULT_PAYLOAD_NAME,
) -> UpdatedArchive:
    """Rewrite ``archive`` with the payload added to its release folder.

    The new archive is built in a temp file beside ``archive`` and moved over
    it, so a failure leaves the original untouched.

    Raises:
        OSError: reading, writing or replacing files failed.
        BadZipFile: ``archive`` is not a valid ZIP.
    """
    tmp = sibling_temp_path(archive)
    try:
        with ZipFile(archive) as source:
            root = release_root(source.namelist(), version_number)
            member = f"{root}/{payload_name}"
            _repack(source, tmp, member, payload_text.encode("utf-8"))
        os.replace(tmp, archive)
    finally:
        tmp.unlink(missing_ok=True)

    return UpdatedArchive(path=archive, member=member)


def update_archives(
    *,
    static_dir: Path,
    version_number: int,
    release_note: ReleaseNote,
    console: ConsoleProtocol,
    payload_name: str = DEFAULT_PAYLOAD_NAME,
    msg_type: int = BUNDLED_MSG_TYPE,
    dry_run: bool = False,
) -> Result[list[UpdatedArchive], ReleaseError]:
    version_dir = version_dir_for(static_dir, version_number)
    console.print(f'versionFolderPath: "{version_dir}"', Style.DIM)

    payload_text = dump_json(bundled_payload(version_number, release_note, msg_type=msg_type))

    archives = list_archives(version_dir)
    if isinstance(archives, Err):
        return archives
    if not archives.value:
        console.warning(f"no {ARCHIVE_SUFFIX} archives in {version_dir}")

    updated: list[UpdatedArchive] = []
    for archive in archives.value:
        if dry_run:
            try:
                with ZipFile(archive) as zf:
                    root = release_root(zf.namelist(), version_number)
            except (OSError, BadZipFile) as e:
                return Err(
                    ReleaseError(
                        kind="archive_failed",
                        message=f"Release update failed: {archive.name}: {e}",
                        hint=str(archive),
                    )
                )
            planned = UpdatedArchive(path=archive, member=f"{root}/{payload_name}")
            updated.append(planned)
            console.print(f"would update {archive.name} ({planned.member})", Style.DIM)
            continue

        console.print(f"Updating {archive.name}")
        try:
            result = inject_release_note(
                archive,
                payload_text=payload_text,
                version_number=version_number,
                payload_name=payload_name,
            )
        except (OSError, BadZipFile, LargeZipFile) as e:
            return Err(
                ReleaseError(
                    kind="archive_failed",
                    message=f"Release update failed: {archive.name}: {e}",
                    hint=f"{len(updated)} archive(s) were already updated",
                )
            )
        updated.append(result)
        console.success(f"Updated {archive} ({result.member})")

    if not dry_run:
        console.success("Release files updated successfully")
    return Ok(updated)
