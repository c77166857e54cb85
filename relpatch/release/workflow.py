"""Run the three release stages against a server tree.

Stages run in order (archives, previous releases, version info) and stop at
the first failure. There is no rollback: whatever was written before the
failure stays written.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from relpatch.core.config import Config
from relpatch.core.result import Err, Ok, Result
from relpatch.output.console import ConsoleProtocol
from relpatch.release.archives import UpdatedArchive, update_archives
from relpatch.release.errors import ReleaseError
from relpatch.release.manifests import update_prev_releases, update_version_info
from relpatch.release.model import ReleaseRequest


@dataclass(frozen=True, slots=True)
class ReleaseSummary:
    static_dir: Path
    archives: tuple[UpdatedArchive, ...]
    prev_releases: Path | None
    version_info: Path | None
    dry_run: bool = False


def run_release(
    request: ReleaseRequest,
    *,
    console: ConsoleProtocol,
    config: Config | None = None,
    dry_run: bool = False,
) -> Result[ReleaseSummary, ReleaseError]:
    cfg = config or Config()
    static_dir = cfg.static_dir(request.server_root)
    note = request.release_note
    version = request.version_number

    console.header(f"Archives ({version})")
    archives = update_archives(
        static_dir=static_dir,
        version_number=version,
        release_note=note,
        console=console,
        payload_name=cfg.archive.payload_name,
        msg_type=cfg.archive.msg_type,
        dry_run=dry_run,
    )
    if isinstance(archives, Err):
        return archives

    if dry_run:
        console.print(f"would update {static_dir / cfg.paths.prev_releases}")
        console.print(f"would update {static_dir / cfg.paths.version_info}")
        return Ok(
            ReleaseSummary(
                static_dir=static_dir,
                archives=tuple(archives.value),
                prev_releases=None,
                version_info=None,
                dry_run=True,
            )
        )

    console.header("Manifests")
    prev = update_prev_releases(
        static_dir=static_dir,
        version_number=version,
        release_note=note,
        console=console,
        file_name=cfg.paths.prev_releases,
    )
    if isinstance(prev, Err):
        return prev

    info = update_version_info(
        static_dir=static_dir,
        version_number=version,
        console=console,
        file_name=cfg.paths.version_info,
    )
    if isinstance(info, Err):
        return info

    console.success("Release update successful")
    return Ok(
        ReleaseSummary(
            static_dir=static_dir,
            archives=tuple(archives.value),
            prev_releases=prev.value,
            version_info=info.value,
        )
    )
