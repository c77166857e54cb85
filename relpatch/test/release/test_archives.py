from __future__ import annotations

import json
import stat
from pathlib import Path
from zipfile import ZIP_STORED, BadZipFile, ZipFile, ZipInfo

import pytest

from relpatch.core.result import Err, Ok
from relpatch.output.console import MockConsole
from relpatch.release.archives import (
    inject_release_note,
    list_archives,
    release_root,
    update_archives,
)
from relpatch.release.model import ReleaseNote, bundled_payload, empty_notes

VERSION = 2007001064


def _note() -> ReleaseNote:
    notes = empty_notes()
    notes["EN"]["newFeatures"] = ("Watchlists",)
    notes["AR"]["bugFixes"] = ("إصلاح",)
    return ReleaseNote(
        version=VERSION,
        version_name="DFNPRO11_SA_RETAIL_X_2.007.00.2",
        created_date="20260301",
        notes=notes,
    )


def _make_zip(path: Path, entries: dict[str, bytes]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with ZipFile(path, "w") as zf:
        for name, data in entries.items():
            zf.writestr(name, data)


def _read_zip(path: Path) -> dict[str, bytes]:
    with ZipFile(path) as zf:
        return {n: zf.read(n) for n in zf.namelist() if not n.endswith("/")}


class TestReleaseRoot:
    def test_prefers_version_folder(self) -> None:
        names = ["other/a.txt", f"{VERSION}/app.exe", "readme.txt"]
        assert release_root(names, VERSION) == str(VERSION)

    def test_single_top_level_folder(self) -> None:
        assert release_root(["Pro11/", "Pro11/app.exe", "Pro11/lib/x.dll"], VERSION) == "Pro11"

    def test_falls_back_to_version_folder(self) -> None:
        assert release_root(["app.exe", "lib/x.dll"], VERSION) == str(VERSION)
        assert release_root([], VERSION) == str(VERSION)


def test_list_archives_filters_zip_files(tmp_path: Path) -> None:
    _make_zip(tmp_path / "b.zip", {"x": b"1"})
    _make_zip(tmp_path / "a.zip", {"x": b"1"})
    (tmp_path / "upper.ZIP").write_bytes(b"")
    (tmp_path / "notes.txt").write_text("n", encoding="utf-8")
    (tmp_path / "folder.zip").mkdir()
    _make_zip(tmp_path / "nested" / "c.zip", {"x": b"1"})

    result = list_archives(tmp_path)

    assert isinstance(result, Ok)
    assert [p.name for p in result.value] == ["a.zip", "b.zip"]


def test_list_archives_missing_folder(tmp_path: Path) -> None:
    result = list_archives(tmp_path / "missing")
    assert isinstance(result, Err)
    assert result.error.kind == "archive_failed"


def test_inject_keeps_original_entries(tmp_path: Path) -> None:
    archive = tmp_path / "pro11.zip"
    original = {
        f"{VERSION}/app.exe": b"\x00binary",
        f"{VERSION}/lib/x.dll": b"dll",
        f"{VERSION}/releaseNote.json": b"{}",
    }
    _make_zip(archive, original)
    payload_text = '{"msgType": 1}\n'

    updated = inject_release_note(archive, payload_text=payload_text, version_number=VERSION)

    assert updated.member == f"{VERSION}/releaseNote.json"
    contents = _read_zip(archive)
    assert contents[f"{VERSION}/app.exe"] == b"\x00binary"
    assert contents[f"{VERSION}/lib/x.dll"] == b"dll"
    assert contents[f"{VERSION}/releaseNote.json"].decode("utf-8") == payload_text
    # Only the archive itself is left behind.
    assert sorted(p.name for p in tmp_path.iterdir()) == ["pro11.zip"]


def test_inject_keeps_entry_metadata(tmp_path: Path) -> None:
    archive = tmp_path / "pro11.zip"
    script = ZipInfo(f"{VERSION}/run.sh", date_time=(2020, 1, 2, 3, 4, 6))
    script.external_attr = 0o100755 << 16
    script.compress_type = ZIP_STORED
    with ZipFile(archive, "w") as zf:
        zf.writestr(script, b"#!/bin/sh\n")

    inject_release_note(archive, payload_text="{}", version_number=VERSION)

    with ZipFile(archive) as zf:
        kept = zf.getinfo(f"{VERSION}/run.sh")
        assert kept.external_attr >> 16 == 0o100755
        assert kept.date_time == (2020, 1, 2, 3, 4, 6)
        assert kept.compress_type == ZIP_STORED
        assert zf.read(kept) == b"#!/bin/sh\n"
        assert zf.namelist().count(f"{VERSION}/releaseNote.json") == 1


def test_inject_keeps_archive_permissions(tmp_path: Path) -> None:
    archive = tmp_path / "pro11.zip"
    _make_zip(archive, {f"{VERSION}/app.exe": b"x"})
    archive.chmod(0o644)

    inject_release_note(archive, payload_text="{}", version_number=VERSION)

    assert stat.S_IMODE(archive.stat().st_mode) == 0o644


def test_inject_into_single_top_level_folder(tmp_path: Path) -> None:
    archive = tmp_path / "pro11.zip"
    _make_zip(archive, {"Pro11/": b"", "Pro11/a.txt": b"a"})

    updated = inject_release_note(archive, payload_text="{}", version_number=VERSION)

    assert updated.member == "Pro11/releaseNote.json"
    contents = _read_zip(archive)
    assert contents == {"Pro11/a.txt": b"a", "Pro11/releaseNote.json": b"{}"}


def test_inject_bad_zip_leaves_file(tmp_path: Path) -> None:
    archive = tmp_path / "broken.zip"
    archive.write_bytes(b"not a zip")

    with pytest.raises(BadZipFile):
        inject_release_note(archive, payload_text="{}", version_number=VERSION)

    assert archive.read_bytes() == b"not a zip"


def test_update_archives_injects_payload_into_every_zip(tmp_path: Path) -> None:
    version_dir = tmp_path / str(VERSION)
    names = ["win.zip", "mac.zip", "linux.zip"]
    for name in names:
        _make_zip(version_dir / name, {f"{VERSION}/{name}.bin": name.encode()})
    console = MockConsole()

    result = update_archives(
        static_dir=tmp_path, version_number=VERSION, release_note=_note(), console=console
    )

    assert isinstance(result, Ok)
    assert len(result.value) == 3
    expected = bundled_payload(VERSION, _note())
    for name in names:
        contents = _read_zip(version_dir / name)
        assert contents[f"{VERSION}/{name}.bin"] == name.encode()
        assert json.loads(contents[f"{VERSION}/releaseNote.json"]) == expected
    assert len(console.find("Updating")) == 3
    assert not console.has_error()


def test_update_archives_without_zips_is_noop(tmp_path: Path) -> None:
    version_dir = tmp_path / str(VERSION)
    version_dir.mkdir()
    (version_dir / "readme.txt").write_text("r", encoding="utf-8")
    console = MockConsole()

    result = update_archives(
        static_dir=tmp_path, version_number=VERSION, release_note=_note(), console=console
    )

    assert result == Ok([])
    assert (version_dir / "readme.txt").read_text(encoding="utf-8") == "r"
    assert console.find("no .zip archives")


def test_update_archives_missing_version_folder(tmp_path: Path) -> None:
    result = update_archives(
        static_dir=tmp_path,
        version_number=VERSION,
        release_note=_note(),
        console=MockConsole(),
    )
    assert isinstance(result, Err)
    assert result.error.message.startswith("Release update failed")


def test_update_archives_stops_at_first_failure(tmp_path: Path) -> None:
    version_dir = tmp_path / str(VERSION)
    _make_zip(version_dir / "a.zip", {f"{VERSION}/a": b"a"})
    (version_dir / "b.zip").write_bytes(b"garbage")
    _make_zip(version_dir / "c.zip", {f"{VERSION}/c": b"c"})

    result = update_archives(
        static_dir=tmp_path,
        version_number=VERSION,
        release_note=_note(),
        console=MockConsole(),
    )

    assert isinstance(result, Err)
    assert result.error.kind == "archive_failed"
    assert "b.zip" in result.error.message
    assert f"{VERSION}/releaseNote.json" in _read_zip(version_dir / "a.zip")
    assert f"{VERSION}/releaseNote.json" not in _read_zip(version_dir / "c.zip")


def test_update_archives_dry_run(tmp_path: Path) -> None:
    version_dir = tmp_path / str(VERSION)
    _make_zip(version_dir / "a.zip", {f"{VERSION}/a": b"a"})
    before = (version_dir / "a.zip").read_bytes()
    console = MockConsole()

    result = update_archives(
        static_dir=tmp_path,
        version_number=VERSION,
        release_note=_note(),
        console=console,
        dry_run=True,
    )

    assert isinstance(result, Ok)
    assert [u.member for u in result.value] == [f"{VERSION}/releaseNote.json"]
    assert (version_dir / "a.zip").read_bytes() == before
    assert console.find(f"would update a.zip ({VERSION}/releaseNote.json)")
