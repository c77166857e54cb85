"""Typed configuration for relpatch.

Configuration is optional. When ``relpatch.toml`` is absent every value falls
back to the layout used by the production file server:

    [paths]
    static_dir = "fileserver/http/public"
    prev_releases = "prevReleases.json"
    version_info = "versionInfo.json"
    base_dir = "."

    [archive]
    payload_name = "releaseNote.json"
    msg_type = 1
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_int, get_str, get_table

__all__ = [
    "Config",
    "PathsConfig",
    "ArchiveConfig",
    "ConfigError",
    "CONFIG_FILE_NAME",
    "PROGRAM_ROOT",
    "load_config",
    "load_config_or_default",
]

CONFIG_FILE_NAME = "relpatch.toml"

# Server folder names typed at the prompt are resolved from here.
PROGRAM_ROOT = Path(__file__).resolve().parents[2]

DEFAULT_STATIC_DIR = "fileserver/http/public"
DEFAULT_PREV_RELEASES = "prevReleases.json"
DEFAULT_VERSION_INFO = "versionInfo.json"
DEFAULT_PAYLOAD_NAME = "releaseNote.json"
DEFAULT_MSG_TYPE = 1


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Config file could not be read or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class PathsConfig:
    """Layout of the server tree, relative to the server root."""

    static_dir: str = DEFAULT_STATIC_DIR
    prev_releases: str = DEFAULT_PREV_RELEASES
    version_info: str = DEFAULT_VERSION_INFO
    base_dir: Path = PROGRAM_ROOT


@dataclass(frozen=True, slots=True)
class ArchiveConfig:
    payload_name: str = DEFAULT_PAYLOAD_NAME
    msg_type: int = DEFAULT_MSG_TYPE


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    paths: PathsConfig = field(default_factory=PathsConfig)
    archive: ArchiveConfig = field(default_factory=ArchiveConfig)

    def static_dir(self, server_root: Path) -> Path:
        """Public directory holding version folders and manifests."""
        return server_root / self.paths.static_dir

    @classmethod
    def from_dict(cls, data: Mapping[str, object], *, origin: Path | None = None) -> Config:
        """Create Config from parsed TOML.

        A relative ``base_dir`` is taken relative to the config file's folder.
        """
        paths: StrDict = get_table(data, "paths") or {}
        archive: StrDict = get_table(data, "archive") or {}

        base_dir = PROGRAM_ROOT
        raw_base = get_str(paths, "base_dir")
        if raw_base is not None:
            anchor = origin.parent if origin is not None else PROGRAM_ROOT
            base_dir = (anchor / Path(raw_base).expanduser()).resolve()

        msg_type = get_int(archive, "msg_type")

        return cls(
            paths=PathsConfig(
                static_dir=get_str(paths, "static_dir") or DEFAULT_STATIC_DIR,
                prev_releases=get_str(paths, "prev_releases") or DEFAULT_PREV_RELEASES,
                version_info=get_str(paths, "version_info") or DEFAULT_VERSION_INFO,
                base_dir=base_dir,
            ),
            archive=ArchiveConfig(
                payload_name=get_str(archive, "payload_name") or DEFAULT_PAYLOAD_NAME,
                msg_type=DEFAULT_MSG_TYPE if msg_type is None else msg_type,
            ),
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    import tomllib

    try:
        data = as_str_dict(tomllib.loads(path.read_bytes().decode("utf-8")))
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except (OSError, UnicodeDecodeError) as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))

    if data is None:
        return Err(ConfigError("Config root must be a TOML table", path=path))
    return Ok(data)


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to relpatch.toml

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result
    return Ok(Config.from_dict(result.value, origin=path))


def load_config_or_default(path: Path | None = None) -> Result[Config, ConfigError]:
    """Load an explicit config, or the default one if present, or built-in defaults.

    An explicitly passed path must exist; the implicit ``PROGRAM_ROOT/relpatch.toml``
    is optional.
    """
    if path is not None:
        return load_config(path)

    implicit = PROGRAM_ROOT / CONFIG_FILE_NAME
    if implicit.is_file():
        return load_config(implicit)
    return Ok(Config())
