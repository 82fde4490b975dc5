"""Typed release configuration.

The release tool reads an optional `relcut.toml` at the repository root.
Every field has a default matching the Panorama layout, so most repositories
need no config file at all.

Example:

    [release]
    primary_manifest = "package.json"
    packaging_config = "src-tauri/tauri.conf.json"
    workflow = ".github/workflows/release.yml"

    [[release.manifests]]
    path = "src-core/Cargo.toml"
    lock = "src-core/Cargo.lock"
    lock_records = ["panorama_core"]
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_list, get_str, get_str_list, get_table

__all__ = [
    "CONFIG_FILE_NAME",
    "ConfigError",
    "ManifestConfig",
    "ReleaseConfig",
    "load_config",
    "load_config_or_default",
    # Canonical values
    "TAG_TRIGGER_GLOB",
    "UPDATER_ARTIFACTS_SENTINEL",
    "DEFAULT_UPDATER_ENDPOINT",
    "DEFAULT_VALIDATION_COMMAND",
]

CONFIG_FILE_NAME = "relcut.toml"

# -----------------------------------------------------------------------------
# Canonical Values
# -----------------------------------------------------------------------------

TAG_TRIGGER_GLOB = "v*.*.*"
UPDATER_ARTIFACTS_SENTINEL = "v1Compatible"

DEFAULT_UPDATER_ENDPOINT = (
    "https://github.com/galza-guo/Panorama/releases/latest/download/latest.json"
)
DEFAULT_VALIDATION_COMMAND = 'relcut check --tag "${{ github.ref_name }}"'


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class ManifestConfig:
    """A Cargo-style manifest and its optional lock file.

    Attributes:
        path: Manifest path relative to the repository root
        lock: Lock file path; the file may legitimately be absent
        lock_records: Package names inside the lock that carry our version
    """

    path: str
    lock: str | None = None
    lock_records: tuple[str, ...] = ()


def _default_manifests() -> tuple[ManifestConfig, ...]:
    return (
        ManifestConfig(
            path="src-core/Cargo.toml",
            lock="src-core/Cargo.lock",
            lock_records=("panorama_core",),
        ),
        ManifestConfig(
            path="src-server/Cargo.toml",
            lock="src-server/Cargo.lock",
            lock_records=("panorama-server", "panorama_core"),
        ),
        ManifestConfig(
            path="src-tauri/Cargo.toml",
            lock="src-tauri/Cargo.lock",
            lock_records=("panorama-app", "panorama_core"),
        ),
    )


@dataclass(frozen=True, slots=True)
class ReleaseConfig:
    """Release metadata layout and canonical values."""

    primary_manifest: str = "package.json"
    packaging_config: str = "src-tauri/tauri.conf.json"
    workflow: str = ".github/workflows/release.yml"
    updater_endpoint: str = DEFAULT_UPDATER_ENDPOINT
    validation_command: str = DEFAULT_VALIDATION_COMMAND
    manifests: tuple[ManifestConfig, ...] = field(default_factory=_default_manifests)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> ReleaseConfig:
        """Create ReleaseConfig from a mapping (parsed TOML).

        Raises:
            ValueError: if `release.manifests` is malformed.
        """
        release: StrDict = get_table(data, "release") or {}
        defaults = cls()

        manifests = defaults.manifests
        raw_manifests = get_list(release, "manifests")
        if raw_manifests is not None:
            manifests = tuple(_parse_manifest(item) for item in raw_manifests)

        return cls(
            primary_manifest=get_str(release, "primary_manifest") or defaults.primary_manifest,
            packaging_config=get_str(release, "packaging_config") or defaults.packaging_config,
            workflow=get_str(release, "workflow") or defaults.workflow,
            updater_endpoint=get_str(release, "updater_endpoint") or defaults.updater_endpoint,
            validation_command=get_str(release, "validation_command")
            or defaults.validation_command,
            manifests=manifests,
        )


def _parse_manifest(item: object) -> ManifestConfig:
    table = as_str_dict(item)
    if table is None:
        raise ValueError("release.manifests entries must be tables")

    path = get_str(table, "path")
    if path is None:
        raise ValueError("release.manifests entry is missing 'path'")

    records: list[str] = []
    if "lock_records" in table:
        parsed = get_str_list(table, "lock_records")
        if parsed is None:
            raise ValueError(f"{path}: lock_records must be a list of package names")
        records = parsed

    lock = get_str(table, "lock")
    if records and lock is None:
        raise ValueError(f"{path}: lock_records given without 'lock'")

    return ManifestConfig(path=path, lock=lock, lock_records=tuple(records))


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling import and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[ReleaseConfig, ConfigError]:
    """Load and parse release configuration from a TOML file.

    Args:
        path: Path to relcut.toml

    Returns:
        Ok(ReleaseConfig) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(ReleaseConfig.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def load_config_or_default(path: Path) -> Result[ReleaseConfig, ConfigError]:
    """Load config if the file exists, otherwise return the defaults.

    A present-but-broken file is still an error.
    """
    if not path.exists():
        return Ok(ReleaseConfig())
    return load_config(path)
