from __future__ import annotations

from relcut.core.config import ReleaseConfig
from relcut.core.workspace import Workspace
from relcut.services.release.model import VersionLocation


def resolve_locations(*, workspace: Workspace, config: ReleaseConfig) -> tuple[VersionLocation, ...]:
    """Resolve every location that must carry the release version.

    Order: primary manifest, each Cargo manifest followed by its lock
    records, then the packaging config. Lock records are only listed when
    the lock file exists at resolution time.
    """
    out: list[VersionLocation] = [
        VersionLocation(path=config.primary_manifest, kind="json_field"),
    ]

    for manifest in config.manifests:
        out.append(VersionLocation(path=manifest.path, kind="section_field"))
        if manifest.lock is None or not workspace.path(manifest.lock).is_file():
            continue
        for record in manifest.lock_records:
            out.append(
                VersionLocation(
                    path=manifest.lock,
                    kind="keyed_record",
                    record=record,
                    required=False,
                )
            )

    out.append(VersionLocation(path=config.packaging_config, kind="json_field"))

    seen: set[tuple[str, str | None]] = set()
    unique: list[VersionLocation] = []
    for loc in out:
        key = (loc.path, loc.record)
        if key in seen:
            continue
        seen.add(key)
        unique.append(loc)
    return tuple(unique)


def primary_location(locations: tuple[VersionLocation, ...]) -> VersionLocation:
    """The canonical location: ground truth when no version is supplied."""
    return locations[0]


def release_files(*, workspace: Workspace, locations: tuple[VersionLocation, ...]) -> list[str]:
    """Distinct existing files backing the locations, in location order."""
    files: list[str] = []
    for loc in locations:
        if loc.path in files:
            continue
        if not workspace.path(loc.path).is_file():
            continue
        files.append(loc.path)
    return files
