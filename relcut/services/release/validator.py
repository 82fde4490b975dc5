from __future__ import annotations

from relcut.core.config import ReleaseConfig
from relcut.core.result import Err, Ok, Result
from relcut.core.workspace import Workspace
from relcut.services.release.errors import ReleaseError
from relcut.services.release.formats import adapter_for, load_json_object, read_repo_text
from relcut.services.release.invariants import check_packaging, check_workflow
from relcut.services.release.locations import primary_location
from relcut.services.release.model import ValidationReport, VersionLocation
from relcut.services.release.semver import tag_for


def current_versions(
    *, workspace: Workspace, locations: tuple[VersionLocation, ...]
) -> Result[dict[str, str], ReleaseError]:
    """Snapshot label -> version; absent optional locations are skipped."""
    versions: dict[str, str] = {}
    for loc in locations:
        value = adapter_for(loc.kind).read(workspace.root, loc)
        if isinstance(value, Err):
            return value
        if value.value is None:
            continue
        versions[loc.label] = value.value
    return Ok(versions)


def read_primary_version(
    *, workspace: Workspace, locations: tuple[VersionLocation, ...]
) -> Result[str, ReleaseError]:
    loc = primary_location(locations)
    value = adapter_for(loc.kind).read(workspace.root, loc)
    if isinstance(value, Err):
        return value
    if value.value is None:
        return Err(
            ReleaseError(
                kind="missing_field",
                message=f"{loc.label} has no version",
                hint=str(workspace.path(loc.path)),
            )
        )
    return Ok(value.value)


def version_issues(
    versions: dict[str, str],
    *,
    primary_label: str,
    expected_version: str | None,
    expected_tag: str | None,
) -> list[str]:
    issues: list[str] = []

    if len(set(versions.values())) > 1:
        listing = ", ".join(f"{label}={value}" for label, value in versions.items())
        issues.append(f"Version mismatch across files: {listing}")

    if expected_version:
        for label, value in versions.items():
            if value != expected_version:
                issues.append(f"Expected {label} to be {expected_version}, got {value}")

    if expected_tag:
        tag = expected_tag.strip()
        effective = expected_version or versions.get(primary_label)
        required = tag_for(effective) if effective else None
        if tag != required:
            issues.append(f"Tag mismatch: expected {required}, got {tag}")

    return issues


def validate(
    *,
    workspace: Workspace,
    config: ReleaseConfig,
    locations: tuple[VersionLocation, ...],
    expected_version: str | None = None,
    expected_tag: str | None = None,
) -> Result[ValidationReport, ReleaseError]:
    """Collect every consistency issue in one pass.

    Mismatches and invariant violations become issues; only structural
    failures (unreadable or malformed files, missing anchors) are errors.
    """
    versions = current_versions(workspace=workspace, locations=locations)
    if isinstance(versions, Err):
        return versions

    issues = version_issues(
        versions.value,
        primary_label=primary_location(locations).label,
        expected_version=expected_version,
        expected_tag=expected_tag,
    )

    workflow = read_repo_text(workspace.root, config.workflow)
    if isinstance(workflow, Err):
        return workflow
    issues.extend(check_workflow(workflow.value, config=config))

    packaging = read_repo_text(workspace.root, config.packaging_config)
    if isinstance(packaging, Err):
        return packaging
    data = load_json_object(packaging.value, rel=config.packaging_config)
    if isinstance(data, Err):
        return data
    issues.extend(check_packaging(data.value, config=config))

    return Ok(ValidationReport(issues=tuple(issues), versions=versions.value))
