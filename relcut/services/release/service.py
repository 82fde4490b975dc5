"""Release orchestration: check, prepare and cut.

    check   validate (optionally align first) and report
    prepare align to a new version, validate against it and its tag
    cut     prepare, then commit, tag and optionally push

Every step runs once; the first failure stops the sequence and nothing that
already happened is reverted (edited files, a commit whose tag failed).
"""

from __future__ import annotations

from relcut.core.config import ReleaseConfig
from relcut.core.result import Err, Ok, Result
from relcut.core.workspace import Workspace
from relcut.git.repository import DEFAULT_REMOTE, GitError, Repository
from relcut.output.console import ConsoleProtocol, Style
from relcut.services.release.aligner import fix_to_version
from relcut.services.release.errors import ReleaseError
from relcut.services.release.locations import primary_location, release_files, resolve_locations
from relcut.services.release.model import CheckOptions, CutOptions, ValidationReport, VersionLocation
from relcut.services.release.semver import ensure_version_input, parse_version, tag_for
from relcut.services.release.validator import read_primary_version, validate

COMMIT_MESSAGE_TEMPLATE = "chore(release): {tag}"
TAG_MESSAGE_TEMPLATE = "Release {tag}"

_CLI = "relcut"


def run_check(
    *,
    workspace: Workspace,
    config: ReleaseConfig,
    options: CheckOptions,
    console: ConsoleProtocol,
) -> Result[ValidationReport, ReleaseError]:
    locations = resolve_locations(workspace=workspace, config=config)
    return _check(
        workspace=workspace,
        config=config,
        locations=locations,
        options=options,
        console=console,
    )


def prepare(
    *,
    workspace: Workspace,
    config: ReleaseConfig,
    version: str,
    console: ConsoleProtocol,
) -> Result[ValidationReport, ReleaseError]:
    parsed = ensure_version_input(version)
    if isinstance(parsed, Err):
        return parsed

    locations = resolve_locations(workspace=workspace, config=config)
    return _prepare(
        workspace=workspace,
        config=config,
        locations=locations,
        version=version,
        console=console,
    )


def cut(
    *,
    workspace: Workspace,
    config: ReleaseConfig,
    options: CutOptions,
    repo: Repository,
    console: ConsoleProtocol,
) -> Result[str, ReleaseError]:
    """Cut a release; returns the created tag."""
    parsed = ensure_version_input(options.version)
    if isinstance(parsed, Err):
        return parsed
    version = options.version
    tag = tag_for(version)

    locations = resolve_locations(workspace=workspace, config=config)
    prepared = _prepare(
        workspace=workspace,
        config=config,
        locations=locations,
        version=version,
        console=console,
    )
    if isinstance(prepared, Err):
        return prepared

    exists = repo.tag_exists(tag)
    if isinstance(exists, Err):
        return Err(_git_error(exists.error))
    if exists.value:
        return Err(
            ReleaseError(
                kind="tag_exists",
                message=f"tag already exists: {tag}",
                hint="Pick a new version, or delete the tag if it was never pushed.",
            )
        )

    files = release_files(workspace=workspace, locations=locations)
    console.print(f"git add -- {' '.join(files)}", Style.DIM)
    added = repo.add(files)
    if isinstance(added, Err):
        return Err(_git_error(added.error))

    staged = repo.staged_paths()
    if isinstance(staged, Err):
        return Err(_git_error(staged.error))
    if not staged.value:
        return Err(
            ReleaseError(
                kind="no_staged_changes",
                message="no staged release version changes found",
                hint=f"Version files already match {version}; nothing to commit.",
            )
        )

    commit_message = COMMIT_MESSAGE_TEMPLATE.format(tag=tag)
    console.print(f"git commit -m '{commit_message}'", Style.DIM)
    committed = repo.commit(commit_message)
    if isinstance(committed, Err):
        return Err(_git_error(committed.error))

    tag_message = TAG_MESSAGE_TEMPLATE.format(tag=tag)
    console.print(f"git tag -a {tag} -m '{tag_message}'", Style.DIM)
    tagged = repo.tag_annotated(tag, message=tag_message)
    if isinstance(tagged, Err):
        console.warning(f"release commit was created but tag {tag} was not")
        return Err(_git_error(tagged.error))

    console.success(f"Committed release version files and created tag {tag}.")

    if options.push:
        for ref in ("HEAD", tag):
            console.print(f"git push {DEFAULT_REMOTE} {ref}", Style.DIM)
            pushed = repo.push(ref)
            if isinstance(pushed, Err):
                console.warning(f"commit and tag {tag} exist locally; push did not complete")
                return Err(_git_error(pushed.error))
        console.success(f"Pushed commit and tag {tag} to {DEFAULT_REMOTE}.")
    else:
        console.print(f"Tag {tag} is local only. Push when ready:")
        console.print(f"git push {DEFAULT_REMOTE} HEAD && git push {DEFAULT_REMOTE} {tag}")

    return Ok(tag)


def _prepare(
    *,
    workspace: Workspace,
    config: ReleaseConfig,
    locations: tuple[VersionLocation, ...],
    version: str,
    console: ConsoleProtocol,
) -> Result[ValidationReport, ReleaseError]:
    report = _check(
        workspace=workspace,
        config=config,
        locations=locations,
        options=CheckOptions(fix=True, version=version, tag=tag_for(version)),
        console=console,
    )
    if isinstance(report, Err):
        return report

    console.newline()
    console.print(f"Prepared release {version}.")
    console.print("Next steps:")
    console.print("1. Review diff: git diff")
    console.print(f"2. Commit + tag: {_CLI} cut {version} [--push]")
    return report


def _check(
    *,
    workspace: Workspace,
    config: ReleaseConfig,
    locations: tuple[VersionLocation, ...],
    options: CheckOptions,
    console: ConsoleProtocol,
) -> Result[ValidationReport, ReleaseError]:
    version = options.version
    if version:
        parsed = ensure_version_input(version)
        if isinstance(parsed, Err):
            return parsed

    if options.fix:
        canonical = version
        if not canonical:
            current = read_primary_version(workspace=workspace, locations=locations)
            if isinstance(current, Err):
                return current
            canonical = current.value
            if parse_version(canonical) is None:
                return Err(
                    ReleaseError(
                        kind="invalid_version",
                        message=(
                            f"{primary_location(locations).label} version is not valid semver: "
                            f"{canonical}"
                        ),
                        hint=f"Pass --version explicitly, e.g. {_CLI} check --fix --version 0.1.0",
                    )
                )

        fixed = fix_to_version(
            workspace=workspace,
            config=config,
            locations=locations,
            version=canonical,
            console=console,
        )
        if isinstance(fixed, Err):
            return fixed
        version = canonical

    report = validate(
        workspace=workspace,
        config=config,
        locations=locations,
        expected_version=version,
        expected_tag=options.tag,
    )
    if isinstance(report, Err):
        return report

    if not report.value.passed:
        _print_issues(console, report.value.issues)
        count = len(report.value.issues)
        return Err(
            ReleaseError(
                kind="check_failed",
                message=f"release check failed ({count} issue{'s' if count != 1 else ''})",
            )
        )

    console.success("Release metadata check passed.")
    for label, current in report.value.versions.items():
        console.print(f"{label}: {current}")
    return report


def _print_issues(console: ConsoleProtocol, issues: tuple[str, ...]) -> None:
    console.newline()
    console.print("Release check failed:", Style.ERROR)
    for issue in issues:
        console.bullet(issue, Style.ERROR)
    console.newline()
    console.print("Auto-fix command:", Style.WARNING)
    console.print(f"  {_CLI} check --fix --version <x.y.z> --tag v<x.y.z>", Style.WARNING)
    console.print("Quick path:", Style.WARNING)
    console.print(f"  {_CLI} prepare <x.y.z>", Style.WARNING)


def _git_error(e: GitError) -> ReleaseError:
    return ReleaseError(
        kind="git_failed",
        message=f"git {e.command} failed (exit {e.returncode})",
        hint=e.message or None,
    )
