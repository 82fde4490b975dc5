from __future__ import annotations

from relcut.core.config import ReleaseConfig
from relcut.core.result import Err, Ok, Result
from relcut.core.workspace import Workspace
from relcut.output.console import ConsoleProtocol, Style
from relcut.services.release.errors import ReleaseError
from relcut.services.release.formats import (
    adapter_for,
    dump_json,
    load_json_object,
    read_repo_text,
    write_text,
)
from relcut.services.release.invariants import fix_packaging, fix_workflow
from relcut.services.release.model import VersionLocation


def fix_to_version(
    *,
    workspace: Workspace,
    config: ReleaseConfig,
    locations: tuple[VersionLocation, ...],
    version: str,
    console: ConsoleProtocol,
) -> Result[list[str], ReleaseError]:
    """Rewrite every location and invariant to the canonical values.

    Files are only written when their content changes, so running this
    twice with the same version leaves the tree byte-identical. Optional
    locations are never created. Returns the changed repository paths.
    """
    changed: list[str] = []

    def note(rel: str) -> None:
        if rel not in changed:
            changed.append(rel)
            console.print(f"updated {rel}", Style.DIM)

    for loc in locations:
        wrote = adapter_for(loc.kind).write(workspace.root, loc, version)
        if isinstance(wrote, Err):
            return wrote
        if wrote.value:
            note(loc.path)

    packaging = _fix_packaging_file(workspace=workspace, config=config)
    if isinstance(packaging, Err):
        return packaging
    if packaging.value:
        note(config.packaging_config)

    workflow = _fix_workflow_file(workspace=workspace, config=config)
    if isinstance(workflow, Err):
        return workflow
    if workflow.value:
        note(config.workflow)

    return Ok(changed)


def _fix_packaging_file(*, workspace: Workspace, config: ReleaseConfig) -> Result[bool, ReleaseError]:
    rel = config.packaging_config
    text = read_repo_text(workspace.root, rel)
    if isinstance(text, Err):
        return text
    data = load_json_object(text.value, rel=rel)
    if isinstance(data, Err):
        return data

    if not fix_packaging(data.value, config=config):
        return Ok(False)

    written = write_text(workspace.path(rel), rel, dump_json(data.value))
    if isinstance(written, Err):
        return written
    return Ok(True)


def _fix_workflow_file(*, workspace: Workspace, config: ReleaseConfig) -> Result[bool, ReleaseError]:
    rel = config.workflow
    text = read_repo_text(workspace.root, rel)
    if isinstance(text, Err):
        return text

    fixed = fix_workflow(text.value, config=config)
    if fixed == text.value:
        return Ok(False)

    written = write_text(workspace.path(rel), rel, fixed)
    if isinstance(written, Err):
        return written
    return Ok(True)
