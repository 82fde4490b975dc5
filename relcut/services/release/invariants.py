"""Structural invariants of the release pipeline.

The workflow must only publish for `v*.*.*` tags, never as a draft, and must
re-run `relcut check` for the pushed tag before building. The packaging
config must produce v1-compatible updater artifacts and point the updater
at exactly one endpoint.

Each `check_*` returns issue strings; each `fix_*` rewrites toward the
canonical values and is idempotent.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from relcut.core.config import TAG_TRIGGER_GLOB, UPDATER_ARTIFACTS_SENTINEL, ReleaseConfig
from relcut.core.structured import StrDict, get_list, get_str, get_table

__all__ = [
    "TAG_GATE",
    "VALIDATION_STEP_NAME",
    "check_packaging",
    "check_workflow",
    "fix_packaging",
    "fix_workflow",
]

TAG_GATE = "if: startsWith(github.ref, 'refs/tags/')"
VALIDATION_STEP_NAME = "Validate release metadata"

_TAGS_BLOCK_RE = re.compile(
    r"(?m)^(?P<head>[ \t]*tags:[ \t]*\r?\n)"
    r"(?P<items>(?:[ \t]+-[ \t]*[^\r\n]*(?:\r?\n|\Z))+)"
)
_TAG_ITEM_RE = re.compile(r"(?m)^(?P<indent>[ \t]+)-[ \t]*(?P<value>[^\r\n]*?)[ \t]*(?P<eol>\r?\n|\Z)")

_DRAFT_RE = re.compile(r"(?m)(?P<key>releaseDraft:[ \t]*)(?P<value>[^\r\n#]*?)(?P<tail>[ \t]*(?:#[^\r\n]*)?\r?)$")

_CHECKOUT_ANCHOR_RE = re.compile(
    r"(?m)^(?P<indent>[ \t]*)- name: Checkout repository[ \t]*\r?\n"
    r"[ \t]+uses: actions/checkout@[^\r\n]*(?:\r?\n|\Z)"
)

_STEP_START_RE = re.compile(r"(?m)^(?P<indent>[ \t]*)- ")
_CONTENT_LINE_RE = re.compile(r"(?m)^(?P<indent>[ \t]*)\S")


# -----------------------------------------------------------------------------
# Workflow
# -----------------------------------------------------------------------------


def _tag_globs(text: str) -> list[str] | None:
    block = _TAGS_BLOCK_RE.search(text)
    if block is None:
        return None
    globs: list[str] = []
    for item in _TAG_ITEM_RE.finditer(block.group("items")):
        globs.append(item.group("value").strip().strip("\"'"))
    return globs


def _draft_values(text: str) -> list[str]:
    return [m.group("value").strip().strip("\"'") for m in _DRAFT_RE.finditer(text)]


@dataclass(frozen=True, slots=True)
class _Step:
    start: int
    end: int
    text: str


def _step_containing(text: str, idx: int) -> _Step | None:
    """Return the `- ` list item (workflow step) whose body holds idx."""
    starts = [m for m in _STEP_START_RE.finditer(text) if m.start() <= idx]
    if not starts:
        return None
    head = starts[-1]
    indent = head.group("indent")

    # The step ends at the next line indented no deeper than its `- `: a
    # sibling step, the next job, or a job-level key.
    end = len(text)
    line_end = text.find("\n", idx)
    if line_end >= 0:
        for m in _CONTENT_LINE_RE.finditer(text, line_end + 1):
            if len(m.group("indent")) <= len(indent):
                end = m.start()
                break
    return _Step(start=head.start(), end=end, text=text[head.start() : end])


def _validation_step_gated(text: str, command: str) -> bool:
    idx = text.find(command)
    if idx < 0:
        return False
    step = _step_containing(text, idx)
    if step is None:
        return False
    return TAG_GATE in step.text


def check_workflow(text: str, *, config: ReleaseConfig) -> list[str]:
    path = config.workflow
    issues: list[str] = []

    if _tag_globs(text) != [TAG_TRIGGER_GLOB]:
        issues.append(f'{path} must use push.tags = "{TAG_TRIGGER_GLOB}"')

    drafts = _draft_values(text)
    if not drafts or any(v != "false" for v in drafts):
        issues.append(f"{path} must set releaseDraft: false")

    if config.validation_command not in text:
        issues.append(f"{path} must run release metadata validation step")

    if not _validation_step_gated(text, config.validation_command):
        issues.append(f"{path} release validation step must run only for tag refs")

    return issues


def _fix_tag_trigger(text: str) -> str:
    block = _TAGS_BLOCK_RE.search(text)
    if block is None:
        return text
    first = _TAG_ITEM_RE.search(block.group("items"))
    if first is None:
        return text
    eol = first.group("eol") or "\n"
    items = f'{first.group("indent")}- "{TAG_TRIGGER_GLOB}"{eol}'
    return text[: block.start("items")] + items + text[block.end("items") :]


def _fix_draft(text: str) -> str:
    return _DRAFT_RE.sub(lambda m: f"{m.group('key')}false{m.group('tail')}", text)


def _insert_validation_step(text: str, command: str) -> str:
    if command in text:
        return text
    anchor = _CHECKOUT_ANCHOR_RE.search(text)
    if anchor is None:
        return text

    indent = anchor.group("indent")
    nl = "\r\n" if anchor.group(0).endswith("\r\n") else "\n"
    step = nl.join(
        [
            f"{indent}- name: {VALIDATION_STEP_NAME}",
            f"{indent}  {TAG_GATE}",
            f"{indent}  run: {command}",
            "",
        ]
    )
    head = text[: anchor.end()]
    if not anchor.group(0).endswith("\n"):
        head += nl
    return head + nl + step + text[anchor.end() :]


_BLOCK_SCALAR_RE = re.compile(r"[|>][+-]?\d*[ \t]*\r?$")


def _gate_validation_step(text: str, command: str) -> str:
    idx = text.find(command)
    if idx < 0 or _validation_step_gated(text, command):
        return text
    step = _step_containing(text, idx)
    if step is None:
        return text

    indent = step.text[: len(step.text) - len(step.text.lstrip(" \t"))]
    nl = "\r\n" if "\r\n" in step.text else "\n"
    first_end = step.text.find("\n")
    first_line = step.text if first_end < 0 else step.text[:first_end]

    if first_end >= 0 and _BLOCK_SCALAR_RE.search(first_line) is None:
        # Sibling key right below `- name: ...`.
        cut = step.start + first_end + 1
        return text[:cut] + f"{indent}  {TAG_GATE}{nl}" + text[cut:]

    # `- run: |` (or a last-line one-liner): the gate becomes the first key.
    body = step.text[len(indent) + 2 :]
    gated = f"{indent}- {TAG_GATE}{nl}{indent}  {body}"
    return text[: step.start] + gated + text[step.end :]


def fix_workflow(text: str, *, config: ReleaseConfig) -> str:
    """Rewrite the workflow toward the canonical release pipeline.

    Missing anchors (no tags list, no checkout step) are left alone; the
    validator reports them.
    """
    text = _fix_tag_trigger(text)
    text = _fix_draft(text)
    text = _insert_validation_step(text, config.validation_command)
    text = _gate_validation_step(text, config.validation_command)
    return text


# -----------------------------------------------------------------------------
# Packaging
# -----------------------------------------------------------------------------


def check_packaging(data: StrDict, *, config: ReleaseConfig) -> list[str]:
    path = config.packaging_config
    issues: list[str] = []

    bundle = get_table(data, "bundle") or {}
    if get_str(bundle, "createUpdaterArtifacts") != UPDATER_ARTIFACTS_SENTINEL:
        issues.append(
            f"{path} missing bundle.createUpdaterArtifacts={UPDATER_ARTIFACTS_SENTINEL}"
        )

    plugins = get_table(data, "plugins") or {}
    updater = get_table(plugins, "updater") or {}
    endpoints = get_list(updater, "endpoints")
    if endpoints is None or endpoints != [config.updater_endpoint]:
        issues.append(f"{path} updater endpoint must be exactly {config.updater_endpoint}")

    return issues


def _ensure_table(parent: StrDict, key: str) -> StrDict:
    table = get_table(parent, key)
    if table is None:
        table = {}
        parent[key] = table
    return table


def fix_packaging(data: StrDict, *, config: ReleaseConfig) -> bool:
    """Force the updater settings in place. Returns True if data changed."""
    changed = False

    bundle = _ensure_table(data, "bundle")
    if bundle.get("createUpdaterArtifacts") != UPDATER_ARTIFACTS_SENTINEL:
        bundle["createUpdaterArtifacts"] = UPDATER_ARTIFACTS_SENTINEL
        changed = True

    plugins = _ensure_table(data, "plugins")
    updater = _ensure_table(plugins, "updater")
    if updater.get("endpoints") != [config.updater_endpoint]:
        updater["endpoints"] = [config.updater_endpoint]
        changed = True

    return changed
