"""Shared fixtures: a Panorama-shaped repository on disk."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Literal

import pytest

from relcut.core.config import DEFAULT_UPDATER_ENDPOINT
from relcut.core.workspace import Workspace

WorkflowShape = Literal["aligned", "drifted", "no_checkout"]

ALIGNED_WORKFLOW = """\
name: Release

on:
  push:
    tags:
      - "v*.*.*"

jobs:
  publish-tauri:
    runs-on: ubuntu-latest
    steps:
      - name: Checkout repository
        uses: actions/checkout@v4

      - name: Validate release metadata
        if: startsWith(github.ref, 'refs/tags/')
        run: relcut check --tag "${{ github.ref_name }}"

      - name: Build and publish
        uses: tauri-apps/tauri-action@v0
        with:
          tagName: ${{ github.ref_name }}
          releaseDraft: false
"""

DRIFTED_WORKFLOW = """\
name: Release

on:
  push:
    tags:
      - "v*"
      - "release-*"

jobs:
  publish-tauri:
    runs-on: ubuntu-latest
    steps:
      - name: Checkout repository
        uses: actions/checkout@v4

      - name: Build and publish
        uses: tauri-apps/tauri-action@v0
        with:
          tagName: ${{ github.ref_name }}
          releaseDraft: true
"""

NO_CHECKOUT_WORKFLOW = """\
name: Release

on:
  push:
    tags:
      - "v*.*.*"

jobs:
  publish-tauri:
    runs-on: ubuntu-latest
    steps:
      - name: Build and publish
        uses: tauri-apps/tauri-action@v0
        with:
          releaseDraft: false
"""

_WORKFLOWS: dict[WorkflowShape, str] = {
    "aligned": ALIGNED_WORKFLOW,
    "drifted": DRIFTED_WORKFLOW,
    "no_checkout": NO_CHECKOUT_WORKFLOW,
}


def _cargo_toml(name: str, version: str) -> str:
    return (
        "[package]\n"
        f'name = "{name}"\n'
        f'version = "{version}"\n'
        'edition = "2021"\n'
        "\n"
        "[dependencies]\n"
        'serde = { version = "1", features = ["derive"] }\n'
    )


def _cargo_lock(records: list[tuple[str, str]]) -> str:
    out = [
        "# This file is automatically @generated by Cargo.",
        "# It is not intended for manual editing.",
        "version = 3",
        "",
    ]
    for name, version in records:
        out.extend(["[[package]]", f'name = "{name}"', f'version = "{version}"', ""])
    out.extend(
        [
            "[[package]]",
            'name = "serde"',
            'version = "1.0.200"',
            'source = "registry+https://github.com/rust-lang/crates.io-index"',
            "",
        ]
    )
    return "\n".join(out)


def _dump(data: dict[str, object]) -> str:
    return json.dumps(data, indent=2) + "\n"


def write_release_tree(
    root: Path,
    *,
    version: str = "1.0.0",
    locks: bool = True,
    workflow: WorkflowShape = "aligned",
    endpoints: list[str] | None = None,
) -> Workspace:
    files: dict[str, str] = {
        "package.json": _dump(
            {
                "name": "panorama",
                "private": True,
                "version": version,
                "scripts": {"dev": "vite", "build": "tsc && vite build"},
            }
        ),
        "src-core/Cargo.toml": _cargo_toml("panorama_core", version),
        "src-server/Cargo.toml": _cargo_toml("panorama-server", version),
        "src-tauri/Cargo.toml": _cargo_toml("panorama-app", version),
        "src-tauri/tauri.conf.json": _dump(
            {
                "productName": "Panorama",
                "version": version,
                "identifier": "com.panorama.app",
                "bundle": {"active": True, "createUpdaterArtifacts": "v1Compatible"},
                "plugins": {
                    "updater": {
                        "pubkey": "dW50cnVzdGVkIGNvbW1lbnQ=",
                        "endpoints": (
                            endpoints if endpoints is not None else [DEFAULT_UPDATER_ENDPOINT]
                        ),
                    }
                },
            }
        ),
        ".github/workflows/release.yml": _WORKFLOWS[workflow],
    }
    if locks:
        files["src-core/Cargo.lock"] = _cargo_lock([("panorama_core", version)])
        files["src-server/Cargo.lock"] = _cargo_lock(
            [("panorama-server", version), ("panorama_core", version)]
        )
        files["src-tauri/Cargo.lock"] = _cargo_lock(
            [("panorama-app", version), ("panorama_core", version)]
        )

    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content.encode("utf-8"))

    return Workspace(root=root)


def snapshot_tree(root: Path) -> dict[str, bytes]:
    """All file bytes under root (excluding .git), keyed by relative path."""
    return {
        str(p.relative_to(root)): p.read_bytes()
        for p in sorted(root.rglob("*"))
        if p.is_file() and ".git" not in p.relative_to(root).parts
    }


@pytest.fixture
def release_tree(tmp_path: Path) -> Callable[..., Workspace]:
    """Factory writing a release tree into tmp_path."""

    def build(**kwargs: object) -> Workspace:
        return write_release_tree(tmp_path, **kwargs)  # type: ignore[arg-type]

    return build


@pytest.fixture
def tree_bytes() -> Callable[[Path], dict[str, bytes]]:
    return snapshot_tree
