"""Repository root detection.

Every release component receives the repository root explicitly through a
`Workspace` value; nothing reads the process working directory on its own.

A directory is a repository root when it holds `relcut.toml` or `.git`.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from .config import CONFIG_FILE_NAME
from .result import Err, Ok, Result

__all__ = [
    "ROOT_ENV_VAR",
    "Workspace",
    "WorkspaceError",
    "detect_workspace",
    "find_workspace_upward",
    "is_workspace_root",
]

ROOT_ENV_VAR = "RELCUT_ROOT"


@dataclass(frozen=True)
class WorkspaceError:
    """Error when the repository root cannot be detected."""

    message: str
    searched_from: Path | None = None


@dataclass(frozen=True, slots=True)
class Workspace:
    """The repository whose release metadata is managed."""

    root: Path

    @property
    def config_path(self) -> Path:
        """Path to relcut.toml (may not exist)."""
        return self.root / CONFIG_FILE_NAME

    def path(self, rel: str) -> Path:
        """Resolve a repository-relative path."""
        return self.root / rel

    def __str__(self) -> str:
        return str(self.root)


def is_workspace_root(path: Path) -> bool:
    return (path / CONFIG_FILE_NAME).is_file() or (path / ".git").exists()


def find_workspace_upward(start: Path) -> Path | None:
    """Search upward from start for a repository root."""
    for parent in (start, *start.parents):
        if is_workspace_root(parent):
            return parent
    return None


def detect_workspace(
    *,
    start_dir: Path | None = None,
    env_var: str = ROOT_ENV_VAR,
) -> Result[Workspace, WorkspaceError]:
    """Detect the repository root.

    Detection order:
    1. RELCUT_ROOT environment variable (set by --root)
    2. Search upward from start_dir (or cwd)
    """
    env_value = os.environ.get(env_var)
    if env_value:
        env_path = Path(env_value).expanduser().resolve()
        if env_path.is_dir():
            return Ok(Workspace(root=env_path))
        return Err(
            WorkspaceError(
                message=f"${env_var} is set to '{env_value}' but it is not a directory",
            )
        )

    search_start = (start_dir or Path.cwd()).resolve()
    found = find_workspace_upward(search_start)
    if found is None:
        return Err(
            WorkspaceError(
                message=f"Could not find repository root ({CONFIG_FILE_NAME} or .git not found)",
                searched_from=search_start,
            )
        )
    return Ok(Workspace(root=found))
