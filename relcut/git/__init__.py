"""Git operations used by the release cut.

Usage:
    from relcut.git import Repository

    repo = Repository(Path("/path/to/repo"))
    exists = repo.tag_exists("v1.2.3")
"""

from relcut.git.repository import (
    DEFAULT_REMOTE,
    GitError,
    Repository,
)

__all__ = [
    "DEFAULT_REMOTE",
    "GitError",
    "Repository",
]
