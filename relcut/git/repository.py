"""Git repository abstraction.

The release cut drives git through this class: staging, the staged-diff
guard, commit, annotated tag, push and the tag-existence query. All
operations return Result types; nothing is retried and nothing times out.

Usage:
    repo = Repository(Path("/path/to/repo"))

    match repo.tag_exists("v1.2.3"):
        case Ok(True):
            print("already released")
        case Ok(False):
            repo.tag_annotated("v1.2.3", message="Release v1.2.3")
        case Err(e):
            print(f"git failed: {e.message}")
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from relcut.core.result import Err, Ok, Result
from relcut.platform.process import ProcessError
from relcut.platform.process import run as run_process

__all__ = [
    "DEFAULT_REMOTE",
    "GitError",
    "Repository",
]

DEFAULT_REMOTE = "origin"


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git command that failed
        message: Error message (git's stderr when available)
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1


class Repository:
    """Git operations on a single repository.

    Attributes:
        path: Path to the repository root
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def tag_exists(self, tag: str) -> Result[bool, GitError]:
        """Query whether `refs/tags/<tag>` exists.

        `git rev-parse -q --verify` exits 1 with no output for a missing
        ref; any other failure is reported as an error.
        """
        result = self._run(["rev-parse", "-q", "--verify", f"refs/tags/{tag}"])
        match result:
            case Ok(_):
                return Ok(True)
            case Err(e):
                if e.returncode == 1 and not e.stderr.strip():
                    return Ok(False)
                return Err(self._error("rev-parse --verify", e, "tag lookup failed"))

    def add(self, paths: list[str]) -> Result[None, GitError]:
        """Stage the given repository-relative paths."""
        result = self._run(["add", "--", *paths])
        if isinstance(result, Err):
            return Err(self._error("add", result.error, "git add failed"))
        return Ok(None)

    def staged_paths(self) -> Result[list[str], GitError]:
        """List paths with staged changes (`git diff --cached --name-only`)."""
        result = self._run(["diff", "--cached", "--name-only"])
        match result:
            case Err(e):
                return Err(self._error("diff --cached", e, "git diff failed"))
            case Ok(stdout):
                return Ok([ln.strip() for ln in stdout.splitlines() if ln.strip()])

    def commit(self, message: str) -> Result[None, GitError]:
        result = self._run(["commit", "-m", message])
        if isinstance(result, Err):
            return Err(self._error("commit", result.error, "git commit failed"))
        return Ok(None)

    def tag_annotated(self, tag: str, *, message: str) -> Result[None, GitError]:
        """Create an annotated tag on HEAD."""
        result = self._run(["tag", "-a", tag, "-m", message])
        if isinstance(result, Err):
            return Err(self._error("tag -a", result.error, f"failed to create tag {tag}"))
        return Ok(None)

    def push(self, ref: str, *, remote: str = DEFAULT_REMOTE) -> Result[None, GitError]:
        """Push a single ref (e.g. `HEAD` or a tag name) to remote."""
        result = self._run(["push", remote, ref])
        if isinstance(result, Err):
            return Err(self._error("push", result.error, f"failed to push {ref}"))
        return Ok(None)

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        """Run a git command in this repository."""
        return run_process(["git", "-C", str(self.path), *args], cwd=self.path)

    def _error(self, command: str, e: ProcessError, fallback: str) -> GitError:
        return GitError(
            command=command,
            message=e.stderr.strip() or e.stdout.strip() or fallback,
            returncode=e.returncode,
        )
