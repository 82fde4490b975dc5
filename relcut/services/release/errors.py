from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ReleaseErrorKind = Literal[
    # adapter-level: the repository is structurally broken
    "missing_field",
    "pattern_not_found",
    "invalid_document",
    "io_failed",
    # input
    "invalid_version",
    # orchestration
    "check_failed",
    "tag_exists",
    "no_staged_changes",
    "git_failed",
]


@dataclass(frozen=True, slots=True)
class ReleaseError:
    kind: ReleaseErrorKind
    message: str
    hint: str | None = None
