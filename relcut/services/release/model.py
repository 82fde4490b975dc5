from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


FormatKind = Literal["json_field", "section_field", "keyed_record"]


@dataclass(frozen=True, slots=True)
class VersionLocation:
    """A file (optionally one record inside it) that mirrors the release version."""

    path: str  # repository-relative
    kind: FormatKind
    # Only for keyed_record: the package name identifying the record.
    record: str | None = None
    # Optional locations may be absent (lock files); mandatory ones must exist.
    required: bool = True

    @property
    def label(self) -> str:
        if self.record is None:
            return self.path
        return f"{self.path} ({self.record})"


@dataclass(frozen=True, slots=True)
class CheckOptions:
    fix: bool = False
    version: str | None = None
    tag: str | None = None


@dataclass(frozen=True, slots=True)
class CutOptions:
    version: str
    push: bool = False


@dataclass(frozen=True, slots=True)
class ValidationReport:
    issues: tuple[str, ...]
    # label -> observed version, in location order; absent optional locations omitted
    versions: dict[str, str]

    @property
    def passed(self) -> bool:
        return not self.issues
