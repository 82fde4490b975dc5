from __future__ import annotations

import re
from dataclasses import dataclass

from relcut.core.result import Err, Ok, Result
from relcut.services.release.errors import ReleaseError


_VERSION_RE = re.compile(r"(\d+)\.(\d+)\.(\d+)(?:-([0-9A-Za-z.-]+))?", re.ASCII)

_VERSION_HINT = "Expected MAJOR.MINOR.PATCH[-prerelease], e.g. 0.1.0"


@dataclass(frozen=True, slots=True)
class SemVer:
    major: int
    minor: int
    patch: int
    prerelease: str | None = None

    def __str__(self) -> str:
        base = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            return f"{base}-{self.prerelease}"
        return base

    def to_tag(self) -> str:
        return f"v{self}"


def parse_version(value: str) -> SemVer | None:
    m = _VERSION_RE.fullmatch(value)
    if m is None:
        return None
    return SemVer(int(m.group(1)), int(m.group(2)), int(m.group(3)), m.group(4))


def ensure_version_input(value: str | None) -> Result[SemVer, ReleaseError]:
    """Validate a user-supplied bare version (no leading "v")."""
    if not value:
        return Err(
            ReleaseError(
                kind="invalid_version",
                message="missing version",
                hint=_VERSION_HINT,
            )
        )
    if value.startswith("v"):
        return Err(
            ReleaseError(
                kind="invalid_version",
                message=f"use bare version without 'v': {value}",
                hint=f"try: {value[1:]}",
            )
        )
    parsed = parse_version(value)
    if parsed is None:
        return Err(
            ReleaseError(
                kind="invalid_version",
                message=f"invalid semver: {value}",
                hint=_VERSION_HINT,
            )
        )
    return Ok(parsed)


def tag_for(version: str) -> str:
    return f"v{version}"
