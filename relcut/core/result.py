"""Result type for explicit error handling.

Release steps touch files and run git; each of them can fail. Instead of
raising, fallible functions return ``Ok(value)`` or ``Err(error)`` and the
caller decides whether to stop.

Usage:
    def read_version(path: Path) -> Result[str, ReleaseError]:
        ...

    match read_version(path):
        case Ok(version):
            print(f"version: {version}")
        case Err(error):
            print(f"error: {error.message}")
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful result carrying a value."""

    value: T

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Failed result carrying an error."""

    error: E

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result: TypeAlias = Ok[T] | Err[E]
