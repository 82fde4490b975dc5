"""Format adapters: read and rewrite a version value in place.

Three kinds of files carry the release version:

- json_field: a string field in a JSON document (package.json,
  tauri.conf.json). The whole document is re-serialized with key order kept.
- section_field: a `version = "X"` assignment inside a `[package]` section
  (Cargo.toml). Only the quoted value changes; every other byte is kept.
- keyed_record: one of many `[[package]]` records identified by
  `name = "X"` (Cargo.lock). Lock files are generated and may be absent or
  partially regenerated, so a missing file or record is not an error.

A write returns Ok(True) when bytes changed and Ok(False) when the value was
already current. An anchor that cannot be located is always an error for the
strict kinds; it never degrades into a silent no-op.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from relcut.core.result import Err, Ok, Result
from relcut.core.structured import StrDict, as_str_dict
from relcut.platform.files import atomic_write_text, read_text
from relcut.services.release.errors import ReleaseError
from relcut.services.release.model import FormatKind, VersionLocation

__all__ = [
    "FormatAdapter",
    "JsonFieldAdapter",
    "KeyedRecordAdapter",
    "SectionFieldAdapter",
    "adapter_for",
    "dump_json",
    "load_json_object",
    "read_location_text",
    "read_repo_text",
    "write_text",
]


class FormatAdapter(Protocol):
    def read(self, root: Path, location: VersionLocation) -> Result[str | None, ReleaseError]:
        """Return the version, or None for an absent optional location."""
        ...

    def write(
        self, root: Path, location: VersionLocation, version: str
    ) -> Result[bool, ReleaseError]:
        """Rewrite the version; Ok(False) when nothing had to change."""
        ...


# -----------------------------------------------------------------------------
# File helpers
# -----------------------------------------------------------------------------


def read_repo_text(root: Path, rel: str) -> Result[str, ReleaseError]:
    path = root / rel
    try:
        return Ok(read_text(path))
    except OSError as e:
        return Err(
            ReleaseError(
                kind="io_failed",
                message=f"failed to read {rel}: {e}",
                hint=str(path),
            )
        )


def read_location_text(root: Path, location: VersionLocation) -> Result[str | None, ReleaseError]:
    """Read the backing file; None when an optional file is absent."""
    if not location.required and not (root / location.path).exists():
        return Ok(None)
    return read_repo_text(root, location.path)


def write_text(path: Path, rel: str, content: str) -> Result[None, ReleaseError]:
    try:
        atomic_write_text(path, content, encoding="utf-8")
    except OSError as e:
        return Err(
            ReleaseError(
                kind="io_failed",
                message=f"failed to write {rel}: {e}",
                hint=str(path),
            )
        )
    return Ok(None)


def load_json_object(text: str, *, rel: str) -> Result[StrDict, ReleaseError]:
    try:
        obj: object = json.loads(text)
    except json.JSONDecodeError as e:
        return Err(
            ReleaseError(
                kind="invalid_document",
                message=f"invalid JSON in {rel}: {e}",
                hint=rel,
            )
        )

    data = as_str_dict(obj)
    if data is None:
        return Err(
            ReleaseError(
                kind="invalid_document",
                message=f"invalid JSON root in {rel}",
                hint="Expected a JSON object",
            )
        )
    return Ok(data)


def dump_json(data: StrDict) -> str:
    """Serialize the way npm and the Tauri CLI write their JSON files."""
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


# -----------------------------------------------------------------------------
# json_field
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class JsonFieldAdapter:
    field: str = "version"

    def read(self, root: Path, location: VersionLocation) -> Result[str | None, ReleaseError]:
        text = read_location_text(root, location)
        if isinstance(text, Err) or text.value is None:
            return text

        data = load_json_object(text.value, rel=location.path)
        if isinstance(data, Err):
            return data

        return self._field_value(data.value, location)

    def write(
        self, root: Path, location: VersionLocation, version: str
    ) -> Result[bool, ReleaseError]:
        text = read_location_text(root, location)
        if isinstance(text, Err):
            return text
        if text.value is None:
            return Ok(False)

        data = load_json_object(text.value, rel=location.path)
        if isinstance(data, Err):
            return data

        prev = self._field_value(data.value, location)
        if isinstance(prev, Err):
            return prev
        if prev.value == version:
            return Ok(False)

        data.value[self.field] = version
        written = write_text(root / location.path, location.path, dump_json(data.value))
        if isinstance(written, Err):
            return written
        return Ok(True)

    def _field_value(self, data: StrDict, location: VersionLocation) -> Result[str, ReleaseError]:
        value = data.get(self.field)
        if not isinstance(value, str):
            return Err(
                ReleaseError(
                    kind="missing_field",
                    message=f"{location.path} has no string {self.field}",
                    hint=f'Add "{self.field}": "<x.y.z>" to {location.path}',
                )
            )
        return Ok(value)


# -----------------------------------------------------------------------------
# section_field
# -----------------------------------------------------------------------------


_ANY_HEADER_RE = re.compile(r"(?m)^[ \t]*\[")


@dataclass(frozen=True, slots=True)
class SectionFieldAdapter:
    section: str = "package"
    field: str = "version"

    def read(self, root: Path, location: VersionLocation) -> Result[str | None, ReleaseError]:
        text = read_location_text(root, location)
        if isinstance(text, Err) or text.value is None:
            return text

        span = self._value_span(text.value, location)
        if isinstance(span, Err):
            return span
        start, end = span.value
        return Ok(text.value[start:end])

    def write(
        self, root: Path, location: VersionLocation, version: str
    ) -> Result[bool, ReleaseError]:
        text = read_location_text(root, location)
        if isinstance(text, Err):
            return text
        if text.value is None:
            return Ok(False)

        span = self._value_span(text.value, location)
        if isinstance(span, Err):
            return span
        start, end = span.value

        content = text.value
        if content[start:end] == version:
            return Ok(False)

        out = content[:start] + version + content[end:]
        written = write_text(root / location.path, location.path, out)
        if isinstance(written, Err):
            return written
        return Ok(True)

    def _value_span(self, text: str, location: VersionLocation) -> Result[tuple[int, int], ReleaseError]:
        header = re.compile(
            rf"(?m)^[ \t]*\[{re.escape(self.section)}\][ \t]*(?:#[^\r\n]*)?\r?$"
        )
        h = header.search(text)
        if h is None:
            return Err(
                ReleaseError(
                    kind="pattern_not_found",
                    message=f"missing [{self.section}] section in {location.path}",
                    hint=location.path,
                )
            )

        body_start = h.end()
        nxt = _ANY_HEADER_RE.search(text, body_start)
        body_end = nxt.start() if nxt is not None else len(text)

        assign = re.compile(rf'(?m)^[ \t]*{re.escape(self.field)}[ \t]*=[ \t]*"([^"\r\n]+)"')
        m = assign.search(text, body_start, body_end)
        if m is None:
            return Err(
                ReleaseError(
                    kind="pattern_not_found",
                    message=f"could not locate [{self.section}].{self.field} in {location.path}",
                    hint=f'Expected {self.field} = "<x.y.z>" under [{self.section}]',
                )
            )
        return Ok(m.span(1))


# -----------------------------------------------------------------------------
# keyed_record
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class KeyedRecordAdapter:
    marker: str = "[[package]]"
    key_field: str = "name"
    value_field: str = "version"

    def read(self, root: Path, location: VersionLocation) -> Result[str | None, ReleaseError]:
        text = read_location_text(root, location)
        if isinstance(text, Err) or text.value is None:
            return text

        span = self._value_span(text.value, location)
        if span is None:
            return Ok(None)
        start, end = span
        return Ok(text.value[start:end])

    def write(
        self, root: Path, location: VersionLocation, version: str
    ) -> Result[bool, ReleaseError]:
        text = read_location_text(root, location)
        if isinstance(text, Err):
            return text
        if text.value is None:
            return Ok(False)

        content = text.value
        span = self._value_span(content, location)
        if span is None:
            return Ok(False)
        start, end = span
        if content[start:end] == version:
            return Ok(False)

        out = content[:start] + version + content[end:]
        written = write_text(root / location.path, location.path, out)
        if isinstance(written, Err):
            return written
        return Ok(True)

    def _value_span(self, text: str, location: VersionLocation) -> tuple[int, int] | None:
        if location.record is None:
            return None

        marker_re = re.compile(rf"(?m)^[ \t]*{re.escape(self.marker)}[ \t]*\r?$")
        key_re = re.compile(
            rf'(?m)^[ \t]*{re.escape(self.key_field)}[ \t]*=[ \t]*'
            rf'"{re.escape(location.record)}"[ \t]*\r?$'
        )
        value_re = re.compile(
            rf'(?m)^[ \t]*{re.escape(self.value_field)}[ \t]*=[ \t]*"([^"\r\n]+)"'
        )

        markers = list(marker_re.finditer(text))
        for i, m in enumerate(markers):
            start = m.end()
            end = markers[i + 1].start() if i + 1 < len(markers) else len(text)
            key = key_re.search(text, start, end)
            if key is None:
                continue
            value = value_re.search(text, key.end(), end)
            if value is None:
                continue
            return value.span(1)
        return None


_ADAPTERS: dict[FormatKind, FormatAdapter] = {
    "json_field": JsonFieldAdapter(),
    "section_field": SectionFieldAdapter(),
    "keyed_record": KeyedRecordAdapter(),
}


def adapter_for(kind: FormatKind) -> FormatAdapter:
    return _ADAPTERS[kind]
