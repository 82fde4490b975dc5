from __future__ import annotations

import pytest

from relcut.core.result import Err, Ok
from relcut.services.release.semver import SemVer, ensure_version_input, parse_version, tag_for


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("0.1.0", SemVer(0, 1, 0)),
        ("10.20.30", SemVer(10, 20, 30)),
        ("1.0.0-beta.1", SemVer(1, 0, 0, "beta.1")),
        ("2.0.0-rc-1", SemVer(2, 0, 0, "rc-1")),
    ],
)
def test_parse_version(value: str, expected: SemVer) -> None:
    assert parse_version(value) == expected
    assert str(expected) == value


@pytest.mark.parametrize(
    "value",
    ["1.2", "1.2.3.4", "v1.2.3", "1.2.3-", "1.2.3+build.5", " 1.2.3", "1.2.3\n", "١.٢.٣", ""],
)
def test_parse_version_rejects(value: str) -> None:
    assert parse_version(value) is None


def test_to_tag() -> None:
    assert SemVer(1, 2, 3).to_tag() == "v1.2.3"
    assert SemVer(1, 2, 3, "alpha").to_tag() == "v1.2.3-alpha"
    assert tag_for("1.2.3-alpha") == "v1.2.3-alpha"


def test_ensure_version_input_ok() -> None:
    assert ensure_version_input("1.2.3") == Ok(SemVer(1, 2, 3))


def test_ensure_version_input_leading_v() -> None:
    result = ensure_version_input("v1.2.3")

    assert isinstance(result, Err)
    assert result.error.kind == "invalid_version"
    assert result.error.message == "use bare version without 'v': v1.2.3"
    assert result.error.hint == "try: 1.2.3"


@pytest.mark.parametrize("value", [None, ""])
def test_ensure_version_input_missing(value: str | None) -> None:
    result = ensure_version_input(value)

    assert isinstance(result, Err)
    assert result.error.message == "missing version"


@pytest.mark.parametrize("value", ["1.2", "1.2.3.4", "latest"])
def test_ensure_version_input_invalid(value: str) -> None:
    result = ensure_version_input(value)

    assert isinstance(result, Err)
    assert result.error.message == f"invalid semver: {value}"
