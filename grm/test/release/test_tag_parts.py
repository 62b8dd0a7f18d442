from __future__ import annotations

import pytest

from grm.core.result import Err, Ok
from grm.release.model import CalverTagParts, SemverTagParts
from grm.release.tag_parts import format_tag, get_tag_parts, parse_calver_tag, parse_semver_tag


@pytest.mark.parametrize(
    ("tag", "expected"),
    [
        ("rc-1.2.3", SemverTagParts(prefix="rc", major=1, minor=2, patch=3)),
        ("version-0.0.0", SemverTagParts(prefix="version", major=0, minor=0, patch=0)),
        ("version-10.20.30", SemverTagParts(prefix="version", major=10, minor=20, patch=30)),
    ],
)
def test_parse_semver(tag: str, expected: SemverTagParts) -> None:
    assert parse_semver_tag(tag) == expected


@pytest.mark.parametrize(
    "tag",
    ["v1.2.3", "rc-1.2", "rc-01.2.3", "version-1.2.3-beta", "rc-2024.01.15_0", "release-1.0.0"],
)
def test_parse_semver_rejects(tag: str) -> None:
    assert parse_semver_tag(tag) is None


def test_parse_calver() -> None:
    assert parse_calver_tag("version-2024.01.15_2") == CalverTagParts(
        prefix="version", calver="2024.01.15", patch=2
    )
    assert parse_calver_tag("rc-2024.1.15_0") is None
    assert parse_calver_tag("rc-2024.01.15") is None
    assert parse_calver_tag("rc-1.2.3") is None


def test_get_tag_parts_reports_strategy() -> None:
    result = get_tag_parts("rc-2024.01.15_0", "semver")
    assert isinstance(result, Err)
    assert result.error.kind == "invalid_tag"
    assert result.error.message == 'Invalid tag name: expected semver, found "rc-2024.01.15_0"'

    assert isinstance(get_tag_parts("rc-2024.01.15_0", "calver"), Ok)


def test_format_is_inverse_of_parse() -> None:
    for tag in ("rc-1.2.3", "version-2024.01.15_4"):
        parts = parse_semver_tag(tag) or parse_calver_tag(tag)
        assert parts is not None
        assert format_tag(parts) == tag
