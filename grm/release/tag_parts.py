"""Tag grammar for both versioning strategies.

semver: ``rc-1.2.3`` / ``version-1.2.3``
calver: ``rc-2024.01.15_0`` / ``version-2024.01.15_2`` (``_N`` counts patches)
"""

from __future__ import annotations

import re
from typing import cast

from grm.core.result import Err, Ok, Result
from grm.release.errors import ReleaseError
from grm.release.model import (
    CalverTagParts,
    SemverTagParts,
    TagParts,
    TagPrefix,
    VersioningStrategy,
)

SEMVER_RE = re.compile(r"^(rc|version)-(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)$")
CALVER_RE = re.compile(r"^(rc|version)-(\d{4}\.\d{2}\.\d{2})_(0|[1-9]\d*)$")


def parse_semver_tag(tag: str) -> SemverTagParts | None:
    m = SEMVER_RE.match(tag)
    if m is None:
        return None
    return SemverTagParts(
        prefix=cast(TagPrefix, m.group(1)),
        major=int(m.group(2)),
        minor=int(m.group(3)),
        patch=int(m.group(4)),
    )


def parse_calver_tag(tag: str) -> CalverTagParts | None:
    m = CALVER_RE.match(tag)
    if m is None:
        return None
    return CalverTagParts(
        prefix=cast(TagPrefix, m.group(1)),
        calver=m.group(2),
        patch=int(m.group(3)),
    )


def get_tag_parts(tag: str, strategy: VersioningStrategy) -> Result[TagParts, ReleaseError]:
    if strategy == "semver":
        semver = parse_semver_tag(tag)
        if semver is None:
            return Err(
                ReleaseError(
                    kind="invalid_tag",
                    message=f"Invalid tag name: expected semver, found \"{tag}\"",
                    hint="Expected: rc-MAJOR.MINOR.PATCH or version-MAJOR.MINOR.PATCH",
                )
            )
        return Ok(semver)

    calver = parse_calver_tag(tag)
    if calver is None:
        return Err(
            ReleaseError(
                kind="invalid_tag",
                message=f"Invalid tag name: expected calver, found \"{tag}\"",
                hint="Expected: rc-YYYY.MM.DD_N or version-YYYY.MM.DD_N",
            )
        )
    return Ok(calver)


def format_tag(parts: TagParts) -> str:
    return f"{parts.prefix}-{parts.version}"
