"""Tag planning: which tag comes next, and whether existing tags fit the strategy.

Everything here is pure; the flows call it before issuing any request.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import UTC, date, datetime

from grm.core.result import Err, Ok, Result
from grm.github.model import Release
from grm.release.errors import ReleaseError
from grm.release.model import (
    CalverTagParts,
    Project,
    RcInfo,
    SemverBumpLevel,
    SemverTagParts,
    TagParts,
    VersioningStrategy,
)
from grm.release.tag_parts import format_tag, get_tag_parts, parse_calver_tag, parse_semver_tag


def _today() -> date:
    return datetime.now(UTC).date()


def versioning_strategy_matches(tag: str | None, strategy: VersioningStrategy) -> bool:
    """True when ``tag`` follows ``strategy``; a repository without releases always matches."""
    if tag is None:
        return True
    if strategy == "semver":
        return parse_semver_tag(tag) is not None
    return parse_calver_tag(tag) is not None


def validate_tag_name(tag: str | None) -> Result[None, ReleaseError]:
    """Reject tags that follow neither strategy (e.g. ``v1.2.3`` or ``release-7``)."""
    if tag is None:
        return Ok(None)
    if parse_semver_tag(tag) is not None or parse_calver_tag(tag) is not None:
        return Ok(None)
    return Err(
        ReleaseError(
            kind="invalid_tag",
            message=f"Invalid tag name: \"{tag}\"",
            hint="Tags must start with rc- or version- followed by a semver or calver version",
        )
    )


def get_rc_info(
    *,
    latest_release: Release | None,
    project: Project,
    bump_level: SemverBumpLevel = "minor",
) -> Result[RcInfo, ReleaseError]:
    """Branch, tag and release name for the next release candidate."""
    if project.versioning_strategy == "calver":
        calver = _today().strftime("%Y.%m.%d")
        if latest_release is not None:
            latest = get_tag_parts(latest_release.tag_name, "calver")
            if isinstance(latest, Err):
                return latest
            # YYYY.MM.DD compares correctly as a string.
            if isinstance(latest.value, CalverTagParts) and calver <= latest.value.calver:
                return Err(
                    ReleaseError(
                        kind="invalid_input",
                        message=f"A release candidate already exists for {latest.value.calver}",
                        hint="Patch the current release instead, or cut the next one tomorrow",
                    )
                )
        return Ok(
            RcInfo(
                rc_branch=f"rc/{calver}",
                rc_release_tag=f"rc-{calver}_0",
                release_name=f"Version {calver}",
            )
        )

    current = SemverTagParts(prefix="version", major=0, minor=0, patch=0)
    if latest_release is not None:
        parts = get_tag_parts(latest_release.tag_name, "semver")
        if isinstance(parts, Err):
            return parts
        if isinstance(parts.value, SemverTagParts):
            current = parts.value

    if bump_level == "major":
        version = f"{current.major + 1}.0.0"
    else:
        version = f"{current.major}.{current.minor + 1}.0"

    return Ok(
        RcInfo(
            rc_branch=f"rc/{version}",
            rc_release_tag=f"rc-{version}",
            release_name=f"Version {version}",
        )
    )


def bump_patch(parts: TagParts) -> TagParts:
    return replace(parts, patch=parts.patch + 1)


def get_bumped_tag(*, tag: str, project: Project) -> Result[tuple[str, TagParts], ReleaseError]:
    """The tag a patch produces: same prefix and version, patch component plus one."""
    parts = get_tag_parts(tag, project.versioning_strategy)
    if isinstance(parts, Err):
        return parts
    bumped = bump_patch(parts.value)
    return Ok((format_tag(bumped), bumped))


def get_promoted_tag(*, tag: str, project: Project) -> Result[str, ReleaseError]:
    """``rc-<v>`` becomes ``version-<v>``."""
    parts = get_tag_parts(tag, project.versioning_strategy)
    if isinstance(parts, Err):
        return parts
    if parts.value.prefix != "rc":
        return Err(
            ReleaseError(
                kind="not_prerelease",
                message=f"\"{tag}\" is not a release candidate tag",
                hint="Only rc- tags can be promoted",
            )
        )
    return Ok(format_tag(replace(parts.value, prefix="version")))
