"""Release statistics: which candidates and patches each release went through, and how long it took."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta

from grm.core.result import Err, Ok, Result
from grm.github.client import GitHubClient
from grm.github.model import Release, TagRef
from grm.release.errors import ReleaseError, api_error
from grm.release.model import CalverTagParts, Project, TagParts
from grm.release.tag_parts import parse_calver_tag, parse_semver_tag


def _empty_tags() -> list[TagRef]:
    return []


@dataclass
class ReleaseStatsEntry:
    """One release line, e.g. every ``rc-1.4.x`` and ``version-1.4.x`` tag."""

    base_version: str
    created_at: str | None
    html_url: str
    candidates: list[TagRef] = field(default_factory=_empty_tags)
    versions: list[TagRef] = field(default_factory=_empty_tags)


@dataclass(frozen=True, slots=True)
class ReleaseStats:
    releases: dict[str, ReleaseStatsEntry]
    unmapped_releases: tuple[str, ...]
    unmapped_tags: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class ReleaseTime:
    start_date: str | None
    end_date: str | None

    @property
    def duration(self) -> timedelta | None:
        if self.start_date is None or self.end_date is None:
            return None
        return _parse_date(self.end_date) - _parse_date(self.start_date)


def _parse_date(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _parse(tag: str, project: Project) -> TagParts | None:
    if project.versioning_strategy == "semver":
        return parse_semver_tag(tag)
    return parse_calver_tag(tag)


def base_version(parts: TagParts) -> str:
    """Key shared by a release's candidates and patches (``1.4`` or ``2024.01.15``)."""
    if isinstance(parts, CalverTagParts):
        return parts.calver
    return f"{parts.major}.{parts.minor}"


def get_release_stats(
    *, releases: list[Release], tags: list[TagRef], project: Project
) -> ReleaseStats:
    entries: dict[str, ReleaseStatsEntry] = {}
    unmapped_releases: list[str] = []
    for release in releases:
        parts = _parse(release.tag_name, project)
        if parts is None:
            unmapped_releases.append(release.tag_name)
            continue
        key = base_version(parts)
        if key not in entries:
            entries[key] = ReleaseStatsEntry(
                base_version=key,
                created_at=release.published_at,
                html_url=release.html_url,
            )

    unmapped_tags: list[str] = []
    for tag in tags:
        parts = _parse(tag.tag_name, project)
        if parts is None or base_version(parts) not in entries:
            unmapped_tags.append(tag.tag_name)
            continue
        entry = entries[base_version(parts)]
        if parts.prefix == "rc":
            entry.candidates.append(tag)
        else:
            entry.versions.append(tag)

    def patch_of(tag: TagRef) -> int:
        parts = _parse(tag.tag_name, project)
        return parts.patch if parts is not None else -1

    for entry in entries.values():
        entry.candidates.sort(key=patch_of, reverse=True)
        entry.versions.sort(key=patch_of, reverse=True)

    return ReleaseStats(
        releases=entries,
        unmapped_releases=tuple(unmapped_releases),
        unmapped_tags=tuple(unmapped_tags),
    )


def get_tag_date(
    *, client: GitHubClient, project: Project, tag_sha: str
) -> Result[str | None, ReleaseError]:
    """Date a tag was created.

    Annotated tags carry their own tagger date. Lightweight tags point straight
    at a commit, so the lookup fails and the commit's date is used instead.
    """
    annotated = client.get_tag(owner=project.owner, repo=project.repo, tag_sha=tag_sha)
    if isinstance(annotated, Ok):
        return Ok(annotated.value.date)

    commit_date = client.get_commit_date(owner=project.owner, repo=project.repo, ref=tag_sha)
    if isinstance(commit_date, Err):
        return Err(api_error(commit_date.error))
    return Ok(commit_date.value)


def get_release_time(
    *, client: GitHubClient, project: Project, entry: ReleaseStatsEntry
) -> Result[ReleaseTime, ReleaseError]:
    """From the first release candidate to the latest version tag of a release line."""
    first_candidate = entry.candidates[-1] if entry.candidates else None
    latest_version = entry.versions[0] if entry.versions else None

    start: str | None = None
    if first_candidate is not None:
        start_result = get_tag_date(client=client, project=project, tag_sha=first_candidate.sha)
        if isinstance(start_result, Err):
            return start_result
        start = start_result.value

    end: str | None = None
    if latest_version is not None:
        end_result = get_tag_date(client=client, project=project, tag_sha=latest_version.sha)
        if isinstance(end_result, Err):
            return end_result
        end = end_result.value

    return Ok(ReleaseTime(start_date=start, end_date=end))
