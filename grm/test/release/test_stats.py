from __future__ import annotations

from datetime import timedelta

from grm.core.result import Err, Ok
from grm.github.client import GitHubClient
from grm.github.http import HttpError, MockHttpClient
from grm.github.model import Release, TagRef
from grm.release.model import Project
from grm.release.stats import (
    ReleaseStatsEntry,
    ReleaseTime,
    get_release_stats,
    get_release_time,
    get_tag_date,
)

REPO = "/repos/acme/web"
SEMVER = Project(owner="acme", repo="web", versioning_strategy="semver")
CALVER = Project(owner="acme", repo="web", versioning_strategy="calver")


def _release(tag: str) -> Release:
    return Release(
        id=1,
        tag_name=tag,
        target_commitish="",
        prerelease=tag.startswith("rc-"),
        html_url=f"https://github.com/acme/web/releases/tag/{tag}",
        published_at="2024-03-01T10:00:00Z",
    )


def _tag(name: str, sha: str = "s") -> TagRef:
    return TagRef(tag_name=name, sha=sha, type="tag")


class TestReleaseStats:
    def test_groups_tags_by_release_line(self) -> None:
        stats = get_release_stats(
            releases=[_release("version-1.1.2"), _release("rc-1.2.0")],
            tags=[
                _tag("rc-1.1.0"),
                _tag("rc-1.1.1"),
                _tag("version-1.1.1"),
                _tag("version-1.1.2"),
                _tag("rc-1.2.0"),
                _tag("rc-0.9.0"),
                _tag("nightly"),
            ],
            project=SEMVER,
        )
        assert list(stats.releases) == ["1.1", "1.2"]
        line = stats.releases["1.1"]
        assert [t.tag_name for t in line.candidates] == ["rc-1.1.1", "rc-1.1.0"]
        assert [t.tag_name for t in line.versions] == ["version-1.1.2", "version-1.1.1"]
        assert stats.unmapped_tags == ("rc-0.9.0", "nightly")

    def test_calver_lines(self) -> None:
        stats = get_release_stats(
            releases=[_release("version-2024.01.15_1"), _release("v3")],
            tags=[_tag("rc-2024.01.15_0"), _tag("version-2024.01.15_1")],
            project=CALVER,
        )
        assert list(stats.releases) == ["2024.01.15"]
        assert stats.unmapped_releases == ("v3",)


class TestTagDate:
    def test_annotated_tag(self) -> None:
        http = MockHttpClient()
        http.set_response(
            "GET", f"{REPO}/git/tags/tag1", {"tagger": {"date": "2024-03-01T10:00:00Z", "name": "octo"}}
        )
        result = get_tag_date(client=GitHubClient(http, token="t"), project=SEMVER, tag_sha="tag1")
        assert result == Ok("2024-03-01T10:00:00Z")
        assert len(http.calls) == 1

    def test_lightweight_tag_falls_back_to_commit(self) -> None:
        http = MockHttpClient()
        http.set_response(
            "GET",
            f"{REPO}/commits/c1",
            {
                "sha": "c1",
                "commit": {
                    "author": {"date": "2024-02-20T08:00:00Z"},
                    "committer": {"date": "2024-02-28T09:00:00Z"},
                },
            },
        )
        result = get_tag_date(client=GitHubClient(http, token="t"), project=SEMVER, tag_sha="c1")
        assert result == Ok("2024-02-28T09:00:00Z")
        assert http.routes_called == [("GET", f"{REPO}/git/tags/c1"), ("GET", f"{REPO}/commits/c1")]

    def test_both_lookups_fail(self) -> None:
        http = MockHttpClient()
        http.set_response("GET", f"{REPO}/commits/c1", HttpError(url="u", status=500, message="boom"))
        result = get_tag_date(client=GitHubClient(http, token="t"), project=SEMVER, tag_sha="c1")
        assert isinstance(result, Err)
        assert result.error.kind == "api_error"


def test_release_time_spans_first_candidate_to_latest_version() -> None:
    http = MockHttpClient()
    http.set_response("GET", f"{REPO}/git/tags/rc0", {"tagger": {"date": "2024-03-01T10:00:00Z"}})
    http.set_response("GET", f"{REPO}/git/tags/v2", {"tagger": {"date": "2024-03-03T12:00:00Z"}})
    entry = ReleaseStatsEntry(
        base_version="1.1",
        created_at=None,
        html_url="",
        candidates=[_tag("rc-1.1.1", "rc1"), _tag("rc-1.1.0", "rc0")],
        versions=[_tag("version-1.1.2", "v2"), _tag("version-1.1.1", "v1")],
    )
    result = get_release_time(client=GitHubClient(http, token="t"), project=SEMVER, entry=entry)
    assert result == Ok(
        ReleaseTime(start_date="2024-03-01T10:00:00Z", end_date="2024-03-03T12:00:00Z")
    )
    assert isinstance(result, Ok)
    assert result.value.duration == timedelta(days=2, hours=2)


def test_release_time_without_versions() -> None:
    entry = ReleaseStatsEntry(base_version="1.2", created_at=None, html_url="")
    result = get_release_time(
        client=GitHubClient(MockHttpClient(), token="t"), project=SEMVER, entry=entry
    )
    assert result == Ok(ReleaseTime(start_date=None, end_date=None))
    assert isinstance(result, Ok)
    assert result.value.duration is None
