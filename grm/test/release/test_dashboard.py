from __future__ import annotations

from grm.core.config import FeaturesConfig
from grm.core.result import Err, Ok
from grm.github.client import GitHubClient
from grm.github.http import HttpError, MockHttpClient
from grm.github.model import Branch, Release, Repository
from grm.release.dashboard import get_git_batch_info, resolve_dashboard
from grm.release.model import GitBatchInfo, Project

REPO = "/repos/acme/web"
SEMVER = Project(owner="acme", repo="web", versioning_strategy="semver")
CALVER = Project(owner="acme", repo="web", versioning_strategy="calver")
PUSHABLE = Repository(name="web", default_branch="main", push_permissions=True)
BRANCH = Branch(name="rc/1.0.0", html_url="", head_sha="h", tree_sha="t")


def _release(tag: str, *, prerelease: bool) -> Release:
    return Release(
        id=1, tag_name=tag, target_commitish="rc/1.0.0", prerelease=prerelease, html_url=""
    )


def _batch(
    latest: Release | None,
    *,
    branch: Branch | None = BRANCH,
    repository: Repository = PUSHABLE,
) -> GitBatchInfo:
    return GitBatchInfo(repository=repository, latest_release=latest, release_branch=branch)


class TestResolveDashboard:
    def test_missing_push_permission_blocks_everything(self) -> None:
        batch = _batch(
            _release("v1", prerelease=False),
            repository=Repository(name="web", default_branch="main", push_permissions=False),
        )
        dashboard = resolve_dashboard(batch=batch, project=SEMVER)
        assert dashboard.blocked
        assert dashboard.alert is not None
        assert dashboard.alert.kind == "permission_denied"
        assert dashboard.alert.message == 'You lack push permissions for repository "acme/web"'
        assert dashboard.cards == ()

    def test_invalid_tag(self) -> None:
        dashboard = resolve_dashboard(batch=_batch(_release("v1.0.0", prerelease=False)), project=SEMVER)
        assert dashboard.alert is not None
        assert dashboard.alert.kind == "invalid_tag"

    def test_versioning_mismatch(self) -> None:
        dashboard = resolve_dashboard(
            batch=_batch(_release("version-1.0.0", prerelease=False)), project=CALVER
        )
        assert dashboard.alert is not None
        assert dashboard.alert.kind == "versioning_mismatch"
        assert dashboard.alert.message == (
            'Versioning mismatch, expected calver version, got "version-1.0.0"'
        )

    def test_empty_repository(self) -> None:
        dashboard = resolve_dashboard(batch=_batch(None, branch=None), project=SEMVER)
        assert not dashboard.blocked
        assert dashboard.notes == (
            "This repository doesn't have any releases yet",
            "This repository doesn't have any release branches",
        )
        create = dashboard.card("create_rc")
        promote = dashboard.card("promote_rc")
        patch = dashboard.card("patch")
        assert create is not None and create.available
        assert promote is not None and not promote.available
        assert patch is not None and not patch.available

    def test_release_candidate_can_be_promoted_and_patched(self) -> None:
        dashboard = resolve_dashboard(batch=_batch(_release("rc-1.0.0", prerelease=True)), project=SEMVER)
        assert [c.card for c in dashboard.cards if c.available] == [
            "info",
            "create_rc",
            "promote_rc",
            "patch",
        ]

    def test_published_release_cannot_be_promoted(self) -> None:
        dashboard = resolve_dashboard(
            batch=_batch(_release("version-1.0.0", prerelease=False)), project=SEMVER
        )
        promote = dashboard.card("promote_rc")
        assert promote is not None
        assert promote.reason == "Latest GitHub release is not a Release Candidate"

    def test_omitted_features_are_hidden(self) -> None:
        dashboard = resolve_dashboard(
            batch=_batch(_release("rc-1.0.0", prerelease=True)),
            project=SEMVER,
            features=FeaturesConfig(omitted=frozenset({"patch", "promote_rc"})),
        )
        assert [c.card for c in dashboard.cards] == ["info", "create_rc"]
        assert dashboard.card("patch") is None


class TestGitBatchInfo:
    def _http(self) -> MockHttpClient:
        http = MockHttpClient()
        http.set_response(
            "GET", REPO, {"name": "web", "default_branch": "main", "permissions": {"push": True}}
        )
        http.set_response(
            "GET",
            f"{REPO}/releases",
            [
                {
                    "id": 1,
                    "tag_name": "rc-1.0.0",
                    "target_commitish": "rc/1.0.0",
                    "prerelease": True,
                    "html_url": "https://github.com/acme/web/releases/tag/rc-1.0.0",
                }
            ],
        )
        return http

    def test_fetches_release_branch(self) -> None:
        http = self._http()
        http.set_response(
            "GET",
            f"{REPO}/branches/rc/1.0.0",
            {"name": "rc/1.0.0", "commit": {"sha": "h", "commit": {"tree": {"sha": "t"}}}},
        )
        result = get_git_batch_info(client=GitHubClient(http, token="t"), project=SEMVER)
        assert isinstance(result, Ok)
        assert result.value.release_branch is not None
        assert result.value.release_branch.head_sha == "h"

    def test_deleted_branch_is_not_an_error(self) -> None:
        result = get_git_batch_info(client=GitHubClient(self._http(), token="t"), project=SEMVER)
        assert isinstance(result, Ok)
        assert result.value.latest_release is not None
        assert result.value.release_branch is None

    def test_no_releases_skips_branch_lookup(self) -> None:
        http = self._http()
        http.set_response("GET", f"{REPO}/releases", [])
        result = get_git_batch_info(client=GitHubClient(http, token="t"), project=SEMVER)
        assert isinstance(result, Ok)
        assert result.value.latest_release is None
        assert len(http.calls) == 2

    def test_repository_error(self) -> None:
        http = self._http()
        http.set_response("GET", REPO, HttpError(url="u", status=401, message="Bad credentials"))
        result = get_git_batch_info(client=GitHubClient(http, token="t"), project=SEMVER)
        assert isinstance(result, Err)
        assert result.error.message == "Bad credentials"
