from __future__ import annotations

from grm.core.result import Err, Ok
from grm.github.client import GitHubClient
from grm.github.http import HttpError, MockHttpClient
from grm.github.model import Release
from grm.release.model import Project, PromoteResult
from grm.release.promote import promote_rc
from grm.release.steps import StepLog

REPO = "/repos/acme/web"
PROJECT = Project(owner="acme", repo="web", versioning_strategy="semver")
RC = Release(
    id=11,
    tag_name="rc-1.2.0",
    target_commitish="rc/1.2.0",
    prerelease=True,
    html_url="https://github.com/acme/web/releases/tag/rc-1.2.0",
    name="Version 1.2.0",
)


def _promoted(tag: str) -> dict[str, object]:
    return {
        "id": 11,
        "tag_name": tag,
        "target_commitish": "rc/1.2.0",
        "prerelease": False,
        "html_url": f"https://github.com/acme/web/releases/tag/{tag}",
        "name": "Version 1.2.0",
    }


def test_promotes_in_place() -> None:
    http = MockHttpClient()
    http.set_response("PATCH", f"{REPO}/releases/11", _promoted("version-1.2.0"))
    steps = StepLog()

    result = promote_rc(client=GitHubClient(http, token="t"), project=PROJECT, rc_release=RC, steps=steps)

    assert result == Ok(
        PromoteResult(
            github_release_url="https://github.com/acme/web/releases/tag/version-1.2.0",
            github_release_name="Version 1.2.0",
            previous_tag_url=RC.html_url,
            previous_tag="rc-1.2.0",
            updated_tag_url="https://github.com/acme/web/releases/tag/version-1.2.0",
            updated_tag="version-1.2.0",
        )
    )
    assert http.routes_called == [("PATCH", f"{REPO}/releases/11")]
    assert http.calls[0].body == {"tag_name": "version-1.2.0", "prerelease": False}
    assert steps.steps[0].message == 'Promoted "Version 1.2.0"'
    assert steps.progress == 100.0


def test_explicit_release_version() -> None:
    http = MockHttpClient()
    http.set_response("PATCH", f"{REPO}/releases/11", _promoted("version-1.2.0-final"))
    result = promote_rc(
        client=GitHubClient(http, token="t"),
        project=PROJECT,
        rc_release=RC,
        steps=StepLog(),
        release_version="version-1.2.0-final",
    )
    assert isinstance(result, Ok)
    assert http.calls[0].body == {"tag_name": "version-1.2.0-final", "prerelease": False}


def test_rejects_published_release() -> None:
    http = MockHttpClient()
    published = Release(
        id=11,
        tag_name="version-1.2.0",
        target_commitish="rc/1.2.0",
        prerelease=False,
        html_url="",
    )
    result = promote_rc(
        client=GitHubClient(http, token="t"), project=PROJECT, rc_release=published, steps=StepLog()
    )
    assert isinstance(result, Err)
    assert result.error.kind == "not_prerelease"
    assert http.calls == []


def test_api_failure() -> None:
    http = MockHttpClient()
    http.set_response(
        "PATCH", f"{REPO}/releases/11", HttpError(url="u", status=403, message="Resource not accessible")
    )
    steps = StepLog()
    result = promote_rc(client=GitHubClient(http, token="t"), project=PROJECT, rc_release=RC, steps=steps)
    assert isinstance(result, Err)
    assert result.error.kind == "api_error"
    assert len(steps) == 0


def test_success_callback() -> None:
    http = MockHttpClient()
    http.set_response("PATCH", f"{REPO}/releases/11", _promoted("version-1.2.0"))
    received: list[PromoteResult] = []
    steps = StepLog()
    result = promote_rc(
        client=GitHubClient(http, token="t"),
        project=PROJECT,
        rc_release=RC,
        steps=steps,
        success_cb=received.append,
    )
    assert isinstance(result, Ok)
    assert received == [result.value]
    assert len(steps) == 2
