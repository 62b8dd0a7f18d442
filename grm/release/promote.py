from __future__ import annotations

from collections.abc import Callable

from grm.core.result import Err, Ok, Result
from grm.github.client import GitHubClient
from grm.github.model import Release
from grm.release.errors import ReleaseError, api_error
from grm.release.model import Project, PromoteResult
from grm.release.planner import get_promoted_tag
from grm.release.steps import ResponseStep, StepLog, run_success_callback

PROMOTE_STEPS = 1


def promote_rc(
    *,
    client: GitHubClient,
    project: Project,
    rc_release: Release,
    steps: StepLog,
    release_version: str | None = None,
    success_cb: Callable[[PromoteResult], None] | None = None,
) -> Result[PromoteResult, ReleaseError]:
    """Turn a prerelease into a release: clear the prerelease flag and retag it.

    ``release_version`` defaults to the candidate tag with ``rc-`` replaced by
    ``version-``. The release keeps its id.
    """
    if not rc_release.prerelease:
        return Err(
            ReleaseError(
                kind="not_prerelease",
                message=f'Latest release "{rc_release.tag_name}" is not a release candidate',
            )
        )

    if release_version is None:
        promoted = get_promoted_tag(tag=rc_release.tag_name, project=project)
        if isinstance(promoted, Err):
            return promoted
        release_version = promoted.value

    steps.begin(PROMOTE_STEPS + (1 if success_cb is not None else 0))

    release = client.update_release(
        owner=project.owner,
        repo=project.repo,
        release_id=rc_release.id,
        tag_name=release_version,
        prerelease=False,
    )
    if isinstance(release, Err):
        return Err(api_error(release.error))
    steps.add(
        ResponseStep(
            message=f'Promoted "{release.value.name}"',
            secondary_message=f'from "{rc_release.tag_name}" to "{release.value.tag_name}"',
            link=release.value.html_url,
        )
    )

    result = PromoteResult(
        github_release_url=release.value.html_url,
        github_release_name=release.value.name,
        previous_tag_url=rc_release.html_url,
        previous_tag=rc_release.tag_name,
        updated_tag_url=release.value.html_url,
        updated_tag=release.value.tag_name,
    )

    callback = run_success_callback(success_cb, result, steps)
    if isinstance(callback, Err):
        return callback

    return Ok(result)
