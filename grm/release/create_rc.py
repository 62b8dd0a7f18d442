"""Release candidate creation.

Cuts ``rc/<version>`` from the default branch's head, tags it with an
annotated ``rc-<version>`` tag and opens a GitHub prerelease whose body links
the diff against the previous release. Every request waits for the previous
one; the first failure ends the flow.
"""

from __future__ import annotations

from collections.abc import Callable

from grm.core.result import Err, Ok, Result
from grm.github.client import GitHubClient
from grm.github.model import GitHubUser, Release
from grm.release.errors import ReleaseError, api_error, is_reference_exists
from grm.release.model import CreateRcResult, Project, RcInfo
from grm.release.steps import ResponseStep, StepLog, run_success_callback

CREATE_RC_STEPS = 6


def release_body(*, comparison_url: str, ahead_by: int, rc_branch: str) -> str:
    return (
        f"**Compare** {comparison_url}\n\n"
        f"**Ahead by** {ahead_by} commits\n\n"
        f"**Release branch** {rc_branch}\n\n"
        "---\n\n"
    )


def create_rc(
    *,
    client: GitHubClient,
    project: Project,
    default_branch: str,
    latest_release: Release | None,
    rc_info: RcInfo,
    user: GitHubUser,
    steps: StepLog,
    success_cb: Callable[[CreateRcResult], None] | None = None,
) -> Result[CreateRcResult, ReleaseError]:
    owner, repo = project.owner, project.repo
    steps.begin(CREATE_RC_STEPS + (1 if success_cb is not None else 0))

    # (1) Head of the default branch
    latest_commit = client.get_latest_commit(owner=owner, repo=repo, branch=default_branch)
    if isinstance(latest_commit, Err):
        return Err(api_error(latest_commit.error))
    steps.add(
        ResponseStep(
            message=f'Fetched latest commit from "{default_branch}"',
            secondary_message=f'with message "{latest_commit.value.title}"',
            link=latest_commit.value.html_url,
        )
    )

    # (2) Release branch at that commit
    branch_sha = client.create_release_branch(
        owner=owner, repo=repo, branch=rc_info.rc_branch, sha=latest_commit.value.sha
    )
    if isinstance(branch_sha, Err):
        if is_reference_exists(branch_sha.error):
            return Err(
                ReleaseError(
                    kind="reference_exists",
                    message=(
                        f'Branch "{rc_info.rc_branch}" already exists: '
                        f"https://{client.host}/{project.slug}/tree/{rc_info.rc_branch}"
                    ),
                )
            )
        return Err(api_error(branch_sha.error))
    steps.add(
        ResponseStep(
            message="Created Release Branch",
            secondary_message=f'with object sha "{branch_sha.value}"',
        )
    )

    # (3) Tag object for the annotated tag
    tag_object = client.create_tag_object(
        owner=owner,
        repo=repo,
        tag=rc_info.rc_release_tag,
        object_sha=branch_sha.value,
        tagger=user,
    )
    if isinstance(tag_object, Err):
        return Err(api_error(tag_object.error))
    steps.add(
        ResponseStep(
            message="Created Tag Object",
            secondary_message=f'with sha "{tag_object.value.sha}"',
        )
    )

    # (4) Tag reference
    tag_ref = client.create_tag_reference(
        owner=owner, repo=repo, tag_name=rc_info.rc_release_tag, tag_sha=tag_object.value.sha
    )
    if isinstance(tag_ref, Err):
        if is_reference_exists(tag_ref.error):
            return Err(
                ReleaseError(
                    kind="reference_exists",
                    message=f'Tag reference "{rc_info.rc_release_tag}" already exists',
                )
            )
        return Err(api_error(tag_ref.error))
    steps.add(ResponseStep(message="Cut Tag Reference", secondary_message=f'with ref "{tag_ref.value}"'))

    # (5) Diff against the previous release for the release body
    previous_branch = latest_release.target_commitish if latest_release else default_branch
    comparison = client.compare(
        owner=owner, repo=repo, base=previous_branch, head=rc_info.rc_branch
    )
    if isinstance(comparison, Err):
        return Err(api_error(comparison.error))
    steps.add(
        ResponseStep(
            message="Fetched commit comparison",
            secondary_message=f"{previous_branch}...{rc_info.rc_branch}",
            link=comparison.value.html_url,
        )
    )

    # (6) The prerelease itself
    release = client.create_release(
        owner=owner,
        repo=repo,
        tag_name=rc_info.rc_release_tag,
        name=rc_info.release_name,
        target_commitish=rc_info.rc_branch,
        body=release_body(
            comparison_url=comparison.value.html_url,
            ahead_by=comparison.value.ahead_by,
            rc_branch=rc_info.rc_branch,
        ),
    )
    if isinstance(release, Err):
        return Err(api_error(release.error))
    steps.add(
        ResponseStep(
            message=f'Created Release Candidate "{release.value.name}"',
            secondary_message=f'with tag "{rc_info.rc_release_tag}"',
            link=release.value.html_url,
        )
    )

    result = CreateRcResult(
        comparison_url=comparison.value.html_url,
        created_tag=release.value.tag_name,
        github_release_name=release.value.name,
        github_release_url=release.value.html_url,
        previous_tag=latest_release.tag_name if latest_release else None,
    )

    # (7) Caller's callback
    callback = run_success_callback(success_cb, result, steps)
    if isinstance(callback, Err):
        return callback

    return Ok(result)
