"""Patching a release: cherry-pick one commit onto the release branch.

The Git Data API has no cherry-pick, so the flow builds one:

1. a temporary commit carrying the release branch's tree, parented on the
   picked commit's parent;
2. the branch is forced to that temporary commit and the picked commit is
   merged into it, which yields the cherry-picked tree;
3. a real commit with that tree, parented on the original branch head,
   replaces the temporary one;
4. the result is tagged with the bumped patch tag and the release is moved
   onto the new tag.

There is no rollback: a failure after step 2 leaves the branch where the last
successful force-update put it.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

from grm.core.result import Err, Ok, Result
from grm.github.client import GitHubClient
from grm.github.model import Commit, GitHubUser, Release
from grm.release.errors import ReleaseError, api_error, is_reference_exists
from grm.release.model import PatchResult, Project
from grm.release.planner import get_bumped_tag
from grm.release.steps import ResponseStep, StepLog, run_success_callback

PATCH_STEPS = 9


def patch_commit_suffix(commit_sha: str) -> str:
    """Provenance line appended to every cherry-pick commit message."""
    return f"(cherry picked from commit {commit_sha})"


def cherry_pick_message(*, bumped_tag: str, commit: Commit) -> str:
    return f"[patch {bumped_tag}] {commit.message}\n\n{patch_commit_suffix(commit.sha)}"


def patched_release_body(*, body: str | None, patch_number: int, commit: Commit) -> str:
    return f"{body or ''}\n\n#### [Patch {patch_number}]({commit.html_url})\n\n{commit.message}"


def is_commit_patched(branch_commits: Sequence[Commit], commit_sha: str) -> bool:
    """Whether ``commit_sha`` was already cherry-picked onto the branch these commits come from."""
    suffix = patch_commit_suffix(commit_sha)
    return any(suffix in c.message for c in branch_commits)


def patch(
    *,
    client: GitHubClient,
    project: Project,
    latest_release: Release,
    release_branch_name: str,
    selected_commit: Commit,
    user: GitHubUser,
    steps: StepLog,
    success_cb: Callable[[PatchResult], None] | None = None,
) -> Result[PatchResult, ReleaseError]:
    owner, repo = project.owner, project.repo

    bumped = get_bumped_tag(tag=latest_release.tag_name, project=project)
    if isinstance(bumped, Err):
        return bumped
    bumped_tag, bumped_parts = bumped.value

    if selected_commit.first_parent_sha is None:
        return Err(
            ReleaseError(
                kind="invalid_input",
                message=f"Commit {selected_commit.short_sha} has no parent and cannot be cherry-picked",
            )
        )

    steps.begin(PATCH_STEPS + (1 if success_cb is not None else 0))

    # (1) Fresh head and tree of the release branch
    branch = client.get_branch(owner=owner, repo=repo, branch=release_branch_name)
    if isinstance(branch, Err):
        return Err(api_error(branch.error))
    steps.add(
        ResponseStep(
            message=f'Fetched release branch "{branch.value.name}"',
            link=branch.value.html_url or None,
        )
    )

    # (2) Temporary commit
    temp_commit = client.create_commit(
        owner=owner,
        repo=repo,
        message=f"Temporary commit for patch {bumped_parts.patch}",
        tree_sha=branch.value.tree_sha,
        parents=[selected_commit.first_parent_sha],
    )
    if isinstance(temp_commit, Err):
        return Err(api_error(temp_commit.error))
    steps.add(
        ResponseStep(
            message="Created temporary commit",
            secondary_message=f'with message "{temp_commit.value.message}"',
        )
    )

    # (3) Point the branch at it
    forced = client.force_update_branch(
        owner=owner, repo=repo, branch=release_branch_name, sha=temp_commit.value.sha
    )
    if isinstance(forced, Err):
        return Err(api_error(forced.error))
    steps.add(ResponseStep(message="Forced branch to temporary commit"))

    # (4) Merge the picked commit to obtain the cherry-picked tree
    merge = client.merge(owner=owner, repo=repo, base=release_branch_name, head=selected_commit.sha)
    if isinstance(merge, Err):
        return Err(api_error(merge.error))
    steps.add(
        ResponseStep(
            message=f'Merged temporary commit into "{release_branch_name}"',
            secondary_message=f'with message "{merge.value.message}"',
            link=merge.value.html_url or None,
        )
    )

    # (5) The real cherry-pick commit on top of the original head
    cherry_pick = client.create_commit(
        owner=owner,
        repo=repo,
        message=cherry_pick_message(bumped_tag=bumped_tag, commit=selected_commit),
        tree_sha=merge.value.tree_sha,
        parents=[branch.value.head_sha],
    )
    if isinstance(cherry_pick, Err):
        return Err(api_error(cherry_pick.error))
    steps.add(
        ResponseStep(
            message="Cherry-picked patch commit",
            secondary_message=f'with sha "{cherry_pick.value.sha}"',
        )
    )

    # (6) Replace the temporary commit
    updated_ref = client.force_update_branch(
        owner=owner, repo=repo, branch=release_branch_name, sha=cherry_pick.value.sha
    )
    if isinstance(updated_ref, Err):
        return Err(api_error(updated_ref.error))
    steps.add(
        ResponseStep(
            message="Updated reference",
            secondary_message=f'"{updated_ref.value.ref}" now points at "{updated_ref.value.sha}"',
        )
    )

    # (7) Tag object for the patch tag
    tag_object = client.create_tag_object(
        owner=owner, repo=repo, tag=bumped_tag, object_sha=updated_ref.value.sha, tagger=user
    )
    if isinstance(tag_object, Err):
        return Err(api_error(tag_object.error))
    steps.add(
        ResponseStep(message="Created new tag object", secondary_message=f'with name "{bumped_tag}"')
    )

    # (8) Tag reference
    tag_ref = client.create_tag_reference(
        owner=owner, repo=repo, tag_name=bumped_tag, tag_sha=tag_object.value.sha
    )
    if isinstance(tag_ref, Err):
        if is_reference_exists(tag_ref.error):
            return Err(
                ReleaseError(
                    kind="reference_exists",
                    message=f'Tag reference "{bumped_tag}" already exists',
                )
            )
        return Err(api_error(tag_ref.error))
    steps.add(ResponseStep(message="Created new reference", secondary_message=f'for "{bumped_tag}"'))

    # (9) Move the release onto the patch tag
    release = client.update_release(
        owner=owner,
        repo=repo,
        release_id=latest_release.id,
        tag_name=bumped_tag,
        body=patched_release_body(
            body=latest_release.body,
            patch_number=bumped_parts.patch,
            commit=selected_commit,
        ),
    )
    if isinstance(release, Err):
        return Err(api_error(release.error))
    steps.add(
        ResponseStep(
            message=f'Updated release "{release.value.name}"',
            secondary_message=f'with tag "{release.value.tag_name}"',
            link=release.value.html_url,
        )
    )

    result = PatchResult(
        updated_release_name=release.value.name,
        updated_release_url=release.value.html_url,
        previous_tag=latest_release.tag_name,
        patched_tag=release.value.tag_name,
        patch_commit_message=selected_commit.message,
        patch_commit_url=selected_commit.html_url,
    )

    # (10) Caller's callback
    callback = run_success_callback(success_cb, result, steps)
    if isinstance(callback, Err):
        return callback

    return Ok(result)
