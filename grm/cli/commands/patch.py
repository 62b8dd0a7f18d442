from __future__ import annotations

import typer

from grm.cli.commands.common import (
    confirm,
    current_user,
    exit_release,
    fail,
    global_options,
    load_dashboard,
    require_card,
    step_log,
    unwrap_http,
)
from grm.cli.context import CLIContext, build_context
from grm.core.errors import ErrorCode
from grm.core.result import Err
from grm.github.model import Commit
from grm.output.console import Style
from grm.release.model import Project
from grm.release.patch import is_commit_patched, patch as run_patch
from grm.release.planner import get_bumped_tag


def _pick_commit(
    cli: CLIContext,
    *,
    project: Project,
    default_branch: str,
    release_branch: str,
) -> Commit:
    console = cli.console
    commits = unwrap_http(
        cli.client.list_recent_commits(
            owner=project.owner, repo=project.repo, branch=default_branch
        )
    )
    if not commits:
        exit_release(f"no commits found on {default_branch}", code=ErrorCode.USER_ERROR)
    branch_commits = unwrap_http(
        cli.client.list_recent_commits(
            owner=project.owner, repo=project.repo, branch=release_branch
        )
    )

    console.header(f"Select commit from {default_branch}")
    for i, c in enumerate(commits, start=1):
        status = "patched" if is_commit_patched(branch_commits, c.sha) else "       "
        author = f" @{c.author_login}" if c.author_login else ""
        console.print(f"{i:2}. [{status}] {c.short_sha} {c.title}{author}", Style.DIM)

    while True:
        raw = typer.prompt("Pick commit number", default="1")
        try:
            idx = int(raw)
        except ValueError:
            console.error("invalid number")
            continue
        if idx < 1 or idx > len(commits):
            console.error("out of range")
            continue
        chosen = commits[idx - 1]
        if is_commit_patched(branch_commits, chosen.sha):
            console.error(f"{chosen.short_sha} is already on {release_branch}")
            continue
        return chosen


def patch(
    ctx: typer.Context,
    commit: str | None = typer.Option(
        None, "--commit", help="SHA of the commit to cherry-pick (default: pick interactively)"
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """Cherry-pick a commit onto the latest release branch and bump its patch tag."""
    cli = build_context(global_options(ctx))
    project = cli.require_project()
    batch, dashboard = load_dashboard(cli, project)
    require_card(cli, dashboard, "patch")

    latest = batch.latest_release
    release_branch = batch.release_branch
    if latest is None or release_branch is None:
        # require_card has already rejected this
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    if commit is not None:
        selected = unwrap_http(
            cli.client.get_latest_commit(owner=project.owner, repo=project.repo, branch=commit)
        )
        branch_commits = unwrap_http(
            cli.client.list_recent_commits(
                owner=project.owner, repo=project.repo, branch=release_branch.name
            )
        )
        if is_commit_patched(branch_commits, selected.sha):
            exit_release(
                f"{selected.short_sha} is already on {release_branch.name}",
                code=ErrorCode.USER_ERROR,
            )
    else:
        selected = _pick_commit(
            cli,
            project=project,
            default_branch=batch.repository.default_branch,
            release_branch=release_branch.name,
        )

    bumped = get_bumped_tag(tag=latest.tag_name, project=project)
    if isinstance(bumped, Err):
        fail(cli, bumped.error)
    bumped_tag, _ = bumped.value

    cli.console.print(f"commit: {selected.short_sha} {selected.title}")
    cli.console.print(f"{latest.tag_name} -> {bumped_tag} on {release_branch.name}")
    confirm(f"Patch {release_branch.name} with {selected.short_sha}?", yes=yes)
    user = current_user(cli)

    result = run_patch(
        client=cli.client,
        project=project,
        latest_release=latest,
        release_branch_name=release_branch.name,
        selected_commit=selected,
        user=user,
        steps=step_log(cli),
    )
    if isinstance(result, Err):
        fail(cli, result.error)

    cli.console.success(f"{result.value.previous_tag} -> {result.value.patched_tag}")
    cli.console.link(result.value.updated_release_url)
