from __future__ import annotations

from typing import Literal

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
)
from grm.cli.context import build_context
from grm.core.errors import ErrorCode
from grm.core.result import Err
from grm.output.console import Style
from grm.release.create_rc import create_rc as run_create_rc
from grm.release.planner import get_rc_info


def create_rc(
    ctx: typer.Context,
    bump: str = typer.Option("minor", "--bump", help="Semver bump: minor|major"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print the plan and exit"),
) -> None:
    """Cut a release branch from the default branch and open a release candidate."""
    level: Literal["minor", "major"]
    if bump == "minor":
        level = "minor"
    elif bump == "major":
        level = "major"
    else:
        exit_release(f"invalid --bump: {bump} (expected minor|major)", code=ErrorCode.USER_ERROR)

    cli = build_context(global_options(ctx))
    project = cli.require_project()
    batch, dashboard = load_dashboard(cli, project)
    require_card(cli, dashboard, "create_rc")

    rc_info = get_rc_info(latest_release=batch.latest_release, project=project, bump_level=level)
    if isinstance(rc_info, Err):
        fail(cli, rc_info.error)

    console = cli.console
    previous = batch.latest_release.tag_name if batch.latest_release else "none"
    console.header(f"Release candidate for {project.slug}")
    console.print(f"previous release: {previous}", Style.DIM)
    console.print(f"branch: {rc_info.value.rc_branch}")
    console.print(f"tag:    {rc_info.value.rc_release_tag}")
    console.print(f"name:   {rc_info.value.release_name}")
    if dry_run:
        return

    confirm(f"Create {rc_info.value.rc_release_tag}?", yes=yes)
    user = current_user(cli)

    result = run_create_rc(
        client=cli.client,
        project=project,
        default_branch=batch.repository.default_branch,
        latest_release=batch.latest_release,
        rc_info=rc_info.value,
        user=user,
        steps=step_log(cli),
    )
    if isinstance(result, Err):
        fail(cli, result.error)

    console.success(f"Created {result.value.created_tag}")
    console.link(result.value.github_release_url)
