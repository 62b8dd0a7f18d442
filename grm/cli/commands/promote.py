from __future__ import annotations

import typer

from grm.cli.commands.common import (
    confirm,
    fail,
    global_options,
    load_dashboard,
    require_card,
    step_log,
)
from grm.cli.context import build_context
from grm.core.errors import ErrorCode
from grm.core.result import Err
from grm.release.planner import get_promoted_tag
from grm.release.promote import promote_rc


def promote(
    ctx: typer.Context,
    version: str | None = typer.Option(
        None, "--version", help="Tag to promote to (default: rc- replaced by version-)"
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """Promote the latest release candidate to a release."""
    cli = build_context(global_options(ctx))
    project = cli.require_project()
    batch, dashboard = load_dashboard(cli, project)
    require_card(cli, dashboard, "promote_rc")

    rc_release = batch.latest_release
    if rc_release is None:
        # require_card has already rejected this
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    target = version
    if target is None:
        promoted = get_promoted_tag(tag=rc_release.tag_name, project=project)
        if isinstance(promoted, Err):
            fail(cli, promoted.error)
        target = promoted.value

    confirm(f"Promote {rc_release.tag_name} to {target}?", yes=yes)

    result = promote_rc(
        client=cli.client,
        project=project,
        rc_release=rc_release,
        steps=step_log(cli),
        release_version=target,
    )
    if isinstance(result, Err):
        fail(cli, result.error)

    cli.console.success(f"{result.value.previous_tag} -> {result.value.updated_tag}")
    cli.console.link(result.value.github_release_url)
