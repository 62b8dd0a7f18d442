from __future__ import annotations

import typer

from grm.cli.commands.common import fail, global_options, load_dashboard, require_feature
from grm.cli.context import build_context
from grm.output.console import Style


def info(ctx: typer.Context) -> None:
    """Show the latest release, its branch, and which actions are available."""
    cli = build_context(global_options(ctx))
    require_feature(cli, "info")
    project = cli.require_project()
    batch, dashboard = load_dashboard(cli, project)
    console = cli.console

    console.header(f"{project.slug} ({project.versioning_strategy})")
    console.print(f"default branch: {batch.repository.default_branch}", Style.DIM)

    latest = batch.latest_release
    if latest is not None:
        kind = "release candidate" if latest.prerelease else "release"
        console.print(f"latest {kind}: {latest.name or latest.tag_name} ({latest.tag_name})")
        console.link(latest.html_url)
    if batch.release_branch is not None:
        console.print(f"release branch: {batch.release_branch.name}")

    if dashboard.alert is not None:
        fail(cli, dashboard.alert)

    for note in dashboard.notes:
        console.info(note)

    console.newline()
    for card in dashboard.cards:
        if card.available:
            console.success(card.card)
        else:
            console.print(f"-- {card.card}: {card.reason}", Style.DIM)
