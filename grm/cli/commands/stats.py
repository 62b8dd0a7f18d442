from __future__ import annotations

import typer

from grm.cli.commands.common import fail, global_options, require_feature, unwrap_http
from grm.cli.context import build_context
from grm.core.result import Err
from grm.output.console import Style
from grm.release.stats import get_release_stats, get_release_time


def stats(
    ctx: typer.Context,
    time: bool = typer.Option(
        False, "--time", help="Also fetch tag dates and show how long each release took"
    ),
    limit: int = typer.Option(10, "--limit", help="Number of release lines to show"),
) -> None:
    """List release lines with their candidates and patches."""
    cli = build_context(global_options(ctx))
    require_feature(cli, "stats")
    project = cli.require_project()
    console = cli.console

    releases = unwrap_http(cli.client.list_releases(owner=project.owner, repo=project.repo))
    tags = unwrap_http(cli.client.list_tags(owner=project.owner, repo=project.repo))
    report = get_release_stats(releases=releases, tags=tags, project=project)

    console.header(f"Releases of {project.slug}")
    for entry in list(report.releases.values())[:limit]:
        console.print(f"{entry.base_version}  ({entry.created_at or 'unpublished'})")
        candidates = ", ".join(t.tag_name for t in entry.candidates) or "-"
        versions = ", ".join(t.tag_name for t in entry.versions) or "-"
        console.print(f"  candidates: {candidates}", Style.DIM)
        console.print(f"  versions:   {versions}", Style.DIM)
        if time:
            timing = get_release_time(client=cli.client, project=project, entry=entry)
            if isinstance(timing, Err):
                fail(cli, timing.error)
            duration = timing.value.duration
            console.print(f"  took:       {duration if duration is not None else 'n/a'}", Style.DIM)

    if report.unmapped_releases:
        console.warning(
            f"{len(report.unmapped_releases)} release(s) do not follow "
            f"{project.versioning_strategy}: {', '.join(report.unmapped_releases)}"
        )
    if report.unmapped_tags:
        console.print(f"{len(report.unmapped_tags)} tag(s) not attached to a release", Style.DIM)
