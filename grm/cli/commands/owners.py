from __future__ import annotations

import typer

from grm.cli.commands.common import global_options, unwrap_http
from grm.cli.context import build_context


def owners(ctx: typer.Context) -> None:
    """List the authenticated user and the organizations they belong to."""
    cli = build_context(global_options(ctx), need_project=False)
    user = unwrap_http(cli.client.get_user())
    orgs = unwrap_http(cli.client.list_owners())
    cli.console.print(user.username)
    for org in orgs:
        cli.console.print(org)


def repos(
    ctx: typer.Context,
    owner: str | None = typer.Option(
        None, "--owner", help="User or organization (default: the configured owner)"
    ),
) -> None:
    """List repositories of an owner."""
    options = global_options(ctx)
    cli = build_context(options, need_project=False)
    target = owner or options.owner or cli.config.project.owner
    if target is None:
        target = unwrap_http(cli.client.get_user()).username
    for name in unwrap_http(cli.client.list_repositories(owner=target)):
        cli.console.print(f"{target}/{name}")
