from __future__ import annotations

from pathlib import Path

import typer

from grm import __version__
from grm.cli.commands.create_rc import create_rc
from grm.cli.commands.info import info
from grm.cli.commands.owners import owners, repos
from grm.cli.commands.patch import patch
from grm.cli.commands.promote import promote
from grm.cli.commands.stats import stats
from grm.cli.context import GlobalOptions


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# Commands
app.command()(info)
app.command("create-rc")(create_rc)
app.command()(promote)
app.command()(patch)
app.command()(stats)
app.command()(owners)
app.command()(repos)


@app.callback(invoke_without_command=True)
def _main(  # pyright: ignore[reportUnusedFunction]
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
    config: Path | None = typer.Option(
        None,
        "--config",
        help="Config file (default: ./grm.toml when present)",
    ),
    owner: str | None = typer.Option(None, "--owner", help="Repository owner"),
    repo: str | None = typer.Option(None, "--repo", help="Repository name"),
    strategy: str | None = typer.Option(
        None, "--strategy", help="Versioning strategy: semver|calver"
    ),
) -> None:
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(code=0)

    ctx.obj = GlobalOptions(
        config_path=config,
        owner=owner,
        repo=repo,
        versioning_strategy=strategy,
    )


def main() -> None:
    app()
