from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from grm.core.config import DEFAULT_CONFIG_FILENAME, Config, load_config
from grm.core.errors import ErrorCode
from grm.core.result import Err
from grm.github.auth import resolve_token
from grm.github.client import GitHubClient
from grm.github.http import HttpClient, UrllibHttpClient
from grm.output.console import ConsoleProtocol, RichConsole, Style
from grm.release.model import Project
from grm.release.project import parse_project


@dataclass(frozen=True, slots=True)
class GlobalOptions:
    """Options given before the command name (``grm --owner acme --repo web info``)."""

    config_path: Path | None = None
    owner: str | None = None
    repo: str | None = None
    versioning_strategy: str | None = None


@dataclass(frozen=True, slots=True)
class CLIContext:
    config: Config
    console: ConsoleProtocol
    client: GitHubClient
    project: Project | None

    def require_project(self) -> Project:
        if self.project is None:
            typer.echo("error: project owner and repo are required", err=True)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))
        return self.project


def make_http_client() -> HttpClient:
    return UrllibHttpClient()


def make_console() -> ConsoleProtocol:
    return RichConsole()


def _load_config(path: Path | None) -> Config:
    explicit = path is not None
    config_path = path if path is not None else Path.cwd() / DEFAULT_CONFIG_FILENAME
    if not explicit and not config_path.exists():
        return Config()

    result = load_config(config_path)
    if isinstance(result, Err):
        typer.echo(f"error: {result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.IO_ERROR))
    return result.value


def build_context(options: GlobalOptions, *, need_project: bool = True) -> CLIContext:
    config = _load_config(options.config_path)
    console = make_console()

    project: Project | None = None
    if need_project:
        project_result = parse_project(
            owner=options.owner or config.project.owner,
            repo=options.repo or config.project.repo,
            versioning_strategy=options.versioning_strategy or config.project.versioning_strategy,
        )
        if isinstance(project_result, Err):
            console.error(project_result.error.message)
            if project_result.error.hint:
                console.print(f"hint: {project_result.error.hint}", Style.DIM)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))
        project = project_result.value

    github = config.github
    token = resolve_token(host=github.host)
    if isinstance(token, Err):
        console.error(token.error.message)
        if token.error.hint:
            console.print(f"hint: {token.error.hint}", Style.DIM)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    client = GitHubClient(
        make_http_client(),
        token=token.value,
        api_base_url=github.api_base_url,
        host=github.host,
    )
    return CLIContext(config=config, console=console, client=client, project=project)
