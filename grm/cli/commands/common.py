from __future__ import annotations

from typing import NoReturn, TypeVar

import typer

from grm.cli.context import CLIContext, GlobalOptions
from grm.core.errors import ErrorCode
from grm.core.result import Err, Result
from grm.github.http import HttpError
from grm.github.model import GitHubUser
from grm.output.console import Style
from grm.output.errors import print_release_error, release_error_exit_code
from grm.release.dashboard import CardName, Dashboard, get_git_batch_info, resolve_dashboard
from grm.release.errors import ReleaseError
from grm.release.model import GitBatchInfo, Project
from grm.release.steps import StepLog, console_step_listener

T = TypeVar("T")


def exit_release(err: str, *, code: ErrorCode) -> NoReturn:
    typer.echo(f"error: {err}", err=True)
    raise typer.Exit(code=int(code))


def global_options(ctx: typer.Context) -> GlobalOptions:
    obj = ctx.obj
    if isinstance(obj, GlobalOptions):
        return obj
    return GlobalOptions()


def fail(ctx: CLIContext, error: ReleaseError) -> NoReturn:
    print_release_error(error, ctx.console)
    raise typer.Exit(code=release_error_exit_code(error))


def unwrap_http(result: Result[T, HttpError]) -> T:
    if isinstance(result, Err):
        exit_release(str(result.error), code=ErrorCode.NETWORK_ERROR)
    return result.value


def confirm(question: str, *, yes: bool) -> None:
    if yes:
        return
    if not typer.confirm(question, default=False):
        exit_release("aborted", code=ErrorCode.USER_ERROR)


def current_user(ctx: CLIContext) -> GitHubUser:
    user = unwrap_http(ctx.client.get_user())
    ctx.console.print(f"github user: {user.username}", Style.DIM)
    return user


def load_dashboard(ctx: CLIContext, project: Project) -> tuple[GitBatchInfo, Dashboard]:
    batch = get_git_batch_info(client=ctx.client, project=project)
    if isinstance(batch, Err):
        fail(ctx, batch.error)
    dashboard = resolve_dashboard(
        batch=batch.value, project=project, features=ctx.config.features
    )
    return batch.value, dashboard


def require_card(ctx: CLIContext, dashboard: Dashboard, name: CardName) -> None:
    """Exit unless the dashboard lets ``name`` run right now."""
    if dashboard.alert is not None:
        fail(ctx, dashboard.alert)
    state = dashboard.card(name)
    if state is None:
        exit_release(f"{name} is disabled in the configuration", code=ErrorCode.USER_ERROR)
    if not state.available:
        exit_release(state.reason or f"{name} is not available", code=ErrorCode.USER_ERROR)


def step_log(ctx: CLIContext) -> StepLog:
    return StepLog(on_step=console_step_listener(ctx.console))


def require_feature(ctx: CLIContext, name: str) -> None:
    if ctx.config.features.is_omitted(name):
        exit_release(f"{name} is disabled in the configuration", code=ErrorCode.USER_ERROR)
