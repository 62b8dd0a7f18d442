from __future__ import annotations

from pathlib import Path

import pytest
import typer

import grm.cli.context as context_mod
from grm.cli.context import GlobalOptions, build_context
from grm.core.errors import ErrorCode
from grm.core.result import Err, Ok, Result
from grm.github.auth import AuthError
from grm.github.http import MockHttpClient
from grm.output.console import MockConsole


def _patch_env(monkeypatch: pytest.MonkeyPatch, token: Result[str, AuthError] = Ok("t")) -> list[str]:
    hosts: list[str] = []

    def fake_resolve_token(*, host: str = "github.com") -> Result[str, AuthError]:
        hosts.append(host)
        return token

    monkeypatch.setattr(context_mod, "resolve_token", fake_resolve_token)
    monkeypatch.setattr(context_mod, "make_http_client", MockHttpClient)
    monkeypatch.setattr(context_mod, "make_console", MockConsole)
    return hosts


def test_flags_override_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    hosts = _patch_env(monkeypatch)
    config = tmp_path / "grm.toml"
    config.write_text(
        '[[integrations.github]]\nhost = "ghe.example.com"\n\n'
        '[project]\nowner = "acme"\nrepo = "web"\nversioning_strategy = "calver"\n',
        encoding="utf-8",
    )

    ctx = build_context(GlobalOptions(config_path=config, repo="api"))

    assert ctx.project is not None
    assert ctx.project.slug == "acme/api"
    assert ctx.project.versioning_strategy == "calver"
    assert ctx.client.host == "ghe.example.com"
    assert ctx.client.api_base_url == "https://ghe.example.com/api/v3"
    assert hosts == ["ghe.example.com"]


def test_missing_project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _patch_env(monkeypatch)
    monkeypatch.chdir(tmp_path)
    with pytest.raises(typer.Exit) as exc:
        build_context(GlobalOptions())
    assert exc.value.exit_code == int(ErrorCode.USER_ERROR)


def test_project_not_needed(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _patch_env(monkeypatch)
    monkeypatch.chdir(tmp_path)
    ctx = build_context(GlobalOptions(), need_project=False)
    assert ctx.project is None


def test_missing_token(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    _patch_env(monkeypatch, Err(AuthError(message="GitHub token required")))
    monkeypatch.chdir(tmp_path)
    with pytest.raises(typer.Exit) as exc:
        build_context(GlobalOptions(owner="acme", repo="web"))
    assert exc.value.exit_code == int(ErrorCode.ENV_ERROR)


def test_explicit_missing_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _patch_env(monkeypatch)
    with pytest.raises(typer.Exit) as exc:
        build_context(GlobalOptions(config_path=tmp_path / "nope.toml", owner="acme", repo="web"))
    assert exc.value.exit_code == int(ErrorCode.IO_ERROR)
