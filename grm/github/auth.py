"""GitHub token resolution.

Tokens are never issued here: they come from the environment or are borrowed
from an already authenticated GitHub CLI.
"""

from __future__ import annotations

import os
import shutil
from collections.abc import Mapping
from dataclasses import dataclass

from grm.core.result import Err, Ok, Result
from grm.github.timeouts import GH_TOKEN_TIMEOUT_SECONDS
from grm.platform.process import run as run_process

TOKEN_ENV_VARS = ("GITHUB_TOKEN", "GH_TOKEN")


@dataclass(frozen=True, slots=True)
class AuthError:
    message: str
    hint: str | None = None


def resolve_token(
    *, host: str = "github.com", env: Mapping[str, str] | None = None
) -> Result[str, AuthError]:
    """Find a token: ``GITHUB_TOKEN``, then ``GH_TOKEN``, then ``gh auth token``."""
    environ = os.environ if env is None else env
    for name in TOKEN_ENV_VARS:
        value = environ.get(name, "").strip()
        if value:
            return Ok(value)

    missing = AuthError(
        message="GitHub token required",
        hint="Set GITHUB_TOKEN or run: gh auth login",
    )
    if shutil.which("gh") is None:
        return Err(missing)

    result = run_process(
        ["gh", "auth", "token", "--hostname", host], timeout=GH_TOKEN_TIMEOUT_SECONDS
    )
    if isinstance(result, Err):
        return Err(missing)
    token = result.value.strip()
    if not token:
        return Err(missing)
    return Ok(token)
