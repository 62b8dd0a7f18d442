"""Error types for the release flows."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from grm.github.http import HttpError

ReleaseErrorKind = Literal[
    "auth_required",
    "permission_denied",
    "invalid_input",
    "invalid_tag",
    "versioning_mismatch",
    "reference_exists",
    "not_prerelease",
    "api_error",
    "callback_failed",
]

# GitHub's message when creating a ref that is already there.
REFERENCE_EXISTS = "Reference already exists"


@dataclass(frozen=True, slots=True)
class ReleaseError:
    """Canonical release error payload, rendered by the CLI as an alert."""

    kind: ReleaseErrorKind
    message: str
    hint: str | None = None

    def pretty(self) -> str:
        if self.hint:
            return f"{self.message} (hint: {self.hint})"
        return self.message


def api_error(error: HttpError) -> ReleaseError:
    """Pass a transport error through with GitHub's own message.

    A 401 (rejected token) becomes ``auth_required``.
    """
    if error.status == 401:
        return ReleaseError(
            kind="auth_required",
            message=error.message,
            hint="Check GITHUB_TOKEN or run: gh auth login",
        )
    return ReleaseError(kind="api_error", message=error.message, hint=error.url)


def is_reference_exists(error: HttpError) -> bool:
    return error.message == REFERENCE_EXISTS
