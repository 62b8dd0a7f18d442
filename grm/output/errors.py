"""Error presentation utilities.

Centralized error formatting and exit code mapping for consistent UX.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from grm.core.errors import ErrorCode
from grm.output.console import Style
from grm.release.errors import ReleaseError

if TYPE_CHECKING:
    from grm.output.console import ConsoleProtocol

__all__ = ["print_release_error", "release_error_exit_code"]


def print_release_error(error: ReleaseError, console: ConsoleProtocol) -> None:
    """Print a release error as an alert, with its hint underneath."""
    match error.kind:
        case "versioning_mismatch" | "not_prerelease":
            console.warning(error.message)
        case _:
            console.error(error.message)
    if error.hint:
        console.print(f"hint: {error.hint}", Style.DIM)


def release_error_exit_code(error: ReleaseError) -> int:
    match error.kind:
        case "auth_required" | "permission_denied":
            return int(ErrorCode.ENV_ERROR)
        case "reference_exists":
            return int(ErrorCode.CONFLICT_ERROR)
        case "api_error":
            return int(ErrorCode.NETWORK_ERROR)
        case _:
            return int(ErrorCode.USER_ERROR)
