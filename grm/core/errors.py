"""Error codes for CLI exit status.

The numeric values are process exit codes and should remain stable:
- 0: Success
- 1: User error (bad input, invalid tag, versioning mismatch)
- 2: Environment error (missing token, missing permissions)
- 3: Conflict (branch or tag already exists on the remote)
- 4: Network error (GitHub API failure)
- 5: I/O error (config file unreadable)
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands."""

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    CONFLICT_ERROR = 3
    NETWORK_ERROR = 4
    IO_ERROR = 5

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK

    @property
    def is_error(self) -> bool:
        return self != ErrorCode.OK
