"""Core primitives shared by every layer (results, exit codes, config)."""

from grm.core.errors import ErrorCode
from grm.core.result import Err, Ok, Result

__all__ = ["ErrorCode", "Err", "Ok", "Result"]
