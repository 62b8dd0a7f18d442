"""Result type for explicit error handling.

Every GitHub call and every release step returns a ``Result`` instead of
raising. A chain of steps is written as a series of early returns:

    branch = client.create_release_branch(...)
    if isinstance(branch, Err):
        return branch
    tag = client.create_tag_object(..., object_sha=branch.value)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """A successful outcome carrying ``value``."""

    value: T


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """A failed outcome carrying ``error``."""

    error: E


Result: TypeAlias = Ok[T] | Err[E]
