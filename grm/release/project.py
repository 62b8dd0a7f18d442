from __future__ import annotations

from typing import cast

from grm.core.result import Err, Ok, Result
from grm.release.errors import ReleaseError
from grm.release.model import VERSIONING_STRATEGIES, Project, VersioningStrategy


def parse_project(
    *, owner: str | None, repo: str | None, versioning_strategy: str | None
) -> Result[Project, ReleaseError]:
    """Build a Project from loosely typed input (config file, CLI flags)."""
    owner = (owner or "").strip()
    repo = (repo or "").strip()
    strategy = (versioning_strategy or "semver").strip().lower()

    if not owner or not repo:
        return Err(
            ReleaseError(
                kind="invalid_input",
                message="project owner and repo are required",
                hint="Pass --owner/--repo or set [project] in grm.toml",
            )
        )
    if "/" in owner or "/" in repo:
        return Err(
            ReleaseError(
                kind="invalid_input",
                message=f"invalid project: {owner}/{repo}",
                hint="owner and repo must not contain '/'",
            )
        )
    if strategy not in VERSIONING_STRATEGIES:
        return Err(
            ReleaseError(
                kind="invalid_input",
                message=f"unknown versioning strategy: {strategy}",
                hint="Expected: semver or calver",
            )
        )

    return Ok(
        Project(owner=owner, repo=repo, versioning_strategy=cast(VersioningStrategy, strategy))
    )
