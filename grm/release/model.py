from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from grm.github.model import Branch, Release, Repository

VersioningStrategy = Literal["semver", "calver"]
SemverBumpLevel = Literal["major", "minor"]
TagPrefix = Literal["rc", "version"]

VERSIONING_STRATEGIES: tuple[VersioningStrategy, ...] = ("semver", "calver")


@dataclass(frozen=True, slots=True)
class Project:
    """The repository a release flow targets; fixed for the duration of a flow."""

    owner: str
    repo: str
    versioning_strategy: VersioningStrategy

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.repo}"


@dataclass(frozen=True, slots=True)
class SemverTagParts:
    prefix: TagPrefix
    major: int
    minor: int
    patch: int

    @property
    def version(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


@dataclass(frozen=True, slots=True)
class CalverTagParts:
    prefix: TagPrefix
    calver: str  # YYYY.MM.DD
    patch: int

    @property
    def version(self) -> str:
        return f"{self.calver}_{self.patch}"


TagParts = SemverTagParts | CalverTagParts


@dataclass(frozen=True, slots=True)
class RcInfo:
    """Names for the next release candidate."""

    rc_branch: str
    rc_release_tag: str
    release_name: str


@dataclass(frozen=True, slots=True)
class GitBatchInfo:
    """Everything a dashboard pass needs, fetched fresh."""

    repository: Repository
    latest_release: Release | None
    release_branch: Branch | None


@dataclass(frozen=True, slots=True)
class CreateRcResult:
    comparison_url: str
    created_tag: str
    github_release_name: str | None
    github_release_url: str
    previous_tag: str | None


@dataclass(frozen=True, slots=True)
class PatchResult:
    updated_release_name: str | None
    updated_release_url: str
    previous_tag: str
    patched_tag: str
    patch_commit_message: str
    patch_commit_url: str


@dataclass(frozen=True, slots=True)
class PromoteResult:
    github_release_url: str
    github_release_name: str | None
    previous_tag_url: str
    previous_tag: str
    updated_tag_url: str
    updated_tag: str
