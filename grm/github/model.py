from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class GitHubUser:
    username: str
    email: str | None


@dataclass(frozen=True, slots=True)
class Repository:
    name: str
    default_branch: str
    push_permissions: bool


@dataclass(frozen=True, slots=True)
class Release:
    id: int
    tag_name: str
    target_commitish: str
    prerelease: bool
    html_url: str
    body: str | None = None
    name: str | None = None
    published_at: str | None = None


@dataclass(frozen=True, slots=True)
class Commit:
    sha: str
    html_url: str
    message: str
    author_login: str | None = None
    author_html_url: str | None = None
    first_parent_sha: str | None = None

    @property
    def short_sha(self) -> str:
        return self.sha[:7]

    @property
    def title(self) -> str:
        return self.message.splitlines()[0].strip() if self.message else ""


@dataclass(frozen=True, slots=True)
class Branch:
    """A release branch as seen by the Git Data API."""

    name: str
    html_url: str
    head_sha: str
    tree_sha: str


@dataclass(frozen=True, slots=True)
class TagObject:
    tag_name: str
    sha: str


@dataclass(frozen=True, slots=True)
class Comparison:
    html_url: str
    ahead_by: int


@dataclass(frozen=True, slots=True)
class MergeResult:
    html_url: str
    message: str
    tree_sha: str


@dataclass(frozen=True, slots=True)
class CreatedCommit:
    sha: str
    message: str


@dataclass(frozen=True, slots=True)
class UpdatedRef:
    ref: str
    sha: str


@dataclass(frozen=True, slots=True)
class TagRef:
    """An entry of ``refs/tags``; ``type`` is "tag" for annotated tags, "commit" otherwise."""

    tag_name: str
    sha: str
    type: str


@dataclass(frozen=True, slots=True)
class AnnotatedTag:
    date: str
    username: str | None
    user_email: str | None
