"""Typed wrapper around the GitHub REST and Git Data APIs.

Each method issues exactly one logical request (list endpoints follow
pagination) and narrows the JSON payload into a dataclass from
``grm.github.model``. Nothing is cached: reads send a cache-busting header so
every command sees the repository as it is right now.
"""

from __future__ import annotations

import urllib.parse
from datetime import UTC, datetime

from grm.core.result import Err, Ok, Result
from grm.core.structured import (
    StrDict,
    as_obj_list,
    as_str_dict,
    get_bool,
    get_int,
    get_list,
    get_raw_str,
    get_str,
    get_table,
)
from grm.github.http import HttpClient, HttpError, JsonBody
from grm.github.model import (
    AnnotatedTag,
    Branch,
    Commit,
    Comparison,
    CreatedCommit,
    GitHubUser,
    MergeResult,
    Release,
    Repository,
    TagObject,
    TagRef,
    UpdatedRef,
)
from grm.github.timeouts import PER_PAGE

__all__ = ["GitHubClient", "TAG_MESSAGE"]

TAG_MESSAGE = "Tag generated by grm, the GitHub release manager"

# An empty If-None-Match defeats GitHub's conditional-request caching.
_DISABLE_CACHE = {"If-None-Match": ""}


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _unexpected(url: str, what: str) -> Err[HttpError]:
    return Err(HttpError(url=url, status=0, message=f"unexpected {what} payload"))


def _parse_release(d: StrDict) -> Release | None:
    release_id = get_int(d, "id")
    tag_name = get_str(d, "tag_name")
    html_url = get_str(d, "html_url")
    if release_id is None or tag_name is None or html_url is None:
        return None
    return Release(
        id=release_id,
        tag_name=tag_name,
        target_commitish=get_str(d, "target_commitish") or "",
        prerelease=get_bool(d, "prerelease") is True,
        html_url=html_url,
        body=get_raw_str(d, "body"),
        name=get_str(d, "name"),
        published_at=get_str(d, "published_at"),
    )


def _parse_commit(d: StrDict) -> Commit | None:
    sha = get_str(d, "sha")
    commit_tbl = get_table(d, "commit")
    if sha is None or commit_tbl is None:
        return None

    author = get_table(d, "author") or {}
    first_parent_sha: str | None = None
    parents = get_list(d, "parents") or []
    if parents:
        first = as_str_dict(parents[0])
        if first is not None:
            first_parent_sha = get_str(first, "sha")

    return Commit(
        sha=sha,
        html_url=get_str(d, "html_url") or "",
        message=get_raw_str(commit_tbl, "message") or "",
        author_login=get_str(author, "login"),
        author_html_url=get_str(author, "html_url"),
        first_parent_sha=first_parent_sha,
    )


class GitHubClient:
    """Client for one GitHub host, authenticated with a single token."""

    def __init__(
        self,
        http: HttpClient,
        *,
        token: str | None,
        api_base_url: str = "https://api.github.com",
        host: str = "github.com",
    ) -> None:
        self._http = http
        self._token = token
        self.api_base_url = api_base_url.rstrip("/")
        self.host = host

    # ------------------------------------------------------------------
    # Transport helpers

    def _headers(self, *, read: bool) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        if read:
            headers.update(_DISABLE_CACHE)
        return headers

    def _url(self, path: str, query: dict[str, str | int] | None = None) -> str:
        url = f"{self.api_base_url}{path}"
        if query:
            url = f"{url}?{urllib.parse.urlencode(query)}"
        return url

    def _get(self, path: str, query: dict[str, str | int] | None = None) -> Result[object, HttpError]:
        return self._http.request("GET", self._url(path, query), headers=self._headers(read=True))

    def _send(self, method: str, path: str, body: JsonBody) -> Result[object, HttpError]:
        return self._http.request(
            method, self._url(path), headers=self._headers(read=False), body=body
        )

    def _get_object(
        self, path: str, what: str, query: dict[str, str | int] | None = None
    ) -> Result[StrDict, HttpError]:
        result = self._get(path, query)
        if isinstance(result, Err):
            return result
        data = as_str_dict(result.value)
        if data is None:
            return _unexpected(self._url(path), what)
        return Ok(data)

    def _send_object(
        self, method: str, path: str, body: JsonBody, what: str
    ) -> Result[StrDict, HttpError]:
        result = self._send(method, path, body)
        if isinstance(result, Err):
            return result
        data = as_str_dict(result.value)
        if data is None:
            return _unexpected(self._url(path), what)
        return Ok(data)

    def _paginate(
        self, path: str, query: dict[str, str | int] | None = None
    ) -> Result[list[StrDict], HttpError]:
        """Collect every page of a list endpoint.

        Stops at the first page shorter than ``per_page``.
        """
        items: list[StrDict] = []
        page = 1
        while True:
            result = self._get(path, {**(query or {}), "per_page": PER_PAGE, "page": page})
            if isinstance(result, Err):
                return result
            raw = as_obj_list(result.value)
            if raw is None:
                return _unexpected(self._url(path), "list")
            for item in raw:
                d = as_str_dict(item)
                if d is not None:
                    items.append(d)
            if len(raw) < PER_PAGE:
                return Ok(items)
            page += 1

    @staticmethod
    def _repo_path(owner: str, repo: str) -> str:
        return f"/repos/{urllib.parse.quote(owner)}/{urllib.parse.quote(repo)}"

    # ------------------------------------------------------------------
    # Users, owners and repositories

    def get_user(self) -> Result[GitHubUser, HttpError]:
        result = self._get_object("/user", "user")
        if isinstance(result, Err):
            return result
        login = get_str(result.value, "login")
        if login is None:
            return _unexpected(self._url("/user"), "user")
        return Ok(GitHubUser(username=login, email=get_str(result.value, "email")))

    def list_owners(self) -> Result[list[str], HttpError]:
        """Organizations the authenticated user belongs to."""
        result = self._paginate("/user/orgs")
        if isinstance(result, Err):
            return result
        return Ok([login for org in result.value if (login := get_str(org, "login"))])

    def list_repositories(self, *, owner: str) -> Result[list[str], HttpError]:
        """Repository names for an organization, or for a user when ``owner`` is not an org."""
        result = self._paginate(f"/orgs/{urllib.parse.quote(owner)}/repos")
        if isinstance(result, Err):
            if result.error.status != 404:
                return result
            result = self._paginate(f"/users/{urllib.parse.quote(owner)}/repos")
            if isinstance(result, Err):
                return result
        return Ok([name for repo in result.value if (name := get_str(repo, "name"))])

    def get_repository(self, *, owner: str, repo: str) -> Result[Repository, HttpError]:
        path = self._repo_path(owner, repo)
        result = self._get_object(path, "repository")
        if isinstance(result, Err):
            return result
        data = result.value
        name = get_str(data, "name")
        default_branch = get_str(data, "default_branch")
        if name is None or default_branch is None:
            return _unexpected(self._url(path), "repository")
        permissions = get_table(data, "permissions") or {}
        return Ok(
            Repository(
                name=name,
                default_branch=default_branch,
                push_permissions=get_bool(permissions, "push") is True,
            )
        )

    # ------------------------------------------------------------------
    # Commits and branches

    def list_recent_commits(
        self, *, owner: str, repo: str, branch: str | None = None
    ) -> Result[list[Commit], HttpError]:
        """One page of the most recent commits, optionally from ``branch``."""
        path = f"{self._repo_path(owner, repo)}/commits"
        result = self._get(path, {"sha": branch} if branch else None)
        if isinstance(result, Err):
            return result
        raw = as_obj_list(result.value)
        if raw is None:
            return _unexpected(self._url(path), "commits")
        out: list[Commit] = []
        for item in raw:
            d = as_str_dict(item)
            if d is None:
                continue
            commit = _parse_commit(d)
            if commit is not None:
                out.append(commit)
        return Ok(out)

    def get_latest_commit(self, *, owner: str, repo: str, branch: str) -> Result[Commit, HttpError]:
        path = f"{self._repo_path(owner, repo)}/commits/{urllib.parse.quote(branch, safe='/')}"
        result = self._get_object(path, "commit")
        if isinstance(result, Err):
            return result
        commit = _parse_commit(result.value)
        if commit is None:
            return _unexpected(self._url(path), "commit")
        return Ok(commit)

    def get_commit_date(self, *, owner: str, repo: str, ref: str) -> Result[str | None, HttpError]:
        """Committer date of ``ref``."""
        path = f"{self._repo_path(owner, repo)}/commits/{urllib.parse.quote(ref, safe='/')}"
        result = self._get_object(path, "commit")
        if isinstance(result, Err):
            return result
        commit_tbl = get_table(result.value, "commit") or {}
        committer = get_table(commit_tbl, "committer") or {}
        return Ok(get_str(committer, "date"))

    def get_branch(self, *, owner: str, repo: str, branch: str) -> Result[Branch, HttpError]:
        path = f"{self._repo_path(owner, repo)}/branches/{urllib.parse.quote(branch, safe='/')}"
        result = self._get_object(path, "branch")
        if isinstance(result, Err):
            return result
        data = result.value
        name = get_str(data, "name")
        commit = get_table(data, "commit") or {}
        head_sha = get_str(commit, "sha")
        tree = get_table(get_table(commit, "commit") or {}, "tree") or {}
        tree_sha = get_str(tree, "sha")
        links = get_table(data, "_links") or {}
        if name is None or head_sha is None or tree_sha is None:
            return _unexpected(self._url(path), "branch")
        return Ok(
            Branch(
                name=name,
                html_url=get_str(links, "html") or "",
                head_sha=head_sha,
                tree_sha=tree_sha,
            )
        )

    def create_commit(
        self, *, owner: str, repo: str, message: str, tree_sha: str, parents: list[str]
    ) -> Result[CreatedCommit, HttpError]:
        path = f"{self._repo_path(owner, repo)}/git/commits"
        result = self._send_object(
            "POST",
            path,
            {"message": message, "tree": tree_sha, "parents": list(parents)},
            "commit",
        )
        if isinstance(result, Err):
            return result
        sha = get_str(result.value, "sha")
        if sha is None:
            return _unexpected(self._url(path), "commit")
        return Ok(CreatedCommit(sha=sha, message=get_raw_str(result.value, "message") or message))

    def force_update_branch(
        self, *, owner: str, repo: str, branch: str, sha: str
    ) -> Result[UpdatedRef, HttpError]:
        """Move ``branch`` to ``sha`` even when it is not a fast-forward."""
        path = f"{self._repo_path(owner, repo)}/git/refs/heads/{urllib.parse.quote(branch, safe='/')}"
        result = self._send_object("PATCH", path, {"sha": sha, "force": True}, "ref")
        if isinstance(result, Err):
            return result
        ref = get_str(result.value, "ref")
        obj = get_table(result.value, "object") or {}
        object_sha = get_str(obj, "sha")
        if ref is None or object_sha is None:
            return _unexpected(self._url(path), "ref")
        return Ok(UpdatedRef(ref=ref, sha=object_sha))

    def merge(self, *, owner: str, repo: str, base: str, head: str) -> Result[MergeResult, HttpError]:
        path = f"{self._repo_path(owner, repo)}/merges"
        result = self._send_object("POST", path, {"base": base, "head": head}, "merge")
        if isinstance(result, Err):
            return result
        commit_tbl = get_table(result.value, "commit") or {}
        tree = get_table(commit_tbl, "tree") or {}
        tree_sha = get_str(tree, "sha")
        if tree_sha is None:
            return _unexpected(self._url(path), "merge")
        return Ok(
            MergeResult(
                html_url=get_str(result.value, "html_url") or "",
                message=get_raw_str(commit_tbl, "message") or "",
                tree_sha=tree_sha,
            )
        )

    def compare(
        self, *, owner: str, repo: str, base: str, head: str
    ) -> Result[Comparison, HttpError]:
        basehead = f"{urllib.parse.quote(base, safe='/')}...{urllib.parse.quote(head, safe='/')}"
        path = f"{self._repo_path(owner, repo)}/compare/{basehead}"
        result = self._get_object(path, "compare")
        if isinstance(result, Err):
            return result
        html_url = get_str(result.value, "html_url")
        ahead_by = get_int(result.value, "ahead_by")
        if html_url is None or ahead_by is None:
            return _unexpected(self._url(path), "compare")
        return Ok(Comparison(html_url=html_url, ahead_by=ahead_by))

    # ------------------------------------------------------------------
    # Refs and tags

    def _create_ref(
        self, *, owner: str, repo: str, ref: str, sha: str
    ) -> Result[StrDict, HttpError]:
        path = f"{self._repo_path(owner, repo)}/git/refs"
        return self._send_object("POST", path, {"ref": ref, "sha": sha}, "ref")

    def create_release_branch(
        self, *, owner: str, repo: str, branch: str, sha: str
    ) -> Result[str, HttpError]:
        """Create ``refs/heads/<branch>`` at ``sha``; returns the branch's object sha."""
        result = self._create_ref(owner=owner, repo=repo, ref=f"refs/heads/{branch}", sha=sha)
        if isinstance(result, Err):
            return result
        object_sha = get_str(get_table(result.value, "object") or {}, "sha")
        if object_sha is None:
            return _unexpected(self._url(f"{self._repo_path(owner, repo)}/git/refs"), "ref")
        return Ok(object_sha)

    def create_tag_object(
        self,
        *,
        owner: str,
        repo: str,
        tag: str,
        object_sha: str,
        tagger: GitHubUser | None = None,
    ) -> Result[TagObject, HttpError]:
        """Create the tag object that backs an annotated tag.

        The tag is not visible until ``create_tag_reference`` points a ref at it.
        """
        body: JsonBody = {
            "tag": tag,
            "message": TAG_MESSAGE,
            "object": object_sha,
            "type": "commit",
        }
        if tagger is not None and tagger.email:
            body["tagger"] = {
                "name": tagger.username,
                "email": tagger.email,
                "date": _utcnow().isoformat(timespec="seconds"),
            }
        path = f"{self._repo_path(owner, repo)}/git/tags"
        result = self._send_object("POST", path, body, "tag")
        if isinstance(result, Err):
            return result
        tag_name = get_str(result.value, "tag")
        sha = get_str(result.value, "sha")
        if tag_name is None or sha is None:
            return _unexpected(self._url(path), "tag")
        return Ok(TagObject(tag_name=tag_name, sha=sha))

    def create_tag_reference(
        self, *, owner: str, repo: str, tag_name: str, tag_sha: str
    ) -> Result[str, HttpError]:
        """Create ``refs/tags/<tag_name>`` pointing at a tag object; returns the ref."""
        result = self._create_ref(owner=owner, repo=repo, ref=f"refs/tags/{tag_name}", sha=tag_sha)
        if isinstance(result, Err):
            return result
        ref = get_str(result.value, "ref")
        if ref is None:
            return _unexpected(self._url(f"{self._repo_path(owner, repo)}/git/refs"), "ref")
        return Ok(ref)

    def list_tags(self, *, owner: str, repo: str) -> Result[list[TagRef], HttpError]:
        result = self._paginate(f"{self._repo_path(owner, repo)}/git/matching-refs/tags")
        if isinstance(result, Err):
            return result
        out: list[TagRef] = []
        for d in result.value:
            ref = get_str(d, "ref")
            obj = get_table(d, "object") or {}
            sha = get_str(obj, "sha")
            if ref is None or sha is None:
                continue
            out.append(
                TagRef(
                    tag_name=ref.removeprefix("refs/tags/"),
                    sha=sha,
                    type=get_str(obj, "type") or "commit",
                )
            )
        return Ok(out)

    def get_tag(self, *, owner: str, repo: str, tag_sha: str) -> Result[AnnotatedTag, HttpError]:
        """Fetch an annotated tag object. Fails for lightweight tags."""
        path = f"{self._repo_path(owner, repo)}/git/tags/{tag_sha}"
        result = self._get_object(path, "tag")
        if isinstance(result, Err):
            return result
        tagger = get_table(result.value, "tagger") or {}
        date = get_str(tagger, "date")
        if date is None:
            return _unexpected(self._url(path), "tag")
        return Ok(
            AnnotatedTag(
                date=date,
                username=get_str(tagger, "name"),
                user_email=get_str(tagger, "email"),
            )
        )

    # ------------------------------------------------------------------
    # Releases

    def get_latest_release(self, *, owner: str, repo: str) -> Result[Release | None, HttpError]:
        """Most recent release (prereleases included), or None when there is none."""
        path = f"{self._repo_path(owner, repo)}/releases"
        result = self._get(path, {"per_page": 1})
        if isinstance(result, Err):
            return result
        raw = as_obj_list(result.value)
        if raw is None:
            return _unexpected(self._url(path), "releases")
        if not raw:
            return Ok(None)
        d = as_str_dict(raw[0])
        release = _parse_release(d) if d is not None else None
        if release is None:
            return _unexpected(self._url(path), "release")
        return Ok(release)

    def list_releases(self, *, owner: str, repo: str) -> Result[list[Release], HttpError]:
        result = self._paginate(f"{self._repo_path(owner, repo)}/releases")
        if isinstance(result, Err):
            return result
        return Ok([r for d in result.value if (r := _parse_release(d)) is not None])

    def create_release(
        self,
        *,
        owner: str,
        repo: str,
        tag_name: str,
        name: str,
        target_commitish: str,
        body: str,
    ) -> Result[Release, HttpError]:
        """Create a prerelease for an existing tag."""
        path = f"{self._repo_path(owner, repo)}/releases"
        result = self._send_object(
            "POST",
            path,
            {
                "tag_name": tag_name,
                "name": name,
                "target_commitish": target_commitish,
                "body": body,
                "prerelease": True,
            },
            "release",
        )
        if isinstance(result, Err):
            return result
        release = _parse_release(result.value)
        if release is None:
            return _unexpected(self._url(path), "release")
        return Ok(release)

    def update_release(
        self,
        *,
        owner: str,
        repo: str,
        release_id: int,
        tag_name: str,
        body: str | None = None,
        prerelease: bool | None = None,
    ) -> Result[Release, HttpError]:
        payload: JsonBody = {"tag_name": tag_name}
        if body is not None:
            payload["body"] = body
        if prerelease is not None:
            payload["prerelease"] = prerelease
        path = f"{self._repo_path(owner, repo)}/releases/{release_id}"
        result = self._send_object("PATCH", path, payload, "release")
        if isinstance(result, Err):
            return result
        release = _parse_release(result.value)
        if release is None:
            return _unexpected(self._url(path), "release")
        return Ok(release)
