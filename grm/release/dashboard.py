"""What the user can do right now.

``get_git_batch_info`` fetches the repository, its latest release and that
release's branch. ``resolve_dashboard`` turns that snapshot into either one
blocking alert or the list of feature cards to show.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from grm.core.config import FeaturesConfig
from grm.core.result import Err, Ok, Result
from grm.github.client import GitHubClient
from grm.release.errors import ReleaseError, api_error
from grm.release.model import GitBatchInfo, Project
from grm.release.planner import validate_tag_name, versioning_strategy_matches

CardName = Literal["info", "create_rc", "promote_rc", "patch"]

CARD_ORDER: tuple[CardName, ...] = ("info", "create_rc", "promote_rc", "patch")


@dataclass(frozen=True, slots=True)
class CardState:
    card: CardName
    available: bool
    reason: str | None = None


@dataclass(frozen=True, slots=True)
class Dashboard:
    """Either ``alert`` is set and nothing may run, or ``cards`` lists what to show."""

    alert: ReleaseError | None
    notes: tuple[str, ...]
    cards: tuple[CardState, ...]

    @property
    def blocked(self) -> bool:
        return self.alert is not None

    def card(self, name: CardName) -> CardState | None:
        for state in self.cards:
            if state.card == name:
                return state
        return None


def get_git_batch_info(
    *, client: GitHubClient, project: Project
) -> Result[GitBatchInfo, ReleaseError]:
    repository = client.get_repository(owner=project.owner, repo=project.repo)
    if isinstance(repository, Err):
        return Err(api_error(repository.error))

    latest_release = client.get_latest_release(owner=project.owner, repo=project.repo)
    if isinstance(latest_release, Err):
        return Err(api_error(latest_release.error))

    if latest_release.value is None:
        return Ok(
            GitBatchInfo(repository=repository.value, latest_release=None, release_branch=None)
        )

    release_branch = client.get_branch(
        owner=project.owner, repo=project.repo, branch=latest_release.value.target_commitish
    )
    if isinstance(release_branch, Err):
        if release_branch.error.status != 404:
            return Err(api_error(release_branch.error))
        # The release points at a branch that has since been deleted.
        return Ok(
            GitBatchInfo(
                repository=repository.value,
                latest_release=latest_release.value,
                release_branch=None,
            )
        )

    return Ok(
        GitBatchInfo(
            repository=repository.value,
            latest_release=latest_release.value,
            release_branch=release_branch.value,
        )
    )


def _card_state(name: CardName, batch: GitBatchInfo) -> CardState:
    latest = batch.latest_release
    match name:
        case "info" | "create_rc":
            return CardState(card=name, available=True)
        case "promote_rc":
            if latest is None:
                return CardState(card=name, available=False, reason="No release to promote")
            if not latest.prerelease:
                return CardState(
                    card=name,
                    available=False,
                    reason="Latest GitHub release is not a Release Candidate",
                )
            return CardState(card=name, available=True)
        case "patch":
            if latest is None:
                return CardState(card=name, available=False, reason="No release to patch")
            if batch.release_branch is None:
                return CardState(card=name, available=False, reason="No release branch to patch")
            return CardState(card=name, available=True)
        case _:
            raise AssertionError(f"unexpected card: {name}")


def resolve_dashboard(
    *,
    batch: GitBatchInfo,
    project: Project,
    features: FeaturesConfig | None = None,
) -> Dashboard:
    features = features or FeaturesConfig()
    latest_tag = batch.latest_release.tag_name if batch.latest_release else None

    if not batch.repository.push_permissions:
        return Dashboard(
            alert=ReleaseError(
                kind="permission_denied",
                message=f'You lack push permissions for repository "{project.slug}"',
            ),
            notes=(),
            cards=(),
        )

    valid = validate_tag_name(latest_tag)
    if isinstance(valid, Err):
        return Dashboard(alert=valid.error, notes=(), cards=())

    if not versioning_strategy_matches(latest_tag, project.versioning_strategy):
        return Dashboard(
            alert=ReleaseError(
                kind="versioning_mismatch",
                message=(
                    f"Versioning mismatch, expected {project.versioning_strategy} version, "
                    f'got "{latest_tag}"'
                ),
            ),
            notes=(),
            cards=(),
        )

    notes: list[str] = []
    if batch.latest_release is None:
        notes.append("This repository doesn't have any releases yet")
    if batch.release_branch is None:
        notes.append("This repository doesn't have any release branches")

    cards = tuple(
        _card_state(name, batch) for name in CARD_ORDER if not features.is_omitted(name)
    )
    return Dashboard(alert=None, notes=tuple(notes), cards=cards)
