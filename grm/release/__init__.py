"""Release flows: create release candidate, patch, promote, and their planning."""

from grm.release.create_rc import create_rc
from grm.release.dashboard import get_git_batch_info, resolve_dashboard
from grm.release.errors import ReleaseError
from grm.release.model import Project
from grm.release.patch import patch
from grm.release.promote import promote_rc
from grm.release.steps import ResponseStep, StepLog

__all__ = [
    "Project",
    "ReleaseError",
    "ResponseStep",
    "StepLog",
    "create_rc",
    "get_git_batch_info",
    "patch",
    "promote_rc",
    "resolve_dashboard",
]
