"""GitHub release manager: release candidates, patches and promotions over the GitHub API."""

__version__ = "0.1.0"
