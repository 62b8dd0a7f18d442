"""Typed configuration loading and access.

The config file (``grm.toml`` by default) looks like:

    [[integrations.github]]
    host = "ghe.example.com"
    api_base_url = "https://ghe.example.com/api/v3"

    [project]
    owner = "acme"
    repo = "web"
    versioning_strategy = "semver"

    [features.patch]
    omit = true

Every section is optional; command-line flags fill in or override the project.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_bool, get_list, get_str, get_table

__all__ = [
    "Config",
    "ConfigError",
    "FeaturesConfig",
    "GitHubIntegrationConfig",
    "ProjectConfig",
    "DEFAULT_CONFIG_FILENAME",
    "DEFAULT_GITHUB_HOST",
    "DEFAULT_GITHUB_API_BASE_URL",
    "FEATURE_NAMES",
    "load_config",
]

DEFAULT_CONFIG_FILENAME = "grm.toml"
DEFAULT_GITHUB_HOST = "github.com"
DEFAULT_GITHUB_API_BASE_URL = "https://api.github.com"

FEATURE_NAMES = ("info", "create_rc", "promote_rc", "patch", "stats")


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class GitHubIntegrationConfig:
    host: str = DEFAULT_GITHUB_HOST
    api_base_url: str = DEFAULT_GITHUB_API_BASE_URL


@dataclass(frozen=True, slots=True)
class ProjectConfig:
    """Project fields as written in the file; validated later by the release layer."""

    owner: str | None = None
    repo: str | None = None
    versioning_strategy: str | None = None


@dataclass(frozen=True, slots=True)
class FeaturesConfig:
    """Per-feature ``omit`` flags."""

    omitted: frozenset[str] = frozenset()

    def is_omitted(self, feature: str) -> bool:
        return feature in self.omitted


def _default_integrations() -> tuple[GitHubIntegrationConfig, ...]:
    return ()


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    integrations: tuple[GitHubIntegrationConfig, ...] = field(
        default_factory=_default_integrations
    )
    project: ProjectConfig = field(default_factory=ProjectConfig)
    features: FeaturesConfig = field(default_factory=FeaturesConfig)

    @property
    def github(self) -> GitHubIntegrationConfig:
        """The GitHub integration to talk to.

        An enterprise host (``ghe.`` prefix) wins over any other entry; with no
        entries at all the public github.com API is used.
        """
        for integration in self.integrations:
            if integration.host.startswith("ghe."):
                return integration
        if self.integrations:
            return self.integrations[0]
        return GitHubIntegrationConfig()

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a mapping (parsed TOML)."""
        integrations_tbl: StrDict = get_table(data, "integrations") or {}
        project: StrDict = get_table(data, "project") or {}
        features: StrDict = get_table(data, "features") or {}

        integrations: list[GitHubIntegrationConfig] = []
        for item in get_list(integrations_tbl, "github") or []:
            entry = as_str_dict(item)
            if entry is None:
                raise ValueError("integrations.github entries must be tables")
            host = get_str(entry, "host") or DEFAULT_GITHUB_HOST
            api_base_url = get_str(entry, "api_base_url")
            if api_base_url is None:
                api_base_url = (
                    DEFAULT_GITHUB_API_BASE_URL
                    if host == DEFAULT_GITHUB_HOST
                    else f"https://{host}/api/v3"
                )
            integrations.append(
                GitHubIntegrationConfig(host=host, api_base_url=api_base_url.rstrip("/"))
            )

        omitted: set[str] = set()
        for name in FEATURE_NAMES:
            feature = get_table(features, name) or {}
            if get_bool(feature, "omit") is True:
                omitted.add(name)

        return cls(
            integrations=tuple(integrations),
            project=ProjectConfig(
                owner=get_str(project, "owner"),
                repo=get_str(project, "repo"),
                versioning_strategy=get_str(project, "versioning_strategy"),
            ),
            features=FeaturesConfig(omitted=frozenset(omitted)),
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse configuration from a TOML file."""
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(Config.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))
