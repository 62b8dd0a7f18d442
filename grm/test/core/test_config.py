"""Tests for grm.core.config module."""

from __future__ import annotations

from pathlib import Path

from grm.core.config import (
    Config,
    DEFAULT_GITHUB_API_BASE_URL,
    FeaturesConfig,
    GitHubIntegrationConfig,
    load_config,
)
from grm.core.result import Err, Ok


class TestConfigDefaults:
    def test_empty_config_uses_public_github(self) -> None:
        config = Config()
        assert config.github == GitHubIntegrationConfig()
        assert config.github.api_base_url == DEFAULT_GITHUB_API_BASE_URL

    def test_empty_mapping(self) -> None:
        config = Config.from_dict({})
        assert config.integrations == ()
        assert config.project.owner is None
        assert config.features == FeaturesConfig()


class TestIntegrations:
    def test_enterprise_host_wins(self) -> None:
        config = Config.from_dict(
            {
                "integrations": {
                    "github": [
                        {"host": "github.com"},
                        {"host": "ghe.example.com"},
                    ]
                }
            }
        )
        assert config.github.host == "ghe.example.com"
        assert config.github.api_base_url == "https://ghe.example.com/api/v3"

    def test_first_entry_without_enterprise(self) -> None:
        config = Config.from_dict(
            {
                "integrations": {
                    "github": [
                        {"host": "github.com"},
                        {"host": "git.example.com", "api_base_url": "https://api.example.com/"},
                    ]
                }
            }
        )
        assert config.github.host == "github.com"
        assert config.github.api_base_url == DEFAULT_GITHUB_API_BASE_URL

    def test_explicit_api_url_is_trimmed(self) -> None:
        config = Config.from_dict(
            {"integrations": {"github": [{"host": "x.example.com", "api_base_url": "https://x/api/"}]}}
        )
        assert config.github.api_base_url == "https://x/api"


def test_project_and_features() -> None:
    config = Config.from_dict(
        {
            "project": {"owner": "acme", "repo": "web", "versioning_strategy": "calver"},
            "features": {"patch": {"omit": True}, "stats": {"omit": False}},
        }
    )
    assert config.project.owner == "acme"
    assert config.project.repo == "web"
    assert config.project.versioning_strategy == "calver"
    assert config.features.is_omitted("patch")
    assert not config.features.is_omitted("stats")


class TestLoadConfig:
    def test_load_valid_file(self, tmp_path: Path) -> None:
        path = tmp_path / "grm.toml"
        path.write_text(
            '[project]\nowner = "acme"\nrepo = "web"\n\n[features.promote_rc]\nomit = true\n',
            encoding="utf-8",
        )
        result = load_config(path)
        assert isinstance(result, Ok)
        assert result.value.project.owner == "acme"
        assert result.value.features.is_omitted("promote_rc")

    def test_missing_file(self, tmp_path: Path) -> None:
        result = load_config(tmp_path / "missing.toml")
        assert isinstance(result, Err)
        assert "not found" in result.error.message

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "grm.toml"
        path.write_text("[project\nowner = ", encoding="utf-8")
        result = load_config(path)
        assert isinstance(result, Err)
        assert "Invalid TOML" in result.error.message

    def test_invalid_structure(self, tmp_path: Path) -> None:
        path = tmp_path / "grm.toml"
        path.write_text('[integrations]\ngithub = ["ghe.example.com"]\n', encoding="utf-8")
        result = load_config(path)
        assert isinstance(result, Err)
        assert "Invalid config structure" in result.error.message
