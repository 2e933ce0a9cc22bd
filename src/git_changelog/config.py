"""
Configuration management for git-changelog.

Handles loading configuration from the user's config file, a per-repository
config file and environment variables, in increasing order of precedence.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .core.entry import EntryType
from .updater.base import DEFAULT_LABELS, DEFAULT_TRUNK_BRANCH, DEFAULT_VERSION
from .updater.github import DEFAULT_API_URL, DEFAULT_HOST

logger = logging.getLogger(__name__)

REPO_CONFIG_NAME = ".git-changelog.yaml"


@dataclass
class GitHubConfig:
    """Where the repository is hosted and how to reach its API."""

    host: str = DEFAULT_HOST
    api_url: str = DEFAULT_API_URL
    owner: Optional[str] = None
    repo: Optional[str] = None
    token: Optional[str] = None


@dataclass
class ChangelogConfig:
    """Main configuration for git-changelog."""

    changelog_path: str = "CHANGELOG.md"
    trunk_branch: str = DEFAULT_TRUNK_BRANCH
    default_version: str = DEFAULT_VERSION

    github: GitHubConfig = field(default_factory=GitHubConfig)

    # Tracker label name -> entry type
    labels: Dict[str, EntryType] = field(default_factory=lambda: dict(DEFAULT_LABELS))


class ConfigManager:
    """Manages git-changelog configuration from multiple sources."""

    def __init__(self, config_dir: Optional[Path] = None, repo_dir: Optional[Path] = None):
        self.config_dir = config_dir or Path.home() / '.git-changelog'
        self.config_file = self.config_dir / 'config.yaml'
        self.repo_dir = repo_dir
        self._config: Optional[ChangelogConfig] = None

    @property
    def repo_config_file(self) -> Optional[Path]:
        if self.repo_dir is None:
            return None
        return self.repo_dir / REPO_CONFIG_NAME

    def load_config(self) -> ChangelogConfig:
        """Load configuration from all sources."""
        if self._config:
            return self._config

        config = ChangelogConfig()

        for path in (self.config_file, self.repo_config_file):
            if path is not None and path.exists():
                config = self._merge_configs(config, self._load_from_file(path))

        config = self._merge_configs(config, self._load_from_env())

        self._config = config
        return config

    def _load_from_file(self, path: Path) -> Dict[str, Any]:
        """Load configuration from a YAML file."""
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning("Could not load config file %s: %s", path, e)
            return {}

        if not isinstance(data, dict):
            logger.warning("Ignoring config file %s: expected a mapping", path)
            return {}
        return data

    def _load_from_env(self) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        env_config: Dict[str, Any] = {}

        token = os.getenv('GITHUB_TOKEN')
        if token:
            env_config.setdefault('github', {})['token'] = token

        owner = os.getenv('GIT_CHANGELOG_OWNER')
        if owner:
            env_config.setdefault('github', {})['owner'] = owner

        repo = os.getenv('GIT_CHANGELOG_REPO')
        if repo:
            env_config.setdefault('github', {})['repo'] = repo

        path = os.getenv('GIT_CHANGELOG_PATH')
        if path:
            env_config['changelog_path'] = path

        trunk = os.getenv('GIT_CHANGELOG_TRUNK')
        if trunk:
            env_config['trunk_branch'] = trunk

        return env_config

    def _merge_configs(self, base: ChangelogConfig, override: Dict[str, Any]) -> ChangelogConfig:
        """Merge a configuration dictionary into ``base``."""
        for key in ('changelog_path', 'trunk_branch', 'default_version'):
            if key in override:
                setattr(base, key, str(override[key]))

        github = override.get('github') or {}
        for key in ('host', 'api_url', 'owner', 'repo', 'token'):
            if key in github:
                setattr(base.github, key, github[key])

        # A labels mapping replaces the defaults entirely
        if 'labels' in override:
            labels = {}
            for name, kind in (override['labels'] or {}).items():
                try:
                    labels[str(name)] = EntryType(str(kind).lower())
                except ValueError:
                    logger.warning("Ignoring label %r: unknown entry type %r", name, kind)
            base.labels = labels

        return base

    def save_config(self, config: ChangelogConfig) -> None:
        """Save configuration to the user config file."""
        self.config_dir.mkdir(parents=True, exist_ok=True)

        config_dict: Dict[str, Any] = {
            'changelog_path': config.changelog_path,
            'trunk_branch': config.trunk_branch,
            'default_version': config.default_version,
            'github': {
                'host': config.github.host,
                'api_url': config.github.api_url,
            },
            'labels': {name: kind.value for name, kind in config.labels.items()},
        }
        if config.github.owner:
            config_dict['github']['owner'] = config.github.owner
        if config.github.repo:
            config_dict['github']['repo'] = config.github.repo

        with open(self.config_file, 'w', encoding='utf-8') as f:
            yaml.safe_dump(config_dict, f, default_flow_style=False, indent=2, sort_keys=False)

    def create_default_config(self) -> Path:
        """Create a default configuration file."""
        self.save_config(ChangelogConfig())
        return self.config_file

    def get_config_info(self) -> Dict[str, Any]:
        """Get information about current configuration."""
        config = self.load_config()
        repo_file = self.repo_config_file

        return {
            'config_file': str(self.config_file),
            'config_exists': self.config_file.exists(),
            'repo_config_file': str(repo_file) if repo_file else None,
            'repo_config_exists': bool(repo_file and repo_file.exists()),
            'changelog_path': config.changelog_path,
            'trunk_branch': config.trunk_branch,
            'github_repo': f"{config.github.owner}/{config.github.repo}"
            if config.github.owner and config.github.repo else None,
            'github_token_set': bool(config.github.token),
        }


# Global config manager instance
_config_manager: Optional[ConfigManager] = None


def get_config_manager(repo_dir: Optional[Path] = None) -> ConfigManager:
    """Get the global config manager instance."""
    global _config_manager
    if _config_manager is None or (repo_dir is not None and _config_manager.repo_dir != repo_dir):
        _config_manager = ConfigManager(repo_dir=repo_dir)
    return _config_manager


def load_config(repo_dir: Optional[Path] = None) -> ChangelogConfig:
    """Load the current configuration."""
    return get_config_manager(repo_dir).load_config()
