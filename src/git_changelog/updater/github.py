"""
GitHub-backed updater: labels and base branches come from the GitHub REST API.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from ..core.entry import EntryType
from ..exceptions import GitHubError
from ..vcs import git
from .base import DEFAULT_TRUNK_BRANCH, DEFAULT_VERSION, Updater

logger = logging.getLogger(__name__)

DEFAULT_HOST = "github.com"
DEFAULT_API_URL = "https://api.github.com"


class GitHubClient:
    """Minimal synchronous client for the GitHub REST API v3."""

    def __init__(
        self,
        token: Optional[str] = None,
        api_url: str = DEFAULT_API_URL,
        transport: Optional[httpx.BaseTransport] = None,
        timeout: float = 30.0,
    ):
        self.token = token
        self.api_url = api_url.rstrip("/")
        self._client = httpx.Client(
            base_url=self.api_url,
            headers=self._get_headers(),
            timeout=httpx.Timeout(timeout, connect=10.0),
            transport=transport,
        )

    def _get_headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/vnd.github.v3+json", "User-Agent": "git-changelog"}
        if self.token:
            headers["Authorization"] = f"token {self.token}"
        return headers

    def get(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """GET an API endpoint and return the decoded JSON body."""
        logger.debug("GET %s", endpoint)
        try:
            response = self._client.get(endpoint, params=params)
        except httpx.HTTPError as e:
            raise GitHubError(f"GitHub request failed: {e}") from e

        if response.status_code >= 400:
            try:
                message = response.json().get("message", response.reason_phrase)
            except (ValueError, AttributeError):
                message = response.reason_phrase
            raise GitHubError(f"GitHub API error: {message}", status_code=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise GitHubError(f"GitHub returned a body that is not JSON for {endpoint}") from e

    def close(self) -> None:
        self._client.close()


class GitHubUpdater(Updater):
    """Updater for a repository hosted on GitHub."""

    def __init__(
        self,
        owner: str,
        name: str,
        token: Optional[str] = None,
        host: str = DEFAULT_HOST,
        api_url: str = DEFAULT_API_URL,
        trunk_branch: str = DEFAULT_TRUNK_BRANCH,
        labels: Optional[Dict[str, EntryType]] = None,
        default_version: str = DEFAULT_VERSION,
        client: Optional[GitHubClient] = None,
    ):
        super().__init__(trunk_branch=trunk_branch, labels=labels, default_version=default_version)
        self.owner = owner
        self.name = name
        self.host = host
        self.client = client or GitHubClient(token=token, api_url=api_url)

    def labels(self, number: int) -> List[str]:
        data = self.client.get(
            f"/repos/{self.owner}/{self.name}/issues/{number}/labels",
            params={"per_page": 100},
        )
        try:
            return [label["name"] for label in data]
        except (KeyError, TypeError) as e:
            raise GitHubError(f"unexpected labels payload for #{number}") from e

    def target_branch(self, number: int) -> str:
        data = self.client.get(f"/repos/{self.owner}/{self.name}/pulls/{number}")
        try:
            return data["base"]["ref"]
        except (KeyError, TypeError) as e:
            raise GitHubError(f"pull request #{number} has no base branch") from e

    def last_tag(self, rev: str) -> str:
        return git.last_tag(rev)

    def entry_url(self, number: int) -> str:
        return f"https://{self.host}/{self.owner}/{self.name}/pull/{number}"

    def close(self) -> None:
        self.client.close()
