"""
GitHub release index client.

Looks up the most recent published release of a repository through the
GitHub REST API.
"""

import logging
from typing import Optional

import requests
from requests.exceptions import RequestException

from leakskit.core.exceptions import ReleaseIndexError

logger = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"


class GitHubReleaseIndex:
    """
    Read-only access to a repository's releases.

    Example:
        >>> index = GitHubReleaseIndex(token="ghp_...")
        >>> index.get_latest_release_tag("gitleaks", "gitleaks")
        'v8.18.0'
    """

    def __init__(
        self,
        token: Optional[str] = None,
        api_url: str = GITHUB_API_URL,
        timeout: int = 30,
        session: Optional[requests.Session] = None,
    ):
        self.token = token
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _headers(self) -> dict:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def get_latest_release_tag(self, owner: str, repo: str) -> str:
        """
        Get the tag name of the latest published release.

        Args:
            owner: Repository owner
            repo: Repository name

        Returns:
            Tag name as published (e.g. 'v8.18.0')

        Raises:
            ReleaseIndexError: On network, HTTP or payload errors
        """
        url = f"{self.api_url}/repos/{owner}/{repo}/releases/latest"
        logger.debug(f"Requesting latest release: {url}")

        try:
            response = self.session.get(
                url, headers=self._headers(), timeout=self.timeout
            )
            response.raise_for_status()
        except RequestException as e:
            raise ReleaseIndexError(
                f"Failed to query latest release of {owner}/{repo}: {e}"
            ) from e

        try:
            payload = response.json()
        except ValueError as e:
            raise ReleaseIndexError(
                f"Invalid release payload for {owner}/{repo}: {e}"
            ) from e

        tag = payload.get("tag_name") if isinstance(payload, dict) else None
        if not tag:
            raise ReleaseIndexError(f"Latest release of {owner}/{repo} has no tag name")

        return tag
