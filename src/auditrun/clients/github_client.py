"""GitHub API client using httpx for organization audits.

This module provides an async HTTP client for the read-only GitHub API
calls the checks need. It does not retry: a failed request surfaces as a
``GitHubClientError`` and the check reports it as an execution failure.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

import httpx

logger = logging.getLogger(__name__)

# GitHub API constants
GITHUB_API_BASE = "https://api.github.com"
DEFAULT_TIMEOUT = 30.0
PAGE_SIZE = 100
MEMBER_FILTER_2FA_DISABLED = "2fa_disabled"


class GitHubClientError(Exception):
    """Base exception for GitHub client errors."""


class GitHubAuthError(GitHubClientError):
    """Authentication with GitHub failed."""


class GitHubRateLimitError(GitHubClientError):
    """GitHub API rate limit exceeded."""

    def __init__(self, message: str, reset_at: int | None = None) -> None:
        super().__init__(message)
        self.reset_at = reset_at  # Unix timestamp when rate limit resets


class GitHubNotFoundError(GitHubClientError):
    """Requested resource not found."""


@dataclass
class GitHubMember:
    """Represents a member of a GitHub organization."""

    login: str
    id: int | None = None
    url: str = ""


class GitHubClient:
    """Async GitHub API client for organization queries.

    Authenticates with HTTP basic auth using a username and a personal
    access token.
    """

    def __init__(
        self,
        username: str,
        token: str,
        base_url: str = GITHUB_API_BASE,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize the GitHub client.

        Args:
            username: GitHub login the token belongs to.
            token: Personal access token.
            base_url: API root, override for GitHub Enterprise.
            timeout: Request timeout in seconds.

        Raises:
            GitHubAuthError: If the username or token is empty.
        """
        if not username or not token:
            raise GitHubAuthError("GitHub username and access token are required.")

        self.username = username
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

        # never log the token!
        self._auth = httpx.BasicAuth(username, token)
        self._headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }

        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> GitHubClient:
        """Enter async context manager."""
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=self._headers,
            auth=self._auth,
            timeout=self.timeout,
        )
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Exit async context manager."""
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get the HTTP client, ensuring it's initialized."""
        if self._client is None:
            raise RuntimeError("GitHubClient must be used as async context manager")
        return self._client

    async def _request(
        self,
        method: str,
        endpoint: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """Make a single HTTP request.

        Args:
            method: HTTP method (GET, POST, PATCH, etc.).
            endpoint: API endpoint or absolute URL (pagination links).
            **kwargs: Additional arguments passed to httpx request.

        Returns:
            httpx.Response object.

        Raises:
            GitHubAuthError: If authentication fails.
            GitHubRateLimitError: If rate limit is exceeded.
            GitHubNotFoundError: If resource is not found.
            GitHubClientError: For other API or transport errors.
        """
        try:
            response = await self.client.request(method, endpoint, **kwargs)
        except httpx.TimeoutException as e:
            raise GitHubClientError(f"Request timeout: {endpoint}") from e
        except httpx.HTTPError as e:
            raise GitHubClientError(f"HTTP error: {e}") from e

        if response.status_code == 403:
            remaining = response.headers.get("X-RateLimit-Remaining")
            if remaining == "0":
                reset_at = int(response.headers.get("X-RateLimit-Reset", "0"))
                raise GitHubRateLimitError(
                    f"GitHub API rate limit exceeded. Resets at {reset_at}",
                    reset_at=reset_at,
                )

        if response.status_code == 401:
            raise GitHubAuthError("GitHub authentication failed. Check your token.")

        if response.status_code == 404:
            raise GitHubNotFoundError(f"Resource not found: {endpoint}")

        if response.status_code >= 400:
            error_body = response.text
            logger.error(f"GitHub API error {response.status_code}: {error_body}")
            raise GitHubClientError(f"GitHub API error {response.status_code}: {error_body[:200]}")

        return response

    # =========================================================================
    # Organization Operations
    # =========================================================================

    async def list_organization_members(
        self,
        organization: str,
        member_filter: str | None = None,
    ) -> list[GitHubMember]:
        """List organization members, following pagination.

        Args:
            organization: Organization login.
            member_filter: Optional API filter, e.g. ``2fa_disabled``.

        Returns:
            Members in the order the API returns them.
        """
        params: dict[str, str | int] = {"per_page": PAGE_SIZE}
        if member_filter:
            params["filter"] = member_filter

        members: list[GitHubMember] = []
        url: str | None = f"/orgs/{quote(organization, safe='')}/members"
        while url is not None:
            response = await self._request("GET", url, params=params or None)
            for data in response.json():
                members.append(
                    GitHubMember(
                        login=data["login"],
                        id=data.get("id"),
                        url=data.get("html_url", ""),
                    )
                )
            # next link already carries the query string
            url = response.links.get("next", {}).get("url")
            params = {}

        logger.debug(f"Fetched {len(members)} member(s) of {organization} (filter={member_filter})")
        return members
