"""API clients used by checks."""

from auditrun.clients.github_client import (
    GitHubAuthError,
    GitHubClient,
    GitHubClientError,
    GitHubMember,
    GitHubNotFoundError,
    GitHubRateLimitError,
)

__all__ = [
    "GitHubAuthError",
    "GitHubClient",
    "GitHubClientError",
    "GitHubMember",
    "GitHubNotFoundError",
    "GitHubRateLimitError",
]
