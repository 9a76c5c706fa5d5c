"""GitHub organization security check."""

from __future__ import annotations

import logging
from typing import ClassVar

from auditrun.checks.base import Check
from auditrun.clients.github_client import (
    GITHUB_API_BASE,
    MEMBER_FILTER_2FA_DISABLED,
    GitHubClient,
    GitHubClientError,
    GitHubMember,
)
from auditrun.core.errors import ExecutionFailure
from auditrun.core.options import require_string

logger = logging.getLogger(__name__)

C_ORGANIZATION_NAME = "organization_name"
C_USERNAME = "username"
C_ACCESS_KEY = "access_key"
C_API_URL = "api_url"


class GitHubOrganizationCheck(Check):
    """Report every organization member without two-factor authentication."""

    check_type: ClassVar[str] = "github_organization"
    required_options: ClassVar[tuple[str, ...]] = (C_ORGANIZATION_NAME, C_USERNAME, C_ACCESS_KEY)

    async def _check(self) -> None:
        organization = require_string(self.options, C_ORGANIZATION_NAME)
        members = await self._fetch_members_without_mfa(organization)
        logger.info(f"{self.full_identifier}: {len(members)} member(s) of {organization} without MFA")

        for member in members:
            self.add_issue("User without enabled MFA: {}", member.login)

    async def _fetch_members_without_mfa(self, organization: str) -> list[GitHubMember]:
        username = require_string(self.options, C_USERNAME)
        token = require_string(self.options, C_ACCESS_KEY)
        api_url = require_string(self.options, C_API_URL) if self.options.get(C_API_URL) else GITHUB_API_BASE
        try:
            async with GitHubClient(username=username, token=token, base_url=api_url) as client:
                return await client.list_organization_members(organization, member_filter=MEMBER_FILTER_2FA_DISABLED)
        except GitHubClientError as e:
            raise ExecutionFailure(f"Error when trying to communicate with GitHub API: {e}") from e
