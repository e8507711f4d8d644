#!/usr/bin/env python3
"""GitHub API wrapper: list, look up, re-create and delete source repos."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, List, Optional
from urllib.parse import urlparse

import github
import requests

if TYPE_CHECKING:
    from github.Repository import Repository

from config import CloneMethod, GitHubConfig
from errors import DeleteFailed, ProvisionErrorKind, ProvisionFailed
from git_runner import GitCredentials
from logging_utils import Logger
from utils import RateLimiter

# Exit codes
EXIT_AUTH_ERROR = 40
EXIT_GITHUB_ERROR = 31


class GitHubSource:
    """Source host collaborator backed by PyGithub."""

    def __init__(
        self, config: GitHubConfig, push_method: CloneMethod = CloneMethod.SSH
    ) -> None:
        self.config = config
        self.push_method = push_method
        self.api: Optional[github.Github] = None
        self.rate_limiter = RateLimiter(
            max_requests_per_minute=50
        )  # GitHub's standard rate limit

    def connect(self) -> None:
        Logger.info(f"init github API: {self.config.api_url}")
        try:
            auth = github.Auth.Token(self.config.token)
            if self.config.api_url != "https://api.github.com":
                self.api = github.Github(base_url=self.config.api_url, auth=auth)
            else:
                self.api = github.Github(auth=auth)
            if self.config.org:
                self._check_org_visibility()
            self.rate_limiter.wait_if_needed("GitHub API")
            Logger.debug(f"github user: {self.api.get_user().login}")
        except github.BadCredentialsException:
            Logger.error("authentication failed (github): invalid token")
            sys.exit(EXIT_AUTH_ERROR)
        except github.GithubException as e:
            Logger.error(f"github error: {e}")
            sys.exit(EXIT_GITHUB_ERROR)
        except requests.RequestException as e:
            Logger.error(f"failed to contact github api: {e}")
            sys.exit(EXIT_GITHUB_ERROR)

    def credentials(self) -> GitCredentials:
        """HTTPS credentials for git operations against GitHub."""
        return GitCredentials("x-access-token", self.config.token)

    def git_hostname(self) -> str:
        """Return hostname for SSH Git operations."""
        parsed = urlparse(self.config.api_url)
        if parsed.netloc == "api.github.com":
            return "github.com"
        return parsed.netloc

    def _get_api_headers(self) -> dict:
        return {
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {self.config.token}",
            "X-GitHub-Api-Version": "2022-11-28",
        }

    def _check_org_visibility(self) -> None:
        """Check the organization exists and is visible to the token."""
        org_url = f"{self.config.api_url.rstrip('/')}/orgs/{self.config.org}"
        try:
            self.rate_limiter.wait_if_needed("GitHub API")
            r_org = requests.get(org_url, headers=self._get_api_headers(), timeout=30)
        except requests.RequestException as e:
            Logger.error(f"failed to contact github api: {e}")
            sys.exit(EXIT_GITHUB_ERROR)

        if r_org.status_code == 401:
            Logger.error(
                "unauthorized (401): token invalid or not authorized for GitHub API"
            )
            sys.exit(EXIT_AUTH_ERROR)
        if r_org.status_code == 403:
            Logger.error(
                "forbidden (403): token lacks permission to access the organization. "
                "Possible causes: missing read:org scope or SAML SSO not "
                "authorized for this token."
            )
            sys.exit(EXIT_GITHUB_ERROR)
        if r_org.status_code == 404:
            Logger.error(
                f"not found (404): organization '{self.config.org}' does not "
                "exist or is not visible to this token."
            )
            sys.exit(EXIT_GITHUB_ERROR)
        if r_org.status_code != 200:
            Logger.warn(
                f"unexpected response checking org visibility: {r_org.status_code}"
            )

    def _require_api(self) -> github.Github:
        if self.api is None:
            Logger.error("github API not initialized")
            sys.exit(EXIT_GITHUB_ERROR)
        return self.api

    def push_url(self, repo: "Repository") -> str:
        if self.push_method == CloneMethod.SSH:
            return repo.ssh_url
        return repo.clone_url

    def list_private_repos(self, org: str) -> List[str]:
        """Clone URLs of every private repository of ``org``.

        PyGithub's paginated list follows the API's next-page links until
        no further page is announced.
        """
        api = self._require_api()
        Logger.info(f"reading list of private repos for '{org}'")
        try:
            self.rate_limiter.wait_if_needed("GitHub API")
            organization = api.get_organization(org)
            urls = [self.push_url(repo) for repo in organization.get_repos(type="private")]
        except (github.GithubException, requests.RequestException) as e:
            Logger.error(f"failed to list repositories of '{org}': {e}")
            sys.exit(EXIT_GITHUB_ERROR)
        Logger.info(f"found {len(urls)} private repositories")
        return urls

    def get_repository(self, owner: str, name: str) -> str:
        """Push URL of ``owner/name``. Raises ProvisionFailed(NOT_FOUND)."""
        api = self._require_api()
        full_name = f"{owner}/{name}"
        try:
            self.rate_limiter.wait_if_needed("GitHub API")
            repo = api.get_repo(full_name)
        except github.GithubException as e:
            kind = (
                ProvisionErrorKind.NOT_FOUND
                if e.status == 404
                else ProvisionErrorKind.OTHER
            )
            raise ProvisionFailed(
                kind, f"failed to look up '{full_name}': {e}", name=full_name
            ) from e
        except requests.RequestException as e:
            raise ProvisionFailed(
                ProvisionErrorKind.OTHER,
                f"failed to contact github looking up '{full_name}': {e}",
                name=full_name,
            ) from e
        return self.push_url(repo)

    def create_repository(self, owner: str, name: str, description: str = "") -> str:
        """Create a private repository under organization ``owner``."""
        api = self._require_api()
        full_name = f"{owner}/{name}"
        try:
            self.rate_limiter.wait_if_needed("GitHub API")
            organization = api.get_organization(owner)
            self.rate_limiter.wait_if_needed("GitHub API")
            repo = organization.create_repo(
                name=name,
                description=description,
                private=True,
                auto_init=False,
            )
        except github.GithubException as e:
            kind = (
                ProvisionErrorKind.ALREADY_EXISTS
                if e.status == 422
                else ProvisionErrorKind.OTHER
            )
            raise ProvisionFailed(
                kind, f"failed to create '{full_name}': {e}", name=full_name
            ) from e
        except requests.RequestException as e:
            raise ProvisionFailed(
                ProvisionErrorKind.OTHER,
                f"failed to contact github creating '{full_name}': {e}",
                name=full_name,
            ) from e
        Logger.info(f"created repo: {full_name}")
        return self.push_url(repo)

    def delete_repository(self, owner: str, name: str) -> None:
        api = self._require_api()
        full_name = f"{owner}/{name}"
        try:
            self.rate_limiter.wait_if_needed("GitHub API")
            repo = api.get_repo(full_name)
            self.rate_limiter.wait_if_needed("GitHub API")
            repo.delete()
        except (github.GithubException, requests.RequestException) as e:
            raise DeleteFailed(f"failed to delete '{full_name}': {e}") from e
        Logger.warn(f"deleted source repo: {full_name}")
