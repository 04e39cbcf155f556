"""GitHub API operations: list the repositories of an organisation."""

from __future__ import annotations

import json
import logging
import urllib.error
import urllib.request
from typing import Any
from urllib.parse import quote, urlencode

from .constants import API_BASE, GITHUB_API_ACCEPT, HTTP_TIMEOUT_SEC, PER_PAGE, TOKEN_ENV, USER_AGENT
from .types import RepoKind, RepositoryJob

logger = logging.getLogger(__name__)


class GitHubError(RuntimeError):
    pass


class GitHubAuthError(GitHubError):
    pass


class GitHubClient:
    def __init__(self, token: str | None = None, api_base: str = API_BASE) -> None:
        self.token = token
        self.api_base = api_base.rstrip("/")

    # ---------- low-level HTTP ----------
    def _request_json(self, url: str) -> Any:
        req = urllib.request.Request(url)
        req.add_header("Accept", GITHUB_API_ACCEPT)
        req.add_header("User-Agent", USER_AGENT)
        if self.token:
            req.add_header("Authorization", f"Bearer {self.token}")
        try:
            with urllib.request.urlopen(req, timeout=HTTP_TIMEOUT_SEC) as resp:
                return json.loads(resp.read().decode("utf-8"))
        except urllib.error.HTTPError as e:
            if e.code in (401, 403):
                raise GitHubAuthError(f"GitHub rejected the token ({e.code} {e.reason})") from e
            raise GitHubError(f"GET {url} failed: {e.code} {e.reason}") from e
        except urllib.error.URLError as e:
            raise GitHubError(f"GET {url} failed: {e.reason}") from e

    # ---------- public API ----------
    def list_org_repos(self, org: str, kind: RepoKind = RepoKind.all) -> list[dict[str, Any]]:
        """Return every repository dict of `org` for the given listing type, following pages."""
        if not self.token:
            raise GitHubAuthError(f"{TOKEN_ENV} is not set; cannot authenticate against the GitHub API")

        repos: list[dict[str, Any]] = []
        page = 1
        while True:
            query = urlencode({"type": kind.value, "per_page": PER_PAGE, "page": page})
            url = f"{self.api_base}/orgs/{quote(org, safe='')}/repos?{query}"
            data = self._request_json(url)
            if not data:
                break
            repos.extend(data)
            page += 1
        logger.debug("Listed %d %s repositories for %s", len(repos), kind.value, org)
        return repos

    def list_repositories(self, org: str, kind: RepoKind = RepoKind.all) -> list[RepositoryJob]:
        return [RepositoryJob(org=org, name=r["name"]) for r in self.list_org_repos(org, kind)]
