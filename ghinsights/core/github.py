"""Async GitHub API access for profile aggregation.

`ProfileDataSource` is the capability the pipeline depends on; `GitHubClient`
implements it over an injected ``httpx.AsyncClient`` so callers own the
connection lifecycle and tests can swap in ``httpx.MockTransport``.

Every failure (transport error, non-2xx status, invalid JSON, payload that
does not validate) is raised as `RemoteFetchError`. The one exception is the
README lookup, where a 404 is a normal "no README" answer and returns None.

Rate Limits:
    - Authenticated: 5,000 REST requests/hour per token
    - Commit search: 30 requests/minute

Example:
    ```python
    async with httpx.AsyncClient(headers=github_headers(token)) as http:
        gh = GitHubClient(http)
        user = await gh.fetch_user("octocat")
        repos = await gh.fetch_repositories("octocat")
    ```
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
import base64
import binascii
import logging

import httpx
from pydantic import TypeAdapter, ValidationError

from .config import GH_API, GH_GRAPHQL, MAX_PER_PAGE
from .errors import RemoteFetchError
from .models import RepositoryRecord, UserProfile

log = logging.getLogger(__name__)

_REPOS = TypeAdapter(List[RepositoryRecord])


def github_headers(token: str) -> Dict[str, str]:
    """Construct HTTP headers for authenticated GitHub API requests."""
    return {
        "Accept": "application/vnd.github+json",
        "X-GitHub-Api-Version": "2022-11-28",
        "Authorization": f"Bearer {token}",
    }


class ProfileDataSource(ABC):
    """What the aggregation pipeline needs from a source-hosting API."""

    @abstractmethod
    async def fetch_user(self, username: str) -> UserProfile:
        ...

    @abstractmethod
    async def fetch_repositories(self, username: str, per_page: int = MAX_PER_PAGE) -> List[RepositoryRecord]:
        """Return one page of the user's repositories, most recently updated first."""
        ...

    @abstractmethod
    async def fetch_readme(self, owner: str, repo: str) -> Optional[str]:
        """Return decoded README text, or None when the repository has none."""
        ...

    @abstractmethod
    async def graphql(self, query: str, variables: Dict[str, Any]) -> Dict[str, Any]:
        ...

    @abstractmethod
    async def search_commits(self, query: str) -> Dict[str, Any]:
        ...


class GitHubClient(ProfileDataSource):
    """`ProfileDataSource` backed by the GitHub REST and GraphQL APIs.

    Attributes:
        api_url: REST base URL without trailing slash.
        graphql_url: GraphQL endpoint.
    """

    def __init__(self, client: httpx.AsyncClient, api_url: str = GH_API, graphql_url: str = GH_GRAPHQL) -> None:
        self._client = client
        self.api_url = api_url.rstrip("/")
        self.graphql_url = graphql_url

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            return await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            raise RemoteFetchError(f"{method} {url} failed: {exc}") from exc

    @staticmethod
    def _json(r: httpx.Response) -> Any:
        if r.is_error:
            raise RemoteFetchError(
                f"{r.request.method} {r.request.url} returned HTTP {r.status_code}",
                status_code=r.status_code,
            )
        try:
            return r.json()
        except ValueError as exc:
            raise RemoteFetchError(f"{r.request.url} returned invalid JSON", status_code=r.status_code) from exc

    async def fetch_user(self, username: str) -> UserProfile:
        r = await self._request("GET", f"{self.api_url}/users/{username}")
        data = self._json(r)
        try:
            return UserProfile.model_validate(data)
        except ValidationError as exc:
            raise RemoteFetchError(f"Malformed profile payload for {username}: {exc}") from exc

    async def fetch_repositories(self, username: str, per_page: int = MAX_PER_PAGE) -> List[RepositoryRecord]:
        r = await self._request(
            "GET",
            f"{self.api_url}/users/{username}/repos",
            params={"per_page": per_page, "sort": "updated"},
        )
        data = self._json(r)
        try:
            repos = _REPOS.validate_python(data)
        except ValidationError as exc:
            raise RemoteFetchError(f"Malformed repository list for {username}: {exc}") from exc
        log.info("Fetched %d repositories for %s", len(repos), username)
        return repos

    async def fetch_readme(self, owner: str, repo: str) -> Optional[str]:
        """Return decoded README text.

        Any non-success status (404, 403, 5xx) means "no README" and gives
        None. Transport failures raise `RemoteFetchError`.
        """
        r = await self._request("GET", f"{self.api_url}/repos/{owner}/{repo}/readme")
        if r.is_error:
            log.debug("README lookup for %s/%s returned HTTP %d", owner, repo, r.status_code)
            return None
        data = self._json(r)
        if not isinstance(data, dict) or data.get("encoding") != "base64" or "content" not in data:
            return None
        try:
            return base64.b64decode(data["content"]).decode("utf-8", errors="ignore")
        except (binascii.Error, TypeError, ValueError):
            log.debug("Undecodable README for %s/%s", owner, repo)
            return None

    async def graphql(self, query: str, variables: Dict[str, Any]) -> Dict[str, Any]:
        r = await self._request("POST", self.graphql_url, json={"query": query, "variables": variables})
        data = self._json(r)
        if not isinstance(data, dict):
            raise RemoteFetchError("GraphQL response is not an object")
        if data.get("errors") and not data.get("data"):
            messages = "; ".join(str(e.get("message", e)) for e in data["errors"] if isinstance(e, dict))
            raise RemoteFetchError(f"GraphQL errors: {messages or data['errors']}")
        return data

    async def search_commits(self, query: str) -> Dict[str, Any]:
        r = await self._request("GET", f"{self.api_url}/search/commits", params={"q": query, "per_page": 1})
        data = self._json(r)
        if not isinstance(data, dict):
            raise RemoteFetchError("Commit search response is not an object")
        return data
