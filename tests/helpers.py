"""Test helpers: repository payload factory and an in-memory data source."""

from typing import Any, Dict, List, Optional

from ghinsights.core.github import ProfileDataSource
from ghinsights.core.models import RepositoryRecord, UserProfile


USER_PAYLOAD = {
    "login": "octocat",
    "name": "The Octocat",
    "bio": "Mascot",
    "location": "San Francisco",
    "avatar_url": "https://avatars.githubusercontent.com/u/583231",
    "followers": 42,
    "following": 7,
    "public_repos": 8,
    "created_at": "2011-01-25T18:44:36Z",
}


def repo_payload(name: str, updated_at: str = "2025-01-01T00:00:00Z", **overrides: Any) -> Dict[str, Any]:
    """A GitHub REST repository object with sensible defaults."""
    data = {
        "name": name,
        "html_url": f"https://github.com/octocat/{name}",
        "description": f"{name} description",
        "language": "Python",
        "fork": False,
        "stargazers_count": 0,
        "forks_count": 0,
        "updated_at": updated_at,
    }
    data.update(overrides)
    return data


def make_repo(name: str, updated_at: str = "2025-01-01T00:00:00Z", **overrides: Any) -> RepositoryRecord:
    return RepositoryRecord.model_validate(repo_payload(name, updated_at, **overrides))


class FakeSource(ProfileDataSource):
    """In-memory `ProfileDataSource` recording every call.

    ``readmes`` maps repository name to README text, None (no README) or an
    exception instance to raise. ``graphql_result`` / ``search_result`` are
    returned or, when they are exceptions, raised.
    """

    def __init__(
        self,
        user: Optional[Dict[str, Any]] = None,
        repos: Optional[List[Dict[str, Any]]] = None,
        readmes: Optional[Dict[str, Any]] = None,
        graphql_result: Any = None,
        search_result: Any = None,
        user_error: Optional[Exception] = None,
    ):
        self.user = user or USER_PAYLOAD
        self.repos = repos or []
        self.readmes = readmes or {}
        self.graphql_result = graphql_result if graphql_result is not None else RuntimeError("graphql down")
        self.search_result = search_result if search_result is not None else RuntimeError("search down")
        self.user_error = user_error
        self.calls: List[tuple] = []

    async def fetch_user(self, username):
        self.calls.append(("fetch_user", username))
        if self.user_error is not None:
            raise self.user_error
        return UserProfile.model_validate(self.user)

    async def fetch_repositories(self, username, per_page=100):
        self.calls.append(("fetch_repositories", username, per_page))
        return [RepositoryRecord.model_validate(r) for r in self.repos]

    async def fetch_readme(self, owner, repo):
        self.calls.append(("fetch_readme", owner, repo))
        value = self.readmes.get(repo)
        if isinstance(value, Exception):
            raise value
        return value

    async def graphql(self, query, variables):
        self.calls.append(("graphql", variables))
        if isinstance(self.graphql_result, Exception):
            raise self.graphql_result
        return self.graphql_result

    async def search_commits(self, query):
        self.calls.append(("search_commits", query))
        if isinstance(self.search_result, Exception):
            raise self.search_result
        return self.search_result

    def called(self, name: str) -> List[tuple]:
        return [c for c in self.calls if c[0] == name]


def calendar_payload(total: Any) -> Dict[str, Any]:
    return {"data": {"user": {"contributionsCollection": {"contributionCalendar": {"totalContributions": total}}}}}
