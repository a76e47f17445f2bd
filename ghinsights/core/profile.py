"""Profile aggregation: the single entry point that builds a `ProfileSummary`.

Flow for one invocation:

1. validate credentials (no network traffic before this succeeds)
2. fetch the profile and repository list concurrently
3. estimate this year's contributions (sequential tier fallback)
4. aggregate totals, languages and recent repositories
5. fetch and excerpt the README of each recent repository concurrently
6. assemble a frozen `ProfileSummary`

Only `ConfigurationError` and `RemoteFetchError` (from step 2) reach the
caller. README problems degrade the affected repository's preview and
nothing else.

Example:
    ```python
    import asyncio
    from ghinsights.core.config import Credentials
    from ghinsights.core.profile import build_profile_summary

    summary = asyncio.run(build_profile_summary(Credentials(token, "octocat")))
    print(summary.total_stars, [lc.language for lc in summary.top_languages])
    ```
"""
from __future__ import annotations
from datetime import date
from typing import List, Optional, Tuple
import asyncio
import logging

import httpx

from .config import Credentials, Settings, load_settings
from .contributions import ContributionEstimator
from .errors import ConfigurationError, RemoteFetchError
from .excerpt import extract_excerpt, fallback_preview
from .github import GitHubClient, ProfileDataSource, github_headers
from .models import EnrichedRepositoryRecord, ProfileSummary, RepositoryRecord, UserProfile
from .stats import aggregate

log = logging.getLogger(__name__)

NO_README = "No README available"
README_UNAVAILABLE = "README unavailable"


def _require(credentials: Optional[Credentials]) -> Credentials:
    """Return normalised credentials or raise before any request is made.

    Raises:
        ConfigurationError: Credentials are None or token/username is blank.
    """
    if credentials is None:
        raise ConfigurationError("GitHub credentials are required")
    token = getattr(credentials, "token", None)
    username = getattr(credentials, "username", None)
    if not (isinstance(token, str) and token.strip()):
        raise ConfigurationError("GitHub token is missing")
    if not (isinstance(username, str) and username.strip()):
        raise ConfigurationError("GitHub username is missing")
    return Credentials(token=token.strip(), username=username.strip())


async def enrich_repository(source: ProfileDataSource, owner: str, repo: RepositoryRecord) -> EnrichedRepositoryRecord:
    """Attach a README preview to `repo`; never raises.

    A missing README is a normal outcome; a failed lookup falls back to the
    stored description and is logged.
    """
    try:
        text = await source.fetch_readme(owner, repo.name)
    except Exception as exc:
        log.warning("README fetch failed for %s/%s: %s", owner, repo.name, exc)
        return EnrichedRepositoryRecord.from_record(repo, fallback_preview(repo.description, README_UNAVAILABLE), False)

    if text is None:
        return EnrichedRepositoryRecord.from_record(repo, fallback_preview(repo.description, NO_README), False)

    excerpt = extract_excerpt(text, repo.description)
    return EnrichedRepositoryRecord.from_record(repo, excerpt.preview, excerpt.is_real)


async def _fetch_primary(
    source: ProfileDataSource, username: str, per_page: int
) -> Tuple[UserProfile, List[RepositoryRecord]]:
    """Fetch the profile and repository list concurrently.

    Raises:
        RemoteFetchError: Either lookup failed; other errors are wrapped.
    """
    try:
        user, repos = await asyncio.gather(
            source.fetch_user(username),
            source.fetch_repositories(username, per_page),
        )
    except RemoteFetchError:
        raise
    except Exception as exc:
        raise RemoteFetchError(f"Failed to fetch profile data for {username}: {exc}") from exc
    return user, repos


async def _build(source: ProfileDataSource, creds: Credentials, settings: Settings, today: Optional[date]) -> ProfileSummary:
    user, repos = await _fetch_primary(source, creds.username, settings.per_page)

    estimator = ContributionEstimator(
        source,
        today=today,
        activity_cutoff=settings.activity_cutoff,
        per_repo_estimate=settings.per_repo_estimate,
    )
    contributions = await estimator.estimate(creds.username, repos)

    stats = aggregate(repos)
    recent = await asyncio.gather(*(enrich_repository(source, creds.username, r) for r in stats.recent_repos))

    log.info(
        "Summary for %s: %d repos, %d stars, %d contributions (%s)",
        creds.username, len(repos), stats.total_stars, contributions.count, contributions.tier.value,
    )
    return ProfileSummary(
        user=user,
        total_repos=user.public_repos,
        total_stars=stats.total_stars,
        total_forks=stats.total_forks,
        followers=user.followers,
        following=user.following,
        top_languages=stats.top_languages,
        total_language_repos=stats.total_language_repos,
        recent_repos=tuple(recent),
        total_contributions=contributions.count,
    )


async def build_profile_summary(
    credentials: Optional[Credentials],
    *,
    source: Optional[ProfileDataSource] = None,
    settings: Optional[Settings] = None,
    today: Optional[date] = None,
) -> ProfileSummary:
    """Gather and aggregate everything shown on a GitHub profile.

    Args:
        credentials: Token and username; required.
        source: Data source to use. When omitted a `GitHubClient` over a new
            ``httpx.AsyncClient`` is opened for this call and closed after.
        settings: Endpoints, page size and estimator tuning. Defaults apply
            when omitted.
        today: Reference date for the contribution window (defaults to now).

    Returns:
        A new, frozen `ProfileSummary`.

    Raises:
        ConfigurationError: Credentials are missing; raised before any request.
        RemoteFetchError: The profile or repository list could not be fetched.
    """
    creds = _require(credentials)
    settings = settings or Settings()

    if source is not None:
        return await _build(source, creds, settings, today)

    async with httpx.AsyncClient(timeout=settings.timeout, headers=github_headers(creds.token)) as http:
        client = GitHubClient(http, api_url=settings.api_url, graphql_url=settings.graphql_url)
        return await _build(client, creds, settings, today)


def load_profile_summary(settings: Optional[Settings] = None, config_path: Optional[str] = None) -> ProfileSummary:
    """Synchronous wrapper: load settings, validate credentials, run the pipeline."""
    settings = settings or load_settings(config_path)
    return asyncio.run(build_profile_summary(settings.credentials(), settings=settings))
