"""Core functionality for GitHub profile aggregation.

This module contains the core business logic for:
- GitHub API interactions
- README excerpt extraction
- Contribution estimation and repository statistics
- Configuration management
"""

from .config import load_settings, Settings, Credentials
from .errors import GhInsightsError, ConfigurationError, RemoteFetchError
from .excerpt import extract_excerpt, Excerpt
from .github import GitHubClient, ProfileDataSource
from .contributions import ContributionEstimator, estimate_contributions
from .stats import aggregate, RepositoryStats
from .profile import build_profile_summary, load_profile_summary
from .models import (
    UserProfile,
    RepositoryRecord,
    EnrichedRepositoryRecord,
    LanguageCount,
    ContributionTier,
    ContributionEstimate,
    ProfileSummary,
)

__all__ = [
    "load_settings",
    "Settings",
    "Credentials",
    "GhInsightsError",
    "ConfigurationError",
    "RemoteFetchError",
    "extract_excerpt",
    "Excerpt",
    "GitHubClient",
    "ProfileDataSource",
    "ContributionEstimator",
    "estimate_contributions",
    "aggregate",
    "RepositoryStats",
    "build_profile_summary",
    "load_profile_summary",
    "UserProfile",
    "RepositoryRecord",
    "EnrichedRepositoryRecord",
    "LanguageCount",
    "ContributionTier",
    "ContributionEstimate",
    "ProfileSummary",
]
