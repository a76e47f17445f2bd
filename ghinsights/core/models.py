"""Immutable data model for the profile aggregation pipeline.

GitHub REST payloads are validated straight into these models; field aliases
translate GitHub's keys (``fork``, ``stargazers_count``, ...) so the rest of
the package only ever sees our names. Every model is frozen: a summary is a
snapshot, and a new invocation produces a new object.
"""
from __future__ import annotations
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class UserProfile(_Frozen):
    """Read-only snapshot of ``GET /users/{username}``."""

    login: str
    name: Optional[str] = None
    bio: Optional[str] = None
    location: Optional[str] = None
    avatar_url: Optional[str] = None
    followers: int = 0
    following: int = 0
    public_repos: int = 0
    created_at: Optional[datetime] = None


class RepositoryRecord(_Frozen):
    """One entry of ``GET /users/{username}/repos``."""

    name: str
    html_url: str
    description: Optional[str] = None
    language: Optional[str] = None
    is_fork: bool = Field(default=False, alias="fork")
    stargazers: int = Field(default=0, alias="stargazers_count")
    forks: int = Field(default=0, alias="forks_count")
    updated_at: Optional[datetime] = None


class EnrichedRepositoryRecord(RepositoryRecord):
    """A recent repository plus its README preview.

    ``has_real_readme`` is True only when the excerpt heuristics produced
    the preview; otherwise the preview is the stored description or a
    placeholder.
    """

    readme_preview: str
    has_real_readme: bool = False
    original_description: Optional[str] = None

    @field_validator("readme_preview")
    @classmethod
    def _preview_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("readme_preview must not be empty")
        return v

    @classmethod
    def from_record(cls, repo: RepositoryRecord, preview: str, is_real: bool) -> "EnrichedRepositoryRecord":
        return cls(
            **repo.model_dump(),
            readme_preview=preview,
            has_real_readme=is_real,
            original_description=repo.description,
        )


class LanguageCount(_Frozen):
    """Number of repositories whose primary language is ``language``."""

    language: str
    count: int

    def percentage(self, total: int) -> float:
        """Share of ``total`` in percent, 0.0 when ``total`` is zero."""
        return (self.count / total) * 100 if total else 0.0


class ContributionTier(str, Enum):
    """Which source produced a contribution count, most precise first."""

    EXACT = "exact"
    APPROXIMATE = "approximate"
    ESTIMATED = "estimated"


class ContributionEstimate(_Frozen):
    count: int = Field(ge=0)
    tier: ContributionTier


class ProfileSummary(_Frozen):
    """Everything a presentation layer needs to render a profile.

    Attributes:
        user: The fetched profile.
        total_repos: ``public_repos`` as reported by the profile.
        total_stars: Sum of stargazers over every fetched repository.
        total_forks: Sum of forks over every fetched repository.
        followers: Follower count.
        following: Following count.
        top_languages: Up to five most common primary languages.
        total_language_repos: Sum of ``top_languages`` counts only; use it
            as the denominator for language percentages.
        recent_repos: Up to six most recently updated non-fork repositories.
        total_contributions: Best-effort contribution count for this year.
    """

    user: UserProfile
    total_repos: int
    total_stars: int
    total_forks: int
    followers: int
    following: int
    top_languages: Tuple[LanguageCount, ...] = ()
    total_language_repos: int = 0
    recent_repos: Tuple[EnrichedRepositoryRecord, ...] = ()
    total_contributions: int = 0
