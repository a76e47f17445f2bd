"""Repository statistics: totals, language histogram and recent repositories."""
from __future__ import annotations
from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Sequence, Tuple

from .models import LanguageCount, RepositoryRecord

TOP_LANGUAGES = 5
RECENT_REPOS = 6

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class RepositoryStats:
    total_stars: int
    total_forks: int
    top_languages: Tuple[LanguageCount, ...]
    total_language_repos: int
    recent_repos: Tuple[RepositoryRecord, ...]


def top_languages(repositories: Sequence[RepositoryRecord], k: int = TOP_LANGUAGES) -> Tuple[LanguageCount, ...]:
    """Return the `k` most common primary languages.

    Each repository counts once, for its primary language only. Ties keep
    the order in which languages were first seen.
    """
    counts = Counter(r.language for r in repositories if r.language)
    return tuple(LanguageCount(language=lang, count=n) for lang, n in counts.most_common(k))


def recent_repositories(repositories: Sequence[RepositoryRecord], k: int = RECENT_REPOS) -> Tuple[RepositoryRecord, ...]:
    """Return up to `k` non-fork repositories, most recently updated first.

    The sort is stable, so equal timestamps keep their input order;
    repositories without a timestamp sort last.
    """
    own = [r for r in repositories if not r.is_fork]
    own.sort(key=lambda r: r.updated_at or _OLDEST, reverse=True)
    return tuple(own[:k])


def aggregate(repositories: Sequence[RepositoryRecord]) -> RepositoryStats:
    """Reduce the full repository list to the figures shown on a profile.

    Star and fork totals cover every repository, forks included.
    ``total_language_repos`` sums only the returned top languages.
    """
    langs = top_languages(repositories)
    return RepositoryStats(
        total_stars=sum(r.stargazers for r in repositories),
        total_forks=sum(r.forks for r in repositories),
        top_languages=langs,
        total_language_repos=sum(lc.count for lc in langs),
        recent_repos=recent_repositories(repositories),
    )
