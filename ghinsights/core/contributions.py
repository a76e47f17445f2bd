"""Best-effort count of a user's contributions for the current calendar year.

GitHub does not expose one authoritative number over REST, so three sources
are tried in order of precision until one yields a usable value:

1. exact: GraphQL ``contributionCalendar.totalContributions``
2. approximate: commit search ``total_count`` for ``author:<user>``
3. estimated: ``per_repo_estimate`` x active non-fork repositories

The first two are remote and may fail for any reason (network, rate limit,
malformed payload); each failure becomes a degraded `TierOutcome` and a
warning in the log. The third is plain arithmetic and always succeeds, so
`ContributionEstimator.estimate` never raises for remote problems.

Tier 1 counts calendar contributions, tier 2 counts matching commits; the two
can differ noticeably and are deliberately not reconciled.
"""
from __future__ import annotations
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from typing import Any, Dict, Optional, Sequence
import logging

from .errors import RemoteFetchError
from .github import ProfileDataSource
from .models import ContributionEstimate, ContributionTier, RepositoryRecord

log = logging.getLogger(__name__)

DEFAULT_ACTIVITY_CUTOFF = date(2024, 1, 1)
DEFAULT_PER_REPO_ESTIMATE = 15

CONTRIBUTIONS_QUERY = """
query($username: String!, $from: DateTime!, $to: DateTime!) {
  user(login: $username) {
    contributionsCollection(from: $from, to: $to) {
      contributionCalendar {
        totalContributions
      }
    }
  }
}
"""


@dataclass(frozen=True)
class TierOutcome:
    """Result of one tier: a count on success, a reason when degraded."""

    tier: ContributionTier
    count: Optional[int] = None
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.count is not None

    @classmethod
    def degraded(cls, tier: ContributionTier, reason: str) -> "TierOutcome":
        return cls(tier=tier, reason=reason)


def _non_negative_int(value: Any) -> Optional[int]:
    # bool is an int subclass; a JSON true is not a count
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        return None
    return value


def _describe(exc: Exception) -> str:
    if isinstance(exc, RemoteFetchError):
        return str(exc)
    return f"{type(exc).__name__}: {exc}"


def _calendar_total(payload: Dict[str, Any]) -> Optional[int]:
    try:
        calendar = payload["data"]["user"]["contributionsCollection"]["contributionCalendar"]
        return _non_negative_int(calendar["totalContributions"])
    except (KeyError, TypeError):
        return None


class ContributionEstimator:
    """Runs the three tiers strictly in sequence.

    Args:
        source: Remote data source used by the first two tiers.
        today: Reference date for "current year"; defaults to today (UTC).
        activity_cutoff: Repositories updated on/after this date count as
            active for the estimated tier.
        per_repo_estimate: Contributions assumed per active repository.
    """

    def __init__(
        self,
        source: ProfileDataSource,
        today: Optional[date] = None,
        activity_cutoff: date = DEFAULT_ACTIVITY_CUTOFF,
        per_repo_estimate: int = DEFAULT_PER_REPO_ESTIMATE,
    ) -> None:
        self.source = source
        self.today = today
        self.activity_cutoff = activity_cutoff
        self.per_repo_estimate = per_repo_estimate

    @property
    def year(self) -> int:
        return (self.today or datetime.now(timezone.utc).date()).year

    async def exact(self, username: str) -> TierOutcome:
        tier = ContributionTier.EXACT
        start = datetime(self.year, 1, 1, tzinfo=timezone.utc)
        end = datetime.combine(date(self.year, 12, 31), time(23, 59, 59), tzinfo=timezone.utc)
        variables = {
            "username": username,
            "from": start.isoformat().replace("+00:00", "Z"),
            "to": end.isoformat().replace("+00:00", "Z"),
        }
        try:
            payload = await self.source.graphql(CONTRIBUTIONS_QUERY, variables)
        except Exception as exc:
            return TierOutcome.degraded(tier, _describe(exc))
        total = _calendar_total(payload)
        if total is None:
            return TierOutcome.degraded(tier, "response has no contribution total")
        return TierOutcome(tier=tier, count=total)

    async def approximate(self, username: str) -> TierOutcome:
        tier = ContributionTier.APPROXIMATE
        query = f"author:{username} author-date:{self.year}-01-01..{self.year}-12-31"
        try:
            payload = await self.source.search_commits(query)
        except Exception as exc:
            return TierOutcome.degraded(tier, _describe(exc))
        total = _non_negative_int(payload.get("total_count")) if isinstance(payload, dict) else None
        if total is None:
            return TierOutcome.degraded(tier, "response has no total_count")
        return TierOutcome(tier=tier, count=total)

    def estimated(self, repositories: Sequence[RepositoryRecord]) -> TierOutcome:
        active = sum(
            1 for r in repositories
            if not r.is_fork and r.updated_at is not None and r.updated_at.date() >= self.activity_cutoff
        )
        return TierOutcome(tier=ContributionTier.ESTIMATED, count=active * self.per_repo_estimate)

    async def estimate(self, username: str, repositories: Sequence[RepositoryRecord]) -> ContributionEstimate:
        """Return the most precise contribution count available."""
        for attempt in (self.exact, self.approximate):
            outcome = await attempt(username)
            if outcome.ok:
                log.info("Contributions for %s: %d (%s)", username, outcome.count, outcome.tier.value)
                return ContributionEstimate(count=outcome.count, tier=outcome.tier)
            log.warning("Contribution tier '%s' degraded for %s: %s", outcome.tier.value, username, outcome.reason)

        outcome = self.estimated(repositories)
        log.info("Contributions for %s: %d (%s)", username, outcome.count, outcome.tier.value)
        return ContributionEstimate(count=outcome.count, tier=outcome.tier)


async def estimate_contributions(
    source: ProfileDataSource,
    username: str,
    repositories: Sequence[RepositoryRecord],
    **kwargs: Any,
) -> int:
    """Shortcut returning just the number; see `ContributionEstimator`."""
    estimate = await ContributionEstimator(source, **kwargs).estimate(username, repositories)
    return estimate.count
