"""Tests for the tiered contribution estimator."""

import asyncio
import logging
from datetime import date

from helpers import FakeSource, calendar_payload, repo_payload

from ghinsights.core.contributions import ContributionEstimator, estimate_contributions
from ghinsights.core.errors import RemoteFetchError
from ghinsights.core.models import ContributionTier, RepositoryRecord

TODAY = date(2025, 6, 15)


def _repos(payloads):
    return [RepositoryRecord.model_validate(p) for p in payloads]


ACTIVITY_REPOS = [
    repo_payload("a", "2025-03-01T00:00:00Z"),
    repo_payload("b", "2024-06-01T00:00:00Z"),
    repo_payload("c", "2024-01-01T10:00:00Z"),
    repo_payload("forked", "2025-03-01T00:00:00Z", fork=True),
    repo_payload("stale", "2023-12-31T23:00:00Z"),
]


def _estimate(source, repos=()):
    estimator = ContributionEstimator(source, today=TODAY)
    return asyncio.run(estimator.estimate("octocat", _repos(repos)))


class TestExactTier:

    def test_uses_calendar_total(self):
        source = FakeSource(graphql_result=calendar_payload(321), search_result={"total_count": 1})
        result = _estimate(source)
        assert result.count == 321
        assert result.tier is ContributionTier.EXACT
        assert source.called("search_commits") == []

    def test_queries_current_calendar_year(self):
        source = FakeSource(graphql_result=calendar_payload(1))
        _estimate(source)
        (_, variables), = source.called("graphql")
        assert variables == {
            "username": "octocat",
            "from": "2025-01-01T00:00:00Z",
            "to": "2025-12-31T23:59:59Z",
        }

    def test_zero_is_a_valid_total(self):
        source = FakeSource(graphql_result=calendar_payload(0))
        assert _estimate(source).tier is ContributionTier.EXACT


class TestApproximateTier:

    def test_used_when_exact_raises(self):
        """Exact tier throws, search reports 42: result is 42 without estimating."""
        source = FakeSource(graphql_result=RemoteFetchError("boom"), search_result={"total_count": 42})
        result = _estimate(source, ACTIVITY_REPOS)
        assert result.count == 42
        assert result.tier is ContributionTier.APPROXIMATE

    def test_used_when_exact_payload_unusable(self):
        for payload in ({"data": {"user": None}}, {"data": None}, calendar_payload("12"), calendar_payload(True)):
            source = FakeSource(graphql_result=payload, search_result={"total_count": 7})
            assert _estimate(source).count == 7

    def test_search_query_scoped_to_author_and_year(self):
        source = FakeSource(search_result={"total_count": 3})
        _estimate(source)
        assert source.called("search_commits") == [
            ("search_commits", "author:octocat author-date:2025-01-01..2025-12-31"),
        ]


class TestEstimatedTier:

    def test_counts_active_non_fork_repositories(self):
        """Both remote tiers fail: 3 active own repos out of 5 gives 45."""
        source = FakeSource(graphql_result=RemoteFetchError("down"), search_result=RemoteFetchError("limited"))
        result = _estimate(source, ACTIVITY_REPOS)
        assert result.count == 45
        assert result.tier is ContributionTier.ESTIMATED

    def test_malformed_search_payload_falls_through(self):
        source = FakeSource(search_result={"items": []})
        assert _estimate(source, ACTIVITY_REPOS).tier is ContributionTier.ESTIMATED

    def test_custom_cutoff_and_rate(self):
        source = FakeSource()
        estimator = ContributionEstimator(source, today=TODAY, activity_cutoff=date(2025, 1, 1), per_repo_estimate=10)
        result = asyncio.run(estimator.estimate("octocat", _repos(ACTIVITY_REPOS)))
        assert result.count == 10

    def test_no_repositories_gives_zero(self):
        assert _estimate(FakeSource()).count == 0


class TestDegradationLogging:

    def test_each_failed_tier_logs_a_warning(self, caplog):
        source = FakeSource()
        with caplog.at_level(logging.WARNING, logger="ghinsights.core.contributions"):
            _estimate(source)
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 2
        assert "exact" in warnings[0].getMessage()
        assert "approximate" in warnings[1].getMessage()

    def test_never_raises(self):
        source = FakeSource(graphql_result=ValueError("weird"), search_result=KeyError("total_count"))
        assert _estimate(source).count == 0


def test_estimate_contributions_returns_int():
    source = FakeSource(search_result={"total_count": 42})
    count = asyncio.run(estimate_contributions(source, "octocat", [], today=TODAY))
    assert count == 42
    assert isinstance(count, int)
