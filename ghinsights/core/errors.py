"""Exception types raised across the ghinsights public boundary.

Only two failures ever leave `build_profile_summary`:

- `ConfigurationError`: credentials or settings are missing/invalid. Raised
  before any network traffic happens.
- `RemoteFetchError`: the primary user or repository lookup failed.

Contribution-estimation and README-enrichment problems are absorbed inside
the pipeline and show up only as log records and fallback values.
"""
from __future__ import annotations
from typing import Optional


class GhInsightsError(Exception):
    """Base class for all ghinsights errors."""


class ConfigurationError(GhInsightsError):
    """Credentials or settings are absent or malformed."""


class RemoteFetchError(GhInsightsError):
    """A GitHub API call failed or returned an unusable payload.

    Attributes:
        status_code: HTTP status of the failing response, or None when the
            request never produced one (network error, bad JSON, ...).
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
