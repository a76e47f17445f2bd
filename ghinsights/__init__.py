"""GitHub profile insights.

Aggregates a GitHub profile into one immutable summary: star and fork
totals, a language histogram, this year's contribution count and README
previews of the most recently updated repositories. Usable as a CLI or as a
Python SDK.

Quick Start:
    ```python
    import asyncio
    import ghinsights

    creds = ghinsights.Credentials(token="ghp_...", username="octocat")
    summary = asyncio.run(ghinsights.build_profile_summary(creds))

    # or, reading GITHUB_TOKEN / GITHUB_USERNAME from the environment
    summary = ghinsights.load_profile_summary()
    ```

CLI Usage:
    ```bash
    ghinsights --format json
    ghinsights --format md --out profile.md
    ```
"""

__version__ = "0.1.0"

# Re-export main functionality for easy importing
from .core import (
    build_profile_summary,
    load_profile_summary,
    extract_excerpt,
    estimate_contributions,
    aggregate,
    load_settings,
    Settings,
    Credentials,
    ConfigurationError,
    RemoteFetchError,
    ProfileSummary,
)

__all__ = [
    "build_profile_summary",
    "load_profile_summary",
    "extract_excerpt",
    "estimate_contributions",
    "aggregate",
    "load_settings",
    "Settings",
    "Credentials",
    "ConfigurationError",
    "RemoteFetchError",
    "ProfileSummary",
]
