"""Configuration management for ghinsights.

This module handles loading and merging configuration from multiple sources:
1. Environment variables (highest priority, `.env` files are honoured)
2. TOML configuration file (medium priority)
3. Default values (lowest priority)

Example config.toml:
    ```toml
    [github]
    username = "octocat"
    timeout = 20.0

    [contributions]
    activity_cutoff = "2024-01-01"
    per_repo_estimate = 15

    [logging]
    level = "INFO"
    ```

Environment Variables:
    GITHUB_TOKEN: Access token (required, never read from config.toml)
    GITHUB_USERNAME: Profile to summarize (required)
    GITHUB_API_URL: Override REST base URL
    GITHUB_GRAPHQL_URL: Override GraphQL endpoint
    GITHUB_TIMEOUT: Override HTTP timeout in seconds
    GHINSIGHTS_LOG_LEVEL: Override log level
"""
from __future__ import annotations
from dataclasses import dataclass
from datetime import date
from pathlib import Path
import logging
import os
import tomllib  # Python 3.11+

from dotenv import load_dotenv

from .errors import ConfigurationError

GH_API = "https://api.github.com"
GH_GRAPHQL = "https://api.github.com/graphql"
MAX_PER_PAGE = 100


@dataclass(frozen=True)
class Credentials:
    """Access token plus the login whose profile is aggregated."""

    token: str
    username: str


@dataclass
class Settings:
    """Runtime configuration derived from `config.toml` and environment.

    Values are merged with precedence: environment > config file > defaults.

    Attributes:
        token: GitHub access token.
        username: GitHub login to summarize.
        api_url: Base URL of the REST API.
        graphql_url: GraphQL endpoint.
        per_page: Repository page size (GitHub caps this at 100).
        timeout: HTTP timeout in seconds.
        activity_cutoff: Repositories updated on/after this date count as
            active for the last-resort contribution estimate.
        per_repo_estimate: Contributions assumed per active repository.
        log_level: Logging level name used by the CLI.
    """

    token: str | None = None
    username: str | None = None

    api_url: str = GH_API
    graphql_url: str = GH_GRAPHQL
    per_page: int = MAX_PER_PAGE
    timeout: float = 20.0

    activity_cutoff: date = date(2024, 1, 1)
    per_repo_estimate: int = 15

    log_level: str = "WARNING"

    def credentials(self) -> Credentials:
        """Return the credential pair or raise if either half is missing.

        Raises:
            ConfigurationError: If the token or username is unset or blank.
        """
        missing = [
            name for name, value in (("GITHUB_TOKEN", self.token), ("GITHUB_USERNAME", self.username))
            if not (value and value.strip())
        ]
        if missing:
            raise ConfigurationError(f"Missing required setting(s): {', '.join(missing)}")
        return Credentials(token=self.token.strip(), username=self.username.strip())


def load_config(path: str = "config.toml") -> dict:
    """Load a TOML config file into a dictionary.

    Args:
        path: Path to the TOML configuration file.

    Returns:
        Dictionary containing configuration data, or empty dict if file missing.

    Raises:
        ConfigurationError: If the file exists but is not valid TOML.
    """
    p = Path(path)
    if not p.exists():
        return {}
    with p.open("rb") as f:
        try:
            return tomllib.load(f)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigurationError(f"Invalid TOML in {path}: {exc}") from exc


def _as_int(name: str, value) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}") from exc


def _as_float(name: str, value) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from exc


def _as_date(name: str, value) -> date:
    # tomllib already returns date objects for bare TOML dates
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an ISO date, got {value!r}") from exc


def load_settings(config_path: str | None = None) -> Settings:
    """Create a `Settings` object from config file and environment variables.

    Args:
        config_path: Path to TOML config file. Defaults to "config.toml".

    Returns:
        Settings object with merged configuration from all sources. The
        credentials are not validated here; call `Settings.credentials()`.

    Example:
        ```python
        from ghinsights.core.config import load_settings

        settings = load_settings()
        creds = settings.credentials()
        ```
    """
    load_dotenv()
    cfg = load_config(config_path or "config.toml")

    s = Settings()

    # github section
    gh = cfg.get("github", {})
    s.token = os.getenv("GITHUB_TOKEN")
    s.username = os.getenv("GITHUB_USERNAME", gh.get("username"))
    s.api_url = os.getenv("GITHUB_API_URL", gh.get("api_url", s.api_url)).rstrip("/")
    s.graphql_url = os.getenv("GITHUB_GRAPHQL_URL", gh.get("graphql_url", s.graphql_url))
    s.per_page = max(1, min(MAX_PER_PAGE, _as_int("per_page", gh.get("per_page", s.per_page))))
    s.timeout = _as_float("timeout", os.getenv("GITHUB_TIMEOUT", gh.get("timeout", s.timeout)))

    # contributions section
    co = cfg.get("contributions", {})
    s.activity_cutoff = _as_date("activity_cutoff", co.get("activity_cutoff", s.activity_cutoff))
    s.per_repo_estimate = _as_int("per_repo_estimate", co.get("per_repo_estimate", s.per_repo_estimate))

    # logging section
    lg = cfg.get("logging", {})
    s.log_level = os.getenv("GHINSIGHTS_LOG_LEVEL", lg.get("level", s.log_level)).upper()
    if s.log_level not in logging.getLevelNamesMapping():
        raise ConfigurationError(f"Unknown log level: {s.log_level}")

    return s
