"""Tests for configuration loading."""

from datetime import date

import pytest

from ghinsights.core.config import Credentials, Settings, load_settings
from ghinsights.core.errors import ConfigurationError

ENV_VARS = ["GITHUB_TOKEN", "GITHUB_USERNAME", "GITHUB_API_URL", "GITHUB_GRAPHQL_URL", "GITHUB_TIMEOUT", "GHINSIGHTS_LOG_LEVEL"]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("ghinsights.core.config.load_dotenv", lambda *args, **kwargs: False)


class TestLoadSettings:

    def test_defaults(self, tmp_path):
        s = load_settings(str(tmp_path / "missing.toml"))
        assert s.api_url == "https://api.github.com"
        assert s.per_page == 100
        assert s.activity_cutoff == date(2024, 1, 1)
        assert s.per_repo_estimate == 15
        assert s.log_level == "WARNING"

    def test_config_file_values(self, tmp_path):
        cfg = tmp_path / "config.toml"
        cfg.write_text(
            '[github]\nusername = "from-file"\nper_page = 500\ntimeout = 5\n'
            "[contributions]\nactivity_cutoff = 2025-01-01\nper_repo_estimate = 10\n"
            '[logging]\nlevel = "info"\n',
            encoding="utf-8",
        )
        s = load_settings(str(cfg))
        assert s.username == "from-file"
        assert s.per_page == 100
        assert s.timeout == 5.0
        assert s.activity_cutoff == date(2025, 1, 1)
        assert s.per_repo_estimate == 10
        assert s.log_level == "INFO"

    def test_environment_overrides_file(self, tmp_path, monkeypatch):
        cfg = tmp_path / "config.toml"
        cfg.write_text('[github]\nusername = "from-file"\n', encoding="utf-8")
        monkeypatch.setenv("GITHUB_USERNAME", "from-env")
        monkeypatch.setenv("GITHUB_TOKEN", "t0ken")
        monkeypatch.setenv("GITHUB_API_URL", "https://ghe.example.com/api/v3/")
        s = load_settings(str(cfg))
        assert s.credentials() == Credentials(token="t0ken", username="from-env")
        assert s.api_url == "https://ghe.example.com/api/v3"

    def test_invalid_values_raise(self, tmp_path):
        cfg = tmp_path / "config.toml"
        cfg.write_text('[contributions]\nactivity_cutoff = "yesterday"\n', encoding="utf-8")
        with pytest.raises(ConfigurationError, match="activity_cutoff"):
            load_settings(str(cfg))

    def test_invalid_toml_raises(self, tmp_path):
        cfg = tmp_path / "config.toml"
        cfg.write_text("[github\n", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            load_settings(str(cfg))

    def test_unknown_log_level_raises(self, tmp_path, monkeypatch):
        monkeypatch.setenv("GHINSIGHTS_LOG_LEVEL", "chatty")
        with pytest.raises(ConfigurationError, match="log level"):
            load_settings(str(tmp_path / "missing.toml"))


class TestCredentials:

    def test_both_missing(self):
        with pytest.raises(ConfigurationError, match="GITHUB_TOKEN, GITHUB_USERNAME"):
            Settings().credentials()

    def test_blank_token(self):
        with pytest.raises(ConfigurationError, match="GITHUB_TOKEN"):
            Settings(token="  ", username="octocat").credentials()

    def test_strips_whitespace(self):
        assert Settings(token=" t ", username=" u\n").credentials() == Credentials(token="t", username="u")
