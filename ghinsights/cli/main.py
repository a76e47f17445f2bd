"""Command-line interface for ghinsights.

Loads settings, builds one `ProfileSummary` and prints it as JSON or
Markdown. All aggregation happens in `ghinsights.core`; this module only
renders.

Usage:
    ```bash
    # JSON to stdout
    GITHUB_TOKEN=... GITHUB_USERNAME=octocat ghinsights

    # Markdown profile card written to a file
    ghinsights --format md --out profile.md
    ```

Configuration:
    The CLI supports configuration via:
    - Environment variables (and a `.env` file)
    - config.toml file (lowest priority)
"""
from __future__ import annotations
from typing import List
import argparse
import logging
import os
import sys

from ..core.config import load_settings
from ..core.errors import ConfigurationError, RemoteFetchError
from ..core.excerpt import PREVIEW_MAX_CHARS
from ..core.models import ProfileSummary
from ..core.profile import load_profile_summary

log = logging.getLogger(__name__)

BAR_WIDTH = 20


def _language_bar(percentage: float) -> str:
    filled = round(percentage / 100 * BAR_WIDTH)
    return "█" * filled + "░" * (BAR_WIDTH - filled)


def to_markdown(summary: ProfileSummary) -> str:
    """Render a summary as a Markdown profile card.

    Language percentages are relative to ``total_language_repos`` (the top
    languages only), so they add up to 100.
    """
    user = summary.user
    lines: List[str] = [f"# {user.name or user.login} (@{user.login})"]
    if user.bio:
        lines += ["", user.bio]

    lines += [
        "",
        "## Stats",
        "",
        f"- Repositories: {summary.total_repos}",
        f"- Stars: {summary.total_stars}",
        f"- Forks: {summary.total_forks}",
        f"- Followers: {summary.followers}",
        f"- Following: {summary.following}",
        f"- Contributions this year: {summary.total_contributions}",
    ]

    if summary.top_languages:
        lines += ["", "## Languages", ""]
        for lc in summary.top_languages:
            pct = lc.percentage(summary.total_language_repos)
            lines.append(f"- {lc.language} `{_language_bar(pct)}` {pct:.1f}% ({lc.count} repos)")

    if summary.recent_repos:
        lines += ["", "## Recent repositories"]
        for repo in summary.recent_repos:
            tag = " · live docs" if repo.has_real_readme else ""
            preview = repo.readme_preview
            if len(preview) >= PREVIEW_MAX_CHARS:
                preview += "..."
            lines += [
                "",
                f"### [{repo.name}]({repo.html_url})",
                f"★ {repo.stargazers} · forks {repo.forks}{tag}",
                "",
                preview,
            ]

    return "\n".join(lines) + "\n"


def main(argv: List[str] | None = None) -> None:
    """Entry point for the CLI.

    Exits with status 1 and prints the error instead of a summary when the
    configuration is incomplete or GitHub cannot be reached.
    """
    p = argparse.ArgumentParser(prog="ghinsights", description="Summarize a GitHub profile.")
    p.add_argument("--format", choices=["json", "md"], default="json", help="Output format")
    p.add_argument("--out", help="Write to file instead of stdout")
    p.add_argument("--config", help="Path to config.toml (defaults to ./config.toml if present)")
    p.add_argument("-v", "--verbose", action="store_true", help="Log progress at INFO level")

    args = p.parse_args(argv)

    try:
        s = load_settings(args.config or "config.toml")
    except ConfigurationError as exc:
        print(f"error: {exc}", file=sys.stderr)
        sys.exit(1)

    logging.basicConfig(
        level=logging.INFO if args.verbose else s.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s — %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        summary = load_profile_summary(settings=s)
    except (ConfigurationError, RemoteFetchError) as exc:
        log.debug("Summary failed", exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        sys.exit(1)

    if args.format == "json":
        payload = summary.model_dump_json(indent=2)
    else:
        payload = to_markdown(summary)

    if args.out:
        os.makedirs(os.path.dirname(args.out) or ".", exist_ok=True)
        with open(args.out, "w", encoding="utf-8") as f:
            f.write(payload)
        print(f"wrote {args.out} ({len(summary.recent_repos)} recent repos)")
    else:
        print(payload)


if __name__ == "__main__":
    main()
