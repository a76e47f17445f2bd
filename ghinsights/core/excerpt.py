"""README excerpt extraction.

Turns a free-form README into a short plain-text preview. READMEs vary
wildly, so this is a two-pass heuristic rather than a markdown parser: it
must never raise, never return an empty preview, and never leak raw markup
(emphasis markers, link syntax) into the result.

Example:
    ```python
    from ghinsights.core.excerpt import extract_excerpt

    excerpt = extract_excerpt(readme_text, description="A cool tool")
    excerpt.preview   # short plain text
    excerpt.is_real   # True when the README itself supplied the text
    ```
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional
import re

NO_README_CONTENT = "No README content available"

PREVIEW_MAX_CHARS = 280
FALLBACK_MAX_CHARS = 250
PASS_A_MAX_LINES = 4
PASS_A_MIN_LINE = 15
PASS_B_MIN_LINE = 20
MIN_PASS_A_RESULT = 30
MIN_PREVIEW = 15

_PASS_A_SKIP_PREFIXES = ("![", "[![", "```", "---", "|", "- [")
_PASS_B_SKIP_PREFIXES = ("#", "!", "```", "---", "|")
_PASS_A_SKIP_WORDS = ("installation", "license")

_SUBHEADING = re.compile(r"^##+ ")
_EMPHASIS = re.compile(r"[*_`]")
_LINK = re.compile(r"\[([^\]]+)\]\([^)]+\)")
_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class Excerpt:
    preview: str
    is_real: bool


def _clean_markdown(text: str, max_chars: int) -> str:
    """Strip emphasis, keep link labels, collapse whitespace and cap length."""
    text = _EMPHASIS.sub("", text)
    # [text](url) -> text
    text = _LINK.sub(r"\1", text)
    text = _WHITESPACE.sub(" ", text).strip()
    return text[:max_chars]


def _is_prose(line: str) -> bool:
    """Return True for a line worth keeping in the first pass.

    Rejects short lines, images, badges, code fences, rules, table rows,
    table-of-contents links, sub-headings and install/license boilerplate.
    """
    if len(line) <= PASS_A_MIN_LINE:
        return False
    if line.startswith(_PASS_A_SKIP_PREFIXES) or _SUBHEADING.match(line):
        return False
    lowered = line.lower()
    return not any(word in lowered for word in _PASS_A_SKIP_WORDS)


def _is_descriptive(line: str) -> bool:
    """Return True for a sentence-length line that is not markup."""
    return len(line) > PASS_B_MIN_LINE and not line.startswith(_PASS_B_SKIP_PREFIXES)


def fallback_preview(description: Optional[str], placeholder: str) -> str:
    """Return the stored description, or `placeholder` when it is blank.

    Args:
        description: Repository description, possibly None or whitespace.
        placeholder: Non-empty text used when the description has no content.

    Returns:
        The stripped description or the placeholder; never empty.
    """
    return (description or "").strip() or placeholder


def _first_paragraph(lines: List[str]) -> str:
    """Pass A: the first few prose lines, skipping the title heading."""
    kept = [ln for i, ln in enumerate(lines) if not (i == 0 and ln.startswith("# ")) and _is_prose(ln)]
    if not kept:
        return ""
    return _clean_markdown(" ".join(kept[:PASS_A_MAX_LINES]), PREVIEW_MAX_CHARS)


def _first_descriptive_line(lines: List[str]) -> Optional[str]:
    """Pass B: any single line that looks like a sentence."""
    for ln in lines:
        if _is_descriptive(ln):
            return _clean_markdown(ln, FALLBACK_MAX_CHARS)
    return None


def extract_excerpt(raw_text: str, description: Optional[str] = None) -> Excerpt:
    """Return a short plain-text preview of a README.

    Args:
        raw_text: Full decoded README text.
        description: The repository's stored description, used when the
            README yields nothing usable.

    Returns:
        An `Excerpt`; ``is_real`` is True only when the README supplied the
        preview. The preview is never empty.
    """
    lines = [ln.strip() for ln in (raw_text or "").split("\n")]

    content = _first_paragraph(lines)
    if len(content) < MIN_PASS_A_RESULT:
        fallback = _first_descriptive_line(lines)
        if fallback is not None:
            content = fallback

    if len(content) > MIN_PREVIEW:
        return Excerpt(preview=content, is_real=True)
    return Excerpt(preview=fallback_preview(description, NO_README_CONTENT), is_real=False)
