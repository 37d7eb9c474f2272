from __future__ import annotations

"""Bounded evidence excerpts anchored near the first matched query term."""

from docqa.rag.types import TermSet

TRUNCATION_MARKER = "..."
DEFAULT_SNIPPET_CHARS = 300
COMBINED_SNIPPET_CHARS = 500


def extract_snippet(
    text: str,
    terms: TermSet,
    max_chars: int = DEFAULT_SNIPPET_CHARS,
) -> str:
    """Return at most max_chars of text around the first term found.

    Terms are tried in priority order and matched case-insensitively; the
    excerpt itself keeps the original casing. A marker is appended whenever
    the excerpt stops before the end of the text.
    """
    if max_chars <= 0:
        return ""
    lower = text.lower()
    for term in terms:
        idx = lower.find(term)
        if idx == -1:
            continue
        lead = max_chars * 2 // 5
        start = max(0, idx - lead)
        end = min(len(text), idx - lead + max_chars)
        return _with_marker(text[start:end], end < len(text))
    return _with_marker(text[:max_chars], len(text) > max_chars)


def _with_marker(excerpt: str, truncated: bool) -> str:
    return excerpt + TRUNCATION_MARKER if truncated else excerpt
