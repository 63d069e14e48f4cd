"""Inline match highlighting for search results.

Only literal occurrences of the query are marked. Fuzzy matches have no
literal span, so their text comes back unchanged.
"""

from __future__ import annotations

import re


HIGHLIGHT_STYLES = {
    "html": ("<mark>", "</mark>"),
    "plain": ("[[", "]]"),
}


def highlight_match(text: str, query: str, case_sensitive: bool = False, style: str = "html") -> str:
    """Wrap every occurrence of ``query`` in ``text`` with a match marker.

    Args:
        text: Field value to annotate.
        query: Literal text to mark (regex metacharacters are escaped).
        case_sensitive: Match case exactly when True.
        style: "html" for <mark>term</mark> or "plain" for [[term]].

    Returns:
        The annotated text, keeping the original casing of each matched span.
    """
    if not text or not query:
        return text

    try:
        opening, closing = HIGHLIGHT_STYLES[style]
    except KeyError:
        msg = f"Unknown highlight style: {style}"
        raise ValueError(msg) from None

    flags = 0 if case_sensitive else re.IGNORECASE
    pattern = re.compile(re.escape(query), flags)
    return pattern.sub(lambda match: f"{opening}{match.group(0)}{closing}", text)
