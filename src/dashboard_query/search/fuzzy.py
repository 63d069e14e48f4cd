"""Fuzzy scoring for typo-tolerant record search.

Scores a query against one field value on a 0..1 scale:
- Exact-match mode: 1.0 on equality, else 0.0
- Substring hit: 0.9 plus up to 0.1 for how much of the field the query covers
- Otherwise (fuzzy mode): normalized Levenshtein similarity

Substring hits therefore sit in [0.9, 1.0]. Fuzzy similarity is not capped, so
a near-identical long string can outrank a short substring hit.
"""

from __future__ import annotations

from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from dashboard_query.domain.search import SearchOptions


SUBSTRING_BASE_SCORE = 0.9
SUBSTRING_COVERAGE_WEIGHT = 0.1


def levenshtein_distance(s1: str, s2: str, max_distance: int | None = None) -> int:
    """Calculate the Levenshtein (edit) distance between two strings.

    Unit cost for insertion, deletion and substitution. Keeps only two DP rows.

    Args:
        s1: First string.
        s2: Second string.
        max_distance: If provided, return max_distance+1 as soon as the
            distance is guaranteed to exceed it.

    Returns:
        The minimum number of single-character edits turning s1 into s2.

    Examples:
        >>> levenshtein_distance("kitten", "sitting")
        3
        >>> levenshtein_distance("", "abc")
        3
    """
    if not s1:
        return len(s2)
    if not s2:
        return len(s1)

    # Shorter string indexes the row
    if len(s1) > len(s2):
        s1, s2 = s2, s1

    width = len(s1)
    if max_distance is not None and len(s2) - width > max_distance:
        return max_distance + 1

    previous = list(range(width + 1))
    current = [0] * (width + 1)

    for row, char2 in enumerate(s2, start=1):
        current[0] = row
        for col, char1 in enumerate(s1, start=1):
            current[col] = min(
                previous[col] + 1,
                current[col - 1] + 1,
                previous[col - 1] + (char1 != char2),
            )

        if max_distance is not None and min(current) > max_distance:
            return max_distance + 1

        previous, current = current, previous

    return previous[width]


def similarity(s1: str, s2: str) -> float:
    """Normalized edit similarity: 1.0 for identical strings, 0.0 for disjoint ones."""
    longest = max(len(s1), len(s2))
    if longest == 0:
        return 1.0
    return 1.0 - levenshtein_distance(s1, s2) / longest


def substring_score(query: str, text: str) -> float:
    """Score for a query found literally inside ``text``."""
    return min(1.0, SUBSTRING_BASE_SCORE + (len(query) / len(text)) * SUBSTRING_COVERAGE_WEIGHT)


def score_text(query: str, text: str, options: SearchOptions) -> float:
    """Score how well ``query`` matches a single field value.

    Args:
        query: Raw query text.
        text: Stringified field value.
        options: Controls case folding, exact-match mode and fuzzy fallback.

    Returns:
        Score in [0.0, 1.0]; 0.0 when either side is empty.
    """
    if not query or not text:
        return 0.0

    if not options.case_sensitive:
        query = query.lower()
        text = text.lower()

    if options.exact_match:
        return 1.0 if query == text else 0.0

    if query in text:
        return substring_score(query, text)

    if not options.fuzzy:
        return 0.0

    return similarity(query, text)
