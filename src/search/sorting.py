"""
Sort hints inferred from a free-text prompt.

When the caller asks for no explicit ordering, keywords in the prompt
pick the backend sort field: "top saas companies" sorts by data score,
"established manufacturers" oldest-first by founding year, and so on.
"""
from __future__ import annotations

SORT_SCORE = "meta.score"
SORT_REVENUE = "finances.revenue"
SORT_EMPLOYEES = "about.totalEmployees"
SORT_VISITORS = "analytics.monthlyVisitors"
SORT_FOUNDED = "about.yearFounded"

_RANKING_WORDS = ("top", "best", "largest", "biggest")

# Checked in order after a ranking word; first hit wins.
_RANKING_TOPICS: list[tuple[tuple[str, ...], str]] = [
    (("saas", "software", "tech", "startup"), SORT_SCORE),
    (("revenue", "profitable", "earning"), SORT_REVENUE),
    (("employees", "workforce", "staff"), SORT_EMPLOYEES),
    (("visitors", "traffic", "popular"), SORT_VISITORS),
]

_NEW_WORDS = ("new", "recent", "startup", "young")
_OLD_WORDS = ("old", "established", "historic")
_QUALITY_WORDS = ("high score", "quality", "reliable")


def _mentions(text: str, words: tuple[str, ...]) -> bool:
    return any(w in text for w in words)


def infer_sort(prompt: str) -> tuple[str | None, str]:
    """Return ``(sort_key, sort_order)``; ``sort_key`` is None when nothing matches."""
    text = prompt.lower()

    if _mentions(text, _RANKING_WORDS):
        for words, key in _RANKING_TOPICS:
            if _mentions(text, words):
                return key, "desc"
        return SORT_SCORE, "desc"
    if _mentions(text, _NEW_WORDS):
        return SORT_FOUNDED, "desc"
    if _mentions(text, _OLD_WORDS):
        return SORT_FOUNDED, "asc"
    if _mentions(text, _QUALITY_WORDS):
        return SORT_SCORE, "desc"
    return None, "desc"
