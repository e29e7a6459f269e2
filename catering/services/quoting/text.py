"""Text normalization and fuzzy similarity for dish names."""
import re
import unicodedata
from typing import List, Sequence, Tuple

from catering.services.catalog.base import CatalogEntry

_RE_NON_ALNUM = re.compile(r"[^a-z0-9\s]")
_RE_WHITESPACE = re.compile(r"\s+")


def strip_diacritics(text: str) -> str:
    """Drop combining marks after NFD decomposition."""
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize(text: str) -> str:
    """Lower-case and strip diacritics (containment matching)."""
    return strip_diacritics(text.lower())


def normalize_for_matching(text: str) -> str:
    """Normalize text for fuzzy matching.

    Lower-cases, strips diacritics, maps ``đ`` to ``d`` (it has no NFD
    decomposition), keeps only ASCII letters, digits and spaces, and
    collapses whitespace.
    """
    text = normalize(text).replace("đ", "d")
    text = _RE_NON_ALNUM.sub("", text)
    return _RE_WHITESPACE.sub(" ", text).strip()


def levenshtein_distance(s1: str, s2: str) -> int:
    """Calculate Levenshtein distance between two strings"""
    if len(s1) < len(s2):
        return levenshtein_distance(s2, s1)

    if len(s2) == 0:
        return len(s1)

    previous_row = list(range(len(s2) + 1))
    for i, c1 in enumerate(s1):
        current_row = [i + 1]
        for j, c2 in enumerate(s2):
            insertions = previous_row[j + 1] + 1
            deletions = current_row[j] + 1
            substitutions = previous_row[j] + (c1 != c2)
            current_row.append(min(insertions, deletions, substitutions))
        previous_row = current_row

    return previous_row[-1]


def similarity(query: str, name: str) -> float:
    """
    Similarity score between a query and a catalog name, in [0, 1].

    Three tiers, tried in order:
    - containment: one normalized string contains the other,
      0.7 to 1.0 scaled by the length ratio
    - token coverage: more than half of the query tokens (2+ chars)
      appear inside a name token or vice versa, 0.5 to 0.9
    - Levenshtein ratio ``1 - distance / max_len``
    """
    q = normalize_for_matching(query)
    n = normalize_for_matching(name)

    if not q and not n:
        return 1.0
    if not q or not n:
        return 0.0

    if q in n or n in q:
        min_len = min(len(q), len(n))
        max_len = max(len(q), len(n))
        return 0.7 + 0.3 * min_len / max_len

    query_tokens = q.split(" ")
    name_tokens = n.split(" ")
    matched = 0
    for qt in query_tokens:
        if len(qt) < 2:
            continue
        if any(nt in qt or qt in nt for nt in name_tokens):
            matched += 1

    token_score = matched / len(query_tokens) if query_tokens else 0.0
    if token_score > 0.5:
        return 0.5 + token_score * 0.4

    max_len = max(len(q), len(n))
    return 1.0 - levenshtein_distance(q, n) / max_len


def find_similar_entries(
    query: str,
    entries: Sequence[CatalogEntry],
    threshold: float,
    limit: int,
) -> List[Tuple[CatalogEntry, float]]:
    """
    Rank catalog entries by similarity to ``query``.

    Returns at most ``limit`` ``(entry, score)`` pairs with
    ``score >= threshold``, highest first. Equal scores keep catalog order.
    """
    scored = []
    for entry in entries:
        score = similarity(query, entry.name)
        if score >= threshold:
            scored.append((entry, score))

    # sort is stable, so ties stay in catalog order
    scored.sort(key=lambda pair: pair[1], reverse=True)
    return scored[:limit]
