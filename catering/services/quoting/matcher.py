"""Dish input parsing and catalog matching."""
import logging
import re
from typing import List, Optional, Sequence

from catering.services.catalog.base import CatalogEntry
from catering.services.quoting import constants
from catering.services.quoting.models import (
    MatchedLine,
    MatchResult,
    ParsedToken,
    SuggestionCandidate,
    UnmatchedEntry,
)
from catering.services.quoting.text import find_similar_entries, normalize

logger = logging.getLogger(__name__)

_RE_SPLIT = re.compile(r"[\n,]+")
_RE_ORDINAL = re.compile(r"^\d+\.\s*")
# "Gà luộc x 10", "Gà luộc - 10"
_RE_TRAILING_QTY = re.compile(r"^(.+?)\s*[xX×\-]\s*(\d+)$")
# "10 x Gà luộc"; a bare leading number ("10 người") is part of the name
_RE_LEADING_QTY = re.compile(r"^(\d+)\s*[xX×]\s*(.+)$")
# Autocomplete also accepts "-" and a missing separator after a leading number
_RE_TYPING_LEADING_QTY = re.compile(r"^\d+\s*[xX×\-]?\s*(.+)$")


def split_lines(text: str) -> List[str]:
    """Split dish input on newlines and commas, dropping blank lines."""
    lines = [line.strip() for line in _RE_SPLIT.split(text or "")]
    return [line for line in lines if line]


def parse_line(line: str, default_quantity: int) -> Optional[ParsedToken]:
    """
    Parse one dish line into a name and a quantity.

    Args:
        line: Raw input line
        default_quantity: Quantity used when the line has none (table count)

    Returns:
        ParsedToken, or None if the line is only an ordinal ("3.")
    """
    cleaned = _RE_ORDINAL.sub("", line.strip(), count=1).strip()
    if not cleaned:
        return None

    match = _RE_TRAILING_QTY.match(cleaned)
    if match:
        name, qty = match.group(1), match.group(2)
    else:
        match = _RE_LEADING_QTY.match(cleaned)
        if match:
            qty, name = match.group(1), match.group(2)

    if not match:
        return ParsedToken(
            raw_line=line,
            name=cleaned,
            quantity=default_quantity,
            explicit_quantity=False,
        )

    # "x 0" falls back to the default but still counts as explicit
    quantity = int(qty) or default_quantity
    return ParsedToken(
        raw_line=line,
        name=name.strip(),
        quantity=quantity,
        explicit_quantity=True,
    )


def find_entry(name: str, entries: Sequence[CatalogEntry]) -> Optional[CatalogEntry]:
    """
    First catalog entry matching ``name`` by containment.

    An entry matches when its normalized name contains the normalized
    candidate, or when the candidate contains the first two words of the
    entry name.
    """
    candidate = normalize(name)
    for entry in entries:
        entry_name = normalize(entry.name)
        head = " ".join(entry_name.split(" ")[:2])
        if candidate in entry_name or head in candidate:
            return entry
    return None


def suggest(
    query: str,
    entries: Sequence[CatalogEntry],
    threshold: float = constants.SUGGESTION_THRESHOLD,
    limit: int = constants.SUGGESTION_LIMIT,
) -> List[SuggestionCandidate]:
    """Ranked suggestions for an unresolved dish name."""
    return [
        SuggestionCandidate(entry=entry, score=score)
        for entry, score in find_similar_entries(query, entries, threshold, limit)
    ]


def match_dishes(
    text: str, entries: Sequence[CatalogEntry], default_quantity: int
) -> MatchResult:
    """
    Resolve a multi-line dish input against the catalog.

    Unresolved lines are kept verbatim with their top suggestions; they are
    never an error.
    """
    result = MatchResult()
    for line in split_lines(text):
        token = parse_line(line, default_quantity)
        if token is None:
            continue

        entry = find_entry(token.name, entries)
        if entry is not None:
            result.matches.append(
                MatchedLine(
                    entry=entry,
                    quantity=token.quantity,
                    explicit_quantity=token.explicit_quantity,
                )
            )
        else:
            result.unmatched.append(
                UnmatchedEntry(
                    raw_line=line,
                    quantity=token.quantity if token.explicit_quantity else None,
                    suggestions=suggest(token.name, entries),
                )
            )

    logger.debug(
        f"[MATCHER] {len(result.matches)} matched, {len(result.unmatched)} unmatched"
    )
    return result


def autocomplete(fragment: str, entries: Sequence[CatalogEntry]) -> List[SuggestionCandidate]:
    """Suggestions for the dish line currently being typed."""
    term = (fragment or "").strip()
    match = _RE_TRAILING_QTY.match(term) or _RE_TYPING_LEADING_QTY.match(term)
    if match:
        term = match.group(1).strip() or term

    if len(term) < constants.AUTOCOMPLETE_MIN_LENGTH:
        return []

    return suggest(
        term,
        entries,
        threshold=constants.AUTOCOMPLETE_THRESHOLD,
        limit=constants.AUTOCOMPLETE_LIMIT,
    )
