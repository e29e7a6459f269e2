"""Quote line-item builder."""
import logging
from typing import List, Optional

from catering.services.catalog.base import CatalogEntry
from catering.services.quoting.models import (
    LineItem,
    MatchResult,
    SuggestionCandidate,
    UnmatchedEntry,
)

logger = logging.getLogger(__name__)


class LineItemBuilder:
    """Holds the line items and unmatched lines of one quote draft."""

    def __init__(self):
        self._items: List[LineItem] = []
        self._unmatched: List[UnmatchedEntry] = []

    @property
    def items(self) -> List[LineItem]:
        """Deep copies of the current line items."""
        return [item.model_copy(deep=True) for item in self._items]

    @property
    def unmatched(self) -> List[UnmatchedEntry]:
        """Deep copies of the current unmatched lines."""
        return [entry.model_copy(deep=True) for entry in self._unmatched]

    def get_item(self, entry_id: str) -> Optional[LineItem]:
        """Get the live line item for a catalog id."""
        for item in self._items:
            if item.entry_id == entry_id:
                return item
        return None

    def clear(self) -> None:
        """Drop all line items and unmatched lines."""
        self._items = []
        self._unmatched = []

    def load(self, result: MatchResult) -> None:
        """Replace the current state with a fresh parse result."""
        self.clear()
        for matched in result.matches:
            self.add_or_merge_match(
                matched.entry, matched.quantity, matched.explicit_quantity
            )
        self._unmatched = [entry.model_copy(deep=True) for entry in result.unmatched]

    def add_or_merge_match(
        self, entry: CatalogEntry, quantity: int, explicit: bool
    ) -> LineItem:
        """
        Add a matched entry, merging into an existing line for the same id.

        Repeats only add their quantity when it was explicit, so unquantified
        repeated mentions do not inflate the line.
        """
        quantity = max(1, int(quantity))
        existing = self.get_item(entry.id)
        if existing is not None:
            if explicit:
                existing.quantity += quantity
            return existing

        item = LineItem.from_entry(entry, quantity)
        self._items.append(item)
        return item

    def update_quantity(self, entry_id: str, quantity: int) -> Optional[LineItem]:
        """Set quantity, floored at 1."""
        item = self._require(entry_id)
        if item is not None:
            item.quantity = max(1, int(quantity))
        return item

    def update_selling_price_override(
        self, entry_id: str, price: float
    ) -> Optional[LineItem]:
        """Override the selling price of one line, floored at 0."""
        item = self._require(entry_id)
        if item is not None:
            item.price.override = max(0.0, float(price))
        return item

    def update_cost_price_override(
        self, entry_id: str, cost: float
    ) -> Optional[LineItem]:
        """Override the cost price of one line, floored at 0."""
        item = self._require(entry_id)
        if item is not None:
            item.cost.override = max(0.0, float(cost))
        return item

    def remove_line_item(self, entry_id: str) -> bool:
        """Delete a line. Returns whether a line was removed."""
        before = len(self._items)
        self._items = [item for item in self._items if item.entry_id != entry_id]
        return len(self._items) < before

    def accept_suggestion(
        self, raw_line: str, candidate: SuggestionCandidate, quantity: int
    ) -> LineItem:
        """Resolve an unmatched line with one of its suggestions."""
        item = self.add_or_merge_match(candidate.entry, quantity, explicit=True)
        self._unmatched = [
            entry for entry in self._unmatched if entry.raw_line != raw_line
        ]
        return item

    def _require(self, entry_id: str) -> Optional[LineItem]:
        item = self.get_item(entry_id)
        if item is None:
            logger.debug(f"[BUILDER] No line item for {entry_id}, ignoring edit")
        return item
