"""Quote computation models."""
import math
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, computed_field

from catering.services.catalog.base import CatalogEntry


class Overridable(BaseModel):
    """Base value with an optional user override."""

    base: float
    override: Optional[float] = None

    def effective(self) -> float:
        """Override if set, else the base value."""
        return self.override if self.override is not None else self.base


class ParsedToken(BaseModel):
    """One parsed line of the dish input."""

    raw_line: str
    name: str
    quantity: int
    explicit_quantity: bool = False


class LineItem(BaseModel):
    """Resolved, quantified, priced quote row."""

    entry_id: str
    name: str
    unit: str = ""
    quantity: int = 1
    price: Overridable
    cost: Overridable

    @classmethod
    def from_entry(cls, entry: CatalogEntry, quantity: int) -> "LineItem":
        return cls(
            entry_id=entry.id,
            name=entry.name,
            unit=entry.unit,
            quantity=max(1, quantity),
            price=Overridable(base=entry.selling_price),
            cost=Overridable(base=entry.cost_price),
        )

    @computed_field
    @property
    def total(self) -> float:
        return self.price.effective() * self.quantity

    @computed_field
    @property
    def profit(self) -> float:
        return (self.price.effective() - self.cost.effective()) * self.quantity


class SuggestionCandidate(BaseModel):
    """Catalog entry proposed for an unmatched line."""

    entry: CatalogEntry
    score: float


class UnmatchedEntry(BaseModel):
    """Input line that could not be resolved against the catalog."""

    raw_line: str
    # set only when the line carried an explicit quantity
    quantity: Optional[int] = None
    suggestions: List[SuggestionCandidate] = []


class MatchedLine(BaseModel):
    """Input line resolved to a catalog entry."""

    entry: CatalogEntry
    quantity: int
    explicit_quantity: bool


class MatchResult(BaseModel):
    """Matched/unmatched partition of a dish input."""

    matches: List[MatchedLine] = []
    unmatched: List[UnmatchedEntry] = []


class FeeKind(str, Enum):
    """Auxiliary fee categories."""

    TABLE = "table"
    STAFF = "staff"
    FRAME = "frame"

    def __str__(self) -> str:
        return self.value


class TableType(str, Enum):
    """Table rental options."""

    NONE = "none"
    INOX = "inox"
    EVENT = "event"

    def __str__(self) -> str:
        return self.value


class AuxiliaryFeeLine(BaseModel):
    """Non-dish charge (table rental, staff service or frame rental)."""

    kind: FeeKind
    quantity: int = 0
    price: Overridable
    cost: Overridable
    cost_overridable: bool = False

    @computed_field
    @property
    def total(self) -> float:
        return self.price.effective() * self.quantity

    @computed_field
    @property
    def total_cost(self) -> float:
        return self.cost.effective() * self.quantity


def clamp_percent(value: Optional[float]) -> float:
    """Clamp a percentage to [0, 100]; missing or non-finite values become 0."""
    if value is None:
        return 0.0
    try:
        value = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(value):
        return 0.0
    return min(100.0, max(0.0, value))


class ExportAdjustments(BaseModel):
    """Order-level modifiers applied at export time."""

    table_discount: float = 0.0
    frame_discount: float = 0.0
    total_discount: float = 0.0
    vat_percent: float = 0.0
    customer_handles_staff: bool = False
    show_individual_prices: bool = True


class QuoteTotals(BaseModel):
    """Internal totals (cost and profit view)."""

    model_config = ConfigDict(frozen=True)

    dishes_total: float = 0.0
    dishes_cost: float = 0.0
    dishes_profit: float = 0.0
    table_total: float = 0.0
    table_cost: float = 0.0
    staff_total: float = 0.0
    staff_cost: float = 0.0
    frame_total: float = 0.0
    frame_cost: float = 0.0
    grand_total: float = 0.0
    total_cost: float = 0.0
    total_profit: float = 0.0


class ExportTotals(BaseModel):
    """Customer-facing totals after export adjustments."""

    model_config = ConfigDict(frozen=True)

    final_table_total: float = 0.0
    final_frame_total: float = 0.0
    staff_component: float = 0.0
    subtotal: float = 0.0
    subtotal_cost: float = 0.0
    grand_total_final: float = 0.0
    total_cost_final: float = 0.0
    total_profit_final: float = 0.0
    price_per_table: float = 0.0
    vat_amount: float = 0.0
    total_with_vat: float = 0.0


class DisplayRow(BaseModel):
    """One row of a customer-facing quote."""

    name: str
    quantity: int
    unit: str = ""
    unit_price: Optional[float] = None
    total: Optional[float] = None


class QuoteDisplay(BaseModel):
    """Customer-facing rendering data for the export collaborators."""

    show_individual_prices: bool
    rows: List[DisplayRow] = []
    table_count: int = 0
    price_per_table: float = 0.0
    grand_total: float = 0.0
    vat_percent: float = 0.0
    vat_amount: float = 0.0
    total_with_vat: float = 0.0
