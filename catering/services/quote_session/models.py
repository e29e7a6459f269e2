"""Quote session models."""
import logging
import math
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from catering.services.catalog.base import CatalogEntry, ServicePrices
from catering.services.quoting import constants
from catering.services.quoting.builder import LineItemBuilder
from catering.services.quoting.calculator import (
    build_display,
    compute_base_totals,
    compute_export_totals,
)
from catering.services.quoting.matcher import match_dishes
from catering.services.quoting.models import (
    AuxiliaryFeeLine,
    ExportAdjustments,
    ExportTotals,
    FeeKind,
    LineItem,
    Overridable,
    QuoteDisplay,
    QuoteTotals,
    TableType,
    UnmatchedEntry,
)

logger = logging.getLogger(__name__)


class CustomerInfo(BaseModel):
    """Customer and event details."""

    name: str = ""
    phone: str = ""
    address: str = ""
    event_date: Optional[str] = None
    event_type: str = "dam_cuoi"
    notes: str = ""


class QuoteDetails(BaseModel):
    """Quantities and free-text dish input of a quote."""

    table_count: int = 10
    table_type: TableType = TableType.NONE
    staff_count: int = 0
    frame_count: int = 0
    dishes_input: str = ""


class QuoteState(BaseModel):
    """Snapshot of a quote after recomputation."""

    session_id: str
    customer: CustomerInfo
    details: QuoteDetails
    items: List[LineItem] = []
    unmatched: List[UnmatchedEntry] = []
    fees: List[AuxiliaryFeeLine] = []
    adjustments: ExportAdjustments
    totals: QuoteTotals
    export_totals: ExportTotals


class QuoteRecord(BaseModel):
    """Flattened quote handed to persistence.

    Only aggregate figures and the raw dish input are kept; per-line
    overrides are not part of the record.
    """

    customer_name: str
    phone: str
    address: Optional[str] = None
    event_type: Optional[str] = None
    event_date: Optional[str] = None
    num_tables: int = 1
    staff_count: int = 0
    table_type: str = TableType.NONE.value
    dishes_input: str = ""
    subtotal: float = 0.0
    total: float = 0.0
    notes: Optional[str] = None


def suggested_frame_count(table_count: int) -> int:
    """Frames needed to cover ``table_count`` tables."""
    if table_count <= 0:
        return 0
    return math.ceil(table_count / constants.TABLES_PER_FRAME)


class QuoteSession:
    """One quote draft: its inputs, line items and fee lines."""

    def __init__(
        self,
        session_id: str,
        entries: List[CatalogEntry],
        service_prices: ServicePrices,
        default_table_count: int = 10,
    ):
        self.session_id = session_id
        self.entries = list(entries)
        self.service_prices = service_prices
        self.customer = CustomerInfo()
        self.details = QuoteDetails(table_count=default_table_count)
        self.adjustments = ExportAdjustments()
        self.builder = LineItemBuilder()
        self.fees: Dict[FeeKind, AuxiliaryFeeLine] = {
            FeeKind.TABLE: AuxiliaryFeeLine(
                kind=FeeKind.TABLE,
                price=Overridable(base=0),
                cost=Overridable(base=0),
            ),
            FeeKind.STAFF: AuxiliaryFeeLine(
                kind=FeeKind.STAFF,
                price=Overridable(base=service_prices.staff.selling),
                cost=Overridable(base=service_prices.staff.cost),
            ),
            FeeKind.FRAME: AuxiliaryFeeLine(
                kind=FeeKind.FRAME,
                price=Overridable(base=service_prices.frame.selling),
                cost=Overridable(base=service_prices.frame.cost),
                cost_overridable=True,
            ),
        }
        self._sync_fees()

    def _sync_fees(self) -> None:
        """Align fee quantities and base prices with the quote details."""
        table = self.fees[FeeKind.TABLE]
        if self.details.table_type == TableType.INOX:
            price = self.service_prices.table_inox
            table.price.base, table.cost.base = price.selling, price.cost
        elif self.details.table_type == TableType.EVENT:
            price = self.service_prices.table_event
            table.price.base, table.cost.base = price.selling, price.cost
        else:
            table.price.base, table.cost.base = 0, 0
        table.quantity = self.details.table_count

        self.fees[FeeKind.STAFF].quantity = self.details.staff_count
        self.fees[FeeKind.FRAME].quantity = self.details.frame_count

    def update_customer(self, **changes: Any) -> None:
        """Update customer fields."""
        self.customer = self.customer.model_copy(update=changes)

    def update_details(self, **changes: Any) -> None:
        """Update quote details; counts are floored at 0."""
        for field in ("table_count", "staff_count", "frame_count"):
            if changes.get(field) is not None:
                changes[field] = max(0, int(changes[field]))
        if changes.get("table_type") is not None:
            changes["table_type"] = TableType(changes["table_type"])
        changes = {key: value for key, value in changes.items() if value is not None}
        self.details = self.details.model_copy(update=changes)
        self._sync_fees()

    def parse_dishes(self, dishes_input: Optional[str] = None) -> None:
        """Parse the dish input into line items, replacing previous ones."""
        if dishes_input is not None:
            self.details = self.details.model_copy(update={"dishes_input": dishes_input})
        result = match_dishes(
            self.details.dishes_input, self.entries, self.details.table_count
        )
        self.builder.load(result)
        logger.info(
            f"[QUOTE SESSION] {self.session_id} parsed - "
            f"{len(result.matches)} matched lines, {len(result.unmatched)} unmatched"
        )

    def accept_suggestion(
        self, raw_line: str, entry_id: str, quantity: Optional[int] = None
    ) -> Optional[LineItem]:
        """
        Accept a suggested entry for an unmatched line.

        Without a quantity, the line's own explicit quantity is used, else
        the table count.
        """
        for unmatched in self.builder.unmatched:
            if unmatched.raw_line != raw_line:
                continue
            for candidate in unmatched.suggestions:
                if candidate.entry.id == entry_id:
                    qty = quantity
                    if qty is None:
                        qty = unmatched.quantity or self.details.table_count
                    return self.builder.accept_suggestion(raw_line, candidate, qty)
        return None

    def set_fee_price(self, kind: FeeKind, price: Optional[float]) -> None:
        """Override (or reset with None) the selling price of a fee line."""
        fee = self.fees[FeeKind(kind)]
        fee.price.override = None if price is None else max(0.0, float(price))

    def set_fee_cost(self, kind: FeeKind, cost: Optional[float]) -> bool:
        """Override (or reset) the cost of a fee line that allows it."""
        fee = self.fees[FeeKind(kind)]
        if not fee.cost_overridable:
            logger.warning(
                f"[QUOTE SESSION] {self.session_id} cost of {fee.kind} fee is not editable"
            )
            return False
        fee.cost.override = None if cost is None else max(0.0, float(cost))
        return True

    def update_adjustments(self, **changes: Any) -> None:
        """Update export adjustments."""
        changes = {key: value for key, value in changes.items() if value is not None}
        self.adjustments = self.adjustments.model_copy(update=changes)

    def compute_totals(self) -> QuoteTotals:
        return compute_base_totals(
            self.builder.items,
            self.fees[FeeKind.TABLE],
            self.fees[FeeKind.STAFF],
            self.fees[FeeKind.FRAME],
        )

    def recompute(self) -> QuoteState:
        """Recompute every derived figure from the current state."""
        totals = self.compute_totals()
        return QuoteState(
            session_id=self.session_id,
            customer=self.customer.model_copy(),
            details=self.details.model_copy(),
            items=self.builder.items,
            unmatched=self.builder.unmatched,
            fees=[fee.model_copy(deep=True) for fee in self.fees.values()],
            adjustments=self.adjustments.model_copy(),
            totals=totals,
            export_totals=compute_export_totals(
                totals, self.adjustments, self.details.table_count
            ),
        )

    def display(self) -> QuoteDisplay:
        """Customer-facing rows under the current display mode."""
        state = self.recompute()
        return build_display(
            state.items,
            state.fees,
            state.export_totals,
            state.adjustments,
            state.details.table_count,
        )

    def to_record(self) -> QuoteRecord:
        """Flatten the quote for persistence."""
        totals = self.compute_totals()
        return QuoteRecord(
            customer_name=self.customer.name,
            phone=self.customer.phone,
            address=self.customer.address or None,
            event_type=self.customer.event_type or None,
            event_date=self.customer.event_date or None,
            num_tables=self.details.table_count,
            staff_count=self.details.staff_count,
            table_type=self.details.table_type.value,
            dishes_input=self.details.dishes_input,
            subtotal=totals.dishes_total,
            total=totals.grand_total,
            notes=self.customer.notes or None,
        )
