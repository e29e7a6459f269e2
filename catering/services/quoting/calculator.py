"""Quote totals calculation."""
from typing import Sequence

from catering.services.quoting.models import (
    AuxiliaryFeeLine,
    DisplayRow,
    ExportAdjustments,
    ExportTotals,
    FeeKind,
    LineItem,
    QuoteDisplay,
    QuoteTotals,
    clamp_percent,
)


def _discounted(amount: float, percent: float) -> float:
    return amount * (1 - clamp_percent(percent) / 100)


def compute_base_totals(
    line_items: Sequence[LineItem],
    table: AuxiliaryFeeLine,
    staff: AuxiliaryFeeLine,
    frame: AuxiliaryFeeLine,
) -> QuoteTotals:
    """
    Internal totals over dishes and the three fee lines.

    Fee cost is the effective cost times quantity. Table and staff lines
    never carry a cost override, so their cost is always the catalog cost.
    """
    dishes_total = sum(item.price.effective() * item.quantity for item in line_items)
    dishes_cost = sum(item.cost.effective() * item.quantity for item in line_items)

    grand_total = dishes_total + table.total + staff.total + frame.total
    total_cost = dishes_cost + table.total_cost + staff.total_cost + frame.total_cost

    return QuoteTotals(
        dishes_total=dishes_total,
        dishes_cost=dishes_cost,
        dishes_profit=dishes_total - dishes_cost,
        table_total=table.total,
        table_cost=table.total_cost,
        staff_total=staff.total,
        staff_cost=staff.total_cost,
        frame_total=frame.total,
        frame_cost=frame.total_cost,
        grand_total=grand_total,
        total_cost=total_cost,
        total_profit=grand_total - total_cost,
    )


def compute_export_totals(
    base: QuoteTotals, adjustments: ExportAdjustments, table_count: int
) -> ExportTotals:
    """
    Customer-facing totals.

    Category discounts apply to the table and frame totals, then the
    order-level discount applies to the subtotal. Costs are never
    discounted. VAT is reported on top of the final total and is not part
    of profit.
    """
    final_table_total = _discounted(base.table_total, adjustments.table_discount)
    final_frame_total = _discounted(base.frame_total, adjustments.frame_discount)

    if adjustments.customer_handles_staff:
        staff_component = 0.0
        staff_cost_component = 0.0
    else:
        staff_component = base.staff_total
        staff_cost_component = base.staff_cost

    subtotal = base.dishes_total + final_table_total + final_frame_total + staff_component
    subtotal_cost = base.dishes_cost + base.table_cost + base.frame_cost + staff_cost_component

    grand_total_final = _discounted(subtotal, adjustments.total_discount)
    price_per_table = grand_total_final / table_count if table_count > 0 else 0.0
    vat_amount = grand_total_final * clamp_percent(adjustments.vat_percent) / 100

    return ExportTotals(
        final_table_total=final_table_total,
        final_frame_total=final_frame_total,
        staff_component=staff_component,
        subtotal=subtotal,
        subtotal_cost=subtotal_cost,
        grand_total_final=grand_total_final,
        total_cost_final=subtotal_cost,
        total_profit_final=grand_total_final - subtotal_cost,
        price_per_table=price_per_table,
        vat_amount=vat_amount,
        total_with_vat=grand_total_final + vat_amount,
    )


FEE_LABELS = {
    "table": "Thuê bàn ghế",
    "staff": "Nhân viên phục vụ",
    "frame": "Thuê khung rạp",
}


def build_display(
    line_items: Sequence[LineItem],
    fees: Sequence[AuxiliaryFeeLine],
    export: ExportTotals,
    adjustments: ExportAdjustments,
    table_count: int,
) -> QuoteDisplay:
    """Rows for a customer-facing quote, itemized or rolled up per table."""
    display = QuoteDisplay(
        show_individual_prices=adjustments.show_individual_prices,
        table_count=table_count,
        price_per_table=export.price_per_table,
        grand_total=export.grand_total_final,
        vat_percent=clamp_percent(adjustments.vat_percent),
        vat_amount=export.vat_amount,
        total_with_vat=export.total_with_vat,
    )

    if not adjustments.show_individual_prices:
        display.rows = [
            DisplayRow(name=item.name, quantity=item.quantity, unit=item.unit)
            for item in line_items
        ]
        return display

    rows = [
        DisplayRow(
            name=item.name,
            quantity=item.quantity,
            unit=item.unit,
            unit_price=item.price.effective(),
            total=item.total,
        )
        for item in line_items
    ]
    fee_totals = {
        "table": export.final_table_total,
        "staff": export.staff_component,
        "frame": export.final_frame_total,
    }
    for fee in fees:
        kind = str(fee.kind)
        if fee.total == 0:
            continue
        if fee.kind == FeeKind.STAFF and adjustments.customer_handles_staff:
            continue
        rows.append(
            DisplayRow(
                name=FEE_LABELS[kind],
                quantity=fee.quantity,
                unit_price=fee.price.effective(),
                total=fee_totals[kind],
            )
        )
    display.rows = rows
    return display
