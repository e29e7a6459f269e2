"""Unit tests for quote totals calculation."""
import math

import pytest

from catering.services.quoting.calculator import (
    build_display,
    compute_base_totals,
    compute_export_totals,
)
from catering.services.quoting.models import (
    AuxiliaryFeeLine,
    ExportAdjustments,
    FeeKind,
    LineItem,
    Overridable,
    QuoteTotals,
    clamp_percent,
)


def _fee(kind, quantity=0, price=0, cost=0, cost_overridable=False):
    return AuxiliaryFeeLine(
        kind=kind,
        quantity=quantity,
        price=Overridable(base=price),
        cost=Overridable(base=cost),
        cost_overridable=cost_overridable,
    )


def _item(entry_id, quantity, price, cost):
    return LineItem(
        entry_id=entry_id,
        name=entry_id,
        quantity=quantity,
        price=Overridable(base=price),
        cost=Overridable(base=cost),
    )


@pytest.fixture
def no_fees():
    return (
        _fee(FeeKind.TABLE),
        _fee(FeeKind.STAFF),
        _fee(FeeKind.FRAME, cost_overridable=True),
    )


class TestBaseTotals:
    """Test internal totals."""

    def test_dishes_only(self, no_fees):
        items = [_item("A", 10, 200000, 120000), _item("B", 20, 15000, 8000)]
        totals = compute_base_totals(items, *no_fees)

        assert totals.dishes_total == 2300000
        assert totals.dishes_cost == 1360000
        assert totals.dishes_profit == 940000
        assert totals.grand_total == 2300000
        assert totals.total_profit == 940000

    def test_overrides_are_used(self, no_fees):
        item = _item("A", 2, 100, 60)
        item.price.override = 150
        item.cost.override = 50
        totals = compute_base_totals([item], *no_fees)

        assert totals.dishes_total == 300
        assert totals.dishes_cost == 100

    def test_fee_lines(self):
        table = _fee(FeeKind.TABLE, 10, 250000, 250000)
        staff = _fee(FeeKind.STAFF, 5, 350000, 300000)
        frame = _fee(FeeKind.FRAME, 2, 450000, 400000, cost_overridable=True)
        frame.cost.override = 380000
        table.price.override = 200000

        totals = compute_base_totals([], table, staff, frame)

        assert totals.table_total == 2000000
        assert totals.table_cost == 2500000
        assert totals.staff_total == 1750000
        assert totals.staff_cost == 1500000
        assert totals.frame_total == 900000
        assert totals.frame_cost == 760000
        assert totals.grand_total == 4650000
        assert totals.total_cost == 4760000
        assert totals.total_profit == -110000

    def test_recompute_is_idempotent(self):
        items = [_item("A", 3, 1000, 400)]
        fees = (_fee(FeeKind.TABLE, 4, 100, 90), _fee(FeeKind.STAFF, 1, 50, 40), _fee(FeeKind.FRAME))
        adjustments = ExportAdjustments(table_discount=5, total_discount=3, vat_percent=8)

        first = compute_base_totals(items, *fees)
        second = compute_base_totals(items, *fees)
        assert first == second
        assert compute_export_totals(first, adjustments, 4) == compute_export_totals(second, adjustments, 4)


class TestExportTotals:
    """Test customer-facing totals."""

    def test_discounts_compound(self):
        base = QuoteTotals(
            table_total=1000000,
            table_cost=700000,
            grand_total=1000000,
            total_cost=700000,
            total_profit=300000,
        )
        adjustments = ExportAdjustments(table_discount=10, total_discount=10)

        export = compute_export_totals(base, adjustments, 10)

        assert export.final_table_total == pytest.approx(900000)
        assert export.subtotal == pytest.approx(900000)
        assert export.grand_total_final == pytest.approx(810000)
        assert export.subtotal_cost == 700000
        assert export.total_cost_final == 700000
        assert export.total_profit_final == pytest.approx(110000)

    def test_frame_discount_applies_to_frame_only(self):
        base = QuoteTotals(dishes_total=100, frame_total=1000, frame_cost=800)
        export = compute_export_totals(base, ExportAdjustments(frame_discount=50), 1)

        assert export.final_frame_total == pytest.approx(500)
        assert export.subtotal == pytest.approx(600)
        assert export.subtotal_cost == 800

    def test_customer_handles_staff(self):
        staff = _fee(FeeKind.STAFF, 5, 100000, 60000)
        base = compute_base_totals([_item("A", 1, 1000, 500)], _fee(FeeKind.TABLE), staff, _fee(FeeKind.FRAME))

        export = compute_export_totals(base, ExportAdjustments(customer_handles_staff=True), 1)

        assert export.staff_component == 0
        assert export.subtotal == 1000
        assert export.subtotal_cost == 500
        # internal view still carries staff profit
        assert base.staff_total == 500000
        assert base.total_profit == 500 + 200000

    def test_zero_tables(self):
        base = QuoteTotals(dishes_total=1000, grand_total=1000)
        export = compute_export_totals(base, ExportAdjustments(), 0)

        assert export.price_per_table == 0
        assert not math.isnan(export.price_per_table)

    def test_price_per_table(self):
        base = QuoteTotals(dishes_total=1000000, grand_total=1000000)
        export = compute_export_totals(base, ExportAdjustments(total_discount=20), 8)
        assert export.price_per_table == pytest.approx(100000)

    def test_vat_is_separate(self):
        base = QuoteTotals(dishes_total=1000, dishes_cost=600, grand_total=1000, total_cost=600)
        export = compute_export_totals(base, ExportAdjustments(vat_percent=10), 1)

        assert export.grand_total_final == 1000
        assert export.vat_amount == pytest.approx(100)
        assert export.total_with_vat == pytest.approx(1100)
        assert export.total_profit_final == 400

    @pytest.mark.parametrize(
        "value,expected",
        [(-10, 0), (150, 100), (float("nan"), 0), (float("inf"), 0), (None, 0), (12.5, 12.5)],
    )
    def test_percentages_are_clamped(self, value, expected):
        assert clamp_percent(value) == expected

    def test_out_of_range_adjustments_do_not_propagate_nan(self):
        base = QuoteTotals(dishes_total=1000, table_total=500, grand_total=1500)
        adjustments = ExportAdjustments(
            table_discount=float("nan"), total_discount=250, vat_percent=-3
        )
        export = compute_export_totals(base, adjustments, 3)

        assert export.final_table_total == 500
        assert export.grand_total_final == 0
        assert export.vat_amount == 0


class TestDisplay:
    """Test display modes."""

    def test_itemized(self):
        items = [_item("A", 2, 100, 50)]
        table = _fee(FeeKind.TABLE, 2, 30, 30)
        staff = _fee(FeeKind.STAFF)
        frame = _fee(FeeKind.FRAME)
        adjustments = ExportAdjustments()
        export = compute_export_totals(compute_base_totals(items, table, staff, frame), adjustments, 2)

        display = build_display(items, [table, staff, frame], export, adjustments, 2)

        assert display.show_individual_prices is True
        assert [row.total for row in display.rows] == [200, 60]
        assert display.rows[0].unit_price == 100

    def test_per_table_hides_prices(self):
        items = [_item("A", 2, 100, 50), _item("B", 2, 50, 10)]
        fees = [_fee(FeeKind.TABLE, 2, 30, 30), _fee(FeeKind.STAFF), _fee(FeeKind.FRAME)]
        adjustments = ExportAdjustments(show_individual_prices=False)
        export = compute_export_totals(compute_base_totals(items, *fees), adjustments, 2)

        display = build_display(items, fees, export, adjustments, 2)

        assert [row.name for row in display.rows] == ["A", "B"]
        assert all(row.unit_price is None and row.total is None for row in display.rows)
        assert display.price_per_table == pytest.approx(180)
        assert display.price_per_table * display.table_count == pytest.approx(display.grand_total)

    def test_excluded_staff_row_is_hidden(self):
        staff = _fee(FeeKind.STAFF, 2, 100, 80)
        fees = [_fee(FeeKind.TABLE), staff, _fee(FeeKind.FRAME)]
        adjustments = ExportAdjustments(customer_handles_staff=True)
        export = compute_export_totals(compute_base_totals([], *fees), adjustments, 1)

        display = build_display([], fees, export, adjustments, 1)
        assert display.rows == []
