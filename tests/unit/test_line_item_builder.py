"""Unit tests for the quote line-item builder."""
import pytest

from catering.services.catalog.base import CatalogEntry
from catering.services.quoting.builder import LineItemBuilder
from catering.services.quoting.matcher import match_dishes
from catering.services.quoting.models import SuggestionCandidate


@pytest.fixture
def ga_luoc():
    return CatalogEntry(id="MON-001", name="Gà luộc", unit="con", selling_price=200000, cost_price=120000)


@pytest.fixture
def cha_gio():
    return CatalogEntry(id="MON-002", name="Chả giò", unit="đĩa", selling_price=15000, cost_price=8000)


@pytest.fixture
def builder(ga_luoc, cha_gio):
    builder = LineItemBuilder()
    builder.add_or_merge_match(ga_luoc, 10, explicit=False)
    builder.add_or_merge_match(cha_gio, 20, explicit=True)
    return builder


class TestAddOrMerge:
    """Test adding and merging matches."""

    def test_new_line_uses_catalog_prices(self, builder):
        item = builder.get_item("MON-001")

        assert item.quantity == 10
        assert item.price.override is None
        assert item.cost.override is None
        assert item.total == 2000000
        assert item.profit == 800000

    def test_unquantified_repeat_does_not_inflate(self, builder, ga_luoc):
        builder.add_or_merge_match(ga_luoc, 10, explicit=False)

        assert len(builder.items) == 2
        assert builder.get_item("MON-001").quantity == 10

    def test_explicit_repeat_accumulates(self, builder, cha_gio):
        builder.add_or_merge_match(cha_gio, 5, explicit=True)
        assert builder.get_item("MON-002").quantity == 25

    def test_merge_from_parsed_input_without_quantities(self):
        pho = CatalogEntry(id="PHO", name="Phở", selling_price=50000, cost_price=30000)
        builder = LineItemBuilder()
        builder.load(match_dishes("Phở\nPhở", [pho], 10))

        assert len(builder.items) == 1
        assert builder.items[0].name == "Phở"
        assert builder.items[0].quantity == 10

    def test_merge_from_parsed_input_with_quantities(self):
        pho = CatalogEntry(id="PHO", name="Phở", selling_price=50000, cost_price=30000)
        builder = LineItemBuilder()
        builder.load(match_dishes("Phở x 5\nPhở x 3", [pho], 10))

        assert len(builder.items) == 1
        assert builder.items[0].quantity == 8


class TestEdits:
    """Test quantity and price edits."""

    @pytest.mark.parametrize("quantity", [0, -5])
    def test_quantity_floor(self, builder, quantity):
        builder.update_quantity("MON-001", quantity)
        assert builder.get_item("MON-001").quantity == 1

    def test_quantity_uses_overridden_prices(self, builder):
        builder.update_selling_price_override("MON-001", 250000)
        builder.update_cost_price_override("MON-001", 100000)
        builder.update_quantity("MON-001", 2)

        item = builder.get_item("MON-001")
        assert item.total == 500000
        assert item.profit == 300000

    def test_selling_price_override(self, builder):
        builder.update_selling_price_override("MON-001", 180000)

        item = builder.get_item("MON-001")
        assert item.price.effective() == 180000
        assert item.price.base == 200000
        assert item.total == 1800000
        assert item.profit == (180000 - 120000) * 10

    def test_negative_price_is_clamped(self, builder):
        builder.update_selling_price_override("MON-001", -1)
        builder.update_cost_price_override("MON-001", -1)

        item = builder.get_item("MON-001")
        assert item.price.effective() == 0
        assert item.cost.effective() == 0

    def test_cost_override_changes_profit_only(self, builder):
        builder.update_cost_price_override("MON-002", 10000)

        item = builder.get_item("MON-002")
        assert item.total == 300000
        assert item.profit == (15000 - 10000) * 20

    def test_override_isolation(self, builder):
        before = builder.get_item("MON-002").model_copy(deep=True)

        builder.update_selling_price_override("MON-001", 1)

        after = builder.get_item("MON-002")
        assert after.price.effective() == before.price.effective()
        assert after.total == before.total
        assert after.profit == before.profit

    def test_unknown_id_is_ignored(self, builder):
        assert builder.update_quantity("NOPE", 3) is None
        assert len(builder.items) == 2


class TestRemoveAndSuggestions:
    """Test removal and suggestion acceptance."""

    def test_remove_line_item(self, builder):
        assert builder.remove_line_item("MON-001") is True
        assert builder.get_item("MON-001") is None
        assert builder.remove_line_item("MON-001") is False

    def test_accept_suggestion_adds_line_and_clears_unmatched(self, dish_entries):
        builder = LineItemBuilder()
        builder.load(match_dishes("Tom chin xu", dish_entries, 10))
        unmatched = builder.unmatched[0]

        item = builder.accept_suggestion(unmatched.raw_line, unmatched.suggestions[0], 10)

        assert item.entry_id == "MON-005"
        assert item.quantity == 10
        assert builder.unmatched == []

    def test_accept_suggestion_merges_explicitly(self, builder, ga_luoc):
        builder.accept_suggestion("ga luc", SuggestionCandidate(entry=ga_luoc, score=0.8), 5)
        assert builder.get_item("MON-001").quantity == 15

    def test_snapshots_are_copies(self, builder):
        snapshot = builder.items
        snapshot[0].quantity = 99
        assert builder.get_item("MON-001").quantity == 10


class TestQuantityFloorOnMerge:
    """Test that merged quantities never shrink a line."""

    def test_negative_suggestion_quantity(self, builder, ga_luoc):
        builder.accept_suggestion("ga luc", SuggestionCandidate(entry=ga_luoc, score=0.8), -5)
        assert builder.get_item("MON-001").quantity == 11

    def test_negative_explicit_merge(self, builder, cha_gio):
        builder.add_or_merge_match(cha_gio, -30, explicit=True)
        assert builder.get_item("MON-002").quantity == 21
