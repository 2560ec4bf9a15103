import pytest

from services.costing import (
    ReferenceState,
    UnresolvedReference,
    daily_rate,
    item_cost,
    order_product_cost,
    product_cost_breakdown,
)


def test_daily_rate_blends_all_employees():
    labor = [
        {"monthlySalary": 100000, "daysWorked": 20},
        {"monthlySalary": 50000, "daysWorked": 10},
    ]
    assert daily_rate(labor) == 5000


def test_daily_rate_without_days_is_zero():
    assert daily_rate([]) == 0
    assert daily_rate([{"monthlySalary": 100000, "daysWorked": 0}]) == 0


def test_product_breakdown(catalog, inventory):
    breakdown = product_cost_breakdown(catalog["bag-1"], inventory, 5000)
    assert breakdown.material_cost == 2 * 1000 + 1 * 3000
    assert breakdown.labor_cost == 10000
    assert breakdown.total_cost == 15000
    categories = {c["category"]: c["value"] for c in breakdown.to_dict()["costs"]}
    assert categories == {"raw_material": 5000, "labor": 10000}


def test_item_cost_includes_additions_and_quantity(catalog, inventory):
    item = {
        "productId": "bag-1",
        "quantity": 3,
        "additionalMaterials": [{"materialId": "beads", "quantity": 1}],
        "additionalCosts": [{"name": "Monogram", "amount": 500}],
    }
    # (5000 materials + 10000 labor + 1000 extra beads + 500 monogram) * 3
    assert item_cost(item, catalog["bag-1"], inventory, 5000) == 16500 * 3


def test_item_cost_for_missing_product_is_zero(inventory):
    unresolved = []
    assert item_cost({"productId": "ghost", "quantity": 4}, None, inventory, 5000, unresolved, 0) == 0
    assert unresolved == [UnresolvedReference("product", "ghost", 0)]


def test_missing_material_is_skipped_and_reported(catalog, inventory):
    product = {**catalog["bag-1"], "materials": [{"materialId": "beads", "quantity": 1}, {"materialId": "gold", "quantity": 1}]}
    unresolved = []
    cost = item_cost({"productId": "bag-1", "quantity": 1}, product, inventory, 0, unresolved, 2)
    assert cost == 1000
    assert unresolved == [UnresolvedReference("material", "gold", 2)]


def test_order_cost_flags_unknown_products(catalog, inventory):
    items = [
        {"productId": "bag-1", "quantity": 1},
        {"productId": "78", "quantity": 5},
    ]
    result = order_product_cost(items, catalog, inventory, 5000)
    assert result.cost == 15000
    assert result.has_invalid_products is True
    assert [ref.ref_id for ref in result.unresolved] == ["78"]


def test_order_cost_all_resolved(catalog, inventory):
    result = order_product_cost([{"productId": "bag-1", "quantity": 2}], catalog, inventory, 5000)
    assert result.cost == 30000
    assert result.has_invalid_products is False
    assert result.unresolved == ()


@pytest.mark.parametrize("state", [ReferenceState.NOT_LOADED, ReferenceState.LOADING])
def test_catalog_not_ready_counts_as_invalid(catalog, inventory, state):
    result = order_product_cost([{"productId": "bag-1", "quantity": 1}], catalog, inventory, 5000, state)
    assert result.cost == 0
    assert result.has_invalid_products is True


def test_empty_order_with_ready_catalog_is_valid(inventory):
    result = order_product_cost([], {}, inventory, 5000)
    assert result.cost == 0
    assert result.has_invalid_products is False
