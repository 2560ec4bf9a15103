from datetime import datetime, timezone

import pytest

from services.orderStatus import OrderStatus
from services.woocommerce import (
    map_order,
    map_status,
    merge_with_existing,
    resolve_product_id,
    validate_payload,
)

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize("raw,expected", [
    ("pending", OrderStatus.PENDING),
    ("Processing", OrderStatus.PROCESSING),
    ("COMPLETED", OrderStatus.COMPLETED),
    ("cancelled", OrderStatus.CANCELLED),
    ("shipped", OrderStatus.SHIPPED),
    ("delivered", OrderStatus.DELIVERED),
    ("on-hold", OrderStatus.ACCEPTED),
    ("accepted", OrderStatus.ACCEPTED),
    ("refunded", OrderStatus.ACCEPTED),
    (None, OrderStatus.ACCEPTED),
])
def test_map_status(raw, expected):
    assert map_status(raw) is expected


def test_resolve_product_id_prefers_internal_meta():
    assert resolve_product_id({"product_id": 5, "meta_data": [{"key": "_internal_product_id", "value": "bag-1"}]}) == "bag-1"
    assert resolve_product_id({"product_id": 5}) == "5"


def test_validate_payload(woo_payload):
    assert validate_payload(woo_payload) is None
    assert validate_payload({**woo_payload, "id": None}) == "Invalid payload"
    assert validate_payload({**woo_payload, "line_items": "nope"}) == "Invalid payload"
    assert validate_payload({**woo_payload, "billing": {"first_name": "Ada"}}) == "Missing customer email"
    assert validate_payload(None) == "Invalid payload"


def test_map_order(woo_payload):
    order = map_order(woo_payload, now=NOW)

    assert order["id"] == "1042"
    assert order["customerName"] == "Ada Obi"
    assert order["currency"] == "USD"
    assert order["status"] == "processing"
    assert order["totalAmount"] == 100.0
    assert order["notes"] == "Please gift wrap"
    assert order["items"][0] == {
        "productId": "bag-1", "quantity": 2, "price": 40.0,
        "additionalMaterials": [], "additionalCosts": [],
    }
    assert order["items"][1]["productId"] == "78"

    info = order["shipping"]["shippingInfo"]
    assert info["customerPaid"] == 12.5
    assert info["trackingNumber"] == "TRK123"
    assert info["carrier"] == "DHL"
    assert info["estimatedDeliveryDate"].startswith("2026-03-15")
    assert order["shipping"]["shippingAddress"]["city"] == "Ikeja"
    assert order["shipping"]["status"] == "pending"

    assert order["extraExpenses"] == [] and order["additionalPayments"] == []
    assert order["profitMargin"] == 0 and order["hasInvalidProducts"] is False


def test_map_order_without_names(woo_payload):
    woo_payload["billing"] = {"email": "x@example.com"}
    assert map_order(woo_payload, now=NOW)["customerName"] == "Unknown Customer"


def test_merge_without_existing_returns_mapped(woo_payload):
    order = map_order(woo_payload, now=NOW)
    assert merge_with_existing(order, None) is order


def test_merge_preserves_curated_fields(woo_payload):
    existing = map_order(woo_payload, now=NOW)
    existing.update({
        "customerName": "Old Name",
        "extraExpenses": [{"id": "e1", "amount": 10}],
        "additionalPayments": [{"id": "p1", "amount": 5}],
        "totalExtraExpenses": 10,
        "totalAdditionalPayments": 5,
        "profitMargin": 62500,
        "productCostInNGN": 60000,
        "shippingCostInNGN": 20000,
        "hasInvalidProducts": True,
    })
    existing["shipping"]["shippingInfo"].update({
        "actualCost": 20000,
        "dateShipped": "2026-03-03",
        "actualDeliveryDate": "2026-03-09",
        "shippingCompany": "GIG Logistics",
    })
    existing["shipping"]["status"] = "in_transit"

    woo_payload["status"] = "completed"
    woo_payload["billing"]["first_name"] = "Adaeze"
    fresh = map_order(woo_payload, now=NOW)
    merged = merge_with_existing(fresh, existing)

    assert merged["customerName"] == "Adaeze Obi"
    assert merged["status"] == "completed"
    assert merged["extraExpenses"] == [{"id": "e1", "amount": 10}]
    assert merged["additionalPayments"] == [{"id": "p1", "amount": 5}]
    assert merged["profitMargin"] == 62500
    assert merged["hasInvalidProducts"] is True
    info = merged["shipping"]["shippingInfo"]
    assert info["actualCost"] == 20000
    assert info["shippingCompany"] == "GIG Logistics"
    assert info["dateShipped"] == "2026-03-03"
    assert info["actualDeliveryDate"] == "2026-03-09"
    assert info["trackingNumber"] == "TRK123"
    assert merged["shipping"]["status"] == "in_transit"


def test_merge_with_bare_existing_keeps_defaults(woo_payload):
    fresh = map_order(woo_payload, now=NOW)
    merged = merge_with_existing(fresh, {"id": "1042"})
    assert merged["extraExpenses"] == []
    assert merged["shipping"]["status"] == "pending"
    assert "actualCost" not in merged["shipping"]["shippingInfo"]


def test_map_order_normalizes_dates(woo_payload):
    order = map_order(woo_payload, now=NOW)
    assert order["orderDate"] == "2026-03-01T10:00:00+00:00"
    assert order["dateCompleted"] == NOW.isoformat()

    woo_payload["date_created"] = ["not", "a", "date"]
    assert map_order(woo_payload, now=NOW)["orderDate"] == NOW.isoformat()


def test_map_order_treats_non_finite_money_as_zero(woo_payload):
    woo_payload["total"] = "nan"
    woo_payload["shipping_total"] = "inf"

    order = map_order(woo_payload, now=NOW)

    assert order["totalAmount"] == 0.0
    assert order["shipping"]["shippingInfo"]["customerPaid"] == 0.0
