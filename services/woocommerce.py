from core.dates import utcnow, to_iso, normalize_date
from core.imports import timedelta, math
from services.currency import map_currency
from services.orderStatus import OrderStatus

# Fields staff curate by hand; a re-delivered webhook must not wipe them.
PRESERVED_ORDER_FIELDS = {
    "extraExpenses": [],
    "additionalPayments": [],
    "totalExtraExpenses": 0,
    "totalAdditionalPayments": 0,
    "productCostInNGN": 0,
    "shippingCostInNGN": 0,
    "profitMargin": 0,
    "hasInvalidProducts": False,
}
PRESERVED_SHIPPING_INFO_FIELDS = ("actualCost", "dateShipped", "actualDeliveryDate", "shippingCompany")


def _fresh(default):
    return list(default) if isinstance(default, list) else default


def get_meta_value(meta, key):
    for entry in meta or []:
        if entry.get("key") == key:
            return entry.get("value")
    return None


def resolve_product_id(item):
    internal_id = get_meta_value(item.get("meta_data"), "_internal_product_id")
    return str(internal_id) if internal_id is not None else str(item.get("product_id"))


def map_status(status):
    try:
        return OrderStatus(str(status or "").lower())
    except ValueError:
        # on-hold, accepted and anything unknown
        return OrderStatus.ACCEPTED


def _to_float(value, default=0.0):
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number if math.isfinite(number) else default


def estimate_delivery(now, days=14):
    return now + timedelta(days=days)


def validate_payload(body):
    """Return an error message for a payload that cannot be ingested, else None."""
    if not isinstance(body, dict) or not body.get("id") or not isinstance(body.get("line_items"), list):
        return "Invalid payload"
    billing = body.get("billing")
    if not isinstance(billing, dict) or not billing.get("email"):
        return "Missing customer email"
    return None


def map_order(body, now=None, delivery_days=14):
    """Map a WooCommerce order payload to an order document."""
    now = now or utcnow()
    billing = body.get("billing") or {}
    shipping = body.get("shipping") or {}
    meta = body.get("meta_data")

    customer_name = f"{billing.get('first_name') or ''} {billing.get('last_name') or ''}".strip()

    order = {
        "id": str(body["id"]),
        "customerName": customer_name or "Unknown Customer",
        "customerEmail": billing.get("email") or "",
        "customerPhone": billing.get("phone") or "",
        "items": [
            {
                "productId": resolve_product_id(item),
                "quantity": int(_to_float(item.get("quantity"))),
                "price": _to_float(item.get("price")),
                "additionalMaterials": [],
                "additionalCosts": [],
            }
            for item in body["line_items"]
        ],
        "totalAmount": _to_float(body.get("total")),
        "currency": map_currency(body.get("currency")).value,
        "status": map_status(body.get("status")).value,
        "orderDate": normalize_date(body.get("date_created"), now),
        "dateCompleted": normalize_date(body.get("date_completed"), now),
        **{key: _fresh(default) for key, default in PRESERVED_ORDER_FIELDS.items()},
        "shipping": {
            "shippingAddress": {
                "street": shipping.get("address_1") or "",
                "city": shipping.get("city") or "",
                "state": shipping.get("state") or "",
                "country": shipping.get("country") or "",
                "postalCode": shipping.get("postcode") or "",
            },
            "shippingInfo": {
                "customerPaid": _to_float(body.get("shipping_total")),
                "trackingNumber": get_meta_value(meta, "_tracking_number"),
                "carrier": get_meta_value(meta, "_carrier"),
                "estimatedDeliveryDate": to_iso(estimate_delivery(now, delivery_days)),
            },
            "status": "pending",
        },
    }
    if body.get("customer_note"):
        order["notes"] = body["customer_note"]
    return order


def merge_with_existing(order, existing):
    """Overlay the curated fields of a stored order onto a freshly mapped one."""
    if not existing:
        return order

    merged = dict(order)
    for key, default in PRESERVED_ORDER_FIELDS.items():
        merged[key] = existing.get(key) or _fresh(default)

    existing_shipping = existing.get("shipping") or {}
    existing_info = existing_shipping.get("shippingInfo") or {}
    shipping_info = dict(order["shipping"]["shippingInfo"])
    for key in PRESERVED_SHIPPING_INFO_FIELDS:
        if existing_info.get(key):
            shipping_info[key] = existing_info[key]

    merged["shipping"] = {
        **order["shipping"],
        "shippingInfo": shipping_info,
        "status": existing_shipping.get("status") or "pending",
    }
    return merged
