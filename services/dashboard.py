"""
Dashboard rollups across many orders.

Read-only: consumes per-order reconciliation snapshots and never recomputes
costs itself. All money is NGN.
"""
import math

from core.dates import parse_date, utcnow
from services.currency import convert_to_ngn
from services.orderStatus import FINISHED_STATUSES, OPEN_STATUSES

ATTENTION_WINDOW_DAYS = 3
TOP_PRODUCTS = 5


def _estimated_delivery(order):
    info = (order.get("shipping") or {}).get("shippingInfo") or {}
    return parse_date(info.get("estimatedDeliveryDate"))


def _days_until(when, today):
    return math.ceil((when - today).total_seconds() / 86400)


def _to_iso_or_none(value):
    return value.isoformat() if value else None


def is_overdue(order, today):
    expected = _estimated_delivery(order)
    return bool(expected) and expected < today and order.get("status") in OPEN_STATUSES


def needs_attention(order, today):
    if order.get("status") not in OPEN_STATUSES:
        return False
    expected = _estimated_delivery(order)
    if not expected:
        return False
    return expected < today or 0 <= _days_until(expected, today) <= ATTENTION_WINDOW_DAYS


def low_inventory_products(catalog, inventory):
    """Products needing a material whose stock is below twice the required quantity."""
    low = []
    for product in catalog.values():
        for requirement in product.get("materials") or []:
            material = inventory.get(requirement.get("materialId"))
            if material and float(material.get("currentQuantity") or 0) < float(requirement.get("quantity") or 0) * 2:
                low.append({"id": product["id"], "name": product.get("name")})
                break
    return low


def top_selling_products(orders, catalog, currency_table, limit=TOP_PRODUCTS):
    sales = {}
    for order in orders:
        for item in order.get("items") or []:
            product_id = item.get("productId")
            if product_id not in catalog:
                continue
            entry = sales.setdefault(product_id, {
                "id": product_id,
                "name": catalog[product_id].get("name"),
                "totalQuantity": 0,
                "totalRevenue": 0.0,
                "orderIds": set(),
            })
            quantity = int(item.get("quantity") or 0)
            entry["totalQuantity"] += quantity
            entry["totalRevenue"] += convert_to_ngn(
                float(item.get("price") or 0) * quantity, order.get("currency"), currency_table
            )
            entry["orderIds"].add(order.get("id"))

    ranked = sorted(sales.values(), key=lambda e: e["totalQuantity"], reverse=True)[:limit]
    return [
        {**{k: v for k, v in entry.items() if k != "orderIds"}, "orderCount": len(entry["orderIds"])}
        for entry in ranked
    ]


def monthly_expenses(labor_costs, purchases, today):
    labor = sum(float(c.get("monthlySalary") or 0) for c in labor_costs)
    materials = 0.0
    for purchase in purchases:
        when = parse_date(purchase.get("purchaseDate"))
        if when and when.year == today.year and when.month == today.month:
            materials += float(purchase.get("price") or 0) * float(purchase.get("quantity") or 0)
    return labor + materials


def currency_breakdown(orders, currency_table):
    breakdown = {}
    for order in orders:
        currency = order.get("currency") or "UNKNOWN"
        amount = float(order.get("totalAmount") or 0)
        entry = breakdown.setdefault(currency, {"count": 0, "total": 0.0, "totalInNGN": 0.0})
        entry["count"] += 1
        entry["total"] += amount
        entry["totalInNGN"] += convert_to_ngn(amount, currency, currency_table)
    return breakdown


def summarize(orders, snapshots, catalog, inventory, labor_costs, purchases, currency_table, today=None):
    """
    `snapshots` maps order id to that order's FinancialSnapshot. Orders with
    unpriced items are excluded from profit so they cannot inflate it.
    """
    today = today or utcnow()

    total_revenue = sum(snapshots[o["id"]].total_amount_ngn for o in orders)
    priced = [snapshots[o["id"]] for o in orders if not snapshots[o["id"]].has_invalid_products]
    priced_revenue = sum(s.total_amount_ngn for s in priced)
    total_profit = sum(s.profit_margin for s in priced)

    attention = [o for o in orders if needs_attention(o, today)]

    return {
        "totalRevenue": total_revenue,
        "totalOrders": len(orders),
        "pendingOrders": sum(1 for o in orders if o.get("status") in OPEN_STATUSES),
        "completedOrders": sum(1 for o in orders if o.get("status") in FINISHED_STATUSES),
        "overdueOrders": sum(1 for o in orders if is_overdue(o, today)),
        "ordersNeedingAttention": [
            {
                "id": o["id"],
                "customerName": o.get("customerName"),
                "status": o.get("status"),
                "estimatedDeliveryDate": _to_iso_or_none(_estimated_delivery(o)),
            }
            for o in attention
        ],
        "invalidOrders": [o["id"] for o in orders if snapshots[o["id"]].has_invalid_products],
        "lowInventoryProducts": low_inventory_products(catalog, inventory),
        "topSellingProducts": top_selling_products(orders, catalog, currency_table),
        "monthlyExpenses": monthly_expenses(labor_costs, purchases, today),
        "totalProfit": total_profit,
        "profitMarginPercent": (total_profit / priced_revenue * 100) if priced_revenue > 0 else 0.0,
        "currencyBreakdown": currency_breakdown(orders, currency_table),
    }
