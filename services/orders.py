from core.store import ORDERS
from services.orderSchema import upgrade_order
from services.reconciliation import apply_snapshot, reconcile


def get_order(store, order_id):
    order = store.get(ORDERS, order_id)
    return upgrade_order(order) if order else None


def list_orders(store, status=None):
    orders = [upgrade_order(o) for o in store.list(ORDERS, order_by="orderDate", descending=True)]
    if status:
        orders = [o for o in orders if o.get("status") == status]
    return orders


def reconcile_order(order, refs, currency_table):
    return reconcile(
        order,
        refs.catalog,
        refs.inventory,
        refs.daily_rate,
        currency_table,
        catalog_state=refs.catalog_state,
    )


def sum_amounts(entries):
    return sum(float(entry.get("amount") or 0) for entry in entries or [])


def save_order(store, order, refs, currency_table):
    """Recompute the cached financials and write the whole order back."""
    order = dict(order)
    order["totalExtraExpenses"] = sum_amounts(order.get("extraExpenses"))
    order["totalAdditionalPayments"] = sum_amounts(order.get("additionalPayments"))
    snapshot = reconcile_order(order, refs, currency_table)
    saved = store.set(ORDERS, order["id"], apply_snapshot(order, snapshot))
    return saved, snapshot
