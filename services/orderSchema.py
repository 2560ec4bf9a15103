"""
Read-time upgrades for stored order documents.

Version 1 orders keep `shippingInfo` / `shippingAddress` at the top level.
Version 2 nests them under `shipping` together with a shipping status.
Upgrades run on read only; stored documents are left as they are.
"""

CURRENT_ORDER_VERSION = 2


def blank_address():
    return {"street": "", "city": "", "state": "", "country": "", "postalCode": ""}


def detect_order_version(order):
    if "shippingInfo" in order and not order.get("shipping"):
        return 1
    return 2


def _upgrade_v1_to_v2(order):
    return {
        **order,
        "shipping": {
            "shippingAddress": order.get("shippingAddress") or blank_address(),
            "shippingInfo": order["shippingInfo"],
            "status": "pending",
        },
    }


_UPGRADES = {1: _upgrade_v1_to_v2}


def upgrade_order(order):
    """Return the order in the current shape. Never mutates the input."""
    version = detect_order_version(order)
    while version < CURRENT_ORDER_VERSION:
        order = _UPGRADES[version](order)
        version += 1
    return order
