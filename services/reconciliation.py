from dataclasses import dataclass

from services.costing import ReferenceState, order_product_cost
from services.currency import convert_to_ngn


@dataclass(frozen=True)
class FinancialSnapshot:
    product_cost_ngn: float
    shipping_cost_ngn: float
    total_extra_expenses_ngn: float
    total_additional_payments_ngn: float
    total_amount_ngn: float
    profit_margin: float
    has_invalid_products: bool
    unresolved: tuple = ()

    def cached_fields(self):
        """The derived fields stored on an order document."""
        return {
            "productCostInNGN": self.product_cost_ngn,
            "shippingCostInNGN": self.shipping_cost_ngn,
            "profitMargin": self.profit_margin,
            "hasInvalidProducts": self.has_invalid_products,
        }

    def to_dict(self):
        return {
            **self.cached_fields(),
            "totalExtraExpensesInNGN": self.total_extra_expenses_ngn,
            "totalAdditionalPaymentsInNGN": self.total_additional_payments_ngn,
            "totalAmountInNGN": self.total_amount_ngn,
        }

    def unresolved_to_list(self):
        return [
            {"kind": ref.kind, "id": ref.ref_id, "itemIndex": ref.item_index}
            for ref in self.unresolved
        ]


def shipping_actual_cost(order):
    # actualCost is entered in NGN, so it is never converted.
    shipping_info = (order.get("shipping") or {}).get("shippingInfo") or {}
    return float(shipping_info.get("actualCost") or 0)


def reconcile(order, catalog, inventory, daily_rate, currency_table,
              catalog_state=ReferenceState.READY) -> FinancialSnapshot:
    """
    Recompute an order's derived financial fields from current reference data.

    Pure: reads only its arguments and never raises for missing products or
    materials. Those contribute zero cost and set `has_invalid_products` (for
    products) and are listed in `unresolved`.
    """
    currency = order.get("currency")

    product_cost = order_product_cost(order.get("items"), catalog, inventory, daily_rate, catalog_state)
    shipping_cost = shipping_actual_cost(order)

    extra_expenses = sum(
        convert_to_ngn(float(expense.get("amount") or 0), currency, currency_table)
        for expense in order.get("extraExpenses") or []
    )
    additional_payments = sum(
        convert_to_ngn(float(payment.get("amount") or 0), currency, currency_table)
        for payment in order.get("additionalPayments") or []
    )
    total_amount = convert_to_ngn(float(order.get("totalAmount") or 0), currency, currency_table)

    profit_margin = total_amount - product_cost.cost - shipping_cost - extra_expenses + additional_payments

    return FinancialSnapshot(
        product_cost_ngn=product_cost.cost,
        shipping_cost_ngn=shipping_cost,
        total_extra_expenses_ngn=extra_expenses,
        total_additional_payments_ngn=additional_payments,
        total_amount_ngn=total_amount,
        profit_margin=profit_margin,
        has_invalid_products=product_cost.has_invalid_products,
        unresolved=product_cost.unresolved,
    )


def apply_snapshot(order, snapshot):
    return {**order, **snapshot.cached_fields()}
