"""
Product and line-item costing in NGN.

Material cost uses each raw material's `lastPurchasePrice` as its unit cost.
Labor cost uses one blended daily rate for every product. Ids that cannot be
resolved never raise: they contribute nothing and are reported back as
`UnresolvedReference` entries.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ReferenceState(str, Enum):
    NOT_LOADED = "not_loaded"
    LOADING = "loading"
    READY = "ready"


@dataclass(frozen=True)
class UnresolvedReference:
    kind: str  # "product" or "material"
    ref_id: str
    item_index: Optional[int] = None


@dataclass(frozen=True)
class ProductCostBreakdown:
    material_cost: float
    labor_cost: float

    @property
    def total_cost(self):
        return self.material_cost + self.labor_cost

    def to_dict(self):
        return {
            "materialCost": self.material_cost,
            "laborCost": self.labor_cost,
            "totalCost": self.total_cost,
            "costs": [
                {"category": "raw_material", "value": self.material_cost},
                {"category": "labor", "value": self.labor_cost},
            ],
        }


@dataclass(frozen=True)
class ProductCostResult:
    cost: float
    has_invalid_products: bool
    unresolved: tuple = ()


def daily_rate(labor_costs):
    """Sum of monthly salaries over sum of days worked, 0 when no days are recorded."""
    total_salary = sum(float(c.get("monthlySalary") or 0) for c in labor_costs)
    total_days = sum(float(c.get("daysWorked") or 0) for c in labor_costs)
    return total_salary / total_days if total_days > 0 else 0.0


def materials_cost(requirements, materials, unresolved=None, item_index=None):
    total = 0.0
    for requirement in requirements or []:
        material_id = requirement.get("materialId")
        raw_material = materials.get(material_id)
        if raw_material is None:
            if unresolved is not None:
                unresolved.append(UnresolvedReference("material", material_id, item_index))
            continue
        total += float(raw_material.get("lastPurchasePrice") or 0) * float(requirement.get("quantity") or 0)
    return total


def product_cost_breakdown(product, materials, rate, unresolved=None, item_index=None):
    material_cost = materials_cost(product.get("materials"), materials, unresolved, item_index)
    labor_cost = rate * float(product.get("timeToMake") or 0)
    return ProductCostBreakdown(material_cost=material_cost, labor_cost=labor_cost)


def item_cost(item, product, materials, rate, unresolved=None, item_index=None):
    if product is None:
        if unresolved is not None:
            unresolved.append(UnresolvedReference("product", item.get("productId"), item_index))
        return 0.0

    base_cost = product_cost_breakdown(product, materials, rate, unresolved, item_index).total_cost
    additional_material_cost = materials_cost(item.get("additionalMaterials"), materials, unresolved, item_index)
    additional_costs = sum(float(c.get("amount") or 0) for c in item.get("additionalCosts") or [])

    return (base_cost + additional_material_cost + additional_costs) * float(item.get("quantity") or 0)


def order_product_cost(items, catalog, materials, rate, catalog_state=ReferenceState.READY):
    # An incomplete catalog would understate cost, so treat it as invalid.
    if catalog_state != ReferenceState.READY:
        return ProductCostResult(cost=0.0, has_invalid_products=True)

    unresolved = []
    total = 0.0
    has_invalid = False
    for index, item in enumerate(items or []):
        product = catalog.get(item.get("productId"))
        if product is None:
            has_invalid = True
        total += item_cost(item, product, materials, rate, unresolved, index)

    return ProductCostResult(cost=total, has_invalid_products=has_invalid, unresolved=tuple(unresolved))
