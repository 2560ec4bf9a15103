from dataclasses import dataclass, field

from core.store import LABOR_COSTS, PRODUCTS, RAW_MATERIALS
from services.costing import ReferenceState, daily_rate


@dataclass
class ReferenceData:
    """Catalog, inventory and labor rate needed to price an order."""
    catalog: dict = field(default_factory=dict)
    inventory: dict = field(default_factory=dict)
    daily_rate: float = 0.0
    labor_costs: list = field(default_factory=list)
    catalog_state: ReferenceState = ReferenceState.NOT_LOADED


def index_by_id(docs):
    return {doc["id"]: doc for doc in docs}


def load_reference_data(store):
    refs = ReferenceData(catalog_state=ReferenceState.LOADING)
    refs.catalog = index_by_id(store.list(PRODUCTS))
    refs.inventory = index_by_id(store.list(RAW_MATERIALS))
    refs.labor_costs = store.list(LABOR_COSTS, order_by="startDate", descending=True)
    refs.daily_rate = daily_rate(refs.labor_costs)
    refs.catalog_state = ReferenceState.READY
    return refs
