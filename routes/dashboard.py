from core.imports import Blueprint, jsonify, jwt_required
from core.store import get_store, RAW_MATERIAL_PURCHASES
from routes.orders import currency_table
from services.dashboard import summarize
from services.orders import list_orders, reconcile_order
from services.references import load_reference_data

dashboard_bp = Blueprint('dashboard', __name__)


@dashboard_bp.route('/api/dashboard', methods=['GET'])
@jwt_required()
def get_dashboard():
    """
    Revenue, profit, inventory and attention-queue summary
    ---
    tags:
      - Dashboard
    security:
      - Bearer: []
    responses:
      200:
        description: Dashboard summary, money in NGN
    """
    store = get_store()
    refs = load_reference_data(store)
    table = currency_table()

    orders = list_orders(store)
    snapshots = {order["id"]: reconcile_order(order, refs, table) for order in orders}

    summary = summarize(
        orders,
        snapshots,
        refs.catalog,
        refs.inventory,
        refs.labor_costs,
        store.list(RAW_MATERIAL_PURCHASES),
        table,
    )
    return jsonify(summary), 200
