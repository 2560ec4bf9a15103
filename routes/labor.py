from core.imports import Blueprint, jsonify, request, jwt_required, get_jwt, math
from core.dates import utcnow, to_iso
from core.store import get_store, LABOR_COSTS
from services.costing import daily_rate

labor_bp = Blueprint('labor', __name__)

NUMERIC_FIELDS = ("monthlySalary", "daysWorked", "hoursPerDay")


def parse_labor_cost(data):
    """Validate a labor cost body. Returns (fields, error)."""
    name = (data.get("employeeName") or "").strip()
    if not name:
        return None, "employeeName is required"

    fields = {"employeeName": name}
    for key in NUMERIC_FIELDS:
        try:
            value = float(data.get(key))
        except (TypeError, ValueError):
            return None, f"{key} must be a number"
        if not math.isfinite(value):
            return None, f"{key} must be a number"
        if value < 0:
            return None, f"{key} must not be negative"
        fields[key] = value

    fields["startDate"] = data.get("startDate") or to_iso(utcnow())
    if data.get("endDate"):
        fields["endDate"] = data["endDate"]
    return fields, None


def forbidden_unless_admin():
    if get_jwt().get("role") != "admin":
        return jsonify({"error": "Forbidden"}), 403
    return None


@labor_bp.route('/api/labor-costs', methods=['GET'])
@jwt_required()
def get_labor_costs():
    costs = get_store().list(LABOR_COSTS, order_by="startDate", descending=True)
    return jsonify({"laborCosts": costs, "count": len(costs)}), 200


@labor_bp.route('/api/labor-costs/summary', methods=['GET'])
@jwt_required()
def get_labor_summary():
    """
    Blended labor rate
    ---
    tags:
      - Labor
    security:
      - Bearer: []
    responses:
      200:
        description: Monthly labor cost, days worked and the daily rate used for product costing
        schema:
          type: object
          properties:
            totalMonthlyLaborCost: { type: number, example: 300000 }
            totalLaborDays: { type: number, example: 44 }
            dailyRate: { type: number, example: 6818.18 }
    """
    costs = get_store().list(LABOR_COSTS)
    return jsonify({
        "totalMonthlyLaborCost": sum(float(c.get("monthlySalary") or 0) for c in costs),
        "totalLaborDays": sum(float(c.get("daysWorked") or 0) for c in costs),
        "dailyRate": daily_rate(costs),
    }), 200


@labor_bp.route('/api/labor-costs', methods=['POST'])
@jwt_required()
def add_labor_cost():
    """
    Admin: add an employee labor cost
    ---
    tags:
      - Labor
    security:
      - Bearer: []
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required:
            - employeeName
            - monthlySalary
            - daysWorked
            - hoursPerDay
          properties:
            employeeName: { type: string, example: "Chioma" }
            monthlySalary: { type: number, example: 150000 }
            daysWorked: { type: number, example: 22 }
            hoursPerDay: { type: number, example: 8 }
    responses:
      201:
        description: Labor cost created
      400:
        description: Invalid input
      403:
        description: Forbidden (not admin)
    """
    denied = forbidden_unless_admin()
    if denied:
        return denied

    fields, error = parse_labor_cost(request.get_json(silent=True) or {})
    if error:
        return jsonify({"error": error}), 400

    store = get_store()
    cost_id = store.add(LABOR_COSTS, fields)
    return jsonify({"message": "Labor cost created", "laborCost": store.get(LABOR_COSTS, cost_id)}), 201


@labor_bp.route('/api/labor-costs/<string:cost_id>', methods=['PUT'])
@jwt_required()
def update_labor_cost(cost_id):
    denied = forbidden_unless_admin()
    if denied:
        return denied

    store = get_store()
    existing = store.get(LABOR_COSTS, cost_id)
    if not existing:
        return jsonify({"message": "Labor cost not found"}), 404

    fields, error = parse_labor_cost({**existing, **(request.get_json(silent=True) or {})})
    if error:
        return jsonify({"error": error}), 400

    return jsonify({"message": "Labor cost updated", "laborCost": store.update(LABOR_COSTS, cost_id, fields)}), 200


@labor_bp.route('/api/labor-costs/<string:cost_id>', methods=['DELETE'])
@jwt_required()
def delete_labor_cost(cost_id):
    denied = forbidden_unless_admin()
    if denied:
        return denied

    if not get_store().delete(LABOR_COSTS, cost_id):
        return jsonify({"message": "Labor cost not found"}), 404
    return jsonify({"message": "Labor cost deleted"}), 200
