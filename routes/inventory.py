from core.imports import Blueprint, jsonify, request, jwt_required, get_jwt_identity, uuid, math
from core.dates import utcnow, to_iso
from core.store import get_store, RAW_MATERIALS, RAW_MATERIAL_PURCHASES

inventory_bp = Blueprint('inventory', __name__)


def _number(value):
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


@inventory_bp.route('/api/raw-materials', methods=['GET'])
@jwt_required()
def get_raw_materials():
    materials = get_store().list(RAW_MATERIALS, order_by="name")
    return jsonify({"materials": materials, "count": len(materials)}), 200


@inventory_bp.route('/api/raw-materials/<string:material_id>', methods=['GET'])
@jwt_required()
def get_raw_material(material_id):
    material = get_store().get(RAW_MATERIALS, material_id)
    if not material:
        return jsonify({"message": "Raw material not found"}), 404
    return jsonify({"material": material}), 200


@inventory_bp.route('/api/raw-materials', methods=['POST'])
@jwt_required()
def add_raw_material():
    """
    Add a raw material
    ---
    tags:
      - Inventory
    security:
      - Bearer: []
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required:
            - name
            - unit
          properties:
            name:
              type: string
              example: "Ankara fabric"
            unit:
              type: string
              example: yard
            currentQuantity:
              type: number
              example: 12
            lastPurchasePrice:
              type: number
              example: 2500
    responses:
      201:
        description: Raw material created
      400:
        description: Invalid input
    """
    data = request.get_json(silent=True) or {}
    name = (data.get("name") or "").strip()
    unit = (data.get("unit") or "").strip()
    quantity = _number(data.get("currentQuantity", 0))
    price = _number(data.get("lastPurchasePrice", 0))

    if not name or not unit:
        return jsonify({"error": "name and unit are required"}), 400
    if quantity is None or price is None or quantity < 0 or price < 0:
        return jsonify({"error": "currentQuantity and lastPurchasePrice must be non-negative numbers"}), 400

    store = get_store()
    material_id = store.add(RAW_MATERIALS, {
        "name": name,
        "unit": unit,
        "currentQuantity": quantity,
        "lastPurchasePrice": price,
        "lastPurchaseDate": to_iso(utcnow()),
        "purchaseHistory": [],
    })
    return jsonify({"message": "Raw material created", "material": store.get(RAW_MATERIALS, material_id)}), 201


@inventory_bp.route('/api/raw-materials/purchases', methods=['GET'])
@jwt_required()
def get_purchases():
    purchases = get_store().list(RAW_MATERIAL_PURCHASES, order_by="purchaseDate", descending=True)
    return jsonify({"purchases": purchases, "count": len(purchases)}), 200


@inventory_bp.route('/api/raw-materials/purchases', methods=['POST'])
@jwt_required()
def record_purchase():
    """
    Record a raw material purchase
    ---
    tags:
      - Inventory
    security:
      - Bearer: []
    description: >
      Stores the purchase and makes its unit price the material's standing
      cost (lastPurchasePrice). Stock on hand grows by the purchased quantity.
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required:
            - materialId
            - quantity
            - price
          properties:
            materialId:
              type: string
            quantity:
              type: number
              example: 5
            price:
              type: number
              description: Unit price in NGN
              example: 2800
            purchasedBy:
              type: string
    responses:
      201:
        description: Purchase recorded
      400:
        description: Invalid input
      404:
        description: Raw material not found
    """
    data = request.get_json(silent=True) or {}
    material_id = data.get("materialId")
    quantity = _number(data.get("quantity"))
    price = _number(data.get("price"))

    if not material_id or quantity is None or price is None or quantity <= 0 or price < 0:
        return jsonify({"error": "materialId, a positive quantity and a price are required"}), 400

    store = get_store()
    material = store.get(RAW_MATERIALS, material_id)
    if not material:
        return jsonify({"message": "Raw material not found"}), 404

    purchase_date = to_iso(utcnow())
    purchase_id = store.add(RAW_MATERIAL_PURCHASES, {
        "materialId": material_id,
        "quantity": quantity,
        "price": price,
        "purchaseDate": purchase_date,
        "purchasedBy": data.get("purchasedBy") or get_jwt_identity(),
    })

    history = list(material.get("purchaseHistory") or [])
    history.append({
        "id": uuid.uuid4().hex,
        "quantity": quantity,
        "totalCost": quantity * price,
        "purchaseDate": purchase_date,
    })
    material = store.update(RAW_MATERIALS, material_id, {
        "lastPurchasePrice": price,
        "lastPurchaseDate": purchase_date,
        "currentQuantity": float(material.get("currentQuantity") or 0) + quantity,
        "purchaseHistory": history,
    })

    return jsonify({
        "message": "Purchase recorded",
        "purchase": store.get(RAW_MATERIAL_PURCHASES, purchase_id),
        "material": material,
    }), 201
