from core.imports import Blueprint, jsonify, request, jwt_required, math
from core.store import get_store, PRODUCTS
from services.costing import product_cost_breakdown
from services.references import load_reference_data

products_bp = Blueprint('products', __name__)


def parse_product(data):
    """Validate a product body. Returns (fields, error)."""
    name = (data.get("name") or "").strip()
    if not name:
        return None, "name is required"

    try:
        time_to_make = float(data.get("timeToMake", 0))
    except (TypeError, ValueError):
        return None, "timeToMake must be a number of days"
    if not math.isfinite(time_to_make) or time_to_make < 0:
        return None, "timeToMake must be a number of days"

    materials = []
    for requirement in data.get("materials") or []:
        try:
            quantity = float(requirement.get("quantity"))
        except (TypeError, ValueError, AttributeError):
            return None, "Each material needs a numeric quantity"
        if not requirement.get("materialId") or not math.isfinite(quantity) or quantity <= 0:
            return None, "Each material needs a materialId and a positive quantity"
        materials.append({"materialId": requirement["materialId"], "quantity": quantity})

    return {"name": name, "materials": materials, "timeToMake": time_to_make}, None


def with_costs(product, refs):
    return {**product, "cost": product_cost_breakdown(product, refs.inventory, refs.daily_rate).to_dict()}


@products_bp.route('/api/products', methods=['GET'])
@jwt_required()
def get_products():
    store = get_store()
    refs = load_reference_data(store)
    products = sorted(refs.catalog.values(), key=lambda p: p.get("name") or "")
    return jsonify({"products": [with_costs(p, refs) for p in products], "count": len(products)}), 200


@products_bp.route('/api/products/<string:product_id>', methods=['GET'])
@jwt_required()
def get_product(product_id):
    """
    Product details with material and labor cost breakdown
    ---
    tags:
      - Products
    security:
      - Bearer: []
    parameters:
      - name: product_id
        in: path
        type: string
        required: true
    responses:
      200:
        description: Product with cost breakdown in NGN
      404:
        description: Product not found
    """
    store = get_store()
    refs = load_reference_data(store)
    product = refs.catalog.get(product_id)
    if not product:
        return jsonify({"message": "Product not found"}), 404
    return jsonify({"product": with_costs(product, refs)}), 200


@products_bp.route('/api/products', methods=['POST'])
@jwt_required()
def add_product():
    """
    Add a product
    ---
    tags:
      - Products
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
          properties:
            name:
              type: string
              example: "Beaded clutch"
            timeToMake:
              type: number
              example: 2
            materials:
              type: array
              items:
                type: object
                properties:
                  materialId:
                    type: string
                  quantity:
                    type: number
    responses:
      201:
        description: Product created
      400:
        description: Invalid input
    """
    fields, error = parse_product(request.get_json(silent=True) or {})
    if error:
        return jsonify({"error": error}), 400

    store = get_store()
    product_id = store.add(PRODUCTS, fields)
    return jsonify({"message": "Product created", "product": store.get(PRODUCTS, product_id)}), 201


@products_bp.route('/api/products/<string:product_id>', methods=['PUT'])
@jwt_required()
def update_product(product_id):
    store = get_store()
    existing = store.get(PRODUCTS, product_id)
    if not existing:
        return jsonify({"message": "Product not found"}), 404

    fields, error = parse_product({**existing, **(request.get_json(silent=True) or {})})
    if error:
        return jsonify({"error": error}), 400

    product = store.update(PRODUCTS, product_id, fields)
    return jsonify({"message": "Product updated", "product": product}), 200


@products_bp.route('/api/products/<string:product_id>', methods=['DELETE'])
@jwt_required()
def delete_product(product_id):
    if not get_store().delete(PRODUCTS, product_id):
        return jsonify({"message": "Product not found"}), 404
    return jsonify({"message": "Product deleted"}), 200
