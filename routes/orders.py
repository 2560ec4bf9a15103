from core.imports import Blueprint, jsonify, request, jwt_required, current_app, uuid, math
from core.dates import utcnow, to_iso, normalize_date
from core.store import get_store, ORDERS, PRODUCTS
from services.currency import CurrencyTable, map_currency
from services.orders import get_order, list_orders, reconcile_order, save_order
from services.orderSchema import blank_address
from services.orderStatus import OrderStatus, FINISHED_STATUSES, SHIPPING_STATUSES
from services.reconciliation import apply_snapshot
from services.references import load_reference_data

orders_bp = Blueprint('orders', __name__)

EXPENSE_CATEGORIES = ("shipping", "materials", "labor", "other")
PAYMENT_TYPES = ("shipping", "product", "other")
SHIPPING_INFO_FIELDS = ("shippingCompany", "trackingNumber", "carrier",
                        "estimatedDeliveryDate", "actualDeliveryDate", "dateShipped")
ADDRESS_FIELDS = ("street", "city", "state", "country", "postalCode")


def currency_table():
    return CurrencyTable.from_mapping(current_app.config["CURRENCY_RATES_TO_NGN"])


def order_payload(order, snapshot):
    return {
        **apply_snapshot(order, snapshot),
        "financials": snapshot.to_dict(),
        "unresolvedReferences": snapshot.unresolved_to_list(),
    }


def parse_amount(value):
    """Parse a finite number, or None."""
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return None
    return amount if math.isfinite(amount) else None


def parse_items(raw_items):
    """Validate line items from a staff request. Returns (items, error)."""
    if not isinstance(raw_items, list) or not raw_items:
        return None, "items must be a non-empty list"

    items = []
    for raw in raw_items:
        if not isinstance(raw, dict) or not raw.get("productId"):
            return None, "Each item needs a productId"
        quantity = raw.get("quantity", 1)
        if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity < 1:
            return None, "Item quantity must be a positive integer"
        price = parse_amount(raw.get("price", 0))
        if price is None:
            return None, "Item price must be a number"

        extra_materials = raw.get("additionalMaterials") or []
        extra_costs = raw.get("additionalCosts") or []
        if not isinstance(extra_materials, list) or not all(isinstance(m, dict) for m in extra_materials):
            return None, "additionalMaterials must be a list of objects"
        if not isinstance(extra_costs, list) or not all(isinstance(c, dict) for c in extra_costs):
            return None, "additionalCosts must be a list of objects"

        items.append({
            "productId": str(raw["productId"]),
            "quantity": quantity,
            "price": price,
            "additionalMaterials": [
                {"materialId": m.get("materialId"), "quantity": parse_amount(m.get("quantity")) or 0}
                for m in extra_materials
            ],
            "additionalCosts": [
                {"name": c.get("name"), "amount": parse_amount(c.get("amount")) or 0}
                for c in extra_costs
            ],
        })
    return items, None


def parse_social_media(raw):
    """Validate social media references. Returns (entries, error)."""
    raw = raw or []
    if not isinstance(raw, list) or not all(isinstance(s, dict) for s in raw):
        return None, "socialMedia must be a list of objects"
    return [
        {"platform": s.get("platform", ""), "handle": s.get("handle", ""), "url": s.get("url", "")}
        for s in raw
    ], None


def load_for_update(order_id):
    store = get_store()
    order = get_order(store, order_id)
    return store, order


def save_and_respond(store, order, message, status=200):
    refs = load_reference_data(store)
    saved, snapshot = save_order(store, order, refs, currency_table())
    return jsonify({"message": message, "order": order_payload(saved, snapshot)}), status


@orders_bp.route('/api/orders', methods=['GET'])
@jwt_required()
def get_orders():
    """
    List orders with freshly reconciled financials
    ---
    tags:
      - Orders
    security:
      - Bearer: []
    parameters:
      - name: status
        in: query
        type: string
        required: false
        example: pending
    responses:
      200:
        description: Orders, newest first
    """
    store = get_store()
    refs = load_reference_data(store)
    table = currency_table()

    orders = list_orders(store, status=request.args.get("status"))
    result = [order_payload(order, reconcile_order(order, refs, table)) for order in orders]

    return jsonify({"orders": result, "count": len(result)}), 200


@orders_bp.route('/api/orders/<string:order_id>', methods=['GET'])
@jwt_required()
def get_order_details(order_id):
    """
    Get one order with its financial breakdown
    ---
    tags:
      - Orders
    security:
      - Bearer: []
    parameters:
      - name: order_id
        in: path
        type: string
        required: true
    responses:
      200:
        description: Order with financials and unresolved references
      404:
        description: Order not found
    """
    store = get_store()
    order = get_order(store, order_id)
    if not order:
        return jsonify({"message": "Order not found"}), 404

    snapshot = reconcile_order(order, load_reference_data(store), currency_table())
    return jsonify({"order": order_payload(order, snapshot)}), 200


@orders_bp.route('/api/orders', methods=['POST'])
@jwt_required()
def create_order():
    """
    Create an order by hand
    ---
    tags:
      - Orders
    security:
      - Bearer: []
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required:
            - customerName
            - items
            - totalAmount
          properties:
            customerName:
              type: string
              example: "Ada Obi"
            customerEmail:
              type: string
            currency:
              type: string
              example: NGN
            totalAmount:
              type: number
              example: 45000
            items:
              type: array
              items:
                type: object
                properties:
                  productId:
                    type: string
                  quantity:
                    type: integer
                  price:
                    type: number
    responses:
      201:
        description: Order created
      400:
        description: Invalid input
    """
    data = request.get_json(silent=True) or {}

    customer_name = (data.get("customerName") or "").strip()
    total_amount = parse_amount(data.get("totalAmount"))
    if not customer_name or total_amount is None:
        return jsonify({"message": "customerName and totalAmount are required"}), 400

    items, error = parse_items(data.get("items"))
    if error:
        return jsonify({"message": error}), 400

    social_media, error = parse_social_media(data.get("socialMedia"))
    if error:
        return jsonify({"message": error}), 400

    raw_address = data.get("shippingAddress") or {}
    if not isinstance(raw_address, dict):
        return jsonify({"message": "shippingAddress must be an object"}), 400
    shipping_address = {**blank_address(), **{k: v for k, v in raw_address.items() if k in ADDRESS_FIELDS}}

    order = {
        "id": str(data.get("id") or uuid.uuid4().hex),
        "customerName": customer_name,
        "customerEmail": data.get("customerEmail", ""),
        "customerPhone": data.get("customerPhone", ""),
        "socialMedia": social_media,
        "items": items,
        "totalAmount": total_amount,
        "currency": map_currency(data.get("currency") or "NGN").value,
        "status": OrderStatus.PENDING.value,
        "orderDate": normalize_date(data.get("orderDate"), utcnow()),
        "notes": data.get("notes", ""),
        "extraExpenses": [],
        "additionalPayments": [],
        "shipping": {
            "shippingAddress": shipping_address,
            "shippingInfo": {
                "customerPaid": parse_amount(data.get("shippingPaid")) or 0,
                "estimatedDeliveryDate": normalize_date(data.get("estimatedDeliveryDate")),
            },
            "status": "pending",
        },
    }

    store = get_store()
    if store.exists(ORDERS, order["id"]):
        return jsonify({"message": f"Order {order['id']} already exists"}), 409

    return save_and_respond(store, order, "Order created successfully", 201)


@orders_bp.route('/api/orders/<string:order_id>', methods=['PATCH'])
@jwt_required()
def update_order(order_id):
    """
    Update notes and social media references
    ---
    tags:
      - Orders
    security:
      - Bearer: []
    parameters:
      - name: order_id
        in: path
        type: string
        required: true
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            notes:
              type: string
              example: "Call before delivery"
            socialMedia:
              type: array
              items:
                type: object
                properties:
                  platform:
                    type: string
                    example: instagram
                  handle:
                    type: string
                    example: "@ada"
                  url:
                    type: string
    responses:
      200:
        description: Order updated
      400:
        description: socialMedia is not a list of objects
      404:
        description: Order not found
    """
    store, order = load_for_update(order_id)
    if not order:
        return jsonify({"message": "Order not found"}), 404

    data = request.get_json(silent=True) or {}
    if "notes" in data:
        order["notes"] = data["notes"] or ""
    if "socialMedia" in data:
        social_media, error = parse_social_media(data["socialMedia"])
        if error:
            return jsonify({"message": error}), 400
        order["socialMedia"] = social_media

    return save_and_respond(store, order, "Order updated successfully")


@orders_bp.route('/api/orders/<string:order_id>/status', methods=['PATCH'])
@jwt_required()
def update_order_status(order_id):
    """
    Update Order Status
    ---
    tags:
      - Orders
    security:
      - Bearer: []
    parameters:
      - name: order_id
        in: path
        type: string
        required: true
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            status:
              type: string
              example: shipped
    responses:
      200:
        description: Status updated successfully
      400:
        description: Invalid status
      404:
        description: Order not found
    """
    data = request.get_json(silent=True) or {}
    new_status = data.get('status')

    if new_status not in [s.value for s in OrderStatus]:
        return jsonify({"message": "Invalid status"}), 400

    store, order = load_for_update(order_id)
    if not order:
        return jsonify({"message": "Order not found"}), 404

    order["status"] = new_status
    if new_status in FINISHED_STATUSES:
        order["dateCompleted"] = to_iso(utcnow())

    return save_and_respond(store, order, f"Order status updated to {new_status}")


@orders_bp.route('/api/orders/<string:order_id>/shipping', methods=['PUT'])
@jwt_required()
def update_shipping(order_id):
    """
    Update shipping details
    ---
    tags:
      - Orders
    security:
      - Bearer: []
    parameters:
      - name: order_id
        in: path
        type: string
        required: true
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            shippingCompany:
              type: string
            actualShippingCost:
              type: number
              description: Amount paid to the courier, in NGN
            estimatedDeliveryDate:
              type: string
            actualDeliveryDate:
              type: string
            status:
              type: string
              example: in_transit
            shippingAddress:
              type: object
    responses:
      200:
        description: Shipping updated, financials recomputed
      400:
        description: Invalid shipping status or cost
      404:
        description: Order not found
    """
    store, order = load_for_update(order_id)
    if not order:
        return jsonify({"message": "Order not found"}), 404

    data = request.get_json(silent=True) or {}
    shipping = dict(order.get("shipping") or {})
    shipping_info = dict(shipping.get("shippingInfo") or {})

    for field in SHIPPING_INFO_FIELDS:
        if data.get(field):
            shipping_info[field] = data[field]

    if data.get("actualShippingCost") not in (None, ""):
        actual_cost = parse_amount(data["actualShippingCost"])
        if actual_cost is None or actual_cost < 0:
            return jsonify({"message": "actualShippingCost must be a non-negative number"}), 400
        shipping_info["actualCost"] = actual_cost

    if "status" in data:
        if data["status"] not in SHIPPING_STATUSES:
            return jsonify({"message": "Invalid shipping status"}), 400
        shipping["status"] = data["status"]

    if isinstance(data.get("shippingAddress"), dict):
        address = dict(shipping.get("shippingAddress") or blank_address())
        address.update({k: v for k, v in data["shippingAddress"].items() if k in ADDRESS_FIELDS})
        shipping["shippingAddress"] = address

    shipping["shippingInfo"] = {k: v for k, v in shipping_info.items() if v is not None}
    shipping.setdefault("status", "pending")
    order["shipping"] = shipping

    return save_and_respond(store, order, "Shipping information updated successfully")


@orders_bp.route('/api/orders/<string:order_id>/expenses', methods=['POST'])
@jwt_required()
def add_extra_expense(order_id):
    """
    Add an extra expense (amount in the order's currency)
    ---
    tags:
      - Orders
    security:
      - Bearer: []
    parameters:
      - name: order_id
        in: path
        type: string
        required: true
      - in: body
        name: body
        required: true
        schema:
          type: object
          required:
            - description
            - amount
          properties:
            description:
              type: string
              example: "Gift wrapping"
            amount:
              type: number
              example: 10
            category:
              type: string
              example: other
            notes:
              type: string
    responses:
      201:
        description: Expense added
      400:
        description: Invalid expense
      404:
        description: Order not found
    """
    store, order = load_for_update(order_id)
    if not order:
        return jsonify({"message": "Order not found"}), 404

    data = request.get_json(silent=True) or {}
    amount = parse_amount(data.get("amount"))
    if not data.get("description") or amount is None or amount <= 0:
        return jsonify({"message": "description and a positive amount are required"}), 400

    category = data.get("category") or "other"
    if category not in EXPENSE_CATEGORIES:
        return jsonify({"message": f"category must be one of {', '.join(EXPENSE_CATEGORIES)}"}), 400

    expense = {
        "id": uuid.uuid4().hex,
        "description": data["description"],
        "amount": amount,
        "date": data.get("date") or to_iso(utcnow()),
        "category": category,
    }
    if data.get("notes"):
        expense["notes"] = data["notes"]

    order["extraExpenses"] = list(order.get("extraExpenses") or []) + [expense]
    return save_and_respond(store, order, "Expense added", 201)


@orders_bp.route('/api/orders/<string:order_id>/expenses/<string:expense_id>', methods=['DELETE'])
@jwt_required()
def remove_extra_expense(order_id, expense_id):
    """
    Remove an extra expense
    ---
    tags:
      - Orders
    security:
      - Bearer: []
    parameters:
      - name: order_id
        in: path
        type: string
        required: true
      - name: expense_id
        in: path
        type: string
        required: true
    responses:
      200:
        description: Expense removed and financials recomputed
      404:
        description: Order or expense not found
    """
    store, order = load_for_update(order_id)
    if not order:
        return jsonify({"message": "Order not found"}), 404

    expenses = order.get("extraExpenses") or []
    remaining = [e for e in expenses if e.get("id") != expense_id]
    if len(remaining) == len(expenses):
        return jsonify({"message": "Expense not found"}), 404

    order["extraExpenses"] = remaining
    return save_and_respond(store, order, "Expense removed")


@orders_bp.route('/api/orders/<string:order_id>/payments', methods=['POST'])
@jwt_required()
def add_additional_payment(order_id):
    """
    Record an additional payment (amount in the order's currency)
    ---
    tags:
      - Orders
    security:
      - Bearer: []
    parameters:
      - name: order_id
        in: path
        type: string
        required: true
      - in: body
        name: body
        required: true
        schema:
          type: object
          required:
            - description
            - amount
          properties:
            description:
              type: string
              example: "Customer paid for express delivery"
            amount:
              type: number
              example: 5
            type:
              type: string
              example: shipping
            notes:
              type: string
    responses:
      201:
        description: Payment added
      400:
        description: Invalid payment
      404:
        description: Order not found
    """
    store, order = load_for_update(order_id)
    if not order:
        return jsonify({"message": "Order not found"}), 404

    data = request.get_json(silent=True) or {}
    amount = parse_amount(data.get("amount"))
    if not data.get("description") or amount is None or amount <= 0:
        return jsonify({"message": "description and a positive amount are required"}), 400

    payment_type = data.get("type") or "other"
    if payment_type not in PAYMENT_TYPES:
        return jsonify({"message": f"type must be one of {', '.join(PAYMENT_TYPES)}"}), 400

    payment = {
        "id": uuid.uuid4().hex,
        "description": data["description"],
        "amount": amount,
        "date": data.get("date") or to_iso(utcnow()),
        "type": payment_type,
    }
    if data.get("notes"):
        payment["notes"] = data["notes"]

    order["additionalPayments"] = list(order.get("additionalPayments") or []) + [payment]
    return save_and_respond(store, order, "Payment added", 201)


@orders_bp.route('/api/orders/<string:order_id>/payments/<string:payment_id>', methods=['DELETE'])
@jwt_required()
def remove_additional_payment(order_id, payment_id):
    """
    Remove an additional payment
    ---
    tags:
      - Orders
    security:
      - Bearer: []
    parameters:
      - name: order_id
        in: path
        type: string
        required: true
      - name: payment_id
        in: path
        type: string
        required: true
    responses:
      200:
        description: Payment removed and financials recomputed
      404:
        description: Order or payment not found
    """
    store, order = load_for_update(order_id)
    if not order:
        return jsonify({"message": "Order not found"}), 404

    payments = order.get("additionalPayments") or []
    remaining = [p for p in payments if p.get("id") != payment_id]
    if len(remaining) == len(payments):
        return jsonify({"message": "Payment not found"}), 404

    order["additionalPayments"] = remaining
    return save_and_respond(store, order, "Payment removed")


@orders_bp.route('/api/orders/<string:order_id>/items/<int:index>/product', methods=['PATCH'])
@jwt_required()
def relink_item_product(order_id, index):
    """
    Link a line item to a catalog product
    ---
    tags:
      - Orders
    security:
      - Bearer: []
    parameters:
      - name: order_id
        in: path
        type: string
        required: true
      - name: index
        in: path
        type: integer
        required: true
      - in: body
        name: body
        required: true
        schema:
          type: object
          required:
            - productId
          properties:
            productId:
              type: string
    responses:
      200:
        description: Item relinked, financials recomputed
      400:
        description: productId is required
      404:
        description: Order, item or product not found
    """
    store, order = load_for_update(order_id)
    if not order:
        return jsonify({"message": "Order not found"}), 404

    items = list(order.get("items") or [])
    if index < 0 or index >= len(items):
        return jsonify({"message": "Item not found"}), 404

    product_id = (request.get_json(silent=True) or {}).get("productId")
    if not product_id:
        return jsonify({"message": "productId is required"}), 400
    if not store.exists(PRODUCTS, product_id):
        return jsonify({"message": f"Product {product_id} not found"}), 404

    was_invalid = bool(order.get("hasInvalidProducts"))
    items[index] = {**items[index], "productId": str(product_id)}
    order["items"] = items

    saved, snapshot = save_order(store, order, load_reference_data(store), currency_table())
    if snapshot.has_invalid_products:
        message = "Product linked successfully. Some products still need to be linked before profit can be shown."
    elif was_invalid:
        message = "Product linked successfully. All products are now valid."
    else:
        message = "Product linked successfully"

    return jsonify({"message": message, "order": order_payload(saved, snapshot)}), 200
