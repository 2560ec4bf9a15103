from core.imports import Blueprint, request, current_app, SQLAlchemyError
from core.extensions import db
from core.dates import utcnow, to_iso
from core.store import get_store, ORDERS
from services.orders import get_order
from services.orderStatus import FINISHED_STATUSES
from services.woocommerce import map_order, map_status, merge_with_existing, validate_payload

webhooks_bp = Blueprint('webhooks', __name__)


def text_response(message, status):
    return message, status, {"Content-Type": "text/plain; charset=utf-8"}


@webhooks_bp.before_request
def check_webhook_secret():
    secret = current_app.config.get("WEBHOOK_SECRET")
    if secret and request.headers.get("X-Webhook-Secret") != secret:
        current_app.logger.warning("Webhook rejected: bad or missing secret")
        return text_response("Unauthorized", 401)
    return None


@webhooks_bp.route('/syncOrder', methods=['POST'])
def sync_order():
    """
    Ingest a WooCommerce order
    ---
    tags:
      - Webhooks
    consumes:
      - application/json
    produces:
      - text/plain
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required:
            - id
            - line_items
            - billing
          properties:
            id:
              type: integer
              example: 1042
            status:
              type: string
              example: processing
            currency:
              type: string
              example: USD
            total:
              type: string
              example: "100.00"
            line_items:
              type: array
              items:
                type: object
            billing:
              type: object
              properties:
                email:
                  type: string
                  example: "ada@example.com"
    responses:
      200:
        description: Order created or updated
      400:
        description: Invalid payload or missing customer email
      500:
        description: Order could not be stored
    """
    logger = current_app.logger
    logger.info("Received WooCommerce order webhook")

    body = request.get_json(silent=True)
    error = validate_payload(body)
    if error:
        logger.error("Rejected order webhook: %s", error)
        return text_response(error, 400)

    store = get_store()
    try:
        order = map_order(body, delivery_days=current_app.config.get("DEFAULT_DELIVERY_DAYS", 14))
        logger.info("Processing order %s for customer %s", order["id"], order["customerName"])
        logger.info("Order total: %s %s, %d item(s)", order["currency"], order["totalAmount"], len(order["items"]))

        existing = get_order(store, order["id"])
        store.set(ORDERS, order["id"], merge_with_existing(order, existing))

        logger.info("Order %s %s", order["id"], "updated" if existing else "created")
    except Exception:
        db.session.rollback()
        logger.exception("Failed to process order")
        return text_response("Failed to process order", 500)

    return text_response("Order processed successfully", 200)


@webhooks_bp.route('/updateOrderStatus', methods=['POST'])
def update_order_status():
    """
    Update an order's status from WooCommerce
    ---
    tags:
      - Webhooks
    consumes:
      - application/json
    produces:
      - text/plain
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required:
            - id
            - status
          properties:
            id:
              type: integer
              example: 1042
            status:
              type: string
              example: completed
    responses:
      200:
        description: Status updated
      400:
        description: Missing id or status
      404:
        description: Order not found
      500:
        description: Status could not be stored
    """
    logger = current_app.logger
    logger.info("Received WooCommerce order status update webhook")

    body = request.get_json(silent=True)
    if not isinstance(body, dict) or not body.get("id") or not body.get("status"):
        logger.error("Invalid status update payload")
        return text_response("Invalid payload", 400)

    order_id = str(body["id"])
    new_status = map_status(body["status"]).value
    store = get_store()

    try:
        if not store.exists(ORDERS, order_id):
            logger.error("Order %s not found", order_id)
            return text_response("Order not found", 404)

        changes = {"status": new_status}
        if new_status in FINISHED_STATUSES:
            changes["dateCompleted"] = to_iso(utcnow())

        store.update(ORDERS, order_id, changes)
        logger.info("Order %s status updated to %s", order_id, new_status)
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Failed to update order status")
        return text_response("Failed to update order status", 500)

    return text_response("Order status updated successfully", 200)
