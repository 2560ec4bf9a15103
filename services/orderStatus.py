from enum import Enum


class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    ACCEPTED = "accepted"


OPEN_STATUSES = (OrderStatus.PENDING.value, OrderStatus.PROCESSING.value)
FINISHED_STATUSES = (OrderStatus.COMPLETED.value, OrderStatus.DELIVERED.value)
SHIPPING_STATUSES = ("pending", "in_transit", "delivered", "delayed")
