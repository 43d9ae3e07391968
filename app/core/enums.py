from enum import Enum


class InquiryStatus(str, Enum):
    """Lifecycle of an order inquiry. Any status may move to any other."""

    NEW = "new"
    CONTACTED = "contacted"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class DeliveryOption(str, Enum):
    PICKUP = "pickup"
    DELIVERY = "delivery"
