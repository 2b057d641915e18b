"""Enums for the pipeline core.

Values are the lower-case tokens persisted in status columns and exchanged
over the API.
"""

from enum import Enum


class StageColor(Enum):
    """Closed palette for kanban stage columns."""

    BLUE = "blue"
    GREEN = "green"
    YELLOW = "yellow"
    ORANGE = "orange"
    RED = "red"
    PURPLE = "purple"
    PINK = "pink"
    GRAY = "gray"
    TEAL = "teal"


class LeadStatus(Enum):
    """Legacy, non-kanban lead pipeline, in pipeline order."""

    NEW = "new"
    INITIAL_CONTACT = "initial_contact"
    AWAITING_PRESCRIPTION = "awaiting_prescription"
    PRESCRIPTION_RECEIVED = "prescription_received"
    PRESCRIPTION_VALIDATED = "prescription_validated"
    PRODUCTS_RELEASED = "products_released"
    CLOSED = "closed"


class OrderStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    REGULATORY_APPROVED = "regulatory_approved"
    IMPORTING = "importing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class TrackingKind(Enum):
    """Origin of an external tracking identifier attached to an order."""

    CARRIER = "carrier"
    REGULATORY = "regulatory"
    IMPORT = "import"


class ApprovalStatus(Enum):
    PENDING = "pending"
    SUBMITTED = "submitted"
    APPROVED = "approved"
    REJECTED = "rejected"


class ProcessStep(Enum):
    """Patient progress steps, in display order."""

    CONSULTATION = "consultation"
    PRESCRIPTION = "prescription"
    REGULATORY = "regulatory"
    ORDER = "order"
    SHIPPING = "shipping"
    DELIVERED = "delivered"


class StepState(Enum):
    COMPLETED = "completed"
    CURRENT = "current"
    PENDING = "pending"


class AffiliateEventType(Enum):
    CLICK = "click"
    REGISTRATION = "registration"
    PURCHASE = "purchase"


# Convenience accessors for common status values
ORDER_PENDING = OrderStatus.PENDING.value
ORDER_PAID = OrderStatus.PAID.value

LEAD_NEW = LeadStatus.NEW.value

# Orders that count as a purchase: paid and every later non-cancelled status.
ORDER_ATTRIBUTABLE = frozenset(
    {
        OrderStatus.PAID.value,
        OrderStatus.REGULATORY_APPROVED.value,
        OrderStatus.IMPORTING.value,
        OrderStatus.SHIPPED.value,
        OrderStatus.DELIVERED.value,
    }
)
