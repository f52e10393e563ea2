"""Enum definitions for application constants."""

from enum import Enum


class UserRole(str, Enum):
    """User roles; only admins may observe or mutate other users' state."""

    CUSTOMER = "customer"
    ADMIN = "admin"

    @classmethod
    def has_value(cls, value: str) -> bool:
        """Check if value is a valid role."""
        return value in cls._value2member_map_


class ServiceType(str, Enum):
    """Laundry services offered for pickup."""

    WASH_AND_FOLD = "Wash and Fold"
    WASH_AND_IRON = "Wash and Iron"
    IRON = "Iron"
    DRY_CLEAN = "Dry Clean"


class DeliveryClass(str, Enum):
    REGULAR = "regular"
    EXPRESS = "express"


class OrderStatus(str, Enum):
    """
    Order lifecycle status.

    Declaration order is the canonical forward sequence:
    Pending -> In Progress -> Delivering -> Completed.
    """

    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    DELIVERING = "Delivering"
    COMPLETED = "Completed"

    @property
    def rank(self) -> int:
        return ORDER_STATUS_SEQUENCE.index(self)


ORDER_STATUS_SEQUENCE = list(OrderStatus)


class TicketStatus(str, Enum):
    """Support ticket lifecycle status."""

    PENDING = "Pending"
    CONTACTED = "Contacted"
    RESOLVED = "Resolved"


class ReplySender(str, Enum):
    CUSTOMER = "customer"
    ADMIN = "admin"


DEFAULT_ORDER_STATUS = OrderStatus.PENDING
DEFAULT_TICKET_STATUS = TicketStatus.PENDING
DEFAULT_DELIVERY_CLASS = DeliveryClass.REGULAR
