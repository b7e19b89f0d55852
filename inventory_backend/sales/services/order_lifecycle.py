"""
ORDER LIFECYCLE DOMAIN RULES

This module defines the ONLY allowed lifecycle transitions
for Order entities.

DESIGN PRINCIPLES:
- No database writes
- No stock mutation
- No side effects
- Single source of truth
"""

from products.services.exceptions import InvalidTransitionError
from sales.models import Order

# ============================================================
# STATE DEFINITIONS
# ============================================================

VALID_STATES = {choice for choice, _ in Order.STATUS_CHOICES}

TERMINAL_STATES = {
    Order.STATUS_CANCELLED,
}

ALLOWED_TRANSITIONS = {
    Order.STATUS_PENDING: {
        Order.STATUS_PROCESSING,
        Order.STATUS_COMPLETED,
        Order.STATUS_CANCELLED,
    },
    Order.STATUS_PROCESSING: {
        Order.STATUS_COMPLETED,
        Order.STATUS_CANCELLED,
    },
    Order.STATUS_COMPLETED: {
        Order.STATUS_CANCELLED,
    },
}


# ============================================================
# DOMAIN RULES
# ============================================================


def can_transition(*, from_status: str, to_status: str) -> bool:
    if from_status in TERMINAL_STATES:
        return False

    return to_status in ALLOWED_TRANSITIONS.get(from_status, set())


def is_noop(*, from_status: str, to_status: str) -> bool:
    return from_status == to_status


def validate_transition(*, order: Order, target_status: str):
    if target_status not in VALID_STATES:
        raise InvalidTransitionError(f"Unknown order status '{target_status}'")

    if is_noop(from_status=order.status, to_status=target_status):
        return

    if not can_transition(
        from_status=order.status,
        to_status=target_status,
    ):
        raise InvalidTransitionError(
            f"Order {order.invoice_no} cannot transition from "
            f"'{order.status}' to '{target_status}'"
        )


def debits_stock(*, from_status: str, to_status: str) -> bool:
    return to_status == Order.STATUS_COMPLETED and from_status != Order.STATUS_COMPLETED


def credits_stock(*, from_status: str, to_status: str) -> bool:
    return from_status == Order.STATUS_COMPLETED and to_status == Order.STATUS_CANCELLED
