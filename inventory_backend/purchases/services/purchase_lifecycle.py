"""
PURCHASE LIFECYCLE DOMAIN RULES

Allowed transitions for Purchase entities.

DESIGN PRINCIPLES:
- No database writes
- No stock mutation
- Single source of truth

Notes:
- "approved" is an input alias for completed
- completed -> returned is NOT a plain status transition: it is performed by
  purchases.services.returns.commit_purchase_return()
"""

from products.services.exceptions import InvalidTransitionError
from purchases.models import Purchase

TERMINAL_STATES = {
    Purchase.STATUS_RETURNED,
}

STATUS_ALIASES = {
    Purchase.STATUS_APPROVED_ALIAS: Purchase.STATUS_COMPLETED,
}

# Targets accepted by transition_purchase()
TRANSITION_TARGETS = {
    Purchase.STATUS_PENDING,
    Purchase.STATUS_COMPLETED,
}

ALLOWED_TRANSITIONS = {
    Purchase.STATUS_PENDING: {
        Purchase.STATUS_COMPLETED,
    },
}

RETURNABLE_STATES = {
    Purchase.STATUS_COMPLETED,
}


def normalize_status(value: str) -> str:
    value = (value or "").strip().lower()
    return STATUS_ALIASES.get(value, value)


def can_transition(*, from_status: str, to_status: str) -> bool:
    if from_status in TERMINAL_STATES:
        return False

    return to_status in ALLOWED_TRANSITIONS.get(from_status, set())


def validate_transition(*, purchase: Purchase, target_status: str):
    if target_status == Purchase.STATUS_RETURNED:
        raise InvalidTransitionError(
            "Purchases are returned through the return operation, not a status update"
        )

    if target_status not in TRANSITION_TARGETS:
        raise InvalidTransitionError(f"Unknown purchase status '{target_status}'")

    if purchase.status in TERMINAL_STATES:
        raise InvalidTransitionError(
            f"Purchase {purchase.purchase_no} is already '{purchase.status}'"
        )

    if purchase.status == target_status:
        return

    if not can_transition(from_status=purchase.status, to_status=target_status):
        raise InvalidTransitionError(
            f"Purchase {purchase.purchase_no} cannot transition from "
            f"'{purchase.status}' to '{target_status}'"
        )


def validate_returnable(*, purchase: Purchase):
    if purchase.status not in RETURNABLE_STATES:
        raise InvalidTransitionError(
            f"Purchase {purchase.purchase_no} must be completed to return it "
            f"(current status '{purchase.status}')"
        )
