# sales/services/order_service.py

"""
======================================================
PATH: sales/services/order_service.py
======================================================
ORDER WORKFLOW (create, transition, invoice projection)

GUARANTEES:
- create_order() never touches stock
- The completed transition is the ONE point where an order debits stock
- Each line item's debit is applied at most once (OrderLineItem.stock_applied)
- completed -> cancelled credits back exactly what completion debited
- Any ledger failure aborts the whole transition (transaction rollback)
- Transitions of the same order are serialized by the order row lock
"""

from __future__ import annotations

import logging
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction
from django.utils import timezone

from products.models import StockMovement
from products.services import stock_ledger
from products.services.exceptions import (
    DuplicateIdentifierError,
    InsufficientStockError,
    InvalidTransitionError,
    LineItemValidationError,
    NotFoundError,
)
from products.services.line_items import money, normalize_line_items
from sales.models import Customer, Order, OrderLineItem
from sales.services import order_lifecycle

logger = logging.getLogger(__name__)


def _tax_rate() -> Decimal:
    return Decimal(str(getattr(settings, "ORDER_TAX_RATE", "0.18")))


def _get_customer(customer_id) -> Customer:
    try:
        return Customer.objects.get(pk=customer_id)
    except (Customer.DoesNotExist, ValueError, DjangoValidationError) as exc:
        raise NotFoundError(f"Customer not found: {customer_id}") from exc


def _lock_order(order_id) -> Order:
    try:
        return Order.objects.select_for_update().get(pk=order_id)
    except (Order.DoesNotExist, ValueError, DjangoValidationError) as exc:
        raise NotFoundError(f"Order not found: {order_id}") from exc


def _reference(order: Order) -> str:
    return f"ORDER:{order.invoice_no}"


# ============================================================
# CREATE
# ============================================================


def create_order(*, customer_id, items, invoice_no: str, gst=None, order_date=None) -> Order:
    """
    Validate and persist an order with its line items (status=pending).

    Tax is ORDER_TAX_RATE of the subtotal unless an explicit gst amount is given.
    All-or-nothing: on any error nothing is written.
    """
    invoice_no = (invoice_no or "").strip()
    if not invoice_no:
        raise LineItemValidationError("invoice_no is required")

    customer = _get_customer(customer_id)
    lines = normalize_line_items(items)

    if Order.objects.filter(invoice_no=invoice_no).exists():
        raise DuplicateIdentifierError(f"Invoice number already exists: {invoice_no}")

    subtotal = money(sum((line.line_total for line in lines), Decimal("0.00")))

    if gst is None:
        tax = money(subtotal * _tax_rate())
    else:
        tax = money(gst)
        if tax < Decimal("0.00"):
            raise LineItemValidationError("gst cannot be negative")

    try:
        with transaction.atomic():
            order = Order.objects.create(
                customer=customer,
                invoice_no=invoice_no,
                order_date=order_date or timezone.localdate(),
                status=Order.STATUS_PENDING,
                total_products=sum(line.quantity for line in lines),
                subtotal_amount=subtotal,
                tax_amount=tax,
                total_amount=subtotal + tax,
            )

            for line in lines:
                OrderLineItem.objects.create(
                    order=order,
                    product=line.product,
                    quantity=line.quantity,
                    unit_cost=line.unit_cost,
                    stock_applied=False,
                )
    except IntegrityError as exc:
        # Lost the race on the unique invoice_no constraint
        if Order.objects.filter(invoice_no=invoice_no).exists():
            raise DuplicateIdentifierError(
                f"Invoice number already exists: {invoice_no}"
            ) from exc
        raise

    logger.info(
        "Order created",
        extra={
            "order_id": str(order.id),
            "invoice_no": invoice_no,
            "line_items": len(lines),
            "total_amount": str(order.total_amount),
        },
    )
    return order


# ============================================================
# TRANSITION
# ============================================================


def _apply_completion_debits(order: Order) -> int:
    applied = 0
    pending_lines = (
        order.items.select_for_update()
        .filter(stock_applied=False)
        .order_by("product_id", "id")
    )

    for line in pending_lines:
        stock_ledger.debit(
            product_id=line.product_id,
            quantity=int(line.quantity),
            reason=StockMovement.Reason.ORDER_COMPLETION,
            reference=_reference(order),
        )
        line.stock_applied = True
        line.save(update_fields=["stock_applied"])
        applied += 1

    return applied


def _apply_cancellation_credits(order: Order) -> int:
    applied = 0
    applied_lines = (
        order.items.select_for_update()
        .filter(stock_applied=True)
        .order_by("product_id", "id")
    )

    for line in applied_lines:
        stock_ledger.credit(
            product_id=line.product_id,
            quantity=int(line.quantity),
            reason=StockMovement.Reason.ORDER_CANCELLATION,
            reference=_reference(order),
        )
        line.stock_applied = False
        line.save(update_fields=["stock_applied"])
        applied += 1

    return applied


@transaction.atomic
def transition_order(*, order_id, status: str) -> Order:
    """
    Move an order to `status`.

    - same status: no-op
    - -> completed: debit every line not yet applied
    - completed -> cancelled: credit every applied line
    - other allowed edges: status only
    """
    target = (status or "").strip().lower()
    order = _lock_order(order_id)
    current = order.status

    try:
        order_lifecycle.validate_transition(order=order, target_status=target)
    except InvalidTransitionError:
        logger.warning(
            "Order transition rejected",
            extra={"order_id": str(order.id), "from": current, "to": target},
        )
        raise

    if order_lifecycle.is_noop(from_status=current, to_status=target):
        return order

    if order_lifecycle.debits_stock(from_status=current, to_status=target):
        try:
            lines = _apply_completion_debits(order)
        except InsufficientStockError:
            logger.warning(
                "Order completion aborted: insufficient stock",
                extra={"order_id": str(order.id), "invoice_no": order.invoice_no},
            )
            raise
        order.completed_at = timezone.now()

    elif order_lifecycle.credits_stock(from_status=current, to_status=target):
        lines = _apply_cancellation_credits(order)
    else:
        lines = 0

    if target == Order.STATUS_CANCELLED:
        order.cancelled_at = timezone.now()

    order.status = target
    order.save(update_fields=["status", "completed_at", "cancelled_at", "updated_at"])

    logger.info(
        "Order transitioned",
        extra={
            "order_id": str(order.id),
            "invoice_no": order.invoice_no,
            "from": current,
            "to": target,
            "ledger_lines": lines,
        },
    )
    return order


# ============================================================
# INVOICE PROJECTION (read-only)
# ============================================================


def get_order_invoice_data(*, order_id) -> dict:
    try:
        order = Order.objects.select_related("customer").get(pk=order_id)
    except (Order.DoesNotExist, ValueError, DjangoValidationError) as exc:
        raise NotFoundError(f"Order not found: {order_id}") from exc

    customer = order.customer
    lines = order.items.select_related("product").order_by("id")

    return {
        "order_id": str(order.id),
        "invoice_no": order.invoice_no,
        "order_date": order.order_date.isoformat(),
        "status": order.status,
        "customer": {
            "id": str(customer.id),
            "name": customer.name,
            "email": customer.email,
            "phone": customer.phone,
            "address": customer.address,
            "store_name": customer.store_name,
        },
        "items": [
            {
                "product_id": str(line.product_id),
                "product_code": line.product.product_code,
                "product_name": line.product.name,
                "quantity": int(line.quantity),
                "unit_cost": f"{money(line.unit_cost):.2f}",
                "line_total": f"{money(line.line_total):.2f}",
            }
            for line in lines
        ],
        "total_products": int(order.total_products),
        "subtotal_amount": f"{money(order.subtotal_amount):.2f}",
        "tax_amount": f"{money(order.tax_amount):.2f}",
        "total_amount": f"{money(order.total_amount):.2f}",
    }
