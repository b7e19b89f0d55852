# purchases/services/purchase_service.py

"""
======================================================
PATH: purchases/services/purchase_service.py
======================================================
PURCHASE WORKFLOW (create + receive)

Canonical flow for receiving:
1) Lock purchase
2) Validate transition
3) Credit stock for each line not yet applied (stock_applied guard)
4) Mark purchase completed

Idempotency rule:
- Completing an already completed purchase is a no-op.
- Lines already credited are never credited again.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction
from django.utils import timezone

from products.models import StockMovement
from products.services import stock_ledger
from products.services.exceptions import (
    DuplicateIdentifierError,
    InvalidTransitionError,
    LineItemValidationError,
    NotFoundError,
)
from products.services.line_items import money, normalize_line_items
from purchases.models import Purchase, PurchaseLineItem, Supplier
from purchases.services import purchase_lifecycle

logger = logging.getLogger(__name__)


def _get_supplier(supplier_id) -> Supplier:
    try:
        return Supplier.objects.get(pk=supplier_id)
    except (Supplier.DoesNotExist, ValueError, DjangoValidationError) as exc:
        raise NotFoundError(f"Supplier not found: {supplier_id}") from exc


def lock_purchase(purchase_id) -> Purchase:
    try:
        return Purchase.objects.select_for_update().get(pk=purchase_id)
    except (Purchase.DoesNotExist, ValueError, DjangoValidationError) as exc:
        raise NotFoundError(f"Purchase not found: {purchase_id}") from exc


def reference_for(purchase: Purchase) -> str:
    return f"PURCHASE:{purchase.purchase_no}"


def create_purchase(*, supplier_id, items, purchase_no: str, purchase_date=None) -> Purchase:
    """
    Validate and persist a purchase with its line items (status=pending).
    No stock is credited until the purchase is completed.
    """
    purchase_no = (purchase_no or "").strip()
    if not purchase_no:
        raise LineItemValidationError("purchase_no is required")

    supplier = _get_supplier(supplier_id)
    lines = normalize_line_items(items)

    if Purchase.objects.filter(purchase_no=purchase_no).exists():
        raise DuplicateIdentifierError(f"Purchase number already exists: {purchase_no}")

    total = money(sum((line.line_total for line in lines), Decimal("0.00")))

    try:
        with transaction.atomic():
            purchase = Purchase.objects.create(
                supplier=supplier,
                purchase_no=purchase_no,
                purchase_date=purchase_date or timezone.localdate(),
                status=Purchase.STATUS_PENDING,
                total_amount=total,
            )
            for line in lines:
                PurchaseLineItem.objects.create(
                    purchase=purchase,
                    product=line.product,
                    quantity=line.quantity,
                    unit_cost=line.unit_cost,
                    stock_applied=False,
                )
    except IntegrityError as exc:
        if Purchase.objects.filter(purchase_no=purchase_no).exists():
            raise DuplicateIdentifierError(
                f"Purchase number already exists: {purchase_no}"
            ) from exc
        raise

    logger.info(
        "Purchase created",
        extra={
            "purchase_id": str(purchase.id),
            "purchase_no": purchase_no,
            "line_items": len(lines),
            "total_amount": str(total),
        },
    )
    return purchase


@transaction.atomic
def transition_purchase(*, purchase_id, status: str) -> Purchase:
    """
    Accepts pending | completed | approved (alias of completed).
    """
    target = purchase_lifecycle.normalize_status(status)
    purchase = lock_purchase(purchase_id)
    current = purchase.status

    try:
        purchase_lifecycle.validate_transition(purchase=purchase, target_status=target)
    except InvalidTransitionError:
        logger.warning(
            "Purchase transition rejected",
            extra={"purchase_id": str(purchase.id), "from": current, "to": target},
        )
        raise

    if current == target:
        return purchase

    credited = 0
    pending_lines = (
        purchase.items.select_for_update()
        .filter(stock_applied=False)
        .order_by("product_id", "id")
    )
    for line in pending_lines:
        stock_ledger.credit(
            product_id=line.product_id,
            quantity=int(line.quantity),
            reason=StockMovement.Reason.PURCHASE_RECEIPT,
            reference=reference_for(purchase),
        )
        line.stock_applied = True
        line.save(update_fields=["stock_applied"])
        credited += 1

    purchase.status = target
    purchase.completed_at = timezone.now()
    purchase.save(update_fields=["status", "completed_at", "updated_at"])

    logger.info(
        "Purchase completed",
        extra={
            "purchase_id": str(purchase.id),
            "purchase_no": purchase.purchase_no,
            "ledger_lines": credited,
        },
    )
    return purchase
