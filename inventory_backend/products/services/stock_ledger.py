# products/services/stock_ledger.py

"""
======================================================
PATH: products/services/stock_ledger.py
======================================================
STOCK LEDGER (SOLE AUTHORITY FOR Product.stock)

Purpose:
- debit():  subtract stock, fail on insufficiency (never below zero)
- credit(): add stock, no upper bound
- query():  read-only current stock
- lock_available_stock(): row-locked read used to clamp purchase returns

Rules:
- Quantities are positive integer units.
- Every mutation locks the product row (select_for_update) AND writes through a
  conditional UPDATE (stock >= quantity for debits), so concurrent callers for the
  same product are linearized and stock can never go negative.
- Different products never share a lock.
- Every applied mutation appends one immutable StockMovement row.

Idempotency:
- The ledger has no memory of prior calls. Callers (order / purchase lifecycles)
  guarantee exactly-once application through their line item stock_applied flags.
"""

from __future__ import annotations

import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.db.models import F

from products.models import Product, StockMovement
from products.services.exceptions import (
    InsufficientStockError,
    LineItemValidationError,
    NotFoundError,
)

logger = logging.getLogger(__name__)


def _require_positive_qty(value) -> int:
    """
    Quantity normalizer.
    HARD RULE: quantities are whole integer units greater than zero.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise LineItemValidationError("quantity must be a whole integer unit")
    if value <= 0:
        raise LineItemValidationError("quantity must be greater than zero")
    return value


def _lock_product(product_id) -> Product:
    try:
        return Product.objects.select_for_update().get(pk=product_id)
    except (Product.DoesNotExist, ValueError, DjangoValidationError) as exc:
        raise NotFoundError(f"Product not found: {product_id}") from exc


def _record_movement(*, product: Product, reason: str, quantity: int, stock_after: int, reference: str):
    StockMovement.objects.create(
        product=product,
        movement_type=StockMovement.REASON_TO_MOVEMENT.get(reason, ""),
        reason=reason,
        quantity=quantity,
        stock_after=stock_after,
        reference=(reference or "").strip(),
    )


@transaction.atomic
def debit(*, product_id, quantity, reason: str, reference: str = "") -> int:
    """
    Subtract `quantity` from the product's stock.

    Raises InsufficientStockError (nothing written) when quantity > stock.
    Returns the new stock level.
    """
    qty = _require_positive_qty(quantity)
    product = _lock_product(product_id)

    available = int(product.stock)
    if qty > available:
        logger.warning(
            "Stock debit rejected: insufficient stock",
            extra={
                "product_id": str(product.id),
                "requested": qty,
                "available": available,
                "reference": reference,
            },
        )
        raise InsufficientStockError(
            product_id=product.id,
            product_name=product.name,
            requested=qty,
            available=available,
        )

    # Compare-and-swap on the stored quantity (second line of defence behind the row lock)
    updated = Product.objects.filter(pk=product.pk, stock__gte=qty).update(
        stock=F("stock") - qty
    )
    if updated != 1:
        current = Product.objects.values_list("stock", flat=True).get(pk=product.pk)
        raise InsufficientStockError(
            product_id=product.id,
            product_name=product.name,
            requested=qty,
            available=current,
        )

    stock_after = available - qty
    _record_movement(
        product=product,
        reason=reason,
        quantity=qty,
        stock_after=stock_after,
        reference=reference,
    )

    logger.info(
        "Stock debited",
        extra={
            "product_id": str(product.id),
            "quantity": qty,
            "stock_after": stock_after,
            "reason": reason,
            "reference": reference,
        },
    )
    return stock_after


@transaction.atomic
def credit(*, product_id, quantity, reason: str, reference: str = "") -> int:
    """
    Add `quantity` to the product's stock. Returns the new stock level.
    """
    qty = _require_positive_qty(quantity)
    product = _lock_product(product_id)

    Product.objects.filter(pk=product.pk).update(stock=F("stock") + qty)

    stock_after = int(product.stock) + qty
    _record_movement(
        product=product,
        reason=reason,
        quantity=qty,
        stock_after=stock_after,
        reference=reference,
    )

    logger.info(
        "Stock credited",
        extra={
            "product_id": str(product.id),
            "quantity": qty,
            "stock_after": stock_after,
            "reason": reason,
            "reference": reference,
        },
    )
    return stock_after


def query(*, product_id) -> int:
    """
    Read-only current stock (no lock).
    """
    try:
        return int(Product.objects.values_list("stock", flat=True).get(pk=product_id))
    except (Product.DoesNotExist, ValueError, DjangoValidationError) as exc:
        raise NotFoundError(f"Product not found: {product_id}") from exc


def lock_available_stock(*, product_id) -> int:
    """
    Lock the product row for the rest of the caller's transaction and return
    its live stock. Must be called inside transaction.atomic.
    """
    return int(_lock_product(product_id).stock)
