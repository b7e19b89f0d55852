# products/services/line_items.py

"""
LINE ITEM INTAKE (shared by orders + purchases)

Normalizes caller-supplied line items BEFORE anything is persisted:
- non-empty list
- existing product per line
- quantity: whole integer > 0
- unit_cost: decimal >= 0, quantized to 2dp

Raises LineItemValidationError / NotFoundError. Never touches stock.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from django.core.exceptions import ValidationError as DjangoValidationError

from products.models import Product
from products.services.exceptions import LineItemValidationError, NotFoundError

TWOPLACES = Decimal("0.01")


def money(value) -> Decimal:
    return Decimal(str(value or "0")).quantize(TWOPLACES)


@dataclass(frozen=True)
class LineItemInput:
    product: Product
    quantity: int
    unit_cost: Decimal

    @property
    def line_total(self) -> Decimal:
        return money(self.unit_cost * self.quantity)


def _coerce_quantity(raw, *, index: int) -> int:
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise LineItemValidationError(
            f"items[{index}].quantity must be a whole integer unit"
        )
    if raw <= 0:
        raise LineItemValidationError(
            f"items[{index}].quantity must be greater than zero"
        )
    return raw


def _coerce_unit_cost(raw, *, index: int) -> Decimal:
    if raw is None or isinstance(raw, bool):
        raise LineItemValidationError(f"items[{index}].unit_cost is required")
    try:
        value = Decimal(str(raw))
    except (InvalidOperation, ValueError, TypeError):
        raise LineItemValidationError(f"items[{index}].unit_cost must be a valid decimal")
    if not value.is_finite() or value < Decimal("0.00"):
        raise LineItemValidationError(f"items[{index}].unit_cost cannot be negative")
    return value.quantize(TWOPLACES)


def normalize_line_items(items) -> list[LineItemInput]:
    """
    items: iterable of mappings with product_id, quantity, unit_cost.
    """
    items = list(items or [])
    if not items:
        raise LineItemValidationError("At least one line item is required")

    product_ids = []
    for index, raw in enumerate(items):
        if not isinstance(raw, dict) or not raw.get("product_id"):
            raise LineItemValidationError(f"items[{index}].product_id is required")
        product_ids.append(raw["product_id"])

    try:
        products = Product.objects.in_bulk([str(pid) for pid in product_ids])
    except (ValueError, DjangoValidationError) as exc:
        raise NotFoundError("One or more products were not found") from exc
    products = {str(pk): p for pk, p in products.items()}

    normalized = []
    for index, raw in enumerate(items):
        product = products.get(str(raw["product_id"]))
        if product is None:
            raise NotFoundError(f"Product not found: {raw['product_id']}")

        normalized.append(
            LineItemInput(
                product=product,
                quantity=_coerce_quantity(raw.get("quantity"), index=index),
                unit_cost=_coerce_unit_cost(raw.get("unit_cost"), index=index),
            )
        )

    return normalized
