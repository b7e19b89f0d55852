# purchases/services/returns.py

"""
======================================================
PATH: purchases/services/returns.py
======================================================
PURCHASE RETURNS (stock-constrained)

Stock is shared with sales, so units received on a purchase may already be
sold by the time the purchase is returned. A return therefore never debits
more than what is still on hand:

    returnable = min(purchased quantity, current stock)

preview_purchase_return():
- read-only, repeatable, no locks
- walks lines in commit order; lines sharing a product draw down one balance

commit_purchase_return():
1) Lock purchase (completed only)
2) For each line: lock product, re-clamp against LIVE stock
3) Debit the clamped amount (skipped when 0)
4) Record returned_quantity / refund_amount on the line
5) Mark purchase returned with total_refund_amount

Returns are NOT idempotent: a returned purchase cannot be returned again.
Stock may move between preview and commit; the commit result is authoritative.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from decimal import Decimal

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.utils import timezone

from products.models import StockMovement
from products.services import stock_ledger
from products.services.exceptions import InvalidTransitionError, NotFoundError
from products.services.line_items import money
from purchases.models import Purchase
from purchases.services import purchase_lifecycle
from purchases.services.purchase_service import lock_purchase, reference_for

logger = logging.getLogger(__name__)


# ============================================================
# RESULT TYPES
# ============================================================


@dataclass(frozen=True)
class ReturnLinePreview:
    line_item_id: str
    product_id: str
    product_code: str
    product_name: str
    purchased_quantity: int
    current_stock: int
    returnable_quantity: int
    can_fully_return: bool
    unit_cost: Decimal
    potential_refund: Decimal


@dataclass(frozen=True)
class ReturnPreview:
    purchase_id: str
    purchase_no: str
    items: list[ReturnLinePreview] = field(default_factory=list)
    total_potential_refund: Decimal = Decimal("0.00")

    def to_dict(self) -> dict:
        data = asdict(self)
        data["total_potential_refund"] = f"{self.total_potential_refund:.2f}"
        for row in data["items"]:
            row["unit_cost"] = f"{row['unit_cost']:.2f}"
            row["potential_refund"] = f"{row['potential_refund']:.2f}"
        return data


@dataclass(frozen=True)
class ReturnLineResult:
    line_item_id: str
    product_id: str
    product_name: str
    purchased_quantity: int
    returned_quantity: int
    refund_amount: Decimal
    stock_after: int


@dataclass(frozen=True)
class ReturnResult:
    purchase_id: str
    purchase_no: str
    details: list[ReturnLineResult]
    total_refund_amount: Decimal
    total_items_processed: int
    fully_returned_items: int
    partially_returned_items: int

    def to_dict(self) -> dict:
        return {
            "purchase_id": self.purchase_id,
            "purchase_no": self.purchase_no,
            "details": [
                {**asdict(row), "refund_amount": f"{row.refund_amount:.2f}"}
                for row in self.details
            ],
            "total_refund_amount": f"{self.total_refund_amount:.2f}",
            "summary": {
                "total_items_processed": self.total_items_processed,
                "fully_returned_items": self.fully_returned_items,
                "partially_returned_items": self.partially_returned_items,
            },
        }


def _returnable(purchased: int, stock: int) -> int:
    return max(0, min(int(purchased), int(stock)))


# ============================================================
# PREVIEW (read-only)
# ============================================================


def preview_purchase_return(*, purchase_id) -> ReturnPreview:
    try:
        purchase = Purchase.objects.get(pk=purchase_id)
    except (Purchase.DoesNotExist, ValueError, DjangoValidationError) as exc:
        raise NotFoundError(f"Purchase not found: {purchase_id}") from exc

    purchase_lifecycle.validate_returnable(purchase=purchase)

    rows = []
    total = Decimal("0.00")
    # Same walk as the commit: lines sharing a product draw down one balance.
    remaining: dict = {}

    for line in purchase.items.select_related("product").order_by("product_id", "id"):
        current_stock = int(line.product.stock)
        available = remaining.get(line.product_id, current_stock)
        returnable = _returnable(line.quantity, available)
        remaining[line.product_id] = available - returnable
        refund = money(line.unit_cost * returnable)
        total += refund

        rows.append(
            ReturnLinePreview(
                line_item_id=str(line.id),
                product_id=str(line.product_id),
                product_code=line.product.product_code,
                product_name=line.product.name,
                purchased_quantity=int(line.quantity),
                current_stock=current_stock,
                returnable_quantity=returnable,
                can_fully_return=returnable == int(line.quantity),
                unit_cost=money(line.unit_cost),
                potential_refund=refund,
            )
        )

    return ReturnPreview(
        purchase_id=str(purchase.id),
        purchase_no=purchase.purchase_no,
        items=rows,
        total_potential_refund=money(total),
    )


# ============================================================
# COMMIT
# ============================================================


@transaction.atomic
def commit_purchase_return(*, purchase_id) -> ReturnResult:
    purchase = lock_purchase(purchase_id)

    try:
        purchase_lifecycle.validate_returnable(purchase=purchase)
    except InvalidTransitionError:
        logger.warning(
            "Purchase return rejected",
            extra={"purchase_id": str(purchase.id), "status": purchase.status},
        )
        raise

    now = timezone.now()
    details = []
    total_refund = Decimal("0.00")
    fully = 0
    partially = 0

    lines = (
        purchase.items.select_for_update()
        .select_related("product")
        .order_by("product_id", "id")
    )

    for line in lines:
        live_stock = stock_ledger.lock_available_stock(product_id=line.product_id)
        returnable = _returnable(line.quantity, live_stock)

        stock_after = live_stock
        if returnable > 0:
            stock_after = stock_ledger.debit(
                product_id=line.product_id,
                quantity=returnable,
                reason=StockMovement.Reason.PURCHASE_RETURN,
                reference=reference_for(purchase),
            )

        refund = money(line.unit_cost * returnable)

        line.return_processed = True
        line.returned_quantity = returnable
        line.refund_amount = refund
        line.returned_at = now
        line.save(
            update_fields=[
                "return_processed",
                "returned_quantity",
                "refund_amount",
                "returned_at",
            ]
        )

        total_refund += refund
        if returnable == int(line.quantity):
            fully += 1
        elif returnable > 0:
            partially += 1

        details.append(
            ReturnLineResult(
                line_item_id=str(line.id),
                product_id=str(line.product_id),
                product_name=line.product.name,
                purchased_quantity=int(line.quantity),
                returned_quantity=returnable,
                refund_amount=refund,
                stock_after=stock_after,
            )
        )

    purchase.status = Purchase.STATUS_RETURNED
    purchase.returned_at = now
    purchase.total_refund_amount = money(total_refund)
    purchase.save(update_fields=["status", "returned_at", "total_refund_amount", "updated_at"])

    logger.info(
        "Purchase returned",
        extra={
            "purchase_id": str(purchase.id),
            "purchase_no": purchase.purchase_no,
            "total_refund_amount": str(purchase.total_refund_amount),
            "fully_returned_items": fully,
            "partially_returned_items": partially,
        },
    )

    return ReturnResult(
        purchase_id=str(purchase.id),
        purchase_no=purchase.purchase_no,
        details=details,
        total_refund_amount=purchase.total_refund_amount,
        total_items_processed=len(details),
        fully_returned_items=fully,
        partially_returned_items=partially,
    )
