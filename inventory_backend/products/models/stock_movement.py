# products/models/stock_movement.py

"""
STOCK LEDGER AUDIT TRAIL

Immutable record of ONE applied debit or credit.

GUARANTEES:
- Append-only (no updates, no deletes)
- Created ONCE by products.services.stock_ledger, never edited
- Movement direction validated against reason
- stock_after snapshots Product.stock right after the mutation

For any product:
    opening stock + sum(IN) - sum(OUT) == Product.stock
"""

import uuid

from django.core.exceptions import ValidationError
from django.db import models

from .product import Product


class StockMovement(models.Model):
    class MovementType(models.TextChoices):
        IN = "IN", "Stock In"
        OUT = "OUT", "Stock Out"

    class Reason(models.TextChoices):
        PURCHASE_RECEIPT = "PURCHASE_RECEIPT", "Purchase Receipt"
        PURCHASE_RETURN = "PURCHASE_RETURN", "Purchase Return"
        ORDER_COMPLETION = "ORDER_COMPLETION", "Order Completion"
        ORDER_CANCELLATION = "ORDER_CANCELLATION", "Order Cancellation"

    REASON_TO_MOVEMENT = {
        Reason.PURCHASE_RECEIPT: MovementType.IN,
        Reason.ORDER_CANCELLATION: MovementType.IN,
        Reason.ORDER_COMPLETION: MovementType.OUT,
        Reason.PURCHASE_RETURN: MovementType.OUT,
    }

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    product = models.ForeignKey(
        Product, on_delete=models.PROTECT, related_name="stock_movements"
    )

    movement_type = models.CharField(max_length=3, choices=MovementType.choices)
    reason = models.CharField(max_length=32, choices=Reason.choices)

    quantity = models.PositiveIntegerField()
    stock_after = models.PositiveIntegerField()

    reference = models.CharField(
        max_length=128,
        blank=True,
        default="",
        help_text="Business document that caused the movement, e.g. ORDER:INV-001",
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gt=0),
                name="stock_movement_quantity_gt_zero",
            ),
        ]
        indexes = [
            models.Index(fields=["product", "created_at"], name="products_st_product_8e2d41_idx"),
            models.Index(fields=["reason"], name="products_st_reason_3b7c90_idx"),
        ]

    def clean(self):
        if self.quantity is None or self.quantity <= 0:
            raise ValidationError("quantity must be greater than zero")

        expected_type = self.REASON_TO_MOVEMENT.get(self.reason)
        if expected_type is None:
            raise ValidationError(f"Unknown movement reason: {self.reason}")

        if self.movement_type != expected_type:
            raise ValidationError(
                f"{self.reason} requires movement_type={expected_type}"
            )

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("StockMovement records are immutable")

        if not self.movement_type:
            self.movement_type = self.REASON_TO_MOVEMENT.get(self.reason, "")

        self.full_clean()
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError(
            "StockMovement records are immutable and cannot be deleted"
        )

    @property
    def signed_quantity(self) -> int:
        if self.movement_type == self.MovementType.OUT:
            return -int(self.quantity)
        return int(self.quantity)

    def __str__(self):
        product_name = getattr(self.product, "name", "Product")
        return f"{product_name} | {self.reason} | {self.quantity}"
