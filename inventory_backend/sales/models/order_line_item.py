# sales/models/order_line_item.py

"""
ORDER LINE ITEM (IMMUTABLE SNAPSHOT)

Notes:
- Created together with its Order, never edited afterwards
- The ONE mutable field is stock_applied, flipped only by
  sales.services.order_service under the order row lock
"""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models

from products.models import Product

from .order import Order


class OrderLineItem(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    order = models.ForeignKey(
        Order,
        on_delete=models.PROTECT,
        related_name="items",
    )

    product = models.ForeignKey(
        Product,
        on_delete=models.PROTECT,
        related_name="order_line_items",
    )

    quantity = models.PositiveIntegerField()

    unit_cost = models.DecimalField(max_digits=12, decimal_places=2)

    line_total = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        editable=False,
    )

    stock_applied = models.BooleanField(
        default=False,
        help_text="True once this line's debit has been applied to the stock ledger.",
    )

    class Meta:
        ordering = ["id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gt=0),
                name="order_line_item_quantity_gt_zero",
            ),
        ]

    _MUTABLE_FIELDS = {"stock_applied"}

    def clean(self):
        if self.unit_cost is not None and self.unit_cost < Decimal("0.00"):
            raise ValidationError({"unit_cost": "unit_cost cannot be negative"})

    def save(self, *args, **kwargs):
        # Always keep line_total consistent
        self.line_total = (
            Decimal(str(self.unit_cost or "0")) * Decimal(int(self.quantity or 0))
        ).quantize(Decimal("0.01"))

        if not self._state.adding:
            previous = OrderLineItem.objects.filter(pk=self.pk).first()
            if previous is None:
                raise ValidationError("OrderLineItem records are immutable")

            for field in ("order_id", "product_id", "quantity", "unit_cost"):
                if getattr(self, field) != getattr(previous, field):
                    raise ValidationError(f"OrderLineItem field '{field}' is immutable")

        self.full_clean()
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.product} x {self.quantity}"
