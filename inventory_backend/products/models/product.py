# products/models/product.py

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models


class Product(models.Model):
    """
    Represents a sellable product.

    STOCK MODEL (IMPORTANT):
    - Product.stock is the ONE shared on-hand counter for the product
    - Sales orders debit it, purchases credit it (and partially debit on return)
    - After creation, stock is mutated ONLY via products.services.stock_ledger
      (conditional UPDATE, never Product.save())
    - Opening stock may be supplied when the product is first created
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    product_code = models.CharField(max_length=32, unique=True, db_index=True)
    name = models.CharField(max_length=255, db_index=True)

    buying_price = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    selling_price = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )

    stock = models.PositiveIntegerField(
        default=0,
        help_text="On-hand quantity. Managed by the stock ledger.",
    )

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(stock__gte=0),
                name="product_stock_nonnegative",
            ),
            models.CheckConstraint(
                condition=models.Q(buying_price__gte=Decimal("0.00")),
                name="product_buying_price_nonnegative",
            ),
            models.CheckConstraint(
                condition=models.Q(selling_price__gte=Decimal("0.00")),
                name="product_selling_price_nonnegative",
            ),
        ]
        indexes = [
            models.Index(fields=["stock"], name="products_pr_stock_4f1c2a_idx"),
        ]

    def clean(self):
        if not (self.product_code or "").strip():
            raise ValidationError({"product_code": "product_code is required"})

        if self.buying_price is not None and self.buying_price < Decimal("0.00"):
            raise ValidationError({"buying_price": "buying_price cannot be negative"})

        if self.selling_price is not None and self.selling_price < Decimal("0.00"):
            raise ValidationError({"selling_price": "selling_price cannot be negative"})

    def save(self, *args, **kwargs):
        if self.product_code is not None:
            self.product_code = self.product_code.strip()

        if not self._state.adding:
            stored = (
                Product.objects.filter(pk=self.pk)
                .values_list("stock", flat=True)
                .first()
            )
            if stored is not None and int(stored) != int(self.stock or 0):
                raise ValidationError(
                    "Product.stock is managed by the stock ledger and cannot be saved directly"
                )

        self.full_clean()
        return super().save(*args, **kwargs)

    @property
    def inventory_value(self) -> Decimal:
        return Decimal(int(self.stock or 0)) * Decimal(str(self.buying_price or "0.00"))

    def __str__(self):
        return f"{self.name} ({self.product_code})"
