# sales/models/order.py

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

from .customer import Customer


class Order(models.Model):
    """
    Sales order header.

    GUARANTEES:
    - Money fields are computed ONCE at creation (sales.services.order_service)
      and never re-derived afterwards
    - Only status and its timestamps change after creation
    - Stock is debited ONLY at the completed transition, per line item,
      guarded by OrderLineItem.stock_applied
    """

    STATUS_PENDING = "pending"
    STATUS_PROCESSING = "processing"
    STATUS_COMPLETED = "completed"
    STATUS_CANCELLED = "cancelled"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_PROCESSING, "Processing"),
        (STATUS_COMPLETED, "Completed"),
        (STATUS_CANCELLED, "Cancelled"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    customer = models.ForeignKey(
        Customer,
        on_delete=models.PROTECT,
        related_name="orders",
    )

    invoice_no = models.CharField(max_length=64, unique=True)
    order_date = models.DateField(default=timezone.localdate)

    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=STATUS_PENDING,
    )

    total_products = models.PositiveIntegerField(default=0)

    subtotal_amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    tax_amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    total_amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )

    completed_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="sales_order_status_5a1d2e_idx"),
            models.Index(fields=["order_date"], name="sales_order_order_d_9c3b7f_idx"),
        ]

    _IMMUTABLE_FIELDS = (
        "customer_id",
        "invoice_no",
        "order_date",
        "total_products",
        "subtotal_amount",
        "tax_amount",
        "total_amount",
    )

    def _validate_immutable(self, previous: "Order"):
        for field in self._IMMUTABLE_FIELDS:
            if getattr(self, field) != getattr(previous, field):
                raise ValidationError(
                    f"Order field '{field}' is immutable after creation"
                )

    def clean(self):
        if not (self.invoice_no or "").strip():
            raise ValidationError({"invoice_no": "invoice_no is required"})

        if self.total_amount != self.subtotal_amount + self.tax_amount:
            raise ValidationError("total_amount must equal subtotal_amount + tax_amount")

    def save(self, *args, **kwargs):
        if not self._state.adding:
            previous = Order.objects.filter(pk=self.pk).first()
            if previous is not None:
                self._validate_immutable(previous)

        self.invoice_no = (self.invoice_no or "").strip()
        self.full_clean(validate_unique=False)
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.invoice_no} | {self.status} | {self.total_amount}"
