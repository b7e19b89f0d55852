# purchases/models.py

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

from products.models.product import Product

TWOPLACES = Decimal("0.01")


def _money(v) -> Decimal:
    return Decimal(str(v or "0.00")).quantize(TWOPLACES)


class Supplier(models.Model):
    """
    Supplier master.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=200)
    shop_name = models.CharField(max_length=200, blank=True, default="")
    phone = models.CharField(max_length=50, blank=True, default="")
    email = models.EmailField(blank=True, default="")
    address = models.TextField(blank=True, default="")

    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]
        indexes = [
            models.Index(fields=["name"], name="purchases_s_name_7e0a4c_idx"),
            models.Index(fields=["is_active"], name="purchases_s_is_acti_2b9d1f_idx"),
        ]

    def __str__(self):
        return self.name


class Purchase(models.Model):
    """
    Purchase header.

    Lifecycle (purchases.services):
    - pending   -> completed : credits stock once per line (stock_applied)
    - completed -> returned  : stock-constrained partial return (returns.py)

    "approved" is accepted as an input alias and stored as completed.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    STATUS_PENDING = "pending"
    STATUS_COMPLETED = "completed"
    STATUS_RETURNED = "returned"

    STATUS_APPROVED_ALIAS = "approved"

    STATUSES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_COMPLETED, "Completed"),
        (STATUS_RETURNED, "Returned"),
    ]

    supplier = models.ForeignKey(
        Supplier,
        on_delete=models.PROTECT,
        related_name="purchases",
    )

    purchase_no = models.CharField(max_length=64, unique=True)
    purchase_date = models.DateField(default=timezone.localdate)

    status = models.CharField(max_length=20, choices=STATUSES, default=STATUS_PENDING)

    total_amount = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )
    total_refund_amount = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )

    completed_at = models.DateTimeField(null=True, blank=True)
    returned_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(total_amount__gte=Decimal("0.00")),
                name="purchase_total_nonnegative",
            ),
            models.CheckConstraint(
                condition=models.Q(total_refund_amount__gte=Decimal("0.00")),
                name="purchase_refund_nonnegative",
            ),
        ]
        indexes = [
            models.Index(fields=["status", "created_at"], name="purchases_p_status_4c8e2a_idx"),
            models.Index(fields=["purchase_date"], name="purchases_p_purchas_91f3d6_idx"),
        ]

    def clean(self):
        if not (self.purchase_no or "").strip():
            raise ValidationError({"purchase_no": "purchase_no is required"})

        if self.status == self.STATUS_COMPLETED and not self.completed_at:
            raise ValidationError(
                {"completed_at": "completed_at is required when status is completed"}
            )

        if self.status == self.STATUS_RETURNED and not self.returned_at:
            raise ValidationError(
                {"returned_at": "returned_at is required when status is returned"}
            )

        if self.total_refund_amount > self.total_amount:
            raise ValidationError(
                {"total_refund_amount": "total_refund_amount cannot exceed total_amount"}
            )

    def save(self, *args, **kwargs):
        if self.purchase_no is not None:
            self.purchase_no = self.purchase_no.strip()

        self.full_clean(validate_unique=False)
        return super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.purchase_no} ({self.supplier.name})"


class PurchaseLineItem(models.Model):
    """
    Purchase line.

    Mutable fields after creation:
    - stock_applied (set by the completed transition)
    - return bookkeeping (set once by the return commit)
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    purchase = models.ForeignKey(
        Purchase,
        on_delete=models.PROTECT,
        related_name="items",
    )
    product = models.ForeignKey(
        Product,
        on_delete=models.PROTECT,
        related_name="purchase_line_items",
    )

    quantity = models.PositiveIntegerField()
    unit_cost = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )

    stock_applied = models.BooleanField(
        default=False,
        help_text="True once this line's credit has been applied to the stock ledger.",
    )

    return_processed = models.BooleanField(default=False)
    returned_quantity = models.PositiveIntegerField(default=0)
    refund_amount = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )
    returned_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at", "id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gt=0),
                name="purchase_line_item_quantity_gt_zero",
            ),
            models.CheckConstraint(
                condition=models.Q(unit_cost__gte=Decimal("0.00")),
                name="purchase_line_item_unit_cost_nonnegative",
            ),
            models.CheckConstraint(
                condition=models.Q(returned_quantity__lte=models.F("quantity")),
                name="purchase_line_item_returned_lte_quantity",
            ),
        ]
        indexes = [
            models.Index(fields=["purchase", "created_at"], name="purchases_p_purchas_0d5b7e_idx"),
            models.Index(fields=["product", "created_at"], name="purchases_p_product_6a2f94_idx"),
        ]

    def clean(self):
        if self.unit_cost is not None and self.unit_cost < Decimal("0.00"):
            raise ValidationError({"unit_cost": "unit_cost cannot be negative"})

        if self.returned_quantity and self.returned_quantity > (self.quantity or 0):
            raise ValidationError(
                {"returned_quantity": "returned_quantity cannot exceed quantity"}
            )

    @property
    def line_total(self) -> Decimal:
        return _money(Decimal(str(self.quantity)) * Decimal(str(self.unit_cost)))

    def save(self, *args, **kwargs):
        if not self._state.adding:
            previous = PurchaseLineItem.objects.filter(pk=self.pk).first()
            if previous is None:
                raise ValidationError("PurchaseLineItem records are immutable")

            for field in ("purchase_id", "product_id", "quantity", "unit_cost"):
                if getattr(self, field) != getattr(previous, field):
                    raise ValidationError(
                        f"PurchaseLineItem field '{field}' is immutable"
                    )

        self.full_clean()
        return super().save(*args, **kwargs)

    def __str__(self):
        product_name = getattr(self.product, "name", "Product")
        return f"{product_name} x {self.quantity}"
