"""
======================================================
PATH: products/migrations/0001_initial.py
======================================================
MIGRATION: Product + StockMovement (stock ledger)
"""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Product",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        primary_key=True,
                        default=uuid.uuid4,
                        editable=False,
                        serialize=False,
                    ),
                ),
                (
                    "product_code",
                    models.CharField(max_length=32, unique=True, db_index=True),
                ),
                ("name", models.CharField(max_length=255, db_index=True)),
                (
                    "buying_price",
                    models.DecimalField(
                        max_digits=12, decimal_places=2, default=Decimal("0.00")
                    ),
                ),
                (
                    "selling_price",
                    models.DecimalField(
                        max_digits=12, decimal_places=2, default=Decimal("0.00")
                    ),
                ),
                (
                    "stock",
                    models.PositiveIntegerField(
                        default=0,
                        help_text="On-hand quantity. Managed by the stock ledger.",
                    ),
                ),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["name"],
                "indexes": [
                    models.Index(fields=["stock"], name="products_pr_stock_4f1c2a_idx"),
                ],
                "constraints": [
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
                ],
            },
        ),
        migrations.CreateModel(
            name="StockMovement",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        primary_key=True,
                        default=uuid.uuid4,
                        editable=False,
                        serialize=False,
                    ),
                ),
                (
                    "movement_type",
                    models.CharField(
                        max_length=3,
                        choices=[("IN", "Stock In"), ("OUT", "Stock Out")],
                    ),
                ),
                (
                    "reason",
                    models.CharField(
                        max_length=32,
                        choices=[
                            ("PURCHASE_RECEIPT", "Purchase Receipt"),
                            ("PURCHASE_RETURN", "Purchase Return"),
                            ("ORDER_COMPLETION", "Order Completion"),
                            ("ORDER_CANCELLATION", "Order Cancellation"),
                        ],
                    ),
                ),
                ("quantity", models.PositiveIntegerField()),
                ("stock_after", models.PositiveIntegerField()),
                (
                    "reference",
                    models.CharField(
                        max_length=128,
                        blank=True,
                        default="",
                        help_text="Business document that caused the movement, e.g. ORDER:INV-001",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "product",
                    models.ForeignKey(
                        to="products.product",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="stock_movements",
                    ),
                ),
            ],
            options={
                "ordering": ["created_at"],
                "indexes": [
                    models.Index(
                        fields=["product", "created_at"],
                        name="products_st_product_8e2d41_idx",
                    ),
                    models.Index(fields=["reason"], name="products_st_reason_3b7c90_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(quantity__gt=0),
                        name="stock_movement_quantity_gt_zero",
                    ),
                ],
            },
        ),
    ]
