"""
======================================================
PATH: sales/migrations/0001_initial.py
======================================================
MIGRATION: Customer + Order + OrderLineItem
"""

from __future__ import annotations

import uuid
from decimal import Decimal

import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("products", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Customer",
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
                ("name", models.CharField(max_length=255, db_index=True)),
                ("email", models.EmailField(max_length=254, blank=True, default="")),
                ("phone", models.CharField(max_length=50, blank=True, default="")),
                ("address", models.TextField(blank=True, default="")),
                (
                    "customer_type",
                    models.CharField(
                        max_length=20,
                        choices=[("regular", "Regular"), ("wholesale", "Wholesale")],
                        default="regular",
                    ),
                ),
                ("store_name", models.CharField(max_length=255, blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Order",
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
                ("invoice_no", models.CharField(max_length=64, unique=True)),
                (
                    "order_date",
                    models.DateField(default=django.utils.timezone.localdate),
                ),
                (
                    "status",
                    models.CharField(
                        max_length=20,
                        choices=[
                            ("pending", "Pending"),
                            ("processing", "Processing"),
                            ("completed", "Completed"),
                            ("cancelled", "Cancelled"),
                        ],
                        default="pending",
                    ),
                ),
                ("total_products", models.PositiveIntegerField(default=0)),
                (
                    "subtotal_amount",
                    models.DecimalField(
                        max_digits=12, decimal_places=2, default=Decimal("0.00")
                    ),
                ),
                (
                    "tax_amount",
                    models.DecimalField(
                        max_digits=12, decimal_places=2, default=Decimal("0.00")
                    ),
                ),
                (
                    "total_amount",
                    models.DecimalField(
                        max_digits=12, decimal_places=2, default=Decimal("0.00")
                    ),
                ),
                ("completed_at", models.DateTimeField(null=True, blank=True)),
                ("cancelled_at", models.DateTimeField(null=True, blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "customer",
                    models.ForeignKey(
                        to="sales.customer",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="orders",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["status"], name="sales_order_status_5a1d2e_idx"),
                    models.Index(
                        fields=["order_date"], name="sales_order_order_d_9c3b7f_idx"
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="OrderLineItem",
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
                ("quantity", models.PositiveIntegerField()),
                ("unit_cost", models.DecimalField(max_digits=12, decimal_places=2)),
                (
                    "line_total",
                    models.DecimalField(max_digits=12, decimal_places=2, editable=False),
                ),
                (
                    "stock_applied",
                    models.BooleanField(
                        default=False,
                        help_text="True once this line's debit has been applied to the stock ledger.",
                    ),
                ),
                (
                    "order",
                    models.ForeignKey(
                        to="sales.order",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="items",
                    ),
                ),
                (
                    "product",
                    models.ForeignKey(
                        to="products.product",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="order_line_items",
                    ),
                ),
            ],
            options={
                "ordering": ["id"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(quantity__gt=0),
                        name="order_line_item_quantity_gt_zero",
                    ),
                ],
            },
        ),
    ]
