"""
======================================================
PATH: purchases/migrations/0001_initial.py
======================================================
MIGRATION: Supplier + Purchase + PurchaseLineItem (with return bookkeeping)
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
            name="Supplier",
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
                ("name", models.CharField(max_length=200)),
                ("shop_name", models.CharField(max_length=200, blank=True, default="")),
                ("phone", models.CharField(max_length=50, blank=True, default="")),
                ("email", models.EmailField(max_length=254, blank=True, default="")),
                ("address", models.TextField(blank=True, default="")),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["name"],
                "indexes": [
                    models.Index(fields=["name"], name="purchases_s_name_7e0a4c_idx"),
                    models.Index(
                        fields=["is_active"], name="purchases_s_is_acti_2b9d1f_idx"
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Purchase",
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
                ("purchase_no", models.CharField(max_length=64, unique=True)),
                (
                    "purchase_date",
                    models.DateField(default=django.utils.timezone.localdate),
                ),
                (
                    "status",
                    models.CharField(
                        max_length=20,
                        choices=[
                            ("pending", "Pending"),
                            ("completed", "Completed"),
                            ("returned", "Returned"),
                        ],
                        default="pending",
                    ),
                ),
                (
                    "total_amount",
                    models.DecimalField(
                        max_digits=14, decimal_places=2, default=Decimal("0.00")
                    ),
                ),
                (
                    "total_refund_amount",
                    models.DecimalField(
                        max_digits=14, decimal_places=2, default=Decimal("0.00")
                    ),
                ),
                ("completed_at", models.DateTimeField(null=True, blank=True)),
                ("returned_at", models.DateTimeField(null=True, blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "supplier",
                    models.ForeignKey(
                        to="purchases.supplier",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="purchases",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["status", "created_at"],
                        name="purchases_p_status_4c8e2a_idx",
                    ),
                    models.Index(
                        fields=["purchase_date"], name="purchases_p_purchas_91f3d6_idx"
                    ),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(total_amount__gte=Decimal("0.00")),
                        name="purchase_total_nonnegative",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(total_refund_amount__gte=Decimal("0.00")),
                        name="purchase_refund_nonnegative",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="PurchaseLineItem",
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
                (
                    "unit_cost",
                    models.DecimalField(
                        max_digits=14, decimal_places=2, default=Decimal("0.00")
                    ),
                ),
                (
                    "stock_applied",
                    models.BooleanField(
                        default=False,
                        help_text="True once this line's credit has been applied to the stock ledger.",
                    ),
                ),
                ("return_processed", models.BooleanField(default=False)),
                ("returned_quantity", models.PositiveIntegerField(default=0)),
                (
                    "refund_amount",
                    models.DecimalField(
                        max_digits=14, decimal_places=2, default=Decimal("0.00")
                    ),
                ),
                ("returned_at", models.DateTimeField(null=True, blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "purchase",
                    models.ForeignKey(
                        to="purchases.purchase",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="items",
                    ),
                ),
                (
                    "product",
                    models.ForeignKey(
                        to="products.product",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="purchase_line_items",
                    ),
                ),
            ],
            options={
                "ordering": ["created_at", "id"],
                "indexes": [
                    models.Index(
                        fields=["purchase", "created_at"],
                        name="purchases_p_purchas_0d5b7e_idx",
                    ),
                    models.Index(
                        fields=["product", "created_at"],
                        name="purchases_p_product_6a2f94_idx",
                    ),
                ],
                "constraints": [
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
                ],
            },
        ),
    ]
