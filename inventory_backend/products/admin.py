# products/admin.py
"""
=====================================================
PATH: products/admin.py
=====================================================

Admin rules (ledger-safe):

- Product is created once; opening stock may be set on creation.
- After creation, stock is read-only here. It only moves through
  products.services.stock_ledger (orders, purchases, returns).
- StockMovement rows are audit artifacts: view-only, never edited or deleted.
"""

from __future__ import annotations

from django.contrib import admin

from products.models import Product, StockMovement


# =====================================================
# STOCK MOVEMENT (VIEW-ONLY INLINE)
# =====================================================

class StockMovementInline(admin.TabularInline):
    model = StockMovement
    extra = 0
    can_delete = False
    show_change_link = False

    fields = (
        "created_at",
        "movement_type",
        "reason",
        "quantity",
        "stock_after",
        "reference",
    )
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


# =====================================================
# PRODUCT
# =====================================================

@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = (
        "product_code",
        "name",
        "buying_price",
        "selling_price",
        "stock",
        "is_active",
        "created_at",
    )
    list_filter = ("is_active", "created_at")
    search_fields = ("product_code", "name")
    ordering = ("name",)

    inlines = [StockMovementInline]

    def get_readonly_fields(self, request, obj=None):
        base = ("created_at", "updated_at")
        if obj is not None:
            # Existing products: stock belongs to the ledger
            return base + ("stock",)
        return base


# =====================================================
# STOCK MOVEMENT (VIEW-ONLY LIST)
# =====================================================

@admin.register(StockMovement)
class StockMovementAdmin(admin.ModelAdmin):
    list_display = (
        "product",
        "movement_type",
        "reason",
        "quantity",
        "stock_after",
        "reference",
        "created_at",
    )
    list_filter = ("movement_type", "reason", "created_at")
    search_fields = ("product__name", "product__product_code", "reference")
    ordering = ("-created_at",)

    readonly_fields = (
        "product",
        "movement_type",
        "reason",
        "quantity",
        "stock_after",
        "reference",
        "created_at",
    )

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False if obj else True

    def has_delete_permission(self, request, obj=None):
        return False
