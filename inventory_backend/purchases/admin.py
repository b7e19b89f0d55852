# purchases/admin.py

from django.contrib import admin

from purchases.models import Purchase, PurchaseLineItem, Supplier


# ======================================================
# SUPPLIER ADMIN
# ======================================================


@admin.register(Supplier)
class SupplierAdmin(admin.ModelAdmin):
    list_display = ("name", "shop_name", "phone", "email", "is_active")
    search_fields = ("name", "shop_name", "email", "phone")
    list_filter = ("is_active",)


# ======================================================
# PURCHASE ADMIN (VIEW-ONLY)
# ======================================================


class PurchaseLineItemInline(admin.TabularInline):
    model = PurchaseLineItem
    extra = 0
    can_delete = False
    fields = (
        "product",
        "quantity",
        "unit_cost",
        "stock_applied",
        "return_processed",
        "returned_quantity",
        "refund_amount",
    )
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Purchase)
class PurchaseAdmin(admin.ModelAdmin):
    list_display = (
        "purchase_no",
        "supplier",
        "status",
        "total_amount",
        "total_refund_amount",
        "purchase_date",
    )
    readonly_fields = (
        "supplier",
        "purchase_no",
        "purchase_date",
        "status",
        "total_amount",
        "total_refund_amount",
        "completed_at",
        "returned_at",
        "created_at",
    )
    search_fields = ("purchase_no", "supplier__name")
    list_filter = ("status", "purchase_date")
    inlines = [PurchaseLineItemInline]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
