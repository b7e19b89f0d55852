# sales/admin.py

from django.contrib import admin

from sales.models import Customer, Order, OrderLineItem


# ======================================================
# CUSTOMER ADMIN
# ======================================================


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ("name", "customer_type", "phone", "email", "store_name")
    search_fields = ("name", "email", "phone", "store_name")
    list_filter = ("customer_type",)


# ======================================================
# ORDER ADMIN
# ======================================================


class OrderLineItemInline(admin.TabularInline):
    model = OrderLineItem
    extra = 0
    can_delete = False
    fields = ("product", "quantity", "unit_cost", "line_total", "stock_applied")
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """
    View-only: status changes must go through the order workflow so the
    stock ledger stays consistent.
    """

    list_display = (
        "invoice_no",
        "customer",
        "status",
        "total_products",
        "total_amount",
        "order_date",
        "completed_at",
    )
    readonly_fields = (
        "customer",
        "invoice_no",
        "order_date",
        "status",
        "total_products",
        "subtotal_amount",
        "tax_amount",
        "total_amount",
        "completed_at",
        "cancelled_at",
        "created_at",
    )
    search_fields = ("invoice_no", "customer__name")
    list_filter = ("status", "order_date")
    inlines = [OrderLineItemInline]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
