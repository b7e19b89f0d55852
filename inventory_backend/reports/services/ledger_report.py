# reports/services/ledger_report.py

"""
======================================================
PATH: reports/services/ledger_report.py
======================================================
LEDGER REPORTS (READ-ONLY)

Aggregations over current stock and historical order / purchase line items.

Rules:
- Never mutates anything (no locks, no ledger calls).
- Cancelled orders are excluded from every sales figure.
- Money values are returned as JSON-safe 2dp strings.
- Low stock means stock < threshold (default LOW_STOCK_THRESHOLD).
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.db.models import Count, DecimalField, ExpressionWrapper, F, Sum

from products.models import Product
from purchases.models import Purchase, PurchaseLineItem
from sales.models import Order, OrderLineItem

STATUS_OUT_OF_STOCK = "Out of Stock"
STATUS_LOW_STOCK = "Low Stock"
STATUS_IN_STOCK = "In Stock"

_MONEY_FIELD = DecimalField(max_digits=18, decimal_places=2)


def _money(x) -> str:
    """
    JSON-safe money string.
    """
    if x is None:
        return "0.00"
    return f"{Decimal(str(x)).quantize(Decimal('0.01')):.2f}"


def resolve_threshold(threshold) -> int:
    if threshold is None:
        return int(getattr(settings, "LOW_STOCK_THRESHOLD", 10))
    return int(threshold)


def _date_range(qs, field: str, start_date, end_date):
    if start_date:
        qs = qs.filter(**{f"{field}__gte": start_date})
    if end_date:
        qs = qs.filter(**{f"{field}__lte": end_date})
    return qs


def _inventory_value_expr():
    return ExpressionWrapper(F("stock") * F("buying_price"), output_field=_MONEY_FIELD)


def _purchase_line_total_expr():
    return ExpressionWrapper(F("quantity") * F("unit_cost"), output_field=_MONEY_FIELD)


def _active_orders():
    return Order.objects.exclude(status=Order.STATUS_CANCELLED)


def _active_order_lines():
    return OrderLineItem.objects.exclude(order__status=Order.STATUS_CANCELLED)


def stock_status(stock: int, threshold: int | None = None) -> str:
    threshold = resolve_threshold(threshold)
    if stock <= 0:
        return STATUS_OUT_OF_STOCK
    if stock < threshold:
        return STATUS_LOW_STOCK
    return STATUS_IN_STOCK


def _product_row(product: Product, threshold: int) -> dict:
    return {
        "product_id": str(product.id),
        "product_code": product.product_code,
        "name": product.name,
        "buying_price": _money(product.buying_price),
        "selling_price": _money(product.selling_price),
        "stock": int(product.stock),
        "inventory_value": _money(product.inventory_value),
        "status": stock_status(int(product.stock), threshold),
    }


# ============================================================
# DASHBOARD
# ============================================================


def dashboard_metrics(*, threshold=None) -> dict:
    threshold = resolve_threshold(threshold)

    total_sales = _active_orders().aggregate(total=Sum("total_amount"))["total"]

    total_purchases = PurchaseLineItem.objects.aggregate(
        total=Sum(_purchase_line_total_expr())
    )["total"]

    total_refunds = Purchase.objects.filter(status=Purchase.STATUS_RETURNED).aggregate(
        total=Sum("total_refund_amount")
    )["total"]

    inventory = Product.objects.aggregate(
        inventory_value=Sum(_inventory_value_expr()),
        total_products=Count("id"),
        total_stock=Sum("stock"),
    )

    low_stock_products = [
        {"product_id": str(p.id), "name": p.name, "stock": int(p.stock)}
        for p in Product.objects.filter(stock__lt=threshold).order_by("stock", "name")[:10]
    ]

    recent_orders = [
        {
            "order_id": str(o.id),
            "invoice_no": o.invoice_no,
            "customer_name": o.customer.name,
            "status": o.status,
            "total_amount": _money(o.total_amount),
            "order_date": o.order_date.isoformat(),
        }
        for o in Order.objects.select_related("customer").order_by("-created_at")[:5]
    ]

    return {
        "total_sales": _money(total_sales),
        "total_purchases": _money(total_purchases),
        "total_refunds": _money(total_refunds),
        "inventory_value": _money(inventory["inventory_value"]),
        "total_products": int(inventory["total_products"] or 0),
        "total_stock": int(inventory["total_stock"] or 0),
        "out_of_stock_count": Product.objects.filter(stock=0).count(),
        "low_stock_threshold": threshold,
        "low_stock_products": low_stock_products,
        "recent_orders": recent_orders,
    }


# ============================================================
# STOCK
# ============================================================


def stock_report(*, threshold=None) -> list[dict]:
    threshold = resolve_threshold(threshold)
    return [
        _product_row(p, threshold)
        for p in Product.objects.all().order_by("stock", "name")
    ]


def low_stock_alerts(*, threshold=None) -> list[dict]:
    threshold = resolve_threshold(threshold)
    return [
        _product_row(p, threshold)
        for p in Product.objects.filter(stock__lt=threshold).order_by("stock", "name")
    ]


# ============================================================
# SALES
# ============================================================


def sales_report(*, start_date=None, end_date=None) -> dict:
    orders = _date_range(_active_orders(), "order_date", start_date, end_date)
    lines = _date_range(_active_order_lines(), "order__order_date", start_date, end_date)

    by_date = [
        {
            "date": row["order_date"].isoformat(),
            "total_sales": _money(row["total_sales"]),
            "order_count": row["order_count"],
        }
        for row in orders.values("order_date")
        .annotate(total_sales=Sum("total_amount"), order_count=Count("id"))
        .order_by("order_date")
    ]

    by_product = [
        {
            "product_id": str(row["product_id"]),
            "product_code": row["product__product_code"],
            "name": row["product__name"],
            "quantity_sold": int(row["quantity_sold"] or 0),
            "total_sales": _money(row["total_sales"]),
        }
        for row in lines.values("product_id", "product__product_code", "product__name")
        .annotate(quantity_sold=Sum("quantity"), total_sales=Sum("line_total"))
        .order_by("-total_sales", "product__name")[:10]
    ]

    summary = orders.aggregate(total_sales=Sum("total_amount"), total_orders=Count("id"))
    total_orders = int(summary["total_orders"] or 0)
    total_sales = Decimal(str(summary["total_sales"] or "0"))
    average = total_sales / total_orders if total_orders else Decimal("0")

    return {
        "start_date": start_date.isoformat() if start_date else None,
        "end_date": end_date.isoformat() if end_date else None,
        "sales_by_date": by_date,
        "sales_by_product": by_product,
        "summary": {
            "total_sales": _money(total_sales),
            "total_orders": total_orders,
            "average_order_value": _money(average),
        },
    }


def top_products(*, limit: int = 10) -> list[dict]:
    return [
        {
            "product_id": str(row["product_id"]),
            "product_code": row["product__product_code"],
            "name": row["product__name"],
            "quantity_sold": int(row["quantity_sold"] or 0),
            "total_sales": _money(row["total_sales"]),
            "order_count": row["order_count"],
        }
        for row in _active_order_lines()
        .values("product_id", "product__product_code", "product__name")
        .annotate(
            quantity_sold=Sum("quantity"),
            total_sales=Sum("line_total"),
            order_count=Count("order", distinct=True),
        )
        .order_by("-quantity_sold", "product__name")[: int(limit)]
    ]


# ============================================================
# PURCHASES
# ============================================================


def purchase_report(*, start_date=None, end_date=None) -> dict:
    purchases = _date_range(Purchase.objects.all(), "purchase_date", start_date, end_date)
    lines = _date_range(
        PurchaseLineItem.objects.all(), "purchase__purchase_date", start_date, end_date
    )

    totals_by_date = {
        row["purchase__purchase_date"]: row["total"]
        for row in lines.values("purchase__purchase_date").annotate(
            total=Sum(_purchase_line_total_expr())
        )
    }

    by_date = [
        {
            "date": row["purchase_date"].isoformat(),
            "purchase_count": row["purchase_count"],
            "total_purchases": _money(totals_by_date.get(row["purchase_date"])),
        }
        for row in purchases.values("purchase_date")
        .annotate(purchase_count=Count("id"))
        .order_by("purchase_date")
    ]

    by_supplier = [
        {
            "supplier_id": str(row["supplier_id"]),
            "supplier_name": row["supplier__name"],
            "shop_name": row["supplier__shop_name"] or "N/A",
            "total_purchases": _money(row["total_purchases"]),
            "purchase_count": row["purchase_count"],
        }
        for row in purchases.values("supplier_id", "supplier__name", "supplier__shop_name")
        .annotate(
            total_purchases=Sum("total_amount"),
            purchase_count=Count("id"),
        )
        .order_by("-total_purchases", "supplier__name")
    ]

    summary = purchases.aggregate(
        total_purchases=Sum("total_amount"),
        total_refunds=Sum("total_refund_amount"),
        purchase_count=Count("id"),
    )
    total = Decimal(str(summary["total_purchases"] or "0"))
    refunds = Decimal(str(summary["total_refunds"] or "0"))

    return {
        "start_date": start_date.isoformat() if start_date else None,
        "end_date": end_date.isoformat() if end_date else None,
        "purchases_by_date": by_date,
        "purchases_by_supplier": by_supplier,
        "summary": {
            "purchase_count": int(summary["purchase_count"] or 0),
            "total_purchases": _money(total),
            "total_refunds": _money(refunds),
            "net_purchases": _money(total - refunds),
        },
    }


def sales_vs_purchases(*, start_date=None, end_date=None) -> list[dict]:
    sales = {
        row["order_date"]: row["total"]
        for row in _date_range(_active_orders(), "order_date", start_date, end_date)
        .values("order_date")
        .annotate(total=Sum("total_amount"))
    }
    purchases = {
        row["purchase_date"]: row["total"]
        for row in _date_range(Purchase.objects.all(), "purchase_date", start_date, end_date)
        .values("purchase_date")
        .annotate(total=Sum("total_amount"))
    }

    rows = []
    for day in sorted(set(sales) | set(purchases)):
        s = Decimal(str(sales.get(day) or "0"))
        p = Decimal(str(purchases.get(day) or "0"))
        rows.append(
            {
                "date": day.isoformat(),
                "sales": _money(s),
                "purchases": _money(p),
                "difference": _money(s - p),
            }
        )
    return rows
