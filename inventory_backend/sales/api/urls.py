# sales/api/urls.py

"""
SALES API URLS

Provides:
    GET|POST /api/sales/customers/
    GET|POST /api/sales/orders/                 (?status=pending|processing|completed|cancelled)
    GET      /api/sales/orders/<uuid>/
    PATCH    /api/sales/orders/<uuid>/status/
    GET      /api/sales/orders/<uuid>/invoice/
"""

from django.urls import path

from sales.api.views import (
    CustomerListCreateView,
    OrderDetailView,
    OrderInvoiceView,
    OrderListCreateView,
    OrderStatusView,
)

urlpatterns = [
    path("customers/", CustomerListCreateView.as_view(), name="sales-customers"),
    path("orders/", OrderListCreateView.as_view(), name="sales-orders"),
    path("orders/<uuid:order_id>/", OrderDetailView.as_view(), name="sales-order-detail"),
    path("orders/<uuid:order_id>/status/", OrderStatusView.as_view(), name="sales-order-status"),
    path("orders/<uuid:order_id>/invoice/", OrderInvoiceView.as_view(), name="sales-order-invoice"),
]
