# reports/api/urls.py

from django.urls import path

from reports.api.views import (
    DashboardReportView,
    LowStockAlertsView,
    PurchaseReportView,
    SalesReportView,
    SalesVsPurchasesView,
    StockReportView,
    TopProductsReportView,
)

urlpatterns = [
    path("dashboard/", DashboardReportView.as_view(), name="reports-dashboard"),
    path("stock/", StockReportView.as_view(), name="reports-stock"),
    path("sales/", SalesReportView.as_view(), name="reports-sales"),
    path("purchases/", PurchaseReportView.as_view(), name="reports-purchases"),
    path("top-products/", TopProductsReportView.as_view(), name="reports-top-products"),
    path("low-stock-alerts/", LowStockAlertsView.as_view(), name="reports-low-stock-alerts"),
    path("sales-vs-purchases/", SalesVsPurchasesView.as_view(), name="reports-sales-vs-purchases"),
]
