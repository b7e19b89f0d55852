# purchases/api/urls.py

from django.urls import path

from purchases.api.views import (
    PurchaseDetailView,
    PurchaseListCreateView,
    PurchaseReturnPreviewView,
    PurchaseReturnView,
    PurchaseStatusView,
    SupplierListCreateView,
)

urlpatterns = [
    path("suppliers/", SupplierListCreateView.as_view(), name="purchase-suppliers"),
    path("", PurchaseListCreateView.as_view(), name="purchases"),
    path(
        "<uuid:purchase_id>/", PurchaseDetailView.as_view(), name="purchase-detail"
    ),
    path(
        "<uuid:purchase_id>/status/",
        PurchaseStatusView.as_view(),
        name="purchase-status",
    ),
    path(
        "<uuid:purchase_id>/return-preview/",
        PurchaseReturnPreviewView.as_view(),
        name="purchase-return-preview",
    ),
    path(
        "<uuid:purchase_id>/return/",
        PurchaseReturnView.as_view(),
        name="purchase-return",
    ),
]
