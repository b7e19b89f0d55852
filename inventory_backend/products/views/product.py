# products/views/product.py

"""
PRODUCT VIEWSET

Purpose:
- Read-only catalog listing with ledger stock
- Stock query endpoint (StockLedger.query) used by reporting + low-stock tooling

Catalog management (create/edit) is handled elsewhere; stock is never
writable here.
"""

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from products.models import Product
from products.serializers import ProductSerializer, ProductStockSerializer
from products.services import stock_ledger
from products.services.exceptions import InventoryServiceError
from products.views.errors import service_error_response


class ProductViewSet(viewsets.ReadOnlyModelViewSet):
    """
    GET /api/products/
    GET /api/products/<uuid>/
    GET /api/products/<uuid>/stock/
    """

    serializer_class = ProductSerializer
    permission_classes = [IsAuthenticated]
    filterset_fields = ["is_active"]

    def get_queryset(self):
        qs = Product.objects.all().order_by("name")

        q = (self.request.query_params.get("q") or "").strip()
        if q:
            qs = qs.filter(name__icontains=q) | qs.filter(product_code__icontains=q)

        return qs

    @extend_schema(
        tags=["products"],
        parameters=[
            OpenApiParameter(
                name="q",
                type=str,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Optional search on name / product_code.",
            ),
        ],
    )
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    @extend_schema(tags=["products"], responses=ProductStockSerializer)
    @action(detail=True, methods=["get"], url_path="stock")
    def stock(self, request, pk=None):
        try:
            current = stock_ledger.query(product_id=pk)
        except InventoryServiceError as exc:
            return service_error_response(exc)

        product = Product.objects.only("id", "product_code", "name").get(pk=pk)
        data = ProductStockSerializer(
            {
                "product_id": product.id,
                "product_code": product.product_code,
                "name": product.name,
                "stock": current,
            }
        ).data
        return Response(data)
