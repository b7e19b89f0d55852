# products/urls.py

"""
PRODUCTS URLS

Purpose:
- Register product routes under /api/products/
    /api/products/                 (list)
    /api/products/<uuid>/          (detail)
    /api/products/<uuid>/stock/    (ledger stock query)
"""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from products.views import ProductViewSet

router = SimpleRouter()

router.register(r"", ProductViewSet, basename="products")

urlpatterns = [
    path("", include(router.urls)),
]
