# products/serializers/__init__.py

from .product import ProductSerializer, ProductStockSerializer

__all__ = [
    "ProductSerializer",
    "ProductStockSerializer",
]
