# products/serializers/product.py

"""
PRODUCT SERIALIZERS

Purpose:
- Read surface for catalog + stock ledger state.
- Stock is NEVER writable through the API (ledger-only).
"""

from rest_framework import serializers

from products.models import Product


class ProductSerializer(serializers.ModelSerializer):
    inventory_value = serializers.SerializerMethodField()

    class Meta:
        model = Product
        fields = [
            "id",
            "product_code",
            "name",
            "buying_price",
            "selling_price",
            "stock",
            "inventory_value",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_inventory_value(self, obj):
        return f"{obj.inventory_value:.2f}"


class ProductStockSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    product_code = serializers.CharField()
    name = serializers.CharField()
    stock = serializers.IntegerField()
