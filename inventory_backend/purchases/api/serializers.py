# purchases/api/serializers.py

from rest_framework import serializers

from purchases.models import Purchase, PurchaseLineItem, Supplier


class SupplierSerializer(serializers.ModelSerializer):
    class Meta:
        model = Supplier
        fields = "__all__"
        read_only_fields = ("id", "created_at")


class PurchaseLineInputSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)
    unit_cost = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=0)


class PurchaseCreateSerializer(serializers.Serializer):
    supplier_id = serializers.UUIDField()
    purchase_no = serializers.CharField(max_length=64)
    purchase_date = serializers.DateField(required=False)
    items = PurchaseLineInputSerializer(many=True, allow_empty=False)


class PurchaseLineItemSerializer(serializers.ModelSerializer):
    product_code = serializers.CharField(source="product.product_code", read_only=True)
    product_name = serializers.CharField(source="product.name", read_only=True)
    line_total = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = PurchaseLineItem
        fields = [
            "id",
            "product",
            "product_code",
            "product_name",
            "quantity",
            "unit_cost",
            "line_total",
            "stock_applied",
            "return_processed",
            "returned_quantity",
            "refund_amount",
            "returned_at",
        ]
        read_only_fields = fields


class PurchaseSerializer(serializers.ModelSerializer):
    supplier_name = serializers.CharField(source="supplier.name", read_only=True)
    items = PurchaseLineItemSerializer(many=True, read_only=True)

    class Meta:
        model = Purchase
        fields = [
            "id",
            "supplier",
            "supplier_name",
            "purchase_no",
            "purchase_date",
            "status",
            "total_amount",
            "total_refund_amount",
            "completed_at",
            "returned_at",
            "created_at",
            "items",
        ]
        read_only_fields = fields


class PurchaseStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(
        choices=[
            Purchase.STATUS_PENDING,
            Purchase.STATUS_COMPLETED,
            Purchase.STATUS_APPROVED_ALIAS,
            Purchase.STATUS_RETURNED,
        ]
    )
