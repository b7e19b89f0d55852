# sales/api/serializers.py

from rest_framework import serializers

from sales.models import Customer, Order, OrderLineItem


class CustomerSerializer(serializers.ModelSerializer):
    class Meta:
        model = Customer
        fields = [
            "id",
            "name",
            "email",
            "phone",
            "address",
            "customer_type",
            "store_name",
            "created_at",
        ]
        read_only_fields = ["id", "created_at"]


class OrderLineItemSerializer(serializers.ModelSerializer):
    product_code = serializers.CharField(source="product.product_code", read_only=True)
    product_name = serializers.CharField(source="product.name", read_only=True)

    class Meta:
        model = OrderLineItem
        fields = [
            "id",
            "product",
            "product_code",
            "product_name",
            "quantity",
            "unit_cost",
            "line_total",
            "stock_applied",
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    customer_name = serializers.CharField(source="customer.name", read_only=True)
    items = OrderLineItemSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "customer",
            "customer_name",
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
            "items",
        ]
        read_only_fields = fields


# ==========================================================
# COMMAND INPUTS
# ==========================================================


class OrderLineInputSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)
    unit_cost = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)


class OrderCreateSerializer(serializers.Serializer):
    customer_id = serializers.UUIDField()
    invoice_no = serializers.CharField(max_length=64)
    order_date = serializers.DateField(required=False)
    gst = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0, required=False, allow_null=True
    )
    items = OrderLineInputSerializer(many=True, allow_empty=False)


class OrderStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Order.STATUS_CHOICES)
