# sales/api/views.py

"""
======================================================
PATH: sales/api/views.py
======================================================
SALES API (customers + orders)

Views are thin: payload shape is validated by serializers, every business
rule lives in sales.services.order_service.
"""

from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from products.services.exceptions import InventoryServiceError
from products.views.errors import service_error_response
from sales.api.serializers import (
    CustomerSerializer,
    OrderCreateSerializer,
    OrderSerializer,
    OrderStatusSerializer,
)
from sales.models import Customer, Order
from sales.services.order_service import (
    create_order,
    get_order_invoice_data,
    transition_order,
)


def _order_queryset():
    return (
        Order.objects.select_related("customer")
        .prefetch_related("items", "items__product")
        .order_by("-created_at")
    )


class CustomerListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = CustomerSerializer

    @extend_schema(tags=["sales"], responses=CustomerSerializer(many=True))
    def get(self, request):
        qs = Customer.objects.all().order_by("name")
        return Response(CustomerSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["sales"],
        request=CustomerSerializer,
        responses={201: CustomerSerializer},
    )
    def post(self, request):
        s = CustomerSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        customer = s.save()
        return Response(CustomerSerializer(customer).data, status=status.HTTP_201_CREATED)


class OrderListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = OrderSerializer
    filter_backends = [DjangoFilterBackend]
    filterset_fields = ["status", "customer"]

    def get_queryset(self):
        return _order_queryset()

    @extend_schema(tags=["sales"], responses=OrderSerializer(many=True))
    def get(self, request):
        qs = self.filter_queryset(self.get_queryset())
        return Response(OrderSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["sales"],
        request=OrderCreateSerializer,
        responses={201: OrderSerializer},
    )
    def post(self, request):
        s = OrderCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            order = create_order(
                customer_id=data["customer_id"],
                invoice_no=data["invoice_no"],
                order_date=data.get("order_date"),
                gst=data.get("gst"),
                items=[dict(line) for line in data["items"]],
            )
        except InventoryServiceError as exc:
            return service_error_response(exc)

        order = _order_queryset().get(id=order.id)
        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)


class OrderDetailView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = OrderSerializer

    @extend_schema(tags=["sales"], responses=OrderSerializer)
    def get(self, request, order_id):
        order = _order_queryset().filter(id=order_id).first()
        if order is None:
            return Response({"detail": "Order not found"}, status=status.HTTP_404_NOT_FOUND)
        return Response(OrderSerializer(order).data, status=status.HTTP_200_OK)


class OrderStatusView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = OrderStatusSerializer

    @extend_schema(
        tags=["sales"],
        request=OrderStatusSerializer,
        responses={200: OrderSerializer},
    )
    def patch(self, request, order_id):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            order = transition_order(order_id=order_id, status=s.validated_data["status"])
        except InventoryServiceError as exc:
            return service_error_response(exc)

        order = _order_queryset().get(id=order.id)
        return Response(OrderSerializer(order).data, status=status.HTTP_200_OK)


class OrderInvoiceView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["sales"])
    def get(self, request, order_id):
        try:
            data = get_order_invoice_data(order_id=order_id)
        except InventoryServiceError as exc:
            return service_error_response(exc)
        return Response(data, status=status.HTTP_200_OK)
