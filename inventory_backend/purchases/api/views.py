# purchases/api/views.py

from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from products.services.exceptions import InventoryServiceError
from products.views.errors import service_error_response
from purchases.api.serializers import (
    PurchaseCreateSerializer,
    PurchaseSerializer,
    PurchaseStatusSerializer,
    SupplierSerializer,
)
from purchases.models import Purchase, Supplier
from purchases.services.purchase_service import create_purchase, transition_purchase
from purchases.services.returns import commit_purchase_return, preview_purchase_return


def _purchase_queryset():
    return (
        Purchase.objects.select_related("supplier")
        .prefetch_related("items", "items__product")
        .order_by("-created_at")
    )


class SupplierListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = SupplierSerializer

    @extend_schema(tags=["purchases"], responses=SupplierSerializer(many=True))
    def get(self, request):
        qs = Supplier.objects.filter(is_active=True).order_by("name")
        return Response(
            SupplierSerializer(qs, many=True).data, status=status.HTTP_200_OK
        )

    @extend_schema(
        tags=["purchases"],
        request=SupplierSerializer,
        responses={201: SupplierSerializer},
    )
    def post(self, request):
        s = SupplierSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        supplier = s.save()
        return Response(
            SupplierSerializer(supplier).data, status=status.HTTP_201_CREATED
        )


class PurchaseListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = PurchaseSerializer
    filter_backends = [DjangoFilterBackend]
    filterset_fields = ["status", "supplier"]

    def get_queryset(self):
        return _purchase_queryset()

    @extend_schema(tags=["purchases"], responses=PurchaseSerializer(many=True))
    def get(self, request):
        qs = self.filter_queryset(self.get_queryset())
        return Response(
            PurchaseSerializer(qs, many=True).data, status=status.HTTP_200_OK
        )

    @extend_schema(
        tags=["purchases"],
        request=PurchaseCreateSerializer,
        responses={201: PurchaseSerializer},
    )
    def post(self, request):
        s = PurchaseCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            purchase = create_purchase(
                supplier_id=data["supplier_id"],
                purchase_no=data["purchase_no"],
                purchase_date=data.get("purchase_date"),
                items=[dict(line) for line in data["items"]],
            )
        except InventoryServiceError as exc:
            return service_error_response(exc)

        purchase = _purchase_queryset().get(id=purchase.id)
        return Response(
            PurchaseSerializer(purchase).data, status=status.HTTP_201_CREATED
        )


class PurchaseDetailView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = PurchaseSerializer

    @extend_schema(tags=["purchases"], responses=PurchaseSerializer)
    def get(self, request, purchase_id):
        purchase = _purchase_queryset().filter(id=purchase_id).first()
        if purchase is None:
            return Response(
                {"detail": "Purchase not found"}, status=status.HTTP_404_NOT_FOUND
            )
        return Response(PurchaseSerializer(purchase).data, status=status.HTTP_200_OK)


class PurchaseStatusView(GenericAPIView):
    """
    PATCH status: pending | completed | approved.
    "returned" is rejected here; use POST <id>/return/.
    """

    permission_classes = [IsAuthenticated]
    serializer_class = PurchaseStatusSerializer

    @extend_schema(
        tags=["purchases"],
        request=PurchaseStatusSerializer,
        responses={200: PurchaseSerializer},
    )
    def patch(self, request, purchase_id):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            purchase = transition_purchase(
                purchase_id=purchase_id, status=s.validated_data["status"]
            )
        except InventoryServiceError as exc:
            return service_error_response(exc)

        purchase = _purchase_queryset().get(id=purchase.id)
        return Response(PurchaseSerializer(purchase).data, status=status.HTTP_200_OK)


class PurchaseReturnPreviewView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["purchases"])
    def get(self, request, purchase_id):
        try:
            preview = preview_purchase_return(purchase_id=purchase_id)
        except InventoryServiceError as exc:
            return service_error_response(exc)
        return Response(preview.to_dict(), status=status.HTTP_200_OK)


class PurchaseReturnView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["purchases"], request=None)
    def post(self, request, purchase_id):
        try:
            result = commit_purchase_return(purchase_id=purchase_id)
        except InventoryServiceError as exc:
            return service_error_response(exc)
        return Response(result.to_dict(), status=status.HTTP_200_OK)
