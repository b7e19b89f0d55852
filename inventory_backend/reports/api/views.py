# reports/api/views.py

"""
PATH: reports/api/views.py

LEDGER REPORT ENDPOINTS (READ-ONLY)

Thin wrappers over reports.services.ledger_report.
Query params are parsed here; invalid values return 400.
"""

from __future__ import annotations

from datetime import datetime

from drf_spectacular.utils import OpenApiParameter, OpenApiTypes, extend_schema
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from reports.services import ledger_report

DATE_PARAMS = [
    OpenApiParameter(
        name="start_date",
        type=OpenApiTypes.DATE,
        required=False,
        description="Inclusive start date (YYYY-MM-DD).",
    ),
    OpenApiParameter(
        name="end_date",
        type=OpenApiTypes.DATE,
        required=False,
        description="Inclusive end date (YYYY-MM-DD).",
    ),
]

THRESHOLD_PARAM = OpenApiParameter(
    name="threshold",
    type=OpenApiTypes.INT,
    required=False,
    description="Low-stock threshold. Defaults to LOW_STOCK_THRESHOLD.",
)


class ReportParamError(ValueError):
    pass


def _parse_report_date(date_str: str | None):
    """
    Accepts YYYY-MM-DD. Missing means unbounded.
    """
    if not date_str:
        return None

    try:
        return datetime.strptime(date_str, "%Y-%m-%d").date()
    except ValueError:
        raise ReportParamError("Invalid date format. Use YYYY-MM-DD.")


def _parse_positive_int(raw: str | None, *, name: str):
    if raw in (None, ""):
        return None
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise ReportParamError(f"{name} must be an integer")
    if value < 0:
        raise ReportParamError(f"{name} cannot be negative")
    return value


def _date_range(request):
    start = _parse_report_date(request.query_params.get("start_date"))
    end = _parse_report_date(request.query_params.get("end_date"))
    if start and end and start > end:
        raise ReportParamError("start_date must be on or before end_date")
    return start, end


class LedgerReportView(APIView):
    permission_classes = [IsAuthenticated]

    def build(self, request):
        raise NotImplementedError

    def get(self, request):
        try:
            data = self.build(request)
        except ReportParamError as exc:
            return Response({"detail": str(exc)}, status=400)
        return Response(data)


class DashboardReportView(LedgerReportView):
    @extend_schema(tags=["reports"], parameters=[THRESHOLD_PARAM], responses={200: OpenApiTypes.OBJECT})
    def get(self, request):
        return super().get(request)

    def build(self, request):
        threshold = _parse_positive_int(request.query_params.get("threshold"), name="threshold")
        return ledger_report.dashboard_metrics(threshold=threshold)


class StockReportView(LedgerReportView):
    @extend_schema(tags=["reports"], parameters=[THRESHOLD_PARAM], responses={200: OpenApiTypes.OBJECT})
    def get(self, request):
        return super().get(request)

    def build(self, request):
        threshold = _parse_positive_int(request.query_params.get("threshold"), name="threshold")
        return ledger_report.stock_report(threshold=threshold)


class SalesReportView(LedgerReportView):
    @extend_schema(tags=["reports"], parameters=DATE_PARAMS, responses={200: OpenApiTypes.OBJECT})
    def get(self, request):
        return super().get(request)

    def build(self, request):
        start, end = _date_range(request)
        return ledger_report.sales_report(start_date=start, end_date=end)


class PurchaseReportView(LedgerReportView):
    @extend_schema(tags=["reports"], parameters=DATE_PARAMS, responses={200: OpenApiTypes.OBJECT})
    def get(self, request):
        return super().get(request)

    def build(self, request):
        start, end = _date_range(request)
        return ledger_report.purchase_report(start_date=start, end_date=end)


class TopProductsReportView(LedgerReportView):
    @extend_schema(
        tags=["reports"],
        parameters=[
            OpenApiParameter(
                name="limit",
                type=OpenApiTypes.INT,
                required=False,
                description="Number of products (default 10).",
            )
        ],
        responses={200: OpenApiTypes.OBJECT},
    )
    def get(self, request):
        return super().get(request)

    def build(self, request):
        limit = _parse_positive_int(request.query_params.get("limit"), name="limit")
        return ledger_report.top_products(limit=10 if limit is None else limit)


class LowStockAlertsView(LedgerReportView):
    @extend_schema(tags=["reports"], parameters=[THRESHOLD_PARAM], responses={200: OpenApiTypes.OBJECT})
    def get(self, request):
        return super().get(request)

    def build(self, request):
        threshold = _parse_positive_int(request.query_params.get("threshold"), name="threshold")
        rows = ledger_report.low_stock_alerts(threshold=threshold)
        return {
            "threshold": ledger_report.resolve_threshold(threshold),
            "count": len(rows),
            "low_stock_products": rows,
        }


class SalesVsPurchasesView(LedgerReportView):
    @extend_schema(tags=["reports"], parameters=DATE_PARAMS, responses={200: OpenApiTypes.OBJECT})
    def get(self, request):
        return super().get(request)

    def build(self, request):
        start, end = _date_range(request)
        return ledger_report.sales_vs_purchases(start_date=start, end_date=end)
