# reports/tests/test_ledger_report.py

from __future__ import annotations

from datetime import date
from decimal import Decimal
from io import StringIO

from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.test import TestCase, override_settings
from rest_framework import status
from rest_framework.test import APIClient

from products.models import Product, StockMovement
from products.services import stock_ledger
from purchases.models import Supplier
from purchases.services.purchase_service import create_purchase, transition_purchase
from purchases.services.returns import commit_purchase_return
from reports.services import ledger_report
from sales.models import Customer
from sales.services.order_service import create_order, transition_order

User = get_user_model()


class LedgerReportTests(TestCase):
    """
    Read-only reporting over the ledger.

    GUARANTEES:
    - Reports never mutate stock
    - Cancelled orders never count as sales
    - Stock status buckets follow the threshold
    """

    def setUp(self):
        self.customer = Customer.objects.create(name="Corner Shop")
        self.supplier = Supplier.objects.create(name="Northwind", shop_name="Northwind Depot")

        self.tshirt = Product.objects.create(
            product_code="TSH-100",
            name="Cotton T-Shirt",
            buying_price=Decimal("10.00"),
            selling_price=Decimal("20.00"),
            stock=50,
        )
        self.batteries = Product.objects.create(
            product_code="BAT-004",
            name="AA Batteries",
            buying_price=Decimal("5.00"),
            selling_price=Decimal("8.00"),
            stock=4,
        )
        self.cable = Product.objects.create(
            product_code="USB-C",
            name="USB Cable",
            buying_price=Decimal("3.00"),
            selling_price=Decimal("6.00"),
            stock=0,
        )

        completed = create_order(
            customer_id=self.customer.id,
            invoice_no="INV-1",
            order_date=date(2024, 3, 1),
            gst="0.00",
            items=[{"product_id": self.tshirt.id, "quantity": 5, "unit_cost": "20.00"}],
        )
        transition_order(order_id=completed.id, status="completed")

        pending = create_order(
            customer_id=self.customer.id,
            invoice_no="INV-2",
            order_date=date(2024, 3, 2),
            gst="0.00",
            items=[{"product_id": self.batteries.id, "quantity": 2, "unit_cost": "8.00"}],
        )

        cancelled = create_order(
            customer_id=self.customer.id,
            invoice_no="INV-3",
            order_date=date(2024, 3, 2),
            gst="0.00",
            items=[{"product_id": self.tshirt.id, "quantity": 40, "unit_cost": "20.00"}],
        )
        transition_order(order_id=cancelled.id, status="cancelled")

        self.purchase = create_purchase(
            supplier_id=self.supplier.id,
            purchase_no="PO-1",
            purchase_date=date(2024, 3, 1),
            items=[{"product_id": self.batteries.id, "quantity": 6, "unit_cost": "5.00"}],
        )
        transition_purchase(purchase_id=self.purchase.id, status="completed")

        self.pending_order = pending

    def test_dashboard_metrics(self):
        data = ledger_report.dashboard_metrics()

        # INV-1 (100.00) + INV-2 (16.00); INV-3 cancelled
        self.assertEqual(data["total_sales"], "116.00")
        self.assertEqual(data["total_purchases"], "30.00")
        self.assertEqual(data["total_refunds"], "0.00")
        self.assertEqual(data["total_products"], 3)
        # 45 + 10 + 0
        self.assertEqual(data["total_stock"], 55)
        self.assertEqual(data["inventory_value"], "500.00")
        self.assertEqual(data["out_of_stock_count"], 1)
        self.assertEqual(
            [row["name"] for row in data["low_stock_products"]],
            ["USB Cable"],
        )
        self.assertEqual(len(data["recent_orders"]), 3)

    def test_stock_report_status_buckets(self):
        rows = {row["product_code"]: row for row in ledger_report.stock_report()}

        self.assertEqual(rows["USB-C"]["status"], ledger_report.STATUS_OUT_OF_STOCK)
        self.assertEqual(rows["BAT-004"]["status"], ledger_report.STATUS_IN_STOCK)
        self.assertEqual(rows["TSH-100"]["status"], ledger_report.STATUS_IN_STOCK)
        self.assertEqual(rows["TSH-100"]["inventory_value"], "450.00")

        ordered = [row["stock"] for row in ledger_report.stock_report()]
        self.assertEqual(ordered, sorted(ordered))

    def test_low_stock_alerts_uses_strict_threshold(self):
        codes = [row["product_code"] for row in ledger_report.low_stock_alerts(threshold=10)]
        self.assertEqual(codes, ["USB-C"])

        codes = [row["product_code"] for row in ledger_report.low_stock_alerts(threshold=11)]
        self.assertEqual(codes, ["USB-C", "BAT-004"])

    @override_settings(LOW_STOCK_THRESHOLD=100)
    def test_threshold_default_from_settings(self):
        rows = ledger_report.low_stock_alerts()
        self.assertEqual(len(rows), 3)

    def test_sales_report_excludes_cancelled(self):
        data = ledger_report.sales_report(start_date=date(2024, 3, 1), end_date=date(2024, 3, 31))

        self.assertEqual(data["summary"]["total_orders"], 2)
        self.assertEqual(data["summary"]["total_sales"], "116.00")
        self.assertEqual(
            [(row["date"], row["order_count"]) for row in data["sales_by_date"]],
            [("2024-03-01", 1), ("2024-03-02", 1)],
        )
        self.assertEqual(data["sales_by_product"][0]["product_code"], "TSH-100")

    def test_sales_report_date_window(self):
        data = ledger_report.sales_report(start_date=date(2024, 3, 2), end_date=date(2024, 3, 2))
        self.assertEqual(data["summary"]["total_sales"], "16.00")

    def test_top_products_by_quantity(self):
        rows = ledger_report.top_products(limit=1)

        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0]["product_code"], "TSH-100")
        self.assertEqual(rows[0]["quantity_sold"], 5)

    def test_purchase_report_with_refunds(self):
        commit_purchase_return(purchase_id=self.purchase.id)

        data = ledger_report.purchase_report()

        self.assertEqual(data["summary"]["total_purchases"], "30.00")
        self.assertEqual(data["summary"]["total_refunds"], "30.00")
        self.assertEqual(data["summary"]["net_purchases"], "0.00")
        self.assertEqual(data["purchases_by_supplier"][0]["shop_name"], "Northwind Depot")
        self.assertEqual(data["purchases_by_date"][0]["total_purchases"], "30.00")

    def test_sales_vs_purchases(self):
        rows = {row["date"]: row for row in ledger_report.sales_vs_purchases()}

        self.assertEqual(rows["2024-03-01"]["sales"], "100.00")
        self.assertEqual(rows["2024-03-01"]["purchases"], "30.00")
        self.assertEqual(rows["2024-03-01"]["difference"], "70.00")
        self.assertEqual(rows["2024-03-02"]["purchases"], "0.00")

    def test_reports_never_mutate_stock(self):
        before = {p.id: p.stock for p in Product.objects.all()}
        movements = StockMovement.objects.count()

        ledger_report.dashboard_metrics()
        ledger_report.stock_report()
        ledger_report.sales_report()
        ledger_report.top_products()
        ledger_report.purchase_report()
        ledger_report.low_stock_alerts()
        ledger_report.sales_vs_purchases()

        for product_id, stock in before.items():
            self.assertEqual(stock_ledger.query(product_id=product_id), stock)
        self.assertEqual(StockMovement.objects.count(), movements)

    def test_low_stock_report_command(self):
        out = StringIO()
        call_command("low_stock_report", "--threshold", "11", stdout=out)

        output = out.getvalue()
        self.assertIn("USB-C", output)
        self.assertIn("BAT-004", output)
        self.assertNotIn("TSH-100", output)


class ReportApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(username="manager", password="pass")
        Product.objects.create(product_code="LOW-1", name="Low", stock=1)

    def test_requires_authentication(self):
        response = self.client.get("/api/reports/dashboard/")
        self.assertIn(
            response.status_code,
            (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN),
        )

    def test_all_report_endpoints_respond(self):
        self.client.force_authenticate(self.user)

        for name in (
            "dashboard",
            "stock",
            "sales",
            "purchases",
            "top-products",
            "low-stock-alerts",
            "sales-vs-purchases",
        ):
            response = self.client.get(f"/api/reports/{name}/")
            self.assertEqual(response.status_code, status.HTTP_200_OK, name)

    def test_low_stock_alerts_payload(self):
        self.client.force_authenticate(self.user)

        response = self.client.get("/api/reports/low-stock-alerts/", {"threshold": 5})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["threshold"], 5)
        self.assertEqual(response.data["count"], 1)

    def test_invalid_date_returns_400(self):
        self.client.force_authenticate(self.user)

        response = self.client.get("/api/reports/sales/", {"start_date": "03/01/2024"})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
