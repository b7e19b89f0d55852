# purchases/tests/test_returns.py

from __future__ import annotations

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from products.models import Product, StockMovement
from products.services import stock_ledger
from products.services.exceptions import InvalidTransitionError
from purchases.models import Purchase, Supplier
from purchases.services.purchase_service import create_purchase, transition_purchase
from purchases.services.returns import commit_purchase_return, preview_purchase_return
from sales.models import Customer
from sales.services.order_service import create_order, transition_order

User = get_user_model()


class PurchaseReturnTests(TestCase):
    """
    Stock-constrained purchase returns.

    GUARANTEES:
    - Preview is read-only and repeatable
    - Commit never debits more than min(purchased, live stock)
    - A returned purchase cannot be returned again
    """

    def setUp(self):
        self.supplier = Supplier.objects.create(name="Northwind Wholesale")
        self.customer = Customer.objects.create(name="Walk-in")
        self.product = Product.objects.create(
            product_code="LMP-500",
            name="Desk Lamp",
            buying_price=Decimal("90.00"),
            selling_price=Decimal("120.00"),
            stock=0,
        )

        self.purchase = create_purchase(
            supplier_id=self.supplier.id,
            purchase_no="PO-001",
            items=[{"product_id": self.product.id, "quantity": 10, "unit_cost": "90.00"}],
        )
        transition_purchase(purchase_id=self.purchase.id, status="completed")

    def _stock(self):
        return stock_ledger.query(product_id=self.product.id)

    def _sell(self, quantity, invoice_no="INV-001"):
        order = create_order(
            customer_id=self.customer.id,
            invoice_no=invoice_no,
            items=[{"product_id": self.product.id, "quantity": quantity, "unit_cost": "120.00"}],
        )
        transition_order(order_id=order.id, status="completed")
        return order

    def test_partial_return_after_sale(self):
        self.assertEqual(self._stock(), 10)
        self._sell(4)
        self.assertEqual(self._stock(), 6)

        preview = preview_purchase_return(purchase_id=self.purchase.id)
        line = preview.items[0]
        self.assertEqual(line.purchased_quantity, 10)
        self.assertEqual(line.current_stock, 6)
        self.assertEqual(line.returnable_quantity, 6)
        self.assertFalse(line.can_fully_return)
        self.assertEqual(line.potential_refund, Decimal("540.00"))
        self.assertEqual(preview.total_potential_refund, Decimal("540.00"))

        result = commit_purchase_return(purchase_id=self.purchase.id)

        self.assertEqual(self._stock(), 0)
        self.assertEqual(result.total_refund_amount, preview.total_potential_refund)
        self.assertEqual(result.total_items_processed, 1)
        self.assertEqual(result.partially_returned_items, 1)
        self.assertEqual(result.fully_returned_items, 0)

        self.purchase.refresh_from_db()
        self.assertEqual(self.purchase.status, Purchase.STATUS_RETURNED)
        self.assertEqual(self.purchase.total_refund_amount, Decimal("540.00"))
        self.assertIsNotNone(self.purchase.returned_at)

        item = self.purchase.items.get()
        self.assertTrue(item.return_processed)
        self.assertEqual(item.returned_quantity, 6)
        self.assertEqual(item.refund_amount, Decimal("540.00"))

    def test_full_return_when_stock_untouched(self):
        result = commit_purchase_return(purchase_id=self.purchase.id)

        self.assertEqual(result.fully_returned_items, 1)
        self.assertEqual(result.total_refund_amount, Decimal("900.00"))
        self.assertEqual(self._stock(), 0)

    def test_preview_is_read_only(self):
        self._sell(3)
        movements_before = StockMovement.objects.count()

        first = preview_purchase_return(purchase_id=self.purchase.id)
        for _ in range(3):
            again = preview_purchase_return(purchase_id=self.purchase.id)
            self.assertEqual(again, first)

        self.assertEqual(self._stock(), 7)
        self.assertEqual(StockMovement.objects.count(), movements_before)
        self.assertFalse(self.purchase.items.get().return_processed)

    def test_commit_reclamps_when_stock_moves_after_preview(self):
        preview = preview_purchase_return(purchase_id=self.purchase.id)
        self.assertEqual(preview.items[0].returnable_quantity, 10)

        self._sell(7)

        result = commit_purchase_return(purchase_id=self.purchase.id)

        self.assertEqual(result.details[0].returned_quantity, 3)
        self.assertEqual(result.total_refund_amount, Decimal("270.00"))
        self.assertEqual(self._stock(), 0)

    def test_zero_stock_return_skips_debit(self):
        self._sell(10)
        debits_before = StockMovement.objects.filter(
            reason=StockMovement.Reason.PURCHASE_RETURN
        ).count()

        result = commit_purchase_return(purchase_id=self.purchase.id)

        self.assertEqual(result.details[0].returned_quantity, 0)
        self.assertEqual(result.total_refund_amount, Decimal("0.00"))
        self.assertEqual(result.fully_returned_items, 0)
        self.assertEqual(result.partially_returned_items, 0)
        self.assertEqual(
            StockMovement.objects.filter(reason=StockMovement.Reason.PURCHASE_RETURN).count(),
            debits_before,
        )

    def test_second_return_rejected(self):
        commit_purchase_return(purchase_id=self.purchase.id)

        with self.assertRaises(InvalidTransitionError):
            commit_purchase_return(purchase_id=self.purchase.id)

        with self.assertRaises(InvalidTransitionError):
            preview_purchase_return(purchase_id=self.purchase.id)

    def test_returned_purchase_cannot_transition(self):
        commit_purchase_return(purchase_id=self.purchase.id)

        with self.assertRaises(InvalidTransitionError):
            transition_purchase(purchase_id=self.purchase.id, status="completed")

    def test_pending_purchase_cannot_be_returned(self):
        pending = create_purchase(
            supplier_id=self.supplier.id,
            purchase_no="PO-002",
            items=[{"product_id": self.product.id, "quantity": 1, "unit_cost": "90.00"}],
        )

        with self.assertRaises(InvalidTransitionError):
            preview_purchase_return(purchase_id=pending.id)

        with self.assertRaises(InvalidTransitionError):
            commit_purchase_return(purchase_id=pending.id)

    def test_lines_sharing_a_product_split_remaining_stock(self):
        split = create_purchase(
            supplier_id=self.supplier.id,
            purchase_no="PO-003",
            items=[
                {"product_id": self.product.id, "quantity": 5, "unit_cost": "10.00"},
                {"product_id": self.product.id, "quantity": 5, "unit_cost": "10.00"},
            ],
        )
        transition_purchase(purchase_id=split.id, status="completed")
        self.assertEqual(self._stock(), 20)

        self._sell(14)
        self.assertEqual(self._stock(), 6)

        preview = preview_purchase_return(purchase_id=split.id)
        self.assertEqual([row.returnable_quantity for row in preview.items], [5, 1])
        self.assertEqual(
            [row.can_fully_return for row in preview.items], [True, False]
        )
        self.assertEqual(preview.total_potential_refund, Decimal("60.00"))

        result = commit_purchase_return(purchase_id=split.id)

        self.assertEqual(
            [row.returned_quantity for row in result.details],
            [row.returnable_quantity for row in preview.items],
        )
        self.assertEqual(result.total_refund_amount, preview.total_potential_refund)
        self.assertEqual(result.fully_returned_items, 1)
        self.assertEqual(result.partially_returned_items, 1)
        self.assertEqual(self._stock(), 0)


class PurchaseApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(username="buyer", password="pass")
        self.client.force_authenticate(self.user)

        self.supplier = Supplier.objects.create(name="Northwind Wholesale")
        self.product = Product.objects.create(
            product_code="TSH-100",
            name="Cotton T-Shirt",
            buying_price=Decimal("50.00"),
            stock=2,
        )

    def _create(self, purchase_no="PO-API-1"):
        return self.client.post(
            "/api/purchases/",
            {
                "supplier_id": str(self.supplier.id),
                "purchase_no": purchase_no,
                "items": [
                    {"product_id": str(self.product.id), "quantity": 5, "unit_cost": "50.00"},
                ],
            },
            format="json",
        )

    def test_create_complete_preview_and_return(self):
        response = self._create()
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        purchase_id = response.data["id"]

        response = self.client.patch(
            f"/api/purchases/{purchase_id}/status/", {"status": "approved"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["status"], "completed")

        response = self.client.get(f"/api/purchases/{purchase_id}/return-preview/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["items"][0]["returnable_quantity"], 5)
        self.assertEqual(response.data["total_potential_refund"], "250.00")

        response = self.client.post(f"/api/purchases/{purchase_id}/return/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["total_refund_amount"], "250.00")
        self.assertEqual(response.data["summary"]["fully_returned_items"], 1)

        self.product.refresh_from_db()
        self.assertEqual(self.product.stock, 2)

    def test_status_returned_is_rejected(self):
        purchase_id = self._create().data["id"]

        response = self.client.patch(
            f"/api/purchases/{purchase_id}/status/", {"status": "returned"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_duplicate_purchase_no_returns_409(self):
        self._create(purchase_no="PO-DUP")
        response = self._create(purchase_no="PO-DUP")
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_supplier_create_and_list(self):
        response = self.client.post(
            "/api/purchases/suppliers/", {"name": "New Supplier"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

        response = self.client.get("/api/purchases/suppliers/")
        self.assertEqual(len(response.data), 2)
