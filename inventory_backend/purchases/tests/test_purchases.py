# purchases/tests/test_purchases.py

from __future__ import annotations

import uuid
from decimal import Decimal

from django.test import TestCase

from products.models import Product, StockMovement
from products.services import stock_ledger
from products.services.exceptions import (
    DuplicateIdentifierError,
    InvalidTransitionError,
    LineItemValidationError,
    NotFoundError,
)
from purchases.models import Purchase, PurchaseLineItem, Supplier
from purchases.services.purchase_service import create_purchase, transition_purchase


class PurchaseTestBase(TestCase):
    def setUp(self):
        self.supplier = Supplier.objects.create(name="Northwind Wholesale", shop_name="Northwind")
        self.product = Product.objects.create(
            product_code="LMP-500",
            name="Desk Lamp",
            buying_price=Decimal("90.00"),
            selling_price=Decimal("120.00"),
            stock=0,
        )

    def _create(self, purchase_no="PO-001", quantity=10, unit_cost="90.00", product=None):
        return create_purchase(
            supplier_id=self.supplier.id,
            purchase_no=purchase_no,
            items=[
                {
                    "product_id": (product or self.product).id,
                    "quantity": quantity,
                    "unit_cost": unit_cost,
                }
            ],
        )

    def _stock(self, product=None):
        return stock_ledger.query(product_id=(product or self.product).id)


class CreatePurchaseTests(PurchaseTestBase):
    """
    GUARANTEES:
    - Creation never credits stock
    - total_amount = sum of line totals
    - Duplicate purchase numbers are rejected
    """

    def test_create_purchase_pending_without_stock_effect(self):
        purchase = self._create(quantity=10, unit_cost="90.00")

        self.assertEqual(purchase.status, Purchase.STATUS_PENDING)
        self.assertEqual(purchase.total_amount, Decimal("900.00"))
        self.assertEqual(self._stock(), 0)
        self.assertFalse(purchase.items.get().stock_applied)

    def test_duplicate_purchase_no_rejected(self):
        self._create(purchase_no="PO-DUP")

        with self.assertRaises(DuplicateIdentifierError):
            self._create(purchase_no="PO-DUP")

        self.assertEqual(Purchase.objects.count(), 1)
        self.assertEqual(PurchaseLineItem.objects.count(), 1)

    def test_invalid_lines_rejected(self):
        with self.assertRaises(LineItemValidationError):
            create_purchase(supplier_id=self.supplier.id, purchase_no="PO-E", items=[])

        with self.assertRaises(LineItemValidationError):
            self._create(purchase_no="PO-Z", quantity=0)

        self.assertFalse(Purchase.objects.exists())

    def test_unknown_supplier(self):
        with self.assertRaises(NotFoundError):
            create_purchase(
                supplier_id=uuid.uuid4(),
                purchase_no="PO-X",
                items=[{"product_id": self.product.id, "quantity": 1, "unit_cost": "1.00"}],
            )


class TransitionPurchaseTests(PurchaseTestBase):
    """
    GUARANTEES:
    - Completing credits each line exactly once
    - "approved" behaves as completed
    - completed -> pending and plain "returned" are rejected
    """

    def test_complete_credits_stock_once(self):
        purchase = self._create(quantity=10)

        transition_purchase(purchase_id=purchase.id, status="completed")
        transition_purchase(purchase_id=purchase.id, status="completed")

        purchase.refresh_from_db()
        self.assertEqual(purchase.status, Purchase.STATUS_COMPLETED)
        self.assertIsNotNone(purchase.completed_at)
        self.assertEqual(self._stock(), 10)
        self.assertTrue(purchase.items.get().stock_applied)
        self.assertEqual(
            StockMovement.objects.filter(reason=StockMovement.Reason.PURCHASE_RECEIPT).count(),
            1,
        )

    def test_approved_is_alias_for_completed(self):
        purchase = self._create(quantity=4)

        transition_purchase(purchase_id=purchase.id, status="approved")

        purchase.refresh_from_db()
        self.assertEqual(purchase.status, Purchase.STATUS_COMPLETED)
        self.assertEqual(self._stock(), 4)

    def test_completed_to_pending_rejected(self):
        purchase = self._create()
        transition_purchase(purchase_id=purchase.id, status="completed")

        with self.assertRaises(InvalidTransitionError):
            transition_purchase(purchase_id=purchase.id, status="pending")

        self.assertEqual(self._stock(), 10)

    def test_pending_to_returned_rejected(self):
        purchase = self._create()

        with self.assertRaises(InvalidTransitionError):
            transition_purchase(purchase_id=purchase.id, status="returned")

        purchase.refresh_from_db()
        self.assertEqual(purchase.status, Purchase.STATUS_PENDING)
        self.assertEqual(self._stock(), 0)

    def test_unknown_purchase(self):
        with self.assertRaises(NotFoundError):
            transition_purchase(purchase_id=uuid.uuid4(), status="completed")
