# products/tests/test_stock.py

import uuid
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from products.models import Product, StockMovement
from products.services import stock_ledger
from products.services.exceptions import (
    InsufficientStockError,
    LineItemValidationError,
    NotFoundError,
)

User = get_user_model()


class StockLedgerTests(TestCase):
    """
    Stock ledger tests.

    GUARANTEES:
    - Debits never drive stock below zero
    - Failed debits write nothing
    - Every applied mutation leaves exactly one audit row
    - Products are isolated from each other
    """

    def setUp(self):
        self.product = Product.objects.create(
            product_code="TSH-100",
            name="Cotton T-Shirt",
            buying_price=Decimal("50.00"),
            selling_price=Decimal("100.00"),
            stock=10,
        )
        self.other = Product.objects.create(
            product_code="NBK-400",
            name="Notebook A5",
            stock=4,
        )

    def test_debit_reduces_stock(self):
        after = stock_ledger.debit(
            product_id=self.product.id,
            quantity=4,
            reason=StockMovement.Reason.ORDER_COMPLETION,
            reference="ORDER:INV-1",
        )

        self.assertEqual(after, 6)
        self.assertEqual(stock_ledger.query(product_id=self.product.id), 6)

    def test_debit_exactly_all_stock_reaches_zero(self):
        after = stock_ledger.debit(
            product_id=self.product.id,
            quantity=10,
            reason=StockMovement.Reason.ORDER_COMPLETION,
        )
        self.assertEqual(after, 0)

    def test_insufficient_debit_raises_and_writes_nothing(self):
        with self.assertRaises(InsufficientStockError) as ctx:
            stock_ledger.debit(
                product_id=self.product.id,
                quantity=11,
                reason=StockMovement.Reason.ORDER_COMPLETION,
            )

        err = ctx.exception
        self.assertEqual(err.requested, 11)
        self.assertEqual(err.available, 10)
        self.assertIn("Requested: 11, Available: 10", str(err))

        self.assertEqual(stock_ledger.query(product_id=self.product.id), 10)
        self.assertFalse(StockMovement.objects.filter(product=self.product).exists())

    def test_credit_has_no_upper_bound(self):
        after = stock_ledger.credit(
            product_id=self.product.id,
            quantity=1_000_000,
            reason=StockMovement.Reason.PURCHASE_RECEIPT,
        )
        self.assertEqual(after, 1_000_010)

    def test_non_positive_or_fractional_quantities_rejected(self):
        for bad in (0, -3, 1.5, "2", True):
            with self.assertRaises(LineItemValidationError):
                stock_ledger.debit(
                    product_id=self.product.id,
                    quantity=bad,
                    reason=StockMovement.Reason.ORDER_COMPLETION,
                )

        self.assertEqual(stock_ledger.query(product_id=self.product.id), 10)

    def test_unknown_product_is_not_found(self):
        with self.assertRaises(NotFoundError):
            stock_ledger.query(product_id=uuid.uuid4())

        with self.assertRaises(NotFoundError):
            stock_ledger.credit(
                product_id=uuid.uuid4(),
                quantity=1,
                reason=StockMovement.Reason.PURCHASE_RECEIPT,
            )

    def test_products_are_isolated(self):
        stock_ledger.debit(
            product_id=self.product.id,
            quantity=3,
            reason=StockMovement.Reason.ORDER_COMPLETION,
        )
        self.assertEqual(stock_ledger.query(product_id=self.other.id), 4)

    def test_movements_reconcile_with_stock(self):
        stock_ledger.credit(
            product_id=self.product.id,
            quantity=5,
            reason=StockMovement.Reason.PURCHASE_RECEIPT,
        )
        stock_ledger.debit(
            product_id=self.product.id,
            quantity=8,
            reason=StockMovement.Reason.ORDER_COMPLETION,
        )
        stock_ledger.credit(
            product_id=self.product.id,
            quantity=2,
            reason=StockMovement.Reason.ORDER_CANCELLATION,
        )

        movements = StockMovement.objects.filter(product=self.product)
        self.assertEqual(movements.count(), 3)

        net = sum(m.signed_quantity for m in movements)
        self.assertEqual(10 + net, stock_ledger.query(product_id=self.product.id))

        debit = movements.get(reason=StockMovement.Reason.ORDER_COMPLETION)
        self.assertEqual(debit.movement_type, StockMovement.MovementType.OUT)
        self.assertEqual(debit.stock_after, 7)

        restock = movements.get(reason=StockMovement.Reason.ORDER_CANCELLATION)
        self.assertEqual(restock.stock_after, 9)

    def test_movements_are_immutable(self):
        stock_ledger.credit(
            product_id=self.product.id,
            quantity=1,
            reason=StockMovement.Reason.PURCHASE_RECEIPT,
        )
        movement = StockMovement.objects.get(product=self.product)

        movement.quantity = 99
        with self.assertRaises(ValidationError):
            movement.save()

        with self.assertRaises(ValidationError):
            movement.delete()

    def test_reason_direction_mismatch_rejected(self):
        with self.assertRaises(ValidationError):
            StockMovement.objects.create(
                product=self.product,
                movement_type=StockMovement.MovementType.IN,
                reason=StockMovement.Reason.PURCHASE_RETURN,
                quantity=1,
                stock_after=9,
            )


class ProductStockApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(username="clerk", password="pass")
        self.product = Product.objects.create(
            product_code="BAT-004",
            name="AA Batteries",
            selling_price=Decimal("50.00"),
            stock=7,
        )

    def test_anonymous_request_rejected(self):
        response = self.client.get(f"/api/products/{self.product.id}/stock/")
        self.assertIn(
            response.status_code,
            (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN),
        )

    def test_stock_query_endpoint(self):
        self.client.force_authenticate(self.user)

        response = self.client.get(f"/api/products/{self.product.id}/stock/")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["stock"], 7)
        self.assertEqual(response.data["product_code"], "BAT-004")

    def test_stock_query_unknown_product(self):
        self.client.force_authenticate(self.user)

        response = self.client.get(f"/api/products/{uuid.uuid4()}/stock/")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_product_list_is_read_only(self):
        self.client.force_authenticate(self.user)

        listing = self.client.get("/api/products/")
        self.assertEqual(listing.status_code, status.HTTP_200_OK)

        response = self.client.post("/api/products/", {"name": "x"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)
