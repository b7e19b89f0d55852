# sales/tests/test_sales.py

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.test import TestCase

from products.models import Product
from products.services.exceptions import InvalidTransitionError
from sales.models import Customer, Order, OrderLineItem
from sales.services.order_lifecycle import can_transition, validate_transition


class OrderLifecycleRuleTests(TestCase):
    """
    Order state machine rules (pure, no stock).

    GUARANTEES:
    - Only the documented edges are allowed
    - cancelled is terminal
    - Same-state requests are accepted as no-ops
    """

    def test_allowed_edges(self):
        allowed = [
            ("pending", "processing"),
            ("pending", "completed"),
            ("pending", "cancelled"),
            ("processing", "completed"),
            ("processing", "cancelled"),
            ("completed", "cancelled"),
        ]
        for from_status, to_status in allowed:
            self.assertTrue(
                can_transition(from_status=from_status, to_status=to_status),
                f"{from_status} -> {to_status} should be allowed",
            )

    def test_rejected_edges(self):
        rejected = [
            ("processing", "pending"),
            ("completed", "pending"),
            ("completed", "processing"),
            ("cancelled", "pending"),
            ("cancelled", "completed"),
        ]
        for from_status, to_status in rejected:
            self.assertFalse(can_transition(from_status=from_status, to_status=to_status))

    def test_validate_transition_raises_for_illegal_edge(self):
        order = Order(invoice_no="INV-X", status=Order.STATUS_CANCELLED)
        with self.assertRaises(InvalidTransitionError):
            validate_transition(order=order, target_status=Order.STATUS_COMPLETED)

    def test_validate_transition_rejects_unknown_status(self):
        order = Order(invoice_no="INV-X", status=Order.STATUS_PENDING)
        with self.assertRaises(InvalidTransitionError):
            validate_transition(order=order, target_status="returned")

    def test_same_state_is_accepted(self):
        order = Order(invoice_no="INV-X", status=Order.STATUS_CANCELLED)
        validate_transition(order=order, target_status=Order.STATUS_CANCELLED)


class OrderModelTests(TestCase):
    """
    Tests for Order / OrderLineItem immutability.
    """

    def setUp(self):
        self.customer = Customer.objects.create(name="Acme Stores")
        self.product = Product.objects.create(
            product_code="SKU-100",
            name="Cotton T-Shirt",
            selling_price=Decimal("50.00"),
            stock=20,
        )
        self.order = Order.objects.create(
            customer=self.customer,
            invoice_no="INV-100",
            subtotal_amount=Decimal("100.00"),
            tax_amount=Decimal("18.00"),
            total_amount=Decimal("118.00"),
            total_products=2,
        )
        self.item = OrderLineItem.objects.create(
            order=self.order,
            product=self.product,
            quantity=2,
            unit_cost=Decimal("50.00"),
        )

    def test_line_total_is_computed(self):
        self.assertEqual(self.item.line_total, Decimal("100.00"))

    def test_order_totals_are_immutable(self):
        self.order.total_amount = Decimal("1.00")
        self.order.subtotal_amount = Decimal("1.00")
        self.order.tax_amount = Decimal("0.00")
        with self.assertRaises(ValidationError):
            self.order.save()

    def test_total_must_equal_subtotal_plus_tax(self):
        with self.assertRaises(ValidationError):
            Order.objects.create(
                customer=self.customer,
                invoice_no="INV-101",
                subtotal_amount=Decimal("100.00"),
                tax_amount=Decimal("18.00"),
                total_amount=Decimal("100.00"),
            )

    def test_line_item_quantity_is_immutable(self):
        self.item.quantity = 5
        with self.assertRaises(ValidationError):
            self.item.save()

    def test_stock_applied_flag_is_mutable(self):
        self.item.stock_applied = True
        self.item.save(update_fields=["stock_applied"])

        self.item.refresh_from_db()
        self.assertTrue(self.item.stock_applied)

    def test_line_item_rejects_zero_quantity(self):
        with self.assertRaises(ValidationError):
            OrderLineItem.objects.create(
                order=self.order,
                product=self.product,
                quantity=0,
                unit_cost=Decimal("50.00"),
            )
        self.assertEqual(self.order.items.count(), 1)

    def test_line_item_rejects_negative_unit_cost(self):
        with self.assertRaises(ValidationError):
            OrderLineItem.objects.create(
                order=self.order,
                product=self.product,
                quantity=1,
                unit_cost=Decimal("-5.00"),
            )
        self.assertEqual(self.order.items.count(), 1)
