# sales/models/__init__.py

"""
SALES MODELS PACKAGE EXPORTS

Purpose:
- Central export surface for sales app models.
"""

from .customer import Customer
from .order import Order
from .order_line_item import OrderLineItem

__all__ = [
    "Customer",
    "Order",
    "OrderLineItem",
]
