# products/services/exceptions.py

"""
INVENTORY SERVICE ERRORS

Centralized domain errors shared by the stock ledger and the
order / purchase lifecycles.
"""


class InventoryServiceError(Exception):
    """Base exception for all inventory service failures."""


class NotFoundError(InventoryServiceError):
    """Raised when an order, purchase, product, customer or supplier id is unknown."""


class DuplicateIdentifierError(InventoryServiceError):
    """Raised when an invoice number or purchase number is reused."""


class InvalidTransitionError(InventoryServiceError):
    """Raised when a status change is not allowed by the lifecycle rules."""


class LineItemValidationError(InventoryServiceError):
    """Raised on empty line items, zero/negative quantities or bad prices."""


class InsufficientStockError(InventoryServiceError):
    """Raised when a debit exceeds the product's available stock."""

    def __init__(self, *, product_id, product_name: str, requested: int, available: int):
        self.product_id = product_id
        self.product_name = product_name
        self.requested = int(requested)
        self.available = int(available)
        super().__init__(
            f"Insufficient stock for {product_name}. "
            f"Requested: {self.requested}, Available: {self.available}"
        )
