# products/views/errors.py

"""
API ERROR NORMALIZATION

Maps inventory domain errors to HTTP responses.
Shared by products, sales and purchases views.
"""

from rest_framework import status
from rest_framework.response import Response

from products.services.exceptions import (
    DuplicateIdentifierError,
    InsufficientStockError,
    InvalidTransitionError,
    InventoryServiceError,
    LineItemValidationError,
    NotFoundError,
)

ERROR_STATUS = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    DuplicateIdentifierError: status.HTTP_409_CONFLICT,
    InsufficientStockError: status.HTTP_409_CONFLICT,
    InvalidTransitionError: status.HTTP_400_BAD_REQUEST,
    LineItemValidationError: status.HTTP_400_BAD_REQUEST,
}


def service_error_response(exc: InventoryServiceError) -> Response:
    http_status = ERROR_STATUS.get(type(exc), status.HTTP_400_BAD_REQUEST)
    body = {"detail": str(exc)}

    if isinstance(exc, InsufficientStockError):
        body["product_id"] = str(exc.product_id)
        body["requested"] = exc.requested
        body["available"] = exc.available

    return Response(body, status=http_status)
