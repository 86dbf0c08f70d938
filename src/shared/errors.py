"""Error taxonomy shared by every context, and its HTTP mapping.

Four families:

- ``InputError``: malformed requests; rejected before any external call (400).
- ``ExternalServiceError``: a collaborator (geocoding, routing, carrier,
  payout processor) failed or timed out; the caller may retry (502).
- ``ConflictError``: the request collides with persisted state (409).
  Not-found conditions use Protean's ``ObjectNotFoundError`` (404).
- Non-fatal degradations are logged where they happen and never raised.

Protean's ``ValidationError`` remains the error for field-level and state
machine violations inside aggregates and is mapped to 400.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError, ValidationError
from protean.integrations.fastapi import register_exception_handlers

logger = structlog.get_logger(__name__)

RETRY_LATER_HINT = "A dependent service is unavailable. Please retry later."


class MarketplaceError(Exception):
    """Base class for application errors carrying a human-readable message."""

    status_code = 500
    error_type = "marketplace_error"

    def __init__(self, message: str, **context) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self) -> dict:
        payload = {"type": self.error_type, "message": self.message}
        payload.update(self.context)
        return payload


# ---------------------------------------------------------------------------
# Input validation
# ---------------------------------------------------------------------------
class InputError(MarketplaceError):
    status_code = 400
    error_type = "invalid_input"


class InvalidShippingInputError(InputError):
    error_type = "invalid_shipping_input"


class InvalidCoordinatesError(InputError):
    error_type = "invalid_coordinates"


class SellerIdentityConflictError(InputError):
    error_type = "seller_identity_conflict"


class TotalMismatchError(InputError):
    error_type = "total_mismatch"


# ---------------------------------------------------------------------------
# External dependencies
# ---------------------------------------------------------------------------
class ExternalServiceError(MarketplaceError):
    status_code = 502
    error_type = "external_service_error"
    retry_after_seconds = 30

    def to_dict(self) -> dict:
        payload = super().to_dict()
        payload["hint"] = RETRY_LATER_HINT
        payload["retry_after_seconds"] = self.retry_after_seconds
        return payload


class GeoLookupError(ExternalServiceError):
    error_type = "geo_lookup_failed"


class ShippingComputationError(ExternalServiceError):
    error_type = "shipping_computation_failed"


class ShipmentBookingError(ExternalServiceError):
    error_type = "shipment_booking_failed"


class PayoutLinkError(ExternalServiceError):
    error_type = "payout_link_failed"


# ---------------------------------------------------------------------------
# Consistency
# ---------------------------------------------------------------------------
class ConflictError(MarketplaceError):
    status_code = 409
    error_type = "conflict"


class DuplicatePaymentError(ConflictError):
    error_type = "duplicate_payment"


# ---------------------------------------------------------------------------
# FastAPI wiring
# ---------------------------------------------------------------------------
def _error_response(status_code: int, payload: dict, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": payload}, headers=headers)


async def _marketplace_error_handler(request: Request, exc: MarketplaceError) -> JSONResponse:
    headers = None
    if isinstance(exc, ExternalServiceError):
        logger.warning(
            "External dependency failure",
            path=request.url.path,
            error_type=exc.error_type,
            error=exc.message,
        )
        headers = {"Retry-After": str(exc.retry_after_seconds)}
    return _error_response(exc.status_code, exc.to_dict(), headers)


async def _validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:  # noqa: ARG001
    return _error_response(
        400,
        {"type": "validation_error", "message": "Request failed validation", "fields": exc.messages},
    )


async def _not_found_handler(request: Request, exc: ObjectNotFoundError) -> JSONResponse:  # noqa: ARG001
    messages = getattr(exc, "messages", None) or {"_entity": [str(exc)]}
    return _error_response(404, {"type": "not_found", "message": "Resource not found", "details": messages})


async def _version_conflict_handler(request: Request, exc: ExpectedVersionError) -> JSONResponse:  # noqa: ARG001
    return _error_response(
        409,
        {"type": "concurrent_modification", "message": "The resource changed while processing; retry the request"},
    )


def register_error_handlers(app: FastAPI) -> None:
    """Install structured error responses on ``app``.

    Protean's defaults are registered first; the handlers below override them
    for the exception types this application raises.
    """
    register_exception_handlers(app)
    app.add_exception_handler(MarketplaceError, _marketplace_error_handler)
    app.add_exception_handler(ValidationError, _validation_error_handler)
    app.add_exception_handler(ObjectNotFoundError, _not_found_handler)
    app.add_exception_handler(ExpectedVersionError, _version_conflict_handler)
