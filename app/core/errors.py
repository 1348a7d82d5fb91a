from typing import Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse


class MarketplaceError(Exception):
    """Base for typed domain failures.

    Services raise these; the HTTP layer turns them into
    ``{"detail": ..., "kind": ...}`` responses with ``status_code``.
    """

    kind = "MarketplaceError"
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Request could not be processed"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)
        self.detail = message or self.message


class Unauthenticated(MarketplaceError):
    kind = "Unauthenticated"
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Please sign in first"


class Forbidden(MarketplaceError):
    kind = "Forbidden"
    status_code = status.HTTP_403_FORBIDDEN
    message = "Not authorized"


class NotFound(MarketplaceError):
    kind = "NotFound"
    status_code = status.HTTP_404_NOT_FOUND
    message = "Resource not found"


class InvalidInput(MarketplaceError):
    kind = "InvalidInput"
    status_code = 422
    message = "Invalid input"


class AlreadyOwned(MarketplaceError):
    kind = "AlreadyOwned"
    status_code = status.HTTP_409_CONFLICT
    message = "You already own this product"


class SelfPurchaseForbidden(MarketplaceError):
    kind = "SelfPurchaseForbidden"
    status_code = status.HTTP_400_BAD_REQUEST
    message = "You cannot purchase your own product"


class SplitOverAllocated(MarketplaceError):
    kind = "SplitOverAllocated"
    status_code = 422
    message = "Split percentages must not exceed 100%"


class UnknownCollaborator(MarketplaceError):
    kind = "UnknownCollaborator"
    status_code = 422
    message = "Collaborator not found"


class PurchaseRequired(MarketplaceError):
    kind = "PurchaseRequired"
    status_code = status.HTTP_403_FORBIDDEN
    message = "Purchase the product before reviewing it"


class AlreadyReviewed(MarketplaceError):
    kind = "AlreadyReviewed"
    status_code = status.HTTP_409_CONFLICT
    message = "You have already reviewed this product"


class InvalidRating(MarketplaceError):
    kind = "InvalidRating"
    status_code = 422
    message = "Rating must be between 1 and 5"


class StorageFailure(MarketplaceError):
    kind = "StorageFailure"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Storage operation failed"


async def marketplace_error_handler(request: Request, exc: MarketplaceError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "kind": exc.kind},
    )
