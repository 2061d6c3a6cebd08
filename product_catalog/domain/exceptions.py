"""Domain exceptions.

All domain-level errors raised by the catalog. Each error knows how it is
presented at the HTTP boundary through ``to_problem_detail``.
"""

from typing import Any
from uuid import UUID


class DomainError(Exception):
    """Base class for all domain exceptions.

    All domain errors should inherit from this class to allow
    catching domain-specific errors at the application layer.
    """

    status_code: int = 500
    title: str = "Product service internal server error."

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize domain error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_problem_detail(self) -> dict[str, Any]:
        """Render the error as problem-detail fields.

        Subclasses override ``status_code`` and ``title``; the base
        rendering never exposes the message of an unexpected failure.

        Returns:
            Dictionary with ``status``, ``title`` and ``detail``.
        """
        return {
            "status": self.status_code,
            "title": self.title,
            "detail": None,
        }


# ============================================================================
# Product Errors
# ============================================================================


class ProductNotFoundError(DomainError):
    """Raised when no product has the requested id."""

    status_code = 422
    title = "Product not found."

    def __init__(self, product_id: UUID | str) -> None:
        """Initialize product not found error.

        Args:
            product_id: The id that has no matching product.
        """
        super().__init__(
            f"Product {product_id} not found",
            details={"product_id": str(product_id)},
        )
        self.product_id = product_id

    def to_problem_detail(self) -> dict[str, Any]:
        return {
            "status": self.status_code,
            "title": self.title,
            "detail": self.message,
        }


# ============================================================================
# Event Errors
# ============================================================================


class EventPublishError(DomainError):
    """Raised when an event cannot be handed to the transport."""

    def __init__(self, event_type: str, reason: str) -> None:
        """Initialize event publish error.

        Args:
            event_type: Type of the event that was dropped.
            reason: Why the transport refused it.
        """
        super().__init__(
            f"Could not publish {event_type}: {reason}",
            details={"event_type": event_type, "reason": reason},
        )
