"""Domain events for the product catalog.

Events are immutable snapshots handed to the event channel. They carry no
timestamp of their own; consumers stamp them on receipt.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, ClassVar
from uuid import UUID, uuid4


# ============================================================================
# Domain Event Base
# ============================================================================


@dataclass(frozen=True)
class DomainEvent(ABC):
    """Base class for domain events.

    Attributes:
        event_id: Unique identifier for this event instance.
        event_type: String identifier for the event type (set by subclass).
    """

    event_type: ClassVar[str]

    event_id: UUID = field(default_factory=uuid4)

    def to_dict(self) -> dict[str, Any]:
        """Convert event to dictionary for serialization.

        Returns:
            Dictionary representation of the event.
        """
        return {
            "event_id": str(self.event_id),
            "event_type": self.event_type,
            "payload": self.payload(),
        }

    @abstractmethod
    def payload(self) -> dict[str, Any]:
        """Get event-specific payload data.

        Returns:
            Dictionary with event-specific data.
        """


# ============================================================================
# Product Events
# ============================================================================


@dataclass(frozen=True)
class ProductCreated(DomainEvent):
    """Event raised once a new product has been persisted."""

    event_type: ClassVar[str] = "product.created"

    product_id: str = ""
    name: str = ""
    price: Decimal = Decimal("0.00")
    category: str = ""

    def payload(self) -> dict[str, Any]:
        """Get the product snapshot."""
        return {
            "id": self.product_id,
            "name": self.name,
            "price": str(self.price),
            "category": self.category,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ProductCreated":
        """Rebuild an event from its serialized form.

        Args:
            data: Output of ``to_dict``.

        Returns:
            The decoded event.

        Raises:
            ValueError: If the data is not a product.created event.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Expected an object, got {type(data).__name__}")
        if data.get("event_type") != cls.event_type:
            raise ValueError(f"Unexpected event type: {data.get('event_type')!r}")
        try:
            payload = data["payload"]
            return cls(
                event_id=UUID(data["event_id"]),
                product_id=str(payload["id"]),
                name=payload["name"],
                price=Decimal(payload["price"]),
                category=payload["category"],
            )
        except (KeyError, TypeError, AttributeError, ArithmeticError) as e:
            raise ValueError(f"Malformed product.created event: {e}") from e
