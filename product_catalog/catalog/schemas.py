"""Request and response shapes for products.

Pydantic models that decode and validate external input and serialize
the read-only product projection.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Annotated, Any
from uuid import UUID

from pydantic import (
    AliasChoices,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    field_validator,
)

TWO_PLACES = Decimal("0.01")


def normalize_price(value: Any) -> Any:
    """Decode a raw price into a Decimal with two fraction digits.

    Accepts numbers and numeric strings and rounds half-up, so ``10``
    becomes ``10.00`` and ``19.9`` becomes ``19.90``. Values that are not
    numeric are returned unchanged for the decimal validator to reject.

    Args:
        value: Raw price from JSON or a query string.

    Returns:
        Normalized Decimal, or the original value when it is not numeric.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float, str, Decimal)):
        return value
    try:
        amount = Decimal(str(value).strip())
        if not amount.is_finite():
            return value
        return amount.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        return value


Price = Annotated[
    Decimal,
    BeforeValidator(normalize_price),
    Field(ge=0, max_digits=12, decimal_places=2),
]


class ProductRequest(BaseModel):
    """Product data accepted on create and update.

    Each field is also accepted under its Portuguese name (``nome``,
    ``preco``, ``categoria``). Unknown fields are ignored.
    """

    model_config = ConfigDict(extra="ignore")

    name: str = Field(
        ...,
        max_length=255,
        validation_alias=AliasChoices("name", "nome"),
        description="Product name",
    )
    price: Price = Field(
        ...,
        validation_alias=AliasChoices("price", "preco"),
        description="Price, normalized to two decimal places",
    )
    category: str = Field(
        ...,
        max_length=255,
        validation_alias=AliasChoices("category", "categoria"),
        description="Product category",
    )

    @field_validator("name", "category")
    @classmethod
    def not_blank(cls, value: str) -> str:
        """Reject empty or whitespace-only text."""
        if not value.strip():
            raise ValueError("must not be blank")
        return value


class ProductResponse(BaseModel):
    """Read-only projection of a stored product."""

    id: UUID = Field(..., description="Product identifier")
    name: str = Field(..., description="Product name")
    price: Decimal = Field(..., description="Price with two decimal places")
    category: str = Field(..., description="Product category")
