"""API schemas shared by the HTTP boundary.

Pydantic models for error responses. Product shapes live in
``product_catalog.catalog.schemas``.
"""

from pydantic import BaseModel, Field


class FieldViolation(BaseModel):
    """A single field-level validation failure."""

    field: str = Field(..., description="Field that caused the error")
    message: str = Field(..., description="Error message")


class ProblemDetail(BaseModel):
    """Problem-detail error body (RFC 7807).

    All API errors follow this format for consistency.
    """

    type: str = Field(default="about:blank", description="Problem type URI")
    title: str = Field(..., description="Short summary of the problem")
    status: int = Field(..., description="HTTP status code")
    detail: str | None = Field(default=None, description="Explanation of this occurrence")
    instance: str | None = Field(default=None, description="Request path")
    request_id: str | None = Field(
        default=None, description="Request ID for correlation"
    )
    errors: list[FieldViolation] = Field(
        default_factory=list, description="Field-level violations"
    )
