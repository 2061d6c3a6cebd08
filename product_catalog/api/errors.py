"""Translation of exceptions into problem-detail responses.

Domain errors are raised by the service and translated here, once.
Request decoding failures become 400 responses listing each violated
field before the service is reached.
"""

from collections.abc import Iterable, Sequence
from typing import Any

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from product_catalog.api.schemas import FieldViolation, ProblemDetail
from product_catalog.domain.exceptions import DomainError

logger = structlog.get_logger()

PROBLEM_JSON = "application/problem+json"


def problem_response(
    request: Request,
    status_code: int,
    title: str,
    detail: str | None = None,
    errors: Sequence[FieldViolation] = (),
) -> JSONResponse:
    """Build a problem-detail response for a request.

    Args:
        request: Request being answered.
        status_code: HTTP status.
        title: Short summary.
        detail: Optional explanation.
        errors: Field violations, if any.

    Returns:
        JSONResponse with the problem-detail body.
    """
    body = ProblemDetail(
        title=title,
        status=status_code,
        detail=detail,
        instance=request.url.path,
        request_id=getattr(request.state, "request_id", None),
        errors=list(errors),
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json"),
        media_type=PROBLEM_JSON,
    )


def violations_from_errors(errors: Iterable[dict[str, Any]]) -> list[FieldViolation]:
    """Turn pydantic error dicts into field violations.

    The leading location segment (``body``, ``path``, ``query``) is dropped
    unless it is the only one.

    Args:
        errors: Output of ``RequestValidationError.errors()``.

    Returns:
        One violation per error.
    """
    violations = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ())]
        field = ".".join(loc[1:]) if len(loc) > 1 else ".".join(loc)
        violations.append(FieldViolation(field=field, message=error.get("msg", "")))
    return violations


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Translate a domain error into its problem detail."""
    problem = exc.to_problem_detail()
    if problem["status"] >= 500:
        logger.error(
            "Domain error",
            path=request.url.path,
            method=request.method,
            error=exc.message,
        )
    return problem_response(
        request,
        status_code=problem["status"],
        title=problem["title"],
        detail=problem["detail"],
    )


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Reject malformed requests with their field violations."""
    violations = violations_from_errors(exc.errors())
    logger.info(
        "Request validation failed",
        path=request.url.path,
        method=request.method,
        fields=[v.field for v in violations],
    )
    return problem_response(
        request,
        status_code=status.HTTP_400_BAD_REQUEST,
        title="Invalid request.",
        detail="One or more fields are invalid.",
        errors=violations,
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register the exception handlers on an application."""
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
