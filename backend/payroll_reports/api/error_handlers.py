"""Error Handlers — map exceptions raised under the report routes to JSON envelopes.

Invariants:
    - Every error body has the shape {"error": {code, message, category, severity, ...}}
    - 4xx domain errors log at WARNING, 5xx at ERROR
    - Request validation failures (bad body, bad query, missing X-Requester-Id)
      answer 400 VALIDATION_ERROR with one detail per offending field
    - Unhandled exceptions answer 500 INTERNAL_ERROR without the exception text

Design Decisions:
    - Handlers are plain module functions wired with add_exception_handler, so
      tests can call them directly without building an app
"""

import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from payroll_reports.core.errors import (
    ErrorCategory, ErrorSeverity, PayrollReportError,
)

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PayrollReportError, handle_payroll_report_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)


async def handle_payroll_report_error(
    request: Request, exc: PayrollReportError,
) -> JSONResponse:
    level = logging.ERROR if exc.http_status >= 500 else logging.WARNING
    logger.log(
        level, f"{exc.code} on {request.method} {request.url.path}: {exc.message}",
        extra={
            "error_code": exc.code,
            "path": request.url.path,
            "report_id": exc.context.report_id,
            "report_kind": exc.context.report_kind,
        },
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    details = [_field_problem(problem) for problem in exc.errors()]
    logger.warning(
        f"Rejected request to {request.url.path}: "
        f"{', '.join(d['field'] for d in details)}",
        extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_envelope(
            "VALIDATION_ERROR", "Invalid request data",
            ErrorCategory.VALIDATION, ErrorSeverity.ERROR, details=details,
        ),
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled {type(exc).__name__} on {request.method} {request.url.path}",
        extra={"error_code": "INTERNAL_ERROR", "path": request.url.path},
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_envelope(
            "INTERNAL_ERROR", "An unexpected error occurred",
            ErrorCategory.INTERNAL, ErrorSeverity.CRITICAL,
        ),
    )


def _field_problem(problem: dict) -> dict:
    # loc is ("body", "month") / ("header", "X-Requester-Id") / ("query", "limit")
    return {
        "field": ".".join(str(part) for part in problem["loc"]),
        "message": problem["msg"],
        "type": problem["type"],
    }


def _envelope(
    code: str,
    message: str,
    category: ErrorCategory,
    severity: ErrorSeverity,
    **extra,
) -> dict:
    return {
        "error": {
            "code": code,
            "message": message,
            "category": category.value,
            "severity": severity.value,
            "retryable": False,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            **extra,
        },
    }
