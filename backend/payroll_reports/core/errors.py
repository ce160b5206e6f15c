"""Payroll report errors — one hierarchy for caller mistakes, bad data, and outages.

Invariants:
    - Caller mistakes (missing/invalid parameters) are raised before any IO
    - Bad data (InvalidRecordError) and outages (RecordStoreError, DatabaseError)
      raised inside a recipe are recorded on the Report by the builder
    - to_response() never includes driver messages or stack traces

Design Decisions:
    - ErrorContext carries the identifiers a log line or client needs to find
      the affected report/payslip; it is filled in by each subclass
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class ErrorSeverity(str, Enum):
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    VALIDATION = "validation"
    DATA_QUALITY = "data_quality"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    UPSTREAM = "upstream"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Identifiers attached to an error for logs and the response envelope."""
    report_id: str | None = None
    report_kind: str | None = None
    record_id: str | None = None
    raised_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def identifiers(self) -> dict[str, str | None]:
        return {
            "report_id": self.report_id,
            "report_kind": self.report_kind,
            "record_id": self.record_id,
        }


class PayrollReportError(Exception):
    """Base class; the API error handler turns any subclass into its envelope."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
        retryable: bool = False,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context if context is not None else ErrorContext()
        self.http_status = http_status
        self.retryable = retryable

    def to_response(self) -> dict:
        body = {
            "code": self.code,
            "message": self.message,
            "category": self.category.value,
            "severity": self.severity.value,
            "retryable": self.retryable,
            "timestamp": self.context.raised_at.isoformat(),
            "context": self.context.identifiers(),
        }
        return {"error": body}


# ─── Caller mistakes (400) ───────────────────────────────────────


class MissingParameterError(PayrollReportError):
    """Recipe invoked without one or more of its required parameters."""
    def __init__(
        self, report_kind: str, missing: list[str], context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.report_kind = report_kind
        super().__init__(
            f"{report_kind} requires: {', '.join(missing)}",
            "MISSING_PARAMETER", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, ctx, 400,
        )
        self.report_kind = report_kind
        self.missing = missing


class InvalidParameterError(PayrollReportError):
    """Recipe parameter present but outside its valid domain."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_PARAMETER", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field


class InvalidRecordError(PayrollReportError):
    """Upstream payslip data violates a record invariant."""
    def __init__(self, record_id: str, reason: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.record_id = record_id
        super().__init__(
            f"Payslip '{record_id}' is malformed: {reason}",
            "INVALID_RECORD", ErrorCategory.DATA_QUALITY,
            ErrorSeverity.ERROR, ctx, 422, retryable=True,
        )
        self.record_id = record_id
        self.reason = reason


class ReportNotFoundError(PayrollReportError):
    """Requested report does not exist."""
    def __init__(self, report_id: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.report_id = report_id
        super().__init__(
            f"Report '{report_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404,
        )
        self.report_id = report_id


class ReportImmutableError(PayrollReportError):
    """Attempted to change a report that already reached a terminal status."""
    def __init__(self, report_id: str, status: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.report_id = report_id
        super().__init__(
            f"Report '{report_id}' is {status} and can no longer change",
            "REPORT_IMMUTABLE", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, ctx, 409,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class RecordStoreError(PayrollReportError):
    """Payroll record source could not be read."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Record store {operation} failed: {message}",
            "RECORD_STORE_UNAVAILABLE", ErrorCategory.UPSTREAM,
            ErrorSeverity.CRITICAL, context, 503, retryable=True,
        )
        self.operation = operation


class DatabaseError(PayrollReportError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503, retryable=True,
        )
        self.operation = operation
