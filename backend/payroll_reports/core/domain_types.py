"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - ReportId, EmployeeId, PayslipId wrap UUIDs — never use bare UUID in domain logic
    - Money is always Decimal — never float
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from decimal import Decimal
from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

ReportId = NewType("ReportId", UUID)
EmployeeId = NewType("EmployeeId", UUID)
PayslipId = NewType("PayslipId", UUID)
RequesterId = NewType("RequesterId", str)


# ─── Value Types ─────────────────────────────────────────────────

Money = Decimal
ZERO = Decimal("0")

UNKNOWN_DEPARTMENT = "Unknown"
MIN_REPORT_YEAR = 2000
MAX_REPORT_YEAR = 2100


# ─── Enums ───────────────────────────────────────────────────────

class ReportKind(str, Enum):
    """The five report recipes — maps to DB `kind` column."""
    DEPARTMENT_SUMMARY = "department_summary"
    MONTH_END_SUMMARY = "month_end_summary"
    YEAR_END_SUMMARY = "year_end_summary"
    TAX_REPORT = "tax_report"
    INSURANCE_REPORT = "insurance_report"


class ReportStatus(str, Enum):
    """Report lifecycle: GENERATING -> COMPLETED | FAILED (both terminal)."""
    GENERATING = "generating"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is not ReportStatus.GENERATING


class GroupKey(str, Enum):
    """Dimension used to bucket payslips before summing."""
    EMPLOYEE = "employee"
    DEPARTMENT = "department"
    MONTH = "month"


class BenefitsBasis(str, Enum):
    """Which payslip fields a recipe counts as benefits."""
    ALLOWANCES = "allowances"  # bonus + leave + transportation + other
    PENSION = "pension"
