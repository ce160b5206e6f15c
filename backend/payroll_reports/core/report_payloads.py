"""Report Payloads — one data variant per recipe plus the fixed-shape summary.

Invariants:
    - Every data variant carries a `kind` literal matching its ReportKind value
    - ReportSummary always has all seven keys; fields that do not apply to a
      kind are None (absent), never omitted
    - Breakdown lists are pre-sorted by the recipe that builds them

Design Decisions:
    - Plain dataclasses here, validated into a discriminated union by pydantic at
      the persistence/API boundary (schemas/report.py) — core stays framework-free
"""

from dataclasses import dataclass, field
from typing import Literal, Union
from uuid import UUID

from payroll_reports.core.domain_types import Money, ZERO


@dataclass(frozen=True)
class ReportSummary:
    """Headline totals attached to every completed report."""
    total_employees: int = 0
    total_gross_pay: Money | None = None
    total_deductions: Money | None = None
    total_net_pay: Money | None = None
    total_tax: Money | None = None
    total_insurance: Money | None = None
    total_benefits: Money | None = None


@dataclass(frozen=True)
class EmployeeLabel:
    """Denormalized employee identity stored inside a report."""
    id: UUID
    employee_code: str
    name: str
    department: str | None = None
    position: str | None = None


# ─── Department Summary ──────────────────────────────────────────

@dataclass(frozen=True)
class EmployeePayBreakdown:
    employee: EmployeeLabel
    payslip_ids: list[UUID] = field(default_factory=list)
    payslip_count: int = 0
    total_gross: Money = ZERO
    total_net: Money = ZERO
    total_tax: Money = ZERO


@dataclass(frozen=True)
class DepartmentSummaryData:
    employees: list[EmployeePayBreakdown] = field(default_factory=list)
    payslips_count: int = 0
    kind: Literal["department_summary"] = "department_summary"


# ─── Month-End Summary ───────────────────────────────────────────

@dataclass(frozen=True)
class DepartmentPayBreakdown:
    department: str
    employee_count: int = 0
    total_gross: Money = ZERO
    total_net: Money = ZERO
    total_tax: Money = ZERO


@dataclass(frozen=True)
class MonthEndSummaryData:
    departments: list[DepartmentPayBreakdown] = field(default_factory=list)
    payslips_processed: int = 0
    kind: Literal["month_end_summary"] = "month_end_summary"


# ─── Year-End Summary ────────────────────────────────────────────

@dataclass(frozen=True)
class MonthPayBreakdown:
    month: int
    month_name: str
    total_gross: Money = ZERO
    total_net: Money = ZERO
    employee_count: int = 0


@dataclass(frozen=True)
class YearEndSummaryData:
    monthly_breakdown: list[MonthPayBreakdown] = field(default_factory=list)
    total_payslips: int = 0
    kind: Literal["year_end_summary"] = "year_end_summary"


# ─── Tax Report ──────────────────────────────────────────────────

@dataclass(frozen=True)
class EmployeeTaxBreakdown:
    employee: EmployeeLabel
    total_income_tax: Money = ZERO
    total_social_security: Money = ZERO
    total_tax: Money = ZERO


@dataclass(frozen=True)
class TaxReportData:
    employee_tax_breakdown: list[EmployeeTaxBreakdown] = field(default_factory=list)
    total_income_tax: Money = ZERO
    total_social_security: Money = ZERO
    kind: Literal["tax_report"] = "tax_report"


# ─── Insurance Report ────────────────────────────────────────────

@dataclass(frozen=True)
class InsuranceReportData:
    total_health_insurance: Money = ZERO
    total_pension: Money = ZERO
    payslip_count: int = 0
    kind: Literal["insurance_report"] = "insurance_report"


ReportData = Union[
    DepartmentSummaryData,
    MonthEndSummaryData,
    YearEndSummaryData,
    TaxReportData,
    InsuranceReportData,
]
