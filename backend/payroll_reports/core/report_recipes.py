"""Report Recipes — parameter rules, record windows, and payload shaping per report kind.

Invariants:
    - validate_params raises before any IO: MissingParameterError for absent
      required params, InvalidParameterError for out-of-domain values
    - Windows are inclusive at day granularity; a payslip counts only if its
      whole pay period lies inside the window (partial overlap is excluded)
    - shape_* functions are pure: records (+ employees) in, (data, summary) out
    - Empty input yields an all-zero summary and empty breakdown, never an error

Design Decisions:
    - One shape function per recipe instead of a generic engine: each recipe's
      summary has a different total_employees rule and benefits basis
    - Titles/descriptions built here so FAILED reports carry the same labels
"""

import calendar
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import date

from payroll_reports.core.aggregator import (
    distinct_employee_count, group_by, sum_totals,
)
from payroll_reports.core.domain_types import (
    BenefitsBasis, EmployeeId, GroupKey, MAX_REPORT_YEAR, MIN_REPORT_YEAR,
    ReportKind, RequesterId, ZERO,
)
from payroll_reports.core.errors import InvalidParameterError, MissingParameterError
from payroll_reports.core.payroll_records import EmployeeRef, PayslipRecord
from payroll_reports.core.report import Report
from payroll_reports.core.report_payloads import (
    DepartmentPayBreakdown, DepartmentSummaryData, EmployeeLabel,
    EmployeePayBreakdown, EmployeeTaxBreakdown, InsuranceReportData,
    MonthEndSummaryData, MonthPayBreakdown, ReportSummary, TaxReportData,
    YearEndSummaryData,
)

UNKNOWN_EMPLOYEE = "Unknown"


@dataclass(frozen=True)
class ReportParams:
    """Caller-supplied filter parameters; each recipe reads only its own."""
    department: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    year: int | None = None
    month: int | None = None


REQUIRED_PARAMS: dict[ReportKind, tuple[str, ...]] = {
    ReportKind.DEPARTMENT_SUMMARY: ("department", "start_date", "end_date"),
    ReportKind.MONTH_END_SUMMARY: ("year", "month"),
    ReportKind.YEAR_END_SUMMARY: ("year",),
    ReportKind.TAX_REPORT: ("start_date", "end_date"),
    ReportKind.INSURANCE_REPORT: ("start_date", "end_date"),
}


def _is_missing(value: object) -> bool:
    if isinstance(value, str):
        return not value.strip()
    return value is None


def validate_params(kind: ReportKind, params: ReportParams) -> None:
    """Reject a recipe call whose parameters break the caller contract."""
    required = REQUIRED_PARAMS[kind]
    missing = [name for name in required if _is_missing(getattr(params, name))]
    if missing:
        raise MissingParameterError(kind.value, missing)
    if "year" in required and not MIN_REPORT_YEAR <= params.year <= MAX_REPORT_YEAR:
        raise InvalidParameterError(
            f"year must be between {MIN_REPORT_YEAR} and {MAX_REPORT_YEAR}", "year",
        )
    if "month" in required and not 1 <= params.month <= 12:
        raise InvalidParameterError("month must be between 1 and 12", "month")
    if "start_date" in required and params.start_date > params.end_date:
        raise InvalidParameterError(
            "start_date must not be after end_date", "start_date",
        )


def month_window(year: int, month: int) -> tuple[date, date]:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def year_window(year: int) -> tuple[date, date]:
    return date(year, 1, 1), date(year, 12, 31)


def record_window(kind: ReportKind, params: ReportParams) -> tuple[date, date]:
    """Inclusive [start, end] window a payslip period must lie within."""
    if kind is ReportKind.MONTH_END_SUMMARY:
        return month_window(params.year, params.month)
    if kind is ReportKind.YEAR_END_SUMMARY:
        return year_window(params.year)
    return params.start_date, params.end_date


def new_report(
    kind: ReportKind, params: ReportParams, requested_by: RequesterId,
) -> Report:
    """Fresh GENERATING report carrying only the parameters its kind uses."""
    start, end = record_window(kind, params)
    span = f"from {start.isoformat()} to {end.isoformat()}"
    if kind is ReportKind.DEPARTMENT_SUMMARY:
        return Report(
            kind=kind, requested_by=requested_by,
            title=f"{params.department} Department Report",
            description=f"Department summary {span}",
            department=params.department, start_date=start, end_date=end,
        )
    if kind is ReportKind.MONTH_END_SUMMARY:
        return Report(
            kind=kind, requested_by=requested_by,
            title=f"Month-End Report - {params.year}/{params.month}",
            description=(
                "Monthly payroll summary for "
                f"{calendar.month_name[params.month]} {params.year}"
            ),
            year=params.year, month=params.month, start_date=start, end_date=end,
        )
    if kind is ReportKind.YEAR_END_SUMMARY:
        return Report(
            kind=kind, requested_by=requested_by,
            title=f"Year-End Report - {params.year}",
            description=f"Annual payroll summary for {params.year}",
            year=params.year, start_date=start, end_date=end,
        )
    if kind is ReportKind.TAX_REPORT:
        return Report(
            kind=kind, requested_by=requested_by,
            title="Tax Compliance Report",
            description=f"Tax summary {span}",
            start_date=start, end_date=end,
        )
    return Report(
        kind=kind, requested_by=requested_by,
        title="Insurance & Benefits Report",
        description=f"Insurance contributions {span}",
        start_date=start, end_date=end,
    )


# ─── Labels ──────────────────────────────────────────────────────

def employee_label(
    employee_id: EmployeeId, employees: Mapping[EmployeeId, EmployeeRef],
) -> EmployeeLabel:
    employee = employees.get(employee_id)
    if employee is None:
        return EmployeeLabel(
            id=employee_id, employee_code="", name=UNKNOWN_EMPLOYEE,
        )
    return EmployeeLabel(
        id=employee.id,
        employee_code=employee.employee_code,
        name=employee.display_name,
        department=employee.department,
        position=employee.position,
    )


def _label_sort_key(label: EmployeeLabel) -> tuple[str, str]:
    return label.name.lower(), str(label.id)


# ─── Shaping ─────────────────────────────────────────────────────

def shape_department_summary(
    records: Sequence[PayslipRecord],
    roster: Mapping[EmployeeId, EmployeeRef],
) -> tuple[DepartmentSummaryData, ReportSummary]:
    """Per-employee breakdown; total_employees is the active roster size."""
    totals = sum_totals(records, BenefitsBasis.ALLOWANCES)
    groups = group_by(records, GroupKey.EMPLOYEE, roster)
    rows = [
        EmployeePayBreakdown(
            employee=employee_label(group.key, roster),
            payslip_ids=[r.id for r in group.records],
            payslip_count=group.member_count,
            total_gross=group.totals.gross_pay,
            total_net=group.totals.net_pay,
            total_tax=group.totals.tax,
        )
        for group in groups.values()
    ]
    rows.sort(key=lambda row: _label_sort_key(row.employee))
    summary = ReportSummary(
        total_employees=len(roster),
        total_gross_pay=totals.gross_pay,
        total_deductions=totals.deductions,
        total_net_pay=totals.net_pay,
        total_tax=totals.tax,
        total_insurance=totals.insurance,
        total_benefits=totals.benefits,
    )
    return DepartmentSummaryData(employees=rows, payslips_count=len(records)), summary


def shape_month_end_summary(
    records: Sequence[PayslipRecord],
    employees: Mapping[EmployeeId, EmployeeRef],
) -> tuple[MonthEndSummaryData, ReportSummary]:
    """Per-department breakdown; total_employees is the payslip record count."""
    totals = sum_totals(records)
    groups = group_by(records, GroupKey.DEPARTMENT, employees)
    rows = sorted(
        (
            DepartmentPayBreakdown(
                department=str(group.key),
                employee_count=group.member_count,
                total_gross=group.totals.gross_pay,
                total_net=group.totals.net_pay,
                total_tax=group.totals.tax,
            )
            for group in groups.values()
        ),
        key=lambda row: row.department.lower(),
    )
    summary = ReportSummary(
        total_employees=len(records),
        total_gross_pay=totals.gross_pay,
        total_deductions=totals.deductions,
        total_net_pay=totals.net_pay,
        total_tax=totals.tax,
        total_insurance=totals.insurance,
    )
    return MonthEndSummaryData(departments=rows, payslips_processed=len(records)), summary


def shape_year_end_summary(
    records: Sequence[PayslipRecord],
) -> tuple[YearEndSummaryData, ReportSummary]:
    """Twelve-month series; total_employees counts distinct employees."""
    totals = sum_totals(records, BenefitsBasis.PENSION)
    groups = group_by(records, GroupKey.MONTH)
    months = []
    for month in range(1, 13):
        group = groups.get(month)
        months.append(MonthPayBreakdown(
            month=month,
            month_name=calendar.month_name[month],
            total_gross=group.totals.gross_pay if group else ZERO,
            total_net=group.totals.net_pay if group else ZERO,
            employee_count=group.member_count if group else 0,
        ))
    summary = ReportSummary(
        total_employees=distinct_employee_count(records),
        total_gross_pay=totals.gross_pay,
        total_deductions=totals.deductions,
        total_net_pay=totals.net_pay,
        total_tax=totals.tax,
        total_insurance=totals.insurance,
        total_benefits=totals.benefits,
    )
    return YearEndSummaryData(monthly_breakdown=months, total_payslips=len(records)), summary


def shape_tax_report(
    records: Sequence[PayslipRecord],
    employees: Mapping[EmployeeId, EmployeeRef],
) -> tuple[TaxReportData, ReportSummary]:
    """Per-employee tax split; total_employees counts employees with a payslip."""
    totals = sum_totals(records)
    groups = group_by(records, GroupKey.EMPLOYEE, employees)
    rows = [
        EmployeeTaxBreakdown(
            employee=employee_label(group.key, employees),
            total_income_tax=group.totals.income_tax,
            total_social_security=group.totals.social_security_tax,
            total_tax=group.totals.tax,
        )
        for group in groups.values()
    ]
    rows.sort(key=lambda row: _label_sort_key(row.employee))
    data = TaxReportData(
        employee_tax_breakdown=rows,
        total_income_tax=totals.income_tax,
        total_social_security=totals.social_security_tax,
    )
    return data, ReportSummary(total_employees=len(groups), total_tax=totals.tax)


def shape_insurance_report(
    records: Sequence[PayslipRecord],
) -> tuple[InsuranceReportData, ReportSummary]:
    """Totals only; total_insurance is health insurance plus pension."""
    totals = sum_totals(records, BenefitsBasis.PENSION)
    data = InsuranceReportData(
        total_health_insurance=totals.insurance,
        total_pension=totals.pension,
        payslip_count=len(records),
    )
    summary = ReportSummary(
        total_employees=distinct_employee_count(records),
        total_insurance=totals.insurance + totals.pension,
    )
    return data, summary
