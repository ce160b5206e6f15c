"""Report Schemas — Pydantic models and adapters for report requests, payloads, and responses.

Invariants:
    - `data` is a discriminated union keyed by `kind`: exactly one variant per recipe
    - Amounts serialize as decimal strings in JSON (exact round-trip through the DB)
    - GenerateReportRequest leaves every field optional: required-parameter
      checks belong to the recipe so the error is MISSING_PARAMETER, not a
      generic validation failure

Design Decisions:
    - Core payload dataclasses reused directly as pydantic field types (no
      parallel model hierarchy); TypeAdapter handles the JSON column boundary
"""

from datetime import date, datetime
from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, Field, TypeAdapter

from payroll_reports.core.domain_types import ReportKind, ReportStatus
from payroll_reports.core.report import Report
from payroll_reports.core.report_payloads import ReportData, ReportSummary
from payroll_reports.core.report_recipes import ReportParams
from payroll_reports.core.repository_protocols import ReportPage

DiscriminatedReportData = Annotated[ReportData, Field(discriminator="kind")]

_data_adapter: TypeAdapter[ReportData] = TypeAdapter(DiscriminatedReportData)
_summary_adapter: TypeAdapter[ReportSummary] = TypeAdapter(ReportSummary)


def dump_report_data(data: ReportData | None) -> dict | None:
    """Payload -> JSON-safe dict for the reports.data column."""
    if data is None:
        return None
    return _data_adapter.dump_python(data, mode="json")


def load_report_data(raw: dict | None) -> ReportData | None:
    """reports.data column -> typed payload variant."""
    if raw is None:
        return None
    return _data_adapter.validate_python(raw)


def dump_report_summary(summary: ReportSummary | None) -> dict | None:
    if summary is None:
        return None
    return _summary_adapter.dump_python(summary, mode="json")


def load_report_summary(raw: dict | None) -> ReportSummary | None:
    if raw is None:
        return None
    return _summary_adapter.validate_python(raw)


class GenerateReportRequest(BaseModel):
    """Report generation body — recipes read only the fields they need."""
    department: str | None = Field(None, max_length=100)
    start_date: date | None = None
    end_date: date | None = None
    year: int | None = None
    month: int | None = None

    def to_params(self) -> ReportParams:
        return ReportParams(
            department=self.department.strip() if self.department else None,
            start_date=self.start_date,
            end_date=self.end_date,
            year=self.year,
            month=self.month,
        )


class ReportResponse(BaseModel):
    """Report response — public-facing report artifact."""
    id: UUID
    kind: ReportKind
    title: str
    description: str
    requested_by: str
    status: ReportStatus
    department: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    year: int | None = None
    month: int | None = None
    data: DiscriminatedReportData | None = None
    summary: ReportSummary | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_domain(cls, report: Report) -> "ReportResponse":
        return cls(
            id=report.id,
            kind=report.kind,
            title=report.title,
            description=report.description,
            requested_by=report.requested_by,
            status=report.status,
            department=report.department,
            start_date=report.start_date,
            end_date=report.end_date,
            year=report.year,
            month=report.month,
            data=report.data,
            summary=report.summary,
            created_at=report.created_at,
            updated_at=report.updated_at,
        )


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int


class ReportListResponse(BaseModel):
    """Paged report listing, newest first."""
    reports: list[ReportResponse]
    pagination: Pagination

    @classmethod
    def from_page(cls, page: ReportPage) -> "ReportListResponse":
        return cls(
            reports=[ReportResponse.from_domain(r) for r in page.reports],
            pagination=Pagination(
                page=page.page,
                limit=page.limit,
                total=page.total,
                total_pages=page.total_pages,
            ),
        )
