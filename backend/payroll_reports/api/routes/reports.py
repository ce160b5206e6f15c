"""Report Routes — generate, list, fetch, and delete payroll reports.

Invariants:
    - Generation endpoints return 201 with the stored report, COMPLETED or FAILED
    - Missing recipe parameters surface as 400 MISSING_PARAMETER (raised by the builder)
    - Unknown report ids surface as 404 RESOURCE_NOT_FOUND on GET and DELETE
    - Requester identity comes from the X-Requester-Id header set by the gateway;
      authentication and role checks happen upstream

Design Decisions:
    - One POST per recipe (mirrors the payroll frontend) all funnelling into
      ReportBuilder.generate — routes hold no business logic
    - Builder and repository built per request around the request's DB session
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Header, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from payroll_reports.config import Settings, get_settings
from payroll_reports.core.domain_types import ReportId, ReportKind, RequesterId
from payroll_reports.core.errors import InvalidParameterError
from payroll_reports.core.repository_protocols import ReportQuery
from payroll_reports.infrastructure.database import get_db
from payroll_reports.schemas.report import (
    GenerateReportRequest, ReportListResponse, ReportResponse,
)
from payroll_reports.services.record_store import SqlRecordStore
from payroll_reports.services.report_builder import ReportBuilder
from payroll_reports.services.report_repository import SqlReportRepository

router = APIRouter(prefix="/api/v1/reports", tags=["reports"])


def get_report_repository(
    db: AsyncSession = Depends(get_db),
) -> SqlReportRepository:
    return SqlReportRepository(db)


def get_report_builder(
    db: AsyncSession = Depends(get_db),
) -> ReportBuilder:
    return ReportBuilder(SqlRecordStore(db), SqlReportRepository(db))


async def _generate(
    kind: ReportKind,
    body: GenerateReportRequest,
    requester_id: str,
    builder: ReportBuilder,
) -> ReportResponse:
    report = await builder.generate(
        kind, body.to_params(), RequesterId(requester_id),
    )
    return ReportResponse.from_domain(report)


@router.post(
    "/department", response_model=ReportResponse,
    status_code=status.HTTP_201_CREATED,
)
async def generate_department_report(
    body: GenerateReportRequest,
    requester_id: str = Header(..., alias="X-Requester-Id"),
    builder: ReportBuilder = Depends(get_report_builder),
):
    """Department summary: requires department, start_date, end_date."""
    return await _generate(ReportKind.DEPARTMENT_SUMMARY, body, requester_id, builder)


@router.post(
    "/month-end", response_model=ReportResponse,
    status_code=status.HTTP_201_CREATED,
)
async def generate_month_end_report(
    body: GenerateReportRequest,
    requester_id: str = Header(..., alias="X-Requester-Id"),
    builder: ReportBuilder = Depends(get_report_builder),
):
    """Month-end summary: requires year and month."""
    return await _generate(ReportKind.MONTH_END_SUMMARY, body, requester_id, builder)


@router.post(
    "/year-end", response_model=ReportResponse,
    status_code=status.HTTP_201_CREATED,
)
async def generate_year_end_report(
    body: GenerateReportRequest,
    requester_id: str = Header(..., alias="X-Requester-Id"),
    builder: ReportBuilder = Depends(get_report_builder),
):
    """Year-end summary: requires year."""
    return await _generate(ReportKind.YEAR_END_SUMMARY, body, requester_id, builder)


@router.post(
    "/tax", response_model=ReportResponse,
    status_code=status.HTTP_201_CREATED,
)
async def generate_tax_report(
    body: GenerateReportRequest,
    requester_id: str = Header(..., alias="X-Requester-Id"),
    builder: ReportBuilder = Depends(get_report_builder),
):
    """Tax report: requires start_date and end_date."""
    return await _generate(ReportKind.TAX_REPORT, body, requester_id, builder)


@router.post(
    "/insurance", response_model=ReportResponse,
    status_code=status.HTTP_201_CREATED,
)
async def generate_insurance_report(
    body: GenerateReportRequest,
    requester_id: str = Header(..., alias="X-Requester-Id"),
    builder: ReportBuilder = Depends(get_report_builder),
):
    """Insurance report: requires start_date and end_date."""
    return await _generate(ReportKind.INSURANCE_REPORT, body, requester_id, builder)


@router.get("", response_model=ReportListResponse)
async def list_reports(
    kind: ReportKind | None = Query(None),
    department: str | None = Query(None),
    year: int | None = Query(None),
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
    settings: Settings = Depends(get_settings),
    reports: SqlReportRepository = Depends(get_report_repository),
):
    """List reports with filters and pagination, newest first.

    limit defaults to reports_default_page_size and may not exceed
    reports_max_page_size.
    """
    if limit is None:
        limit = settings.reports_default_page_size
    elif limit > settings.reports_max_page_size:
        raise InvalidParameterError(
            f"limit must be at most {settings.reports_max_page_size}", "limit",
        )
    result = await reports.find_all(ReportQuery(
        kind=kind, department=department, year=year, page=page, limit=limit,
    ))
    return ReportListResponse.from_page(result)


@router.get("/{report_id}", response_model=ReportResponse)
async def get_report(
    report_id: UUID,
    reports: SqlReportRepository = Depends(get_report_repository),
):
    """Get one report by id."""
    report = await reports.find_by_id(ReportId(report_id))
    return ReportResponse.from_domain(report)


@router.delete("/{report_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_report(
    report_id: UUID,
    reports: SqlReportRepository = Depends(get_report_repository),
):
    """Delete a report. A second delete of the same id is 404."""
    await reports.delete(ReportId(report_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
