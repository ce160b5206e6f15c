"""SQL Report Repository — persists, lists, retrieves, and deletes reports.

Invariants:
    - save() assigns an id on first insert; later saves may only move a
      GENERATING row to a terminal status (terminal rows are immutable)
    - find_by_id()/delete() raise ReportNotFoundError for unknown ids — a second
      delete of the same id is NotFound, never a crash
    - find_all() lists newest first with 1-indexed offset pagination

Design Decisions:
    - Commits per call: each generation step (GENERATING row, terminal row) is
      durable on its own, so a FAILED report is recorded even if the caller
      disconnects
    - Payload (de)serialization via schemas/report.py adapters — the JSON column
      is validated on both write and read
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from payroll_reports.core.domain_types import (
    ReportId, ReportKind, ReportStatus, RequesterId,
)
from payroll_reports.core.errors import ReportImmutableError, ReportNotFoundError
from payroll_reports.core.report import Report
from payroll_reports.core.repository_protocols import ReportPage, ReportQuery
from payroll_reports.models.report import Report as ReportModel
from payroll_reports.schemas.report import (
    dump_report_data, dump_report_summary, load_report_data, load_report_summary,
)

logger = logging.getLogger(__name__)


def to_domain(row: ReportModel) -> Report:
    return Report(
        id=ReportId(row.id),
        kind=ReportKind(row.kind),
        title=row.title,
        description=row.description,
        requested_by=RequesterId(row.requested_by),
        status=ReportStatus(row.status),
        department=row.department,
        start_date=row.start_date,
        end_date=row.end_date,
        year=row.year,
        month=row.month,
        data=load_report_data(row.data),
        summary=load_report_summary(row.summary),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _apply(row: ReportModel, report: Report) -> None:
    row.kind = report.kind.value
    row.title = report.title
    row.description = report.description
    row.requested_by = report.requested_by
    row.status = report.status.value
    row.department = report.department
    row.start_date = report.start_date
    row.end_date = report.end_date
    row.year = report.year
    row.month = report.month
    row.data = dump_report_data(report.data)
    row.summary = dump_report_summary(report.summary)
    row.updated_at = report.updated_at or datetime.now(timezone.utc)


class SqlReportRepository:
    """ReportRepository implementation over the reports table."""

    def __init__(self, db: AsyncSession):
        self._db = db

    async def save(self, report: Report) -> Report:
        if report.id is None:
            row = ReportModel()
            self._db.add(row)
        else:
            row = await self._get_row(report.id)
            if ReportStatus(row.status).is_terminal:
                raise ReportImmutableError(str(report.id), row.status)
        _apply(row, report)
        await self._db.commit()
        await self._db.refresh(row)
        saved = to_domain(row)
        report.id = saved.id
        report.created_at = saved.created_at
        report.updated_at = saved.updated_at
        return saved

    async def find_by_id(self, report_id: ReportId) -> Report:
        return to_domain(await self._get_row(report_id))

    async def find_all(self, query: ReportQuery) -> ReportPage:
        conditions = []
        if query.kind is not None:
            conditions.append(ReportModel.kind == query.kind.value)
        if query.department is not None:
            conditions.append(ReportModel.department == query.department)
        if query.year is not None:
            conditions.append(ReportModel.year == query.year)

        total = await self._db.scalar(
            select(func.count()).select_from(ReportModel).where(*conditions),
        )
        result = await self._db.execute(
            select(ReportModel)
            .where(*conditions)
            .order_by(ReportModel.created_at.desc(), ReportModel.id)
            .offset(query.offset)
            .limit(query.limit),
        )
        return ReportPage(
            reports=[to_domain(row) for row in result.scalars().all()],
            total=total or 0,
            page=query.page,
            limit=query.limit,
        )

    async def delete(self, report_id: ReportId) -> None:
        row = await self._get_row(report_id)
        await self._db.delete(row)
        await self._db.commit()
        logger.info(f"Report {report_id} deleted", extra={"report_id": str(report_id)})

    async def _get_row(self, report_id: ReportId) -> ReportModel:
        result = await self._db.execute(
            select(ReportModel).where(ReportModel.id == report_id),
        )
        row = result.scalar_one_or_none()
        if row is None:
            raise ReportNotFoundError(str(report_id))
        return row
