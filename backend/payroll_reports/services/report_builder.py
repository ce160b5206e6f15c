"""Report Builder — runs one report recipe: fetch, aggregate, persist.

Invariants:
    - Parameters validated before any IO (MissingParameterError/InvalidParameterError raised)
    - The report is saved in GENERATING before the fetch, then saved exactly once
      more in a terminal status
    - Data failures (RecordStoreError, DatabaseError, InvalidRecordError) are
      recorded on the report as FAILED and the FAILED report is returned, never raised
    - Every call creates a new report: no caching, no de-duplication

Design Decisions:
    - Explicit dict dispatch from ReportKind to recipe method (no auto-discovery)
    - Two-step fetch: payslips first, then referenced employees in one bulk call
    - Unexpected exceptions and task cancellation still record FAILED before
      propagating; if that save fails too, the original exception still wins
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from payroll_reports.core.domain_types import EmployeeId, ReportKind, RequesterId
from payroll_reports.core.errors import PayrollReportError
from payroll_reports.core.payroll_records import PayslipRecord
from payroll_reports.core.report import Report
from payroll_reports.core.report_payloads import ReportData, ReportSummary
from payroll_reports.core.report_recipes import (
    ReportParams, new_report, record_window, shape_department_summary,
    shape_insurance_report, shape_month_end_summary, shape_tax_report,
    shape_year_end_summary, validate_params,
)
from payroll_reports.core.repository_protocols import (
    PayslipFilter, RecordStore, ReportRepository,
)

logger = logging.getLogger(__name__)

RecipeResult = tuple[ReportData, ReportSummary, int]


class ReportBuilder:
    """Orchestrates the five report recipes over a record store and repository."""

    def __init__(self, records: RecordStore, reports: ReportRepository):
        self._records = records
        self._reports = reports
        self._recipes: dict[
            ReportKind, Callable[[ReportParams], Awaitable[RecipeResult]]
        ] = {
            ReportKind.DEPARTMENT_SUMMARY: self._department_summary,
            ReportKind.MONTH_END_SUMMARY: self._month_end_summary,
            ReportKind.YEAR_END_SUMMARY: self._year_end_summary,
            ReportKind.TAX_REPORT: self._tax_report,
            ReportKind.INSURANCE_REPORT: self._insurance_report,
        }

    async def generate(
        self, kind: ReportKind, params: ReportParams, requester_id: RequesterId,
    ) -> Report:
        """Generate and persist one report. Returns it COMPLETED or FAILED."""
        validate_params(kind, params)
        report = await self._reports.save(new_report(kind, params, requester_id))
        log_extra = {
            "report_id": str(report.id),
            "report_kind": kind.value,
            "requester_id": requester_id,
        }
        logger.info(f"Generating {kind.value} report", extra=log_extra)

        try:
            data, summary, record_count = await self._recipes[kind](params)
        except PayrollReportError as e:
            logger.warning(
                f"Report generation failed: {e.message}",
                extra={**log_extra, "error_code": e.code},
            )
            report.fail(e.message)
            return await self._reports.save(report)
        except (Exception, asyncio.CancelledError) as e:
            cancelled = isinstance(e, asyncio.CancelledError)
            logger.error(
                "Report generation cancelled" if cancelled
                else "Unexpected error during report generation",
                extra=log_extra, exc_info=not cancelled,
            )
            report.fail(
                "generation cancelled" if cancelled
                else "internal error during generation",
            )
            await self._save_failed(report, log_extra)
            raise

        report.complete(data, summary)
        saved = await self._reports.save(report)
        logger.info(
            f"Report {kind.value} completed",
            extra={**log_extra, "record_count": record_count},
        )
        return saved

    async def _save_failed(self, report: Report, log_extra: dict) -> None:
        # The caller re-raises the original error; a failing save must not replace it.
        try:
            await self._reports.save(report)
        except Exception:
            logger.error(
                "Could not persist FAILED status; report left in GENERATING",
                extra=log_extra, exc_info=True,
            )

    # ─── Recipes ─────────────────────────────────────────────────

    async def _fetch_window(
        self, kind: ReportKind, params: ReportParams,
    ) -> list[PayslipRecord]:
        start, end = record_window(kind, params)
        return await self._records.list_payslips(
            PayslipFilter(period_start=start, period_end=end),
        )

    async def _employees_for(self, records: list[PayslipRecord]):
        ids: list[EmployeeId] = list({r.employee_id for r in records})
        return await self._records.get_employees(ids)

    async def _department_summary(self, params: ReportParams) -> RecipeResult:
        roster = await self._records.list_active_employees(params.department)
        records = await self._records.list_payslips(PayslipFilter(
            employee_ids=[e.id for e in roster],
            period_start=params.start_date,
            period_end=params.end_date,
        ))
        data, summary = shape_department_summary(
            records, {e.id: e for e in roster},
        )
        return data, summary, len(records)

    async def _month_end_summary(self, params: ReportParams) -> RecipeResult:
        records = await self._fetch_window(ReportKind.MONTH_END_SUMMARY, params)
        employees = await self._employees_for(records)
        data, summary = shape_month_end_summary(records, employees)
        return data, summary, len(records)

    async def _year_end_summary(self, params: ReportParams) -> RecipeResult:
        records = await self._fetch_window(ReportKind.YEAR_END_SUMMARY, params)
        data, summary = shape_year_end_summary(records)
        return data, summary, len(records)

    async def _tax_report(self, params: ReportParams) -> RecipeResult:
        records = await self._fetch_window(ReportKind.TAX_REPORT, params)
        employees = await self._employees_for(records)
        data, summary = shape_tax_report(records, employees)
        return data, summary, len(records)

    async def _insurance_report(self, params: ReportParams) -> RecipeResult:
        records = await self._fetch_window(ReportKind.INSURANCE_REPORT, params)
        data, summary = shape_insurance_report(records)
        return data, summary, len(records)
