"""In-memory RecordStore/ReportRepository fakes for builder tests.

Both satisfy the Protocols in core/repository_protocols.py structurally and
record every call so tests can assert on IO ordering.
"""

import uuid
from collections.abc import Sequence
from copy import deepcopy
from datetime import datetime, timezone

from payroll_reports.core.domain_types import EmployeeId, ReportId
from payroll_reports.core.errors import (
    RecordStoreError, ReportImmutableError, ReportNotFoundError,
)
from payroll_reports.core.payroll_records import EmployeeRef, PayslipRecord
from payroll_reports.core.report import Report
from payroll_reports.core.repository_protocols import (
    PayslipFilter, ReportPage, ReportQuery,
)


class FakeRecordStore:
    def __init__(
        self,
        employees: Sequence[EmployeeRef] = (),
        payslips: Sequence[PayslipRecord] = (),
        fail_with: Exception | None = None,
    ):
        self.employees = {e.id: e for e in employees}
        self.payslips = list(payslips)
        self.fail_with = fail_with
        self.calls: list[str] = []

    def _maybe_fail(self, operation: str) -> None:
        self.calls.append(operation)
        if self.fail_with is not None:
            raise self.fail_with

    async def list_payslips(self, filter: PayslipFilter) -> list[PayslipRecord]:
        self._maybe_fail("list_payslips")
        result = []
        for p in self.payslips:
            if filter.employee_ids is not None and p.employee_id not in filter.employee_ids:
                continue
            if filter.period_start and p.pay_period_start < filter.period_start:
                continue
            if filter.period_end and p.pay_period_end > filter.period_end:
                continue
            result.append(p)
        return result

    async def list_active_employees(self, department: str | None = None) -> list[EmployeeRef]:
        self._maybe_fail("list_active_employees")
        return [
            e for e in self.employees.values()
            if e.is_active and (department is None or e.department == department)
        ]

    async def get_employees(self, ids: Sequence[EmployeeId]) -> dict[EmployeeId, EmployeeRef]:
        self._maybe_fail("get_employees")
        return {i: self.employees[i] for i in ids if i in self.employees}


class FakeReportRepository:
    def __init__(self):
        self.rows: dict[ReportId, Report] = {}
        self.saved_statuses: list[str] = []

    async def save(self, report: Report) -> Report:
        if report.id is None:
            report.id = ReportId(uuid.uuid4())
            report.created_at = datetime.now(timezone.utc)
        elif self.rows[report.id].status.is_terminal:
            raise ReportImmutableError(str(report.id), self.rows[report.id].status.value)
        self.saved_statuses.append(report.status.value)
        self.rows[report.id] = deepcopy(report)
        return deepcopy(report)

    async def find_by_id(self, report_id: ReportId) -> Report:
        if report_id not in self.rows:
            raise ReportNotFoundError(str(report_id))
        return deepcopy(self.rows[report_id])

    async def find_all(self, query: ReportQuery) -> ReportPage:
        matches = list(self.rows.values())
        return ReportPage(
            reports=matches[query.offset:query.offset + query.limit],
            total=len(matches), page=query.page, limit=query.limit,
        )

    async def delete(self, report_id: ReportId) -> None:
        if self.rows.pop(report_id, None) is None:
            raise ReportNotFoundError(str(report_id))


def unreachable_store() -> FakeRecordStore:
    return FakeRecordStore(fail_with=RecordStoreError("connection refused", "list_payslips"))
