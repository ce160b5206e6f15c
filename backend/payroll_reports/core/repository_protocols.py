"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, tests pass in-memory fakes
    - Async in Protocol: boundary methods are async because implementations do IO,
      but core pure functions never are — the builder orchestrates the async
      calls around the pure aggregation
    - Employees resolved by a separate bulk call (get_employees) after the
      payslip fetch, never by an implicit join
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date
from typing import Protocol

from payroll_reports.core.domain_types import EmployeeId, ReportId, ReportKind
from payroll_reports.core.payroll_records import EmployeeRef, PayslipRecord
from payroll_reports.core.report import Report


@dataclass(frozen=True)
class PayslipFilter:
    """Payslip query: every set field narrows the result.

    employee_ids=None means "any employee"; an empty sequence matches nothing.
    period_start/period_end bound the pay period inclusively on both ends.
    """
    employee_ids: Sequence[EmployeeId] | None = None
    department: str | None = None
    period_start: date | None = None
    period_end: date | None = None


@dataclass(frozen=True)
class ReportQuery:
    """Report listing filter with 1-indexed offset pagination."""
    kind: ReportKind | None = None
    department: str | None = None
    year: int | None = None
    page: int = 1
    limit: int = 10

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True)
class ReportPage:
    """One page of reports plus the unpaged match count."""
    reports: list[Report] = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 10

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


class RecordStore(Protocol):
    """Read-only contract for payroll source data — implemented by shell."""
    async def list_payslips(self, filter: PayslipFilter) -> list[PayslipRecord]: ...
    async def list_active_employees(
        self, department: str | None = None,
    ) -> list[EmployeeRef]: ...
    async def get_employees(
        self, ids: Sequence[EmployeeId],
    ) -> dict[EmployeeId, EmployeeRef]: ...


class ReportRepository(Protocol):
    """Contract for report persistence — implemented by shell."""
    async def save(self, report: Report) -> Report: ...
    async def find_by_id(self, report_id: ReportId) -> Report: ...
    async def find_all(self, query: ReportQuery) -> ReportPage: ...
    async def delete(self, report_id: ReportId) -> None: ...
