"""SQL Record Store — read-only payslip/employee queries behind the RecordStore Protocol.

Invariants:
    - Never writes: employees and payslips are owned by the surrounding payroll system
    - Period filters are inclusive and require the WHOLE pay period inside the
      window (start >= period_start AND end <= period_end)
    - employee_ids=[] short-circuits to no rows (never "no filter")
    - Any SQLAlchemy failure surfaces as RecordStoreError after rollback, so the
      caller's session stays usable for persisting a FAILED report

Design Decisions:
    - ORM rows mapped to frozen core dataclasses at this boundary: core never
      sees SQLAlchemy objects
    - Employees fetched in one bulk IN query (get_employees) after payslips
"""

import logging
from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from payroll_reports.core.domain_types import EmployeeId, PayslipId
from payroll_reports.core.errors import RecordStoreError
from payroll_reports.core.payroll_records import (
    MONEY_FIELDS, EmployeeRef, PayslipRecord,
)
from payroll_reports.core.repository_protocols import PayslipFilter
from payroll_reports.models.employee import Employee
from payroll_reports.models.payslip import Payslip

logger = logging.getLogger(__name__)


def to_employee_ref(row: Employee) -> EmployeeRef:
    return EmployeeRef(
        id=EmployeeId(row.id),
        employee_code=row.employee_code,
        first_name=row.first_name,
        last_name=row.last_name,
        department=row.department,
        position=row.position,
        is_active=row.is_active,
    )


def to_payslip_record(row: Payslip) -> PayslipRecord:
    return PayslipRecord(
        id=PayslipId(row.id),
        employee_id=EmployeeId(row.employee_id),
        pay_period_start=row.pay_period_start,
        pay_period_end=row.pay_period_end,
        **{name: getattr(row, name) for name in MONEY_FIELDS},
    )


class SqlRecordStore:
    """RecordStore implementation over the employees/payslips tables."""

    def __init__(self, db: AsyncSession):
        self._db = db

    async def list_payslips(self, filter: PayslipFilter) -> list[PayslipRecord]:
        if filter.employee_ids is not None and not filter.employee_ids:
            return []
        query = select(Payslip).order_by(Payslip.pay_period_start, Payslip.id)
        if filter.employee_ids is not None:
            query = query.where(Payslip.employee_id.in_(list(filter.employee_ids)))
        if filter.department is not None:
            query = query.join(Employee).where(Employee.department == filter.department)
        if filter.period_start is not None:
            query = query.where(Payslip.pay_period_start >= filter.period_start)
        if filter.period_end is not None:
            query = query.where(Payslip.pay_period_end <= filter.period_end)
        rows = await self._fetch(query, "list_payslips")
        return [to_payslip_record(row) for row in rows]

    async def list_active_employees(
        self, department: str | None = None,
    ) -> list[EmployeeRef]:
        query = (
            select(Employee)
            .where(Employee.is_active.is_(True))
            .order_by(Employee.last_name, Employee.first_name)
        )
        if department is not None:
            query = query.where(Employee.department == department)
        rows = await self._fetch(query, "list_active_employees")
        return [to_employee_ref(row) for row in rows]

    async def get_employees(
        self, ids: Sequence[EmployeeId],
    ) -> dict[EmployeeId, EmployeeRef]:
        if not ids:
            return {}
        query = select(Employee).where(Employee.id.in_(list(set(ids))))
        rows = await self._fetch(query, "get_employees")
        return {EmployeeId(row.id): to_employee_ref(row) for row in rows}

    async def _fetch(self, query, operation: str) -> list:
        try:
            result = await self._db.execute(query)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            await self._db.rollback()
            logger.error(f"Record store {operation} failed: {e}")
            raise RecordStoreError(type(e).__name__, operation) from e
