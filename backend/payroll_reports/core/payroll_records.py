"""Payroll Records — read-only input types supplied by the record store.

Invariants:
    - PayslipRecord and EmployeeRef are frozen; this core never mutates them
    - A valid payslip has start <= end and no negative monetary amount
    - net_pay = gross_pay - total_deductions is trusted, never re-derived

Design Decisions:
    - Employee is referenced by id only; the EmployeeRef is resolved in a second,
      bulk fetch so grouping stays free of storage-layer joins
"""

from dataclasses import dataclass
from datetime import date

from payroll_reports.core.domain_types import (
    EmployeeId, Money, PayslipId, UNKNOWN_DEPARTMENT, ZERO,
)
from payroll_reports.core.errors import InvalidRecordError

MONEY_FIELDS: tuple[str, ...] = (
    "gross_pay",
    "total_deductions",
    "net_pay",
    "income_tax",
    "social_security_tax",
    "health_insurance",
    "pension_contribution",
    "bonus",
    "leave_compensation",
    "transportation_allowance",
    "other_allowances",
)


@dataclass(frozen=True)
class EmployeeRef:
    """Employee metadata used for grouping and labeling."""
    id: EmployeeId
    employee_code: str
    first_name: str
    last_name: str
    department: str | None = None
    position: str | None = None
    is_active: bool = True

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def department_or_unknown(self) -> str:
        return self.department or UNKNOWN_DEPARTMENT


@dataclass(frozen=True)
class PayslipRecord:
    """One pay period's computed earnings and deductions for one employee."""
    id: PayslipId
    employee_id: EmployeeId
    pay_period_start: date
    pay_period_end: date
    gross_pay: Money = ZERO
    total_deductions: Money = ZERO
    net_pay: Money = ZERO
    income_tax: Money = ZERO
    social_security_tax: Money = ZERO
    health_insurance: Money = ZERO
    pension_contribution: Money = ZERO
    bonus: Money = ZERO
    leave_compensation: Money = ZERO
    transportation_allowance: Money = ZERO
    other_allowances: Money = ZERO

    @property
    def tax(self) -> Money:
        return self.income_tax + self.social_security_tax

    @property
    def allowances(self) -> Money:
        return (
            self.bonus + self.leave_compensation
            + self.transportation_allowance + self.other_allowances
        )


def validate_record(record: PayslipRecord) -> None:
    """Raise InvalidRecordError if the record breaks a structural invariant."""
    if record.pay_period_end < record.pay_period_start:
        raise InvalidRecordError(
            str(record.id),
            f"pay period ends {record.pay_period_end.isoformat()} "
            f"before it starts {record.pay_period_start.isoformat()}",
        )
    for name in MONEY_FIELDS:
        value = getattr(record, name)
        if value < ZERO:
            raise InvalidRecordError(str(record.id), f"{name} is negative ({value})")
