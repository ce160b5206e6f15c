"""Aggregator — pure payroll totals and grouped breakdowns.

Invariants:
    - No IO, no shared mutable state: safe to call from concurrent generations
    - All sums are Decimal; sum over the empty set is all-zero Totals, never an error
    - Additivity: combine_totals(g.totals for g in group_by(...).values())
      equals sum_totals(records) for any grouping key
    - Every record is validated before it contributes; a malformed record
      raises InvalidRecordError naming it

Design Decisions:
    - Grouping accumulators are plain dicts keyed by group value; callers sort
      output so breakdowns never depend on iteration order
    - MONTH grouping ignores the year — callers pre-filter the slice to one year
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from payroll_reports.core.domain_types import (
    BenefitsBasis, EmployeeId, GroupKey, Money, UNKNOWN_DEPARTMENT, ZERO,
)
from payroll_reports.core.payroll_records import (
    EmployeeRef, PayslipRecord, validate_record,
)

GroupValue = EmployeeId | str | int


@dataclass(frozen=True)
class Totals:
    """Summed monetary fields for a set of payslips."""
    gross_pay: Money = ZERO
    deductions: Money = ZERO
    net_pay: Money = ZERO
    income_tax: Money = ZERO
    social_security_tax: Money = ZERO
    insurance: Money = ZERO
    pension: Money = ZERO
    benefits: Money = ZERO

    @property
    def tax(self) -> Money:
        return self.income_tax + self.social_security_tax

    def __add__(self, other: "Totals") -> "Totals":
        return Totals(
            gross_pay=self.gross_pay + other.gross_pay,
            deductions=self.deductions + other.deductions,
            net_pay=self.net_pay + other.net_pay,
            income_tax=self.income_tax + other.income_tax,
            social_security_tax=self.social_security_tax + other.social_security_tax,
            insurance=self.insurance + other.insurance,
            pension=self.pension + other.pension,
            benefits=self.benefits + other.benefits,
        )


@dataclass(frozen=True)
class GroupSummary:
    """One bucket of a grouped breakdown."""
    key: GroupValue
    records: tuple[PayslipRecord, ...] = field(default_factory=tuple)
    totals: Totals = field(default_factory=Totals)

    @property
    def member_count(self) -> int:
        return len(self.records)


def _benefits_of(record: PayslipRecord, basis: BenefitsBasis) -> Money:
    if basis is BenefitsBasis.PENSION:
        return record.pension_contribution
    return record.allowances


def sum_totals(
    records: Iterable[PayslipRecord],
    benefits: BenefitsBasis = BenefitsBasis.ALLOWANCES,
) -> Totals:
    """Sum every monetary field over records. Pure, no IO."""
    gross = deductions = net = income_tax = social = ZERO
    insurance = pension = benefit_total = ZERO
    for record in records:
        validate_record(record)
        gross += record.gross_pay
        deductions += record.total_deductions
        net += record.net_pay
        income_tax += record.income_tax
        social += record.social_security_tax
        insurance += record.health_insurance
        pension += record.pension_contribution
        benefit_total += _benefits_of(record, benefits)
    return Totals(
        gross_pay=gross,
        deductions=deductions,
        net_pay=net,
        income_tax=income_tax,
        social_security_tax=social,
        insurance=insurance,
        pension=pension,
        benefits=benefit_total,
    )


def combine_totals(parts: Iterable[Totals]) -> Totals:
    """Fold partial totals into one."""
    combined = Totals()
    for part in parts:
        combined = combined + part
    return combined


def group_key_of(
    record: PayslipRecord,
    key: GroupKey,
    employees: Mapping[EmployeeId, EmployeeRef] | None = None,
) -> GroupValue:
    """Extract the bucket value for one record."""
    if key is GroupKey.EMPLOYEE:
        return record.employee_id
    if key is GroupKey.MONTH:
        return record.pay_period_start.month
    employee = (employees or {}).get(record.employee_id)
    return employee.department_or_unknown if employee else UNKNOWN_DEPARTMENT


def group_by(
    records: Iterable[PayslipRecord],
    key: GroupKey,
    employees: Mapping[EmployeeId, EmployeeRef] | None = None,
    benefits: BenefitsBasis = BenefitsBasis.ALLOWANCES,
) -> dict[GroupValue, GroupSummary]:
    """Bucket records by key and total each bucket. Pure, no IO."""
    buckets: dict[GroupValue, list[PayslipRecord]] = {}
    for record in records:
        buckets.setdefault(group_key_of(record, key, employees), []).append(record)
    return {
        value: GroupSummary(
            key=value,
            records=tuple(members),
            totals=sum_totals(members, benefits),
        )
        for value, members in buckets.items()
    }


def distinct_employee_count(records: Iterable[PayslipRecord]) -> int:
    """Count unique employees referenced by records."""
    return len({record.employee_id for record in records})
