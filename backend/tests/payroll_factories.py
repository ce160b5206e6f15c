"""Builders for test data: core PayslipRecord/EmployeeRef values and Payslip ORM rows."""

import uuid
from datetime import date
from decimal import Decimal

from payroll_reports.core.domain_types import EmployeeId, PayslipId
from payroll_reports.core.payroll_records import EmployeeRef, PayslipRecord
from payroll_reports.models.employee import Employee
from payroll_reports.models.payslip import Payslip


def make_employee(
    first_name: str = "Ana",
    last_name: str = "Silva",
    department: str | None = "Engineering",
    position: str = "Developer",
    is_active: bool = True,
    employee_code: str | None = None,
) -> EmployeeRef:
    emp_id = EmployeeId(uuid.uuid4())
    return EmployeeRef(
        id=emp_id,
        employee_code=employee_code or f"EMP-{str(emp_id)[:8]}",
        first_name=first_name,
        last_name=last_name,
        department=department,
        position=position,
        is_active=is_active,
    )


def make_payslip(
    employee: EmployeeRef | None = None,
    start: date = date(2024, 3, 1),
    end: date = date(2024, 3, 31),
    gross: str = "1000",
    deductions: str = "200",
    income_tax: str = "150",
    social_security: str = "50",
    health_insurance: str = "30",
    pension: str = "0",
    bonus: str = "0",
    leave: str = "0",
    transport: str = "0",
    other: str = "0",
    net: str | None = None,
) -> PayslipRecord:
    gross_pay = Decimal(gross)
    total_deductions = Decimal(deductions)
    return PayslipRecord(
        id=PayslipId(uuid.uuid4()),
        employee_id=employee.id if employee else EmployeeId(uuid.uuid4()),
        pay_period_start=start,
        pay_period_end=end,
        gross_pay=gross_pay,
        total_deductions=total_deductions,
        net_pay=Decimal(net) if net is not None else gross_pay - total_deductions,
        income_tax=Decimal(income_tax),
        social_security_tax=Decimal(social_security),
        health_insurance=Decimal(health_insurance),
        pension_contribution=Decimal(pension),
        bonus=Decimal(bonus),
        leave_compensation=Decimal(leave),
        transportation_allowance=Decimal(transport),
        other_allowances=Decimal(other),
    )


def payslip_row(
    employee: Employee,
    start: date,
    end: date,
    gross: str = "1000",
    deductions: str = "200",
    income_tax: str = "150",
    social_security: str = "50",
    health_insurance: str = "30",
    pension: str = "0",
) -> Payslip:
    gross_pay, total_deductions = Decimal(gross), Decimal(deductions)
    return Payslip(
        employee_id=employee.id,
        pay_period_start=start,
        pay_period_end=end,
        base_salary=gross_pay,
        gross_pay=gross_pay,
        income_tax=Decimal(income_tax),
        social_security_tax=Decimal(social_security),
        health_insurance=Decimal(health_insurance),
        pension_contribution=Decimal(pension),
        total_deductions=total_deductions,
        net_pay=gross_pay - total_deductions,
    )
