"""Initial schema — employees, payslips, reports.

Revision ID: 001_payroll_reports
Revises: None
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_payroll_reports"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

MONEY = sa.Numeric(12, 2)


def _money(name: str, nullable_default: bool = True) -> sa.Column:
    if nullable_default:
        return sa.Column(name, MONEY, nullable=False, server_default="0")
    return sa.Column(name, MONEY, nullable=False)


def upgrade() -> None:
    op.create_table(
        "employees",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("employee_code", sa.String(50), nullable=False, unique=True),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("department", sa.String(100), nullable=False),
        sa.Column("position", sa.String(100), nullable=False),
        sa.Column("hire_date", sa.Date, nullable=True),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_employees_department", "employees", ["department"])

    op.create_table(
        "payslips",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "employee_id", UUID(as_uuid=True),
            sa.ForeignKey("employees.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("pay_period_start", sa.Date, nullable=False),
        sa.Column("pay_period_end", sa.Date, nullable=False),
        sa.Column("pay_date", sa.Date, nullable=True),
        _money("base_salary"),
        _money("overtime"),
        _money("bonus"),
        _money("leave_compensation"),
        _money("transportation_allowance"),
        _money("other_allowances"),
        _money("gross_pay", nullable_default=False),
        _money("income_tax"),
        _money("social_security_tax"),
        _money("health_insurance"),
        _money("pension_contribution"),
        _money("other_deductions"),
        _money("total_deductions", nullable_default=False),
        _money("net_pay", nullable_default=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="draft"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_payslips_employee_id", "payslips", ["employee_id"])
    op.create_index("ix_payslips_period", "payslips", ["pay_period_start", "pay_period_end"])

    op.create_table(
        "reports",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("kind", sa.String(30), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("requested_by", sa.String(100), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="generating"),
        sa.Column("department", sa.String(100), nullable=True),
        sa.Column("start_date", sa.Date, nullable=True),
        sa.Column("end_date", sa.Date, nullable=True),
        sa.Column("year", sa.Integer, nullable=True),
        sa.Column("month", sa.Integer, nullable=True),
        sa.Column("data", sa.JSON, nullable=True),
        sa.Column("summary", sa.JSON, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_reports_kind", "reports", ["kind"])
    op.create_index("ix_reports_department", "reports", ["department"])
    op.create_index("ix_reports_year", "reports", ["year"])


def downgrade() -> None:
    op.drop_table("reports")
    op.drop_table("payslips")
    op.drop_table("employees")
