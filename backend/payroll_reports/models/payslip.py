"""Payslip ORM — one pay period's computed earnings and deductions.

Invariants:
    - Always belongs to an Employee (employee_id FK)
    - Monetary columns are Numeric(12, 2): exact decimals, never floats
    - gross_pay/total_deductions/net_pay are pre-computed upstream

Design Decisions:
    - (pay_period_start, pay_period_end) indexed: every report slices by period
"""

import uuid
from datetime import date, datetime, timezone
from decimal import Decimal

from sqlalchemy import Date, DateTime, ForeignKey, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from payroll_reports.db.base import Base

MONEY = Numeric(12, 2)


class Payslip(Base):
    """Payslip entity — source row for every report."""
    __tablename__ = "payslips"
    __table_args__ = (
        Index("ix_payslips_period", "pay_period_start", "pay_period_end"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    employee_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("employees.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    pay_period_start: Mapped[date] = mapped_column(Date, nullable=False)
    pay_period_end: Mapped[date] = mapped_column(Date, nullable=False)
    pay_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    base_salary: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=0)
    overtime: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=0)
    bonus: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=0)
    leave_compensation: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=0)
    transportation_allowance: Mapped[Decimal] = mapped_column(
        MONEY, nullable=False, default=0,
    )
    other_allowances: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=0)
    gross_pay: Mapped[Decimal] = mapped_column(MONEY, nullable=False)

    income_tax: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=0)
    social_security_tax: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=0)
    health_insurance: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=0)
    pension_contribution: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=0)
    other_deductions: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=0)
    total_deductions: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    net_pay: Mapped[Decimal] = mapped_column(MONEY, nullable=False)

    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="draft",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    employee: Mapped["Employee"] = relationship(
        "Employee", back_populates="payslips",
    )
