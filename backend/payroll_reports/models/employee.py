"""Employee ORM — roster data read for grouping and labeling.

Invariants:
    - employee_code is unique (human-facing id, distinct from the UUID primary key)
    - department is non-nullable text; is_active defaults to True
"""

import uuid
from datetime import date, datetime, timezone

from sqlalchemy import Boolean, Date, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from payroll_reports.db.base import Base


class Employee(Base):
    """Employee entity — referenced by payslips."""
    __tablename__ = "employees"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    employee_code: Mapped[str] = mapped_column(
        String(50), nullable=False, unique=True,
    )
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    department: Mapped[str] = mapped_column(
        String(100), nullable=False, index=True,
    )
    position: Mapped[str] = mapped_column(String(100), nullable=False)
    hire_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    payslips: Mapped[list["Payslip"]] = relationship(
        "Payslip", back_populates="employee",
    )
