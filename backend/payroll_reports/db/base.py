"""Declarative base for the employees, payslips, and reports tables.

alembic/env.py and the test fixtures build the schema from Base.metadata, so
every model module must be imported through payroll_reports.models first.
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass
