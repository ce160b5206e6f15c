"""ORM Models — SQLAlchemy declarative models for payroll source data and reports.

Invariants:
    - All models inherit from Base (db/base.py)
    - employees/payslips are owned by the surrounding payroll system; this service
      only reads them. reports are owned here.

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from payroll_reports.models.employee import Employee  # noqa: F401
from payroll_reports.models.payslip import Payslip  # noqa: F401
from payroll_reports.models.report import Report  # noqa: F401
