"""payroll_reports — department, month-end, year-end, tax, and insurance reports over payroll data."""
