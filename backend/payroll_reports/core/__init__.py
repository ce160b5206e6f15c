"""Functional core — payroll aggregation, report recipes, and the Report entity.

Invariants:
    - Nothing in core/ imports services/, api/, infrastructure/, db/, or models/
    - Functions are synchronous and deterministic given their inputs
"""
