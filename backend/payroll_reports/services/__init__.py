"""Imperative shell — SQL stores and the ReportBuilder that drives them.

Invariants:
    - All IO happens here; core/ is called between fetch and persist
    - SqlRecordStore and SqlReportRepository satisfy the core Protocols structurally
"""
