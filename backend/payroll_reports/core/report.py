"""Report Entity — the persisted result of one report generation.

Invariants:
    - Created in GENERATING; moves exactly once to COMPLETED or FAILED
    - COMPLETED carries data + summary; FAILED carries the reason in description
    - Terminal reports are immutable (complete()/fail() raise ReportImmutableError)
    - Only the parameters relevant to its kind are set

Design Decisions:
    - Mutable dataclass with explicit transition methods rather than free status
      assignment: the builder holds it transiently, the repository owns it after save
"""

from dataclasses import dataclass
from datetime import date, datetime, timezone

from payroll_reports.core.domain_types import (
    ReportId, ReportKind, ReportStatus, RequesterId,
)
from payroll_reports.core.errors import ReportImmutableError
from payroll_reports.core.report_payloads import ReportData, ReportSummary


@dataclass
class Report:
    kind: ReportKind
    title: str
    requested_by: RequesterId
    description: str = ""
    status: ReportStatus = ReportStatus.GENERATING
    department: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    year: int | None = None
    month: int | None = None
    data: ReportData | None = None
    summary: ReportSummary | None = None
    id: ReportId | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def _ensure_open(self) -> None:
        if self.status.is_terminal:
            raise ReportImmutableError(str(self.id), self.status.value)

    def complete(self, data: ReportData, summary: ReportSummary) -> None:
        """GENERATING -> COMPLETED, attaching the computed payload."""
        self._ensure_open()
        self.data = data
        self.summary = summary
        self.status = ReportStatus.COMPLETED
        self.updated_at = datetime.now(timezone.utc)

    def fail(self, reason: str) -> None:
        """GENERATING -> FAILED, recording the reason in description."""
        self._ensure_open()
        self.description = f"Generation failed: {reason}"
        self.data = None
        self.summary = None
        self.status = ReportStatus.FAILED
        self.updated_at = datetime.now(timezone.utc)
