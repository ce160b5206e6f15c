"""Report Builder — generation lifecycle over in-memory stores.

Invariants:
    - GENERATING is persisted before any payslip fetch
    - Data failures end as a stored FAILED report carrying the reason
    - Missing parameters raise before any IO and store nothing
    - Every call creates a new report
"""

import asyncio
from datetime import date
from decimal import Decimal

import pytest

from payroll_reports.core.domain_types import ReportKind, ReportStatus, RequesterId
from payroll_reports.core.errors import MissingParameterError
from payroll_reports.core.report_payloads import (
    DepartmentSummaryData, TaxReportData, YearEndSummaryData,
)
from payroll_reports.core.report_recipes import ReportParams
from payroll_reports.services.report_builder import ReportBuilder
from tests.payroll_factories import make_employee, make_payslip
from tests.services.fake_stores import (
    FakeRecordStore, FakeReportRepository, unreachable_store,
)

REQUESTER = RequesterId("hr-42")
Q1 = ReportParams(start_date=date(2024, 1, 1), end_date=date(2024, 3, 31))


@pytest.fixture
def roster():
    ana = make_employee("Ana", "Silva", department="Engineering")
    bruno = make_employee("Bruno", "Costa", department="Engineering")
    diego = make_employee("Diego", "Rocha", department="Operations")
    return ana, bruno, diego


@pytest.fixture
def store(roster):
    ana, bruno, diego = roster
    return FakeRecordStore(
        employees=roster,
        payslips=[
            make_payslip(ana, start=date(2024, 3, 1), end=date(2024, 3, 31)),
            make_payslip(ana, start=date(2024, 4, 1), end=date(2024, 4, 30)),
            make_payslip(bruno, start=date(2024, 3, 1), end=date(2024, 3, 31),
                         gross="2000", deductions="500", income_tax="300",
                         social_security="100"),
            make_payslip(diego, start=date(2024, 2, 1), end=date(2024, 2, 29)),
        ],
    )


@pytest.fixture
def repo():
    return FakeReportRepository()


async def test_year_end_completes_with_payload(store, repo):
    """Year-end report completes, persists, and carries twelve months."""
    builder = ReportBuilder(store, repo)
    report = await builder.generate(
        ReportKind.YEAR_END_SUMMARY, ReportParams(year=2024), REQUESTER,
    )
    assert report.status == ReportStatus.COMPLETED
    assert report.id in repo.rows
    assert report.requested_by == "hr-42"
    assert isinstance(report.data, YearEndSummaryData)
    assert report.data.total_payslips == 4
    assert report.summary.total_gross_pay == Decimal("5000")
    assert repo.saved_statuses == ["generating", "completed"]


async def test_generating_saved_before_fetch(store, repo):
    """The GENERATING row exists by the time the record store is queried."""
    seen_rows = []
    original = store.list_payslips

    async def spy(filter):
        seen_rows.append([r.status for r in repo.rows.values()])
        return await original(filter)

    store.list_payslips = spy
    await ReportBuilder(store, repo).generate(ReportKind.TAX_REPORT, Q1, REQUESTER)
    assert seen_rows == [[ReportStatus.GENERATING]]


async def test_department_summary_uses_active_roster(store, repo, roster):
    """Department summary counts the department roster and its payslips only."""
    report = await ReportBuilder(store, repo).generate(
        ReportKind.DEPARTMENT_SUMMARY,
        ReportParams(department="Engineering", start_date=Q1.start_date, end_date=Q1.end_date),
        REQUESTER,
    )
    assert isinstance(report.data, DepartmentSummaryData)
    assert report.summary.total_employees == 2
    assert report.data.payslips_count == 2
    assert report.department == "Engineering"
    assert store.calls == ["list_active_employees", "list_payslips"]


async def test_unknown_department_completes_with_zero(store, repo):
    """An unknown department yields an empty, COMPLETED report."""
    report = await ReportBuilder(store, repo).generate(
        ReportKind.DEPARTMENT_SUMMARY,
        ReportParams(department="Nope", start_date=Q1.start_date, end_date=Q1.end_date),
        REQUESTER,
    )
    assert report.status == ReportStatus.COMPLETED
    assert report.summary.total_employees == 0
    assert report.summary.total_gross_pay == 0


async def test_tax_report_fetches_employees_in_bulk(store, repo):
    """Tax report resolves employees with one bulk lookup after payslips."""
    report = await ReportBuilder(store, repo).generate(
        ReportKind.TAX_REPORT, Q1, REQUESTER,
    )
    assert isinstance(report.data, TaxReportData)
    assert store.calls == ["list_payslips", "get_employees"]
    assert report.summary.total_employees == 3
    assert report.summary.total_tax == Decimal("800")


async def test_invalid_record_fails_report_with_reason(roster, repo):
    """A negative amount fails the report and names the offending record."""
    bad = make_payslip(roster[0], gross="-5", deductions="0")
    store = FakeRecordStore(employees=roster, payslips=[bad])
    report = await ReportBuilder(store, repo).generate(
        ReportKind.INSURANCE_REPORT, Q1, REQUESTER,
    )
    assert report.status == ReportStatus.FAILED
    assert str(bad.id) in report.description
    assert report.data is None
    assert repo.saved_statuses == ["generating", "failed"]


async def test_unreachable_store_fails_report(repo):
    """Record store outage is recorded as FAILED, not raised."""
    report = await ReportBuilder(unreachable_store(), repo).generate(
        ReportKind.MONTH_END_SUMMARY, ReportParams(year=2024, month=3), REQUESTER,
    )
    assert report.status == ReportStatus.FAILED
    assert "list_payslips" in report.description
    assert repo.rows[report.id].status == ReportStatus.FAILED


async def test_missing_parameter_raises_before_io(store, repo):
    """Missing month raises MissingParameterError with nothing fetched or stored."""
    with pytest.raises(MissingParameterError) as exc_info:
        await ReportBuilder(store, repo).generate(
            ReportKind.MONTH_END_SUMMARY, ReportParams(year=2024), REQUESTER,
        )
    assert exc_info.value.missing == ["month"]
    assert store.calls == []
    assert repo.rows == {}


async def test_each_call_creates_new_report(store, repo):
    """Identical requests produce two distinct reports."""
    builder = ReportBuilder(store, repo)
    first = await builder.generate(ReportKind.INSURANCE_REPORT, Q1, REQUESTER)
    second = await builder.generate(ReportKind.INSURANCE_REPORT, Q1, REQUESTER)
    assert first.id != second.id
    assert len(repo.rows) == 2


async def test_unexpected_error_leaves_failed_row_then_raises(repo):
    """A non-domain exception marks the report FAILED before propagating."""
    store = FakeRecordStore(fail_with=RuntimeError("driver exploded"))
    with pytest.raises(RuntimeError):
        await ReportBuilder(store, repo).generate(
            ReportKind.YEAR_END_SUMMARY, ReportParams(year=2024), REQUESTER,
        )
    (stored,) = repo.rows.values()
    assert stored.status == ReportStatus.FAILED
    assert repo.saved_statuses == ["generating", "failed"]


async def test_cancellation_leaves_failed_row_then_propagates(repo):
    """A cancelled generation is recorded FAILED before CancelledError escapes."""
    store = FakeRecordStore(fail_with=asyncio.CancelledError())
    with pytest.raises(asyncio.CancelledError):
        await ReportBuilder(store, repo).generate(
            ReportKind.TAX_REPORT, Q1, REQUESTER,
        )
    (stored,) = repo.rows.values()
    assert stored.status == ReportStatus.FAILED
    assert "cancelled" in stored.description


class RejectsTerminalSave(FakeReportRepository):
    async def save(self, report):
        if report.status.is_terminal:
            raise ConnectionError("reports table unavailable")
        return await super().save(report)


async def test_failed_save_error_does_not_mask_original():
    """If recording FAILED breaks too, the recipe's own exception propagates."""
    repo = RejectsTerminalSave()
    store = FakeRecordStore(fail_with=RuntimeError("driver exploded"))
    with pytest.raises(RuntimeError, match="driver exploded"):
        await ReportBuilder(store, repo).generate(
            ReportKind.YEAR_END_SUMMARY, ReportParams(year=2024), REQUESTER,
        )
    assert repo.saved_statuses == ["generating"]
