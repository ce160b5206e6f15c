"""Service test fixtures — in-memory database, seeded payroll, HTTP client.

Invariants:
    - Each test runs against its own freshly created in-memory SQLite schema
    - The client shares that database with test_db (StaticPool, one connection)
    - get_db is overridden and db_manager swapped for the readiness probe;
      both are restored after the test
"""

from datetime import date

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import payroll_reports.infrastructure.database as db_module
from payroll_reports.db.base import Base
from payroll_reports.infrastructure.database import DatabaseSessionManager, get_db
from payroll_reports.main import app
from payroll_reports.models.employee import Employee
from tests.payroll_factories import payslip_row


@pytest.fixture
async def test_engine():
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def test_session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def client(test_engine, test_session_factory, monkeypatch):
    """AsyncClient bound to the app, reading and writing the test database."""
    async def session_per_request():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = session_per_request
    monkeypatch.setattr(
        db_module, "db_manager",
        DatabaseSessionManager(test_engine, test_session_factory),
    )
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as c:
            yield c
    finally:
        app.dependency_overrides.pop(get_db, None)


@pytest.fixture
async def seed_payroll(test_db):
    """Two active engineers, one inactive engineer, one ops employee, 2024 payslips.

    Payslips:
      - ana:    Mar 2024, Apr 2024, and one crossing Apr 16 – May 15 (partial overlap)
      - bruno:  Mar 2024
      - carla (inactive, Engineering): Mar 2024
      - diego (Operations): Mar 2024, Jan 2023
    """
    ana = Employee(employee_code="E001", first_name="Ana", last_name="Silva",
                   department="Engineering", position="Developer")
    bruno = Employee(employee_code="E002", first_name="Bruno", last_name="Costa",
                     department="Engineering", position="Developer")
    carla = Employee(employee_code="E003", first_name="Carla", last_name="Dias",
                     department="Engineering", position="Lead", is_active=False)
    diego = Employee(employee_code="E004", first_name="Diego", last_name="Rocha",
                     department="Operations", position="Analyst")
    test_db.add_all([ana, bruno, carla, diego])
    await test_db.flush()

    test_db.add_all([
        payslip_row(ana, date(2024, 3, 1), date(2024, 3, 31)),
        payslip_row(ana, date(2024, 4, 1), date(2024, 4, 15)),
        payslip_row(ana, date(2024, 4, 16), date(2024, 5, 15)),
        payslip_row(bruno, date(2024, 3, 1), date(2024, 3, 31), gross="2000",
                    deductions="500", income_tax="300", social_security="100"),
        payslip_row(carla, date(2024, 3, 1), date(2024, 3, 31)),
        payslip_row(diego, date(2024, 3, 1), date(2024, 3, 31), pension="70"),
        payslip_row(diego, date(2023, 1, 1), date(2023, 1, 31)),
    ])
    await test_db.commit()
    return {"ana": ana, "bruno": bruno, "carla": carla, "diego": diego}
