"""
Haulpay - Test Configuration

Pytest fixtures and configuration.
"""

import os

# Settings are read at import time
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-haulpay-tests")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("APP_ENV", "testing")

from datetime import date
from decimal import Decimal
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base, get_async_session
from app.models.employee import Employee, EmployeeRole
from app.models.payroll import PayrollRecord, TripType
from app.services.auth_service import AuthService
from app.services.payroll_service import calculate_net_pay
from app.utils.security import get_password_hash, create_access_token
from main import app


ADMIN_PASSWORD = "AdminPass123!"
DRIVER_PASSWORD = "DriverPass123!"

# One shared in-memory database per test
test_engine = create_async_engine(
    "sqlite+aiosqlite:///:memory:",
    echo=False,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestSessionLocal = async_sessionmaker(
    test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh database session for each test."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session
        await session.rollback()

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with database session override."""

    async def override_get_session():
        yield db_session

    app.dependency_overrides[get_async_session] = override_get_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ===========================================
# DATA FIXTURES
# ===========================================

async def create_employee(
    db_session: AsyncSession,
    email: str,
    password: str,
    first_name: str,
    last_name: str,
    role: EmployeeRole = EmployeeRole.EMPLOYEE,
) -> Employee:
    employee = Employee(
        email=email,
        hashed_password=get_password_hash(password),
        first_name=first_name,
        last_name=last_name,
        role=role,
    )
    db_session.add(employee)
    await db_session.commit()
    await db_session.refresh(employee)
    return employee


async def create_payroll_record(
    db_session: AsyncSession,
    employee: Employee,
    pay_period: date,
    base_salary: str,
    deductions: str = "0",
    trip_type: TripType = TripType.LOCAL,
    **allowances: str,
) -> PayrollRecord:
    amounts = {name: Decimal(value) for name, value in allowances.items()}
    record = PayrollRecord(
        employee_id=employee.id,
        pay_period=pay_period,
        base_salary=Decimal(base_salary),
        distance_allowance=amounts.get("distance_allowance", Decimal("0")),
        fuel_allowance=amounts.get("fuel_allowance", Decimal("0")),
        meal_allowance=amounts.get("meal_allowance", Decimal("0")),
        other_allowance=amounts.get("other_allowance", Decimal("0")),
        deductions=Decimal(deductions),
        trip_type=trip_type,
    )
    record.net_pay = calculate_net_pay(
        record.base_salary,
        record.distance_allowance,
        record.fuel_allowance,
        record.meal_allowance,
        record.other_allowance,
        record.deductions,
    )
    db_session.add(record)
    await db_session.commit()
    await db_session.refresh(record)
    return record


@pytest_asyncio.fixture
async def root_admin(db_session: AsyncSession) -> Employee:
    """The seeded root admin account."""
    return await AuthService(db_session).get_or_create_root_admin()


@pytest_asyncio.fixture
async def admin_employee(db_session: AsyncSession) -> Employee:
    """A regular (non-root) admin."""
    return await create_employee(
        db_session, "dispatch@haulpay.com", ADMIN_PASSWORD, "Dana", "Dispatch",
        role=EmployeeRole.ADMIN,
    )


@pytest_asyncio.fixture
async def driver(db_session: AsyncSession) -> Employee:
    return await create_employee(
        db_session, "driver@haulpay.com", DRIVER_PASSWORD, "Alex", "Driver",
    )


@pytest_asyncio.fixture
async def other_driver(db_session: AsyncSession) -> Employee:
    return await create_employee(
        db_session, "second.driver@haulpay.com", DRIVER_PASSWORD, "Blake", "Carter",
    )


def headers_for(employee: Employee) -> dict:
    token = create_access_token(data={
        "sub": str(employee.id),
        "email": employee.email,
        "role": employee.role.value,
    })
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(admin_employee: Employee) -> dict:
    """Generate authorization headers for the admin."""
    return headers_for(admin_employee)


@pytest.fixture
def driver_headers(driver: Employee) -> dict:
    """Generate authorization headers for the driver."""
    return headers_for(driver)
