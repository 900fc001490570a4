"""
Haulpay - Employee API Tests

An employee only ever sees their own payroll.
"""

from datetime import date

import pytest
from httpx import AsyncClient

from conftest import create_payroll_record


class TestEmployeePayrollAPI:

    @pytest.mark.asyncio
    async def test_lists_only_own_records(
        self, client: AsyncClient, db_session, driver, other_driver, driver_headers,
    ):
        await create_payroll_record(db_session, driver, date(2024, 1, 2), "100")
        await create_payroll_record(db_session, driver, date(2024, 1, 9), "200")
        await create_payroll_record(db_session, other_driver, date(2024, 1, 2), "999")

        response = await client.get("/api/employee/payroll", headers=driver_headers)

        assert response.status_code == 200
        records = response.json()
        assert [r["payPeriod"] for r in records] == ["2024-01-09", "2024-01-02"]
        assert {r["employeeId"] for r in records} == {driver.id}

    @pytest.mark.asyncio
    async def test_no_records(self, client: AsyncClient, driver_headers):
        response = await client.get("/api/employee/payroll", headers=driver_headers)

        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_weekly_summary(self, client: AsyncClient, db_session, driver, driver_headers):
        await create_payroll_record(
            db_session, driver, date(2024, 12, 30), "400", deductions="50", meal_allowance="20",
        )
        await create_payroll_record(db_session, driver, date(2024, 12, 27), "100")

        response = await client.get("/api/employee/payroll/summary", headers=driver_headers)

        assert response.status_code == 200
        data = response.json()
        assert [w["key"] for w in data["weeks"]] == ["2025-W01", "2024-W52"]
        assert data["weeks"][0]["label"] == "Dec 30, 2024 - Jan 05, 2025"
        assert data["weeks"][0]["totals"] == {
            "base": "400.00",
            "allowances": "20.00",
            "deductions": "50.00",
            "earnings": "420.00",
            "net": "370.00",
        }
        assert data["totals"]["net"] == "470.00"

    @pytest.mark.asyncio
    async def test_download_own_payslip(self, client: AsyncClient, db_session, driver, driver_headers):
        await create_payroll_record(db_session, driver, date(2024, 1, 3), "250")

        response = await client.get("/api/employee/payroll/payslip/2024-W01", headers=driver_headers)

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert "payslip-alex-driver-2024-W01.pdf" in response.headers["content-disposition"]
        assert response.content.startswith(b"%PDF")

    @pytest.mark.asyncio
    async def test_payslip_for_another_employees_week_is_empty(
        self, client: AsyncClient, db_session, other_driver, driver_headers,
    ):
        await create_payroll_record(db_session, other_driver, date(2024, 1, 3), "250")

        response = await client.get("/api/employee/payroll/payslip/2024-W01", headers=driver_headers)

        assert response.status_code == 404
        assert response.json()["error"] == "No payroll records for week 2024-W01"

    @pytest.mark.asyncio
    async def test_payslip_bad_week_key(self, client: AsyncClient, driver_headers):
        response = await client.get("/api/employee/payroll/payslip/2024-W99", headers=driver_headers)

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_requires_token(self, client: AsyncClient):
        response = await client.get("/api/employee/payroll/summary")

        assert response.status_code == 401
