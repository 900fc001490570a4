"""
Haulpay - Payroll Service Tests

Net pay computation and payroll record persistence.
"""

from datetime import date
from decimal import Decimal

import pytest

from app.models.payroll import TripType
from app.services.payroll_service import PayrollService, calculate_net_pay
from conftest import create_payroll_record


def record_data(employee_id: int, **overrides) -> dict:
    data = {
        "employee_id": employee_id,
        "base_salary": Decimal("1000.00"),
        "distance_allowance": Decimal("120.00"),
        "fuel_allowance": Decimal("80.50"),
        "meal_allowance": Decimal("25.00"),
        "other_allowance": Decimal("0"),
        "deductions": Decimal("200.00"),
        "pay_period": date(2024, 1, 2),
        "trip_type": TripType.LONG_HAUL,
        "trip_description": "Depot to port",
    }
    data.update(overrides)
    return data


class TestCalculateNetPay:

    def test_base_plus_allowances_minus_deductions(self):
        assert calculate_net_pay(
            Decimal("1000.00"), Decimal("120.00"), Decimal("80.50"),
            Decimal("25.00"), Decimal("0"), Decimal("200.00"),
        ) == Decimal("1025.50")

    def test_exact_for_two_decimal_inputs(self):
        assert calculate_net_pay("0.10", "0.20", deductions="0.30") == Decimal("0.00")
        assert calculate_net_pay(1000, deductions="0.01") == Decimal("999.99")

    def test_defaults_to_base_salary(self):
        assert calculate_net_pay(Decimal("500")) == Decimal("500.00")

    def test_deductions_may_exceed_earnings(self):
        assert calculate_net_pay("100", deductions="150") == Decimal("-50.00")


class TestPayrollService:

    @pytest.mark.asyncio
    async def test_create_record_computes_net(self, db_session, driver):
        record = await PayrollService(db_session).create_record(record_data(driver.id))

        assert record.id is not None
        assert record.net_pay == Decimal("1025.50")
        assert record.total_allowances == Decimal("225.50")
        assert record.employee.email == driver.email
        assert record.trip_type == TripType.LONG_HAUL

    @pytest.mark.asyncio
    async def test_create_record_unknown_employee(self, db_session):
        assert await PayrollService(db_session).create_record(record_data(4242)) is None

    @pytest.mark.asyncio
    async def test_update_recomputes_net(self, db_session, driver):
        service = PayrollService(db_session)
        record = await service.create_record(record_data(driver.id))

        updated = await service.update_record(record.id, record_data(
            None, base_salary=Decimal("500.00"), deductions=Decimal("0"),
        ))

        assert updated.employee_id == driver.id
        assert updated.net_pay == Decimal("725.50")

    @pytest.mark.asyncio
    async def test_update_reassigns_employee(self, db_session, driver, other_driver):
        service = PayrollService(db_session)
        record = await service.create_record(record_data(driver.id))

        updated = await service.update_record(record.id, record_data(other_driver.id))

        assert updated.employee_id == other_driver.id
        assert updated.employee.email == other_driver.email

    @pytest.mark.asyncio
    async def test_update_reassign_to_unknown_employee(self, db_session, driver):
        service = PayrollService(db_session)
        record = await service.create_record(record_data(driver.id))

        with pytest.raises(LookupError):
            await service.update_record(record.id, record_data(4242))

    @pytest.mark.asyncio
    async def test_update_and_delete_unknown_record(self, db_session, driver):
        service = PayrollService(db_session)

        assert await service.update_record(4242, record_data(driver.id)) is None
        assert await service.delete_record(4242) is False

    @pytest.mark.asyncio
    async def test_delete_record(self, db_session, driver):
        service = PayrollService(db_session)
        record = await service.create_record(record_data(driver.id))

        assert await service.delete_record(record.id) is True
        assert await service.get_record(record.id) is None

    @pytest.mark.asyncio
    async def test_list_records_ordering_and_filters(self, db_session, driver, other_driver):
        # driver is "Alex Driver", other_driver is "Blake Carter"
        newest = await create_payroll_record(db_session, driver, date(2024, 2, 1), "100")
        same_day_driver = await create_payroll_record(db_session, driver, date(2024, 1, 15), "100")
        same_day_carter = await create_payroll_record(db_session, other_driver, date(2024, 1, 15), "100")
        oldest = await create_payroll_record(db_session, other_driver, date(2024, 1, 1), "100")

        service = PayrollService(db_session)
        records = await service.list_records()

        assert [r.id for r in records] == [
            newest.id, same_day_carter.id, same_day_driver.id, oldest.id,
        ]

        by_employee = await service.list_records(employee_id=other_driver.id)
        assert [r.id for r in by_employee] == [same_day_carter.id, oldest.id]

        by_period = await service.list_records(period=date(2024, 1, 15))
        assert {r.id for r in by_period} == {same_day_driver.id, same_day_carter.id}

        both = await service.list_records(employee_id=driver.id, period=date(2024, 1, 15))
        assert [r.id for r in both] == [same_day_driver.id]

    @pytest.mark.asyncio
    async def test_list_employee_records_only_own(self, db_session, driver, other_driver):
        mine_old = await create_payroll_record(db_session, driver, date(2024, 1, 1), "100")
        mine_new = await create_payroll_record(db_session, driver, date(2024, 1, 9), "100")
        await create_payroll_record(db_session, other_driver, date(2024, 1, 5), "100")

        records = await PayrollService(db_session).list_employee_records(driver.id)

        assert [r.id for r in records] == [mine_new.id, mine_old.id]
