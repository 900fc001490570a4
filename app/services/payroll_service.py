"""
Haulpay - Payroll Service

Business logic for payroll records.

Net pay is derived, never accepted from the client:
    net_pay = base_salary + (distance + fuel + meal + other allowances) - deductions
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import contains_eager, selectinload

from app.models.employee import Employee
from app.models.payroll import PayrollRecord
from app.services.payroll_aggregation import quantize_amount, to_decimal

logger = logging.getLogger(__name__)


ALLOWANCE_FIELDS = (
    "distance_allowance",
    "fuel_allowance",
    "meal_allowance",
    "other_allowance",
)

PAY_FIELDS = ("base_salary",) + ALLOWANCE_FIELDS + ("deductions",)


def calculate_net_pay(
    base_salary: Any,
    distance_allowance: Any = 0,
    fuel_allowance: Any = 0,
    meal_allowance: Any = 0,
    other_allowance: Any = 0,
    deductions: Any = 0,
) -> Decimal:
    """Exact for inputs with at most two decimal places."""
    allowances = (
        to_decimal(distance_allowance)
        + to_decimal(fuel_allowance)
        + to_decimal(meal_allowance)
        + to_decimal(other_allowance)
    )
    return quantize_amount(to_decimal(base_salary) + allowances - to_decimal(deductions))


class PayrollService:
    """Service for creating, reading and maintaining payroll records."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _employee_exists(self, employee_id: int) -> bool:
        result = await self.db.execute(select(Employee.id).where(Employee.id == employee_id))
        return result.first() is not None

    def _apply_pay_fields(self, record: PayrollRecord, data: Dict[str, Any]) -> None:
        for field_name in PAY_FIELDS:
            value = data.get(field_name)
            setattr(record, field_name, quantize_amount(value if value is not None else 0))

        record.pay_period = data["pay_period"]
        record.trip_type = data.get("trip_type")
        record.trip_description = data.get("trip_description")
        record.net_pay = calculate_net_pay(**{f: getattr(record, f) for f in PAY_FIELDS})

    # ===========================================
    # WRITES
    # ===========================================

    async def create_record(self, data: Dict[str, Any]) -> Optional[PayrollRecord]:
        """
        Create a payroll record for an existing employee.

        Returns:
            The stored record with its employee loaded, or None if the
            employee does not exist
        """
        employee_id = data["employee_id"]
        if not await self._employee_exists(employee_id):
            return None

        record = PayrollRecord(employee_id=employee_id)
        self._apply_pay_fields(record, data)

        self.db.add(record)
        await self.db.commit()

        logger.info(
            f"Payroll record {record.id} created for employee {employee_id}: "
            f"net {record.net_pay} on {record.pay_period}"
        )
        return await self.get_record(record.id)

    async def update_record(
        self,
        record_id: int,
        data: Dict[str, Any],
    ) -> Optional[PayrollRecord]:
        """
        Replace the pay components of a record and recompute net pay.

        Raises:
            LookupError: If a reassignment names an unknown employee

        Returns:
            Updated record, or None if the record does not exist
        """
        record = await self.get_record(record_id)
        if not record:
            return None

        new_employee_id = data.get("employee_id")
        if new_employee_id is not None and new_employee_id != record.employee_id:
            if not await self._employee_exists(new_employee_id):
                raise LookupError("Employee not found")
            record.employee_id = new_employee_id

        self._apply_pay_fields(record, data)
        await self.db.commit()

        logger.info(f"Payroll record {record_id} updated: net {record.net_pay}")
        return await self.get_record(record_id)

    async def delete_record(self, record_id: int) -> bool:
        record = await self.db.get(PayrollRecord, record_id)
        if not record:
            return False

        await self.db.delete(record)
        await self.db.commit()

        logger.info(f"Payroll record {record_id} deleted")
        return True

    # ===========================================
    # READS
    # ===========================================

    async def get_record(self, record_id: int) -> Optional[PayrollRecord]:
        result = await self.db.execute(
            select(PayrollRecord)
            .options(selectinload(PayrollRecord.employee))
            .where(PayrollRecord.id == record_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list_records(
        self,
        employee_id: Optional[int] = None,
        period: Optional[date] = None,
    ) -> List[PayrollRecord]:
        """
        Admin listing joined with employee names.

        Ordered by pay period (newest first), then employee last and
        first name, then id.
        """
        query = (
            select(PayrollRecord)
            .join(PayrollRecord.employee)
            .options(contains_eager(PayrollRecord.employee))
        )
        if employee_id is not None:
            query = query.where(PayrollRecord.employee_id == employee_id)
        if period is not None:
            query = query.where(PayrollRecord.pay_period == period)

        query = query.order_by(
            PayrollRecord.pay_period.desc(),
            Employee.last_name,
            Employee.first_name,
            PayrollRecord.id,
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def list_employee_records(self, employee_id: int) -> List[PayrollRecord]:
        """One employee's own records, newest first."""
        result = await self.db.execute(
            select(PayrollRecord)
            .options(selectinload(PayrollRecord.employee))
            .where(PayrollRecord.employee_id == employee_id)
            .order_by(PayrollRecord.pay_period.desc(), PayrollRecord.id.desc())
        )
        return list(result.scalars().all())
