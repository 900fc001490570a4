"""
Seed Script: Demo Drivers and Trips
===================================
Populates a development database with a few employees and several weeks
of trip payroll so the dashboards and payslips have something to show.

This script creates:
- The root admin (if missing)
- Demo drivers with password "Driver123!"
- Payroll records for the last few weeks, one per trip

Safe to run repeatedly: existing demo drivers are left untouched.
"""

import asyncio
import logging
import random
from datetime import date, timedelta
from decimal import Decimal

# Add project root to path
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.database import async_session_maker, init_db
from app.models.employee import EmployeeRole
from app.models.payroll import TripType
from app.services.auth_service import AuthService
from app.services.employee_service import EmployeeService
from app.services.payroll_service import PayrollService

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger("seed_demo_data")


# =============================================================================
# CONSTANTS
# =============================================================================

DEMO_PASSWORD = "Driver123!"
WEEKS_OF_HISTORY = 6

DEMO_DRIVERS = [
    ("maria.lopez@haulpay.com", "Maria", "Lopez"),
    ("james.okafor@haulpay.com", "James", "Okafor"),
    ("chen.wei@haulpay.com", "Chen", "Wei"),
]

TRIPS = {
    TripType.LOCAL: ("City deliveries", Decimal("180.00"), Decimal("15.00")),
    TripType.REGIONAL: ("Depot to regional hub", Decimal("320.00"), Decimal("45.00")),
    TripType.LONG_HAUL: ("Interstate freight run", Decimal("650.00"), Decimal("120.00")),
}


def money(low: int, high: int) -> Decimal:
    return Decimal(random.randint(low * 100, high * 100)) / 100


async def seed() -> None:
    await init_db()

    async with async_session_maker() as session:
        admin = await AuthService(session).get_or_create_root_admin()
        logger.info(f"Root admin: {admin.email}")

        employee_service = EmployeeService(session)
        payroll_service = PayrollService(session)
        auth_service = AuthService(session)

        today = date.today()
        first_monday = today - timedelta(days=today.weekday(), weeks=WEEKS_OF_HISTORY - 1)

        for email, first_name, last_name in DEMO_DRIVERS:
            if await auth_service.get_employee_by_email(email):
                logger.info(f"Skipping existing driver {email}")
                continue

            driver = await employee_service.create_employee({
                "email": email,
                "password": DEMO_PASSWORD,
                "first_name": first_name,
                "last_name": last_name,
                "role": EmployeeRole.EMPLOYEE,
            })

            trips = 0
            for week in range(WEEKS_OF_HISTORY):
                monday = first_monday + timedelta(weeks=week)
                for day in random.sample(range(6), k=random.randint(2, 4)):
                    trip_type = random.choice(list(TRIPS))
                    description, base, fuel = TRIPS[trip_type]
                    await payroll_service.create_record({
                        "employee_id": driver.id,
                        "pay_period": monday + timedelta(days=day),
                        "base_salary": base,
                        "distance_allowance": money(10, 90),
                        "fuel_allowance": fuel,
                        "meal_allowance": Decimal("12.50"),
                        "other_allowance": Decimal("0"),
                        "deductions": money(0, 40),
                        "trip_type": trip_type,
                        "trip_description": description,
                    })
                    trips += 1

            logger.info(f"Created {first_name} {last_name} with {trips} trips")


if __name__ == "__main__":
    asyncio.run(seed())
