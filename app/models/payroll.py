"""
Haulpay - Payroll Models

One payroll record per trip / pay date for an employee.

Pay components:
- Base salary for the trip
- Itemized allowances: distance, fuel, meal, other
- Deductions (single amount)
- Net pay = base + allowances - deductions, always recomputed on write
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Date, ForeignKey, Integer, Numeric, String, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import BaseModel

if TYPE_CHECKING:
    from app.models.employee import Employee


class TripType(str, Enum):
    """Kind of haul a payroll record pays for."""
    LOCAL = "local"
    REGIONAL = "regional"
    LONG_HAUL = "long_haul"
    OTHER = "other"


class PayrollRecord(BaseModel):
    """Payroll entry for a single pay period date."""

    __tablename__ = "payroll"

    employee_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("employees.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    base_salary: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2),
        nullable=False,
    )

    # Itemized allowances
    distance_allowance: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2),
        nullable=False,
        default=Decimal("0.00"),
    )
    fuel_allowance: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2),
        nullable=False,
        default=Decimal("0.00"),
    )
    meal_allowance: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2),
        nullable=False,
        default=Decimal("0.00"),
    )
    other_allowance: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2),
        nullable=False,
        default=Decimal("0.00"),
    )

    deductions: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2),
        nullable=False,
        default=Decimal("0.00"),
    )
    net_pay: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2),
        nullable=False,
        comment="base_salary + allowances - deductions",
    )

    pay_period: Mapped[date] = mapped_column(Date, nullable=False, index=True)

    # Trip metadata
    trip_type: Mapped[Optional[TripType]] = mapped_column(
        SQLEnum(
            TripType,
            name="trip_type",
            values_callable=lambda enum: [member.value for member in enum],
        ),
        nullable=True,
    )
    trip_description: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    # Relationships
    employee: Mapped["Employee"] = relationship(
        "Employee",
        back_populates="payroll_records",
    )

    @property
    def total_allowances(self) -> Decimal:
        """Sum of the itemized allowances."""
        return (
            Decimal(self.distance_allowance or 0)
            + Decimal(self.fuel_allowance or 0)
            + Decimal(self.meal_allowance or 0)
            + Decimal(self.other_allowance or 0)
        )

    @property
    def gross_pay(self) -> Decimal:
        return Decimal(self.base_salary or 0) + self.total_allowances

    def __repr__(self) -> str:
        return f"<PayrollRecord(id={self.id}, employee_id={self.employee_id}, pay_period={self.pay_period})>"
