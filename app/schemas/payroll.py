"""
Haulpay - Payroll Schemas

Pydantic schemas for payroll requests, responses and grouped summaries.
Net pay is never accepted from the client; it is always recomputed.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import Field, field_validator

from app.models.payroll import PayrollRecord, TripType
from app.schemas.common import CamelModel
from app.services.payroll_aggregation import (
    EmployeeSummary,
    PayrollTotals,
    WeekBucket,
    quantize_amount,
    week_in_range,
)


# ===========================================
# REQUEST SCHEMAS
# ===========================================

class PayrollRecordBase(CamelModel):
    """Pay components shared by create and update."""
    base_salary: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    distance_allowance: Decimal = Field(default=Decimal("0"), ge=0, max_digits=12, decimal_places=2)
    fuel_allowance: Decimal = Field(default=Decimal("0"), ge=0, max_digits=12, decimal_places=2)
    meal_allowance: Decimal = Field(default=Decimal("0"), ge=0, max_digits=12, decimal_places=2)
    other_allowance: Decimal = Field(default=Decimal("0"), ge=0, max_digits=12, decimal_places=2)
    deductions: Decimal = Field(default=Decimal("0"), ge=0, max_digits=12, decimal_places=2)
    pay_period: date
    trip_type: Optional[TripType] = None
    trip_description: Optional[str] = Field(None, max_length=500)

    @field_validator("pay_period")
    @classmethod
    def pay_week_in_calendar(cls, v: date) -> date:
        if not week_in_range(v):
            raise ValueError("pay period week runs past the last supported date")
        return v


class PayrollRecordCreate(PayrollRecordBase):
    """Schema for creating a payroll record."""
    employee_id: int = Field(..., gt=0)


class PayrollRecordUpdate(PayrollRecordBase):
    """Full replacement of the pay components; employee may be reassigned."""
    employee_id: Optional[int] = Field(None, gt=0)


# ===========================================
# RESPONSE SCHEMAS
# ===========================================

class PayrollRecordResponse(CamelModel):
    """Payroll record joined with the owning employee's name."""
    id: int
    employee_id: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    base_salary: Decimal
    distance_allowance: Decimal
    fuel_allowance: Decimal
    meal_allowance: Decimal
    other_allowance: Decimal
    total_allowances: Decimal
    deductions: Decimal
    net_pay: Decimal
    pay_period: date
    trip_type: Optional[TripType] = None
    trip_description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: PayrollRecord) -> "PayrollRecordResponse":
        employee = record.employee
        return cls(
            id=record.id,
            employee_id=record.employee_id,
            first_name=employee.first_name if employee else None,
            last_name=employee.last_name if employee else None,
            email=employee.email if employee else None,
            base_salary=quantize_amount(record.base_salary),
            distance_allowance=quantize_amount(record.distance_allowance),
            fuel_allowance=quantize_amount(record.fuel_allowance),
            meal_allowance=quantize_amount(record.meal_allowance),
            other_allowance=quantize_amount(record.other_allowance),
            total_allowances=quantize_amount(record.total_allowances),
            deductions=quantize_amount(record.deductions),
            net_pay=quantize_amount(record.net_pay),
            pay_period=record.pay_period,
            trip_type=record.trip_type,
            trip_description=record.trip_description,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )


class TotalsResponse(CamelModel):
    base: Decimal
    allowances: Decimal
    deductions: Decimal
    earnings: Decimal
    net: Decimal

    @classmethod
    def from_totals(cls, totals: PayrollTotals) -> "TotalsResponse":
        return cls(**totals.to_dict())


class WeekSummaryResponse(CamelModel):
    """One ISO week of records with subtotals."""
    key: str
    label: str
    week_start: date
    week_end: date
    totals: TotalsResponse
    records: List[PayrollRecordResponse]

    @classmethod
    def from_bucket(cls, bucket: WeekBucket) -> "WeekSummaryResponse":
        return cls(
            key=bucket.key,
            label=bucket.label,
            week_start=bucket.week_start,
            week_end=bucket.week_end,
            totals=TotalsResponse.from_totals(bucket.totals),
            records=[PayrollRecordResponse.from_record(r) for r in bucket.records],
        )


class EmployeePayrollSummaryResponse(CamelModel):
    """All weeks of one employee with grand totals."""
    employee_id: int
    employee_name: str
    email: str
    totals: TotalsResponse
    weeks: List[WeekSummaryResponse]

    @classmethod
    def from_summary(cls, summary: EmployeeSummary) -> "EmployeePayrollSummaryResponse":
        return cls(
            employee_id=summary.employee_id,
            employee_name=summary.employee_name,
            email=summary.email,
            totals=TotalsResponse.from_totals(summary.totals),
            weeks=[WeekSummaryResponse.from_bucket(w) for w in summary.weeks],
        )


class WeeklyPayrollResponse(CamelModel):
    """Employee-facing summary: own weeks plus overall totals."""
    totals: TotalsResponse
    weeks: List[WeekSummaryResponse]
