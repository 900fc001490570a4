"""
Haulpay - Employee Payroll Router

Read-only access to the caller's own payroll. The employee id always comes
from the session token, never from the request.
"""

from typing import List

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_async_session
from app.dependencies import get_current_identity
from app.routers.admin_payroll import payslip_pdf_response, week_payslip_or_error
from app.schemas.payroll import (
    PayrollRecordResponse,
    TotalsResponse,
    WeeklyPayrollResponse,
    WeekSummaryResponse,
)
from app.services.employee_service import EmployeeService
from app.services.payroll_aggregation import group_by_week, overall_totals
from app.services.payroll_service import PayrollService
from app.utils.error_handling import NotFoundException
from app.utils.security import SessionIdentity


router = APIRouter()


@router.get(
    "/payroll",
    response_model=List[PayrollRecordResponse],
    summary="My payroll records",
)
async def my_payroll_records(
    identity: SessionIdentity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_async_session),
):
    records = await PayrollService(db).list_employee_records(identity.id)
    return [PayrollRecordResponse.from_record(r) for r in records]


@router.get(
    "/payroll/summary",
    response_model=WeeklyPayrollResponse,
    summary="My payroll by week",
)
async def my_payroll_summary(
    identity: SessionIdentity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_async_session),
):
    records = await PayrollService(db).list_employee_records(identity.id)
    weeks = group_by_week(records)
    return WeeklyPayrollResponse(
        totals=TotalsResponse.from_totals(overall_totals(weeks)),
        weeks=[WeekSummaryResponse.from_bucket(w) for w in weeks],
    )


@router.get(
    "/payroll/payslip/{week_key}",
    summary="Download my payslip PDF",
    response_class=Response,
)
async def download_my_payslip(
    week_key: str,
    identity: SessionIdentity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_async_session),
):
    employee = await EmployeeService(db).get_employee(identity.id)
    if not employee:
        raise NotFoundException("Employee", identity.id)

    records = await PayrollService(db).list_employee_records(identity.id)
    payslip = week_payslip_or_error(employee, records, week_key)
    return payslip_pdf_response(payslip)
