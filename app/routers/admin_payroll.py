"""
Haulpay - Admin Payroll Router

Payroll record management, grouped summaries and payslips for any employee.
Every endpoint requires the admin role.
"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_async_session
from app.dependencies import require_admin
from app.schemas.common import MessageResponse
from app.schemas.payroll import (
    EmployeePayrollSummaryResponse,
    PayrollRecordCreate,
    PayrollRecordResponse,
    PayrollRecordUpdate,
)
from app.services.employee_service import EmployeeService
from app.services.payroll_aggregation import group_by_employee
from app.services.payroll_service import PayrollService
from app.services.payslip_pdf_service import (
    PayslipData,
    PayslipPDFService,
    build_week_payslip,
)
from app.utils.error_handling import NotFoundException, ValidationException
from app.utils.security import SessionIdentity


router = APIRouter()


def payslip_pdf_response(payslip: PayslipData) -> Response:
    """Render a payslip as a PDF attachment."""
    pdf_bytes = PayslipPDFService().generate_payslip_pdf(payslip)
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="{payslip.filename}"',
            "Content-Length": str(len(pdf_bytes)),
        }
    )


def week_payslip_or_error(employee, records, week_key: str) -> PayslipData:
    try:
        payslip = build_week_payslip(employee, records, week_key)
    except ValueError as e:
        raise ValidationException(str(e))
    if payslip is None:
        raise NotFoundException(
            "Payslip",
            message=f"No payroll records for week {week_key}",
        )
    return payslip


# ===========================================
# SUMMARY & PAYSLIP ENDPOINTS
# ===========================================

@router.get(
    "/payroll/summary",
    response_model=List[EmployeePayrollSummaryResponse],
    summary="Payroll grouped by employee and week",
    description="Same filters as the record listing. Employees are sorted by name; weeks newest first.",
)
async def payroll_summary(
    employee_id: Optional[int] = Query(None, alias="employeeId"),
    period: Optional[date] = Query(None),
    admin: SessionIdentity = Depends(require_admin),
    db: AsyncSession = Depends(get_async_session),
):
    records = await PayrollService(db).list_records(employee_id=employee_id, period=period)
    summaries = group_by_employee(records, sort_by_name=True)
    return [EmployeePayrollSummaryResponse.from_summary(s) for s in summaries]


@router.get(
    "/payroll/payslip/{employee_id}/{week_key}",
    summary="Download payslip PDF for an employee",
    response_class=Response,
)
async def download_employee_payslip(
    employee_id: int,
    week_key: str,
    admin: SessionIdentity = Depends(require_admin),
    db: AsyncSession = Depends(get_async_session),
):
    employee = await EmployeeService(db).get_employee(employee_id)
    if not employee:
        raise NotFoundException("Employee", employee_id)

    records = await PayrollService(db).list_employee_records(employee_id)
    payslip = week_payslip_or_error(employee, records, week_key)
    return payslip_pdf_response(payslip)


# ===========================================
# RECORD ENDPOINTS
# ===========================================

@router.get(
    "/payroll",
    response_model=List[PayrollRecordResponse],
    summary="List payroll records",
    description="Filter by employeeId and/or exact pay period date. Newest pay period first.",
)
async def list_payroll_records(
    employee_id: Optional[int] = Query(None, alias="employeeId"),
    period: Optional[date] = Query(None),
    admin: SessionIdentity = Depends(require_admin),
    db: AsyncSession = Depends(get_async_session),
):
    records = await PayrollService(db).list_records(employee_id=employee_id, period=period)
    return [PayrollRecordResponse.from_record(r) for r in records]


@router.post(
    "/payroll",
    response_model=PayrollRecordResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create payroll record",
    description="Net pay is computed from base salary, allowances and deductions.",
)
async def create_payroll_record(
    request: PayrollRecordCreate,
    admin: SessionIdentity = Depends(require_admin),
    db: AsyncSession = Depends(get_async_session),
):
    record = await PayrollService(db).create_record(request.model_dump())
    if not record:
        raise NotFoundException("Employee", request.employee_id)
    return PayrollRecordResponse.from_record(record)


@router.get(
    "/payroll/{record_id}",
    response_model=PayrollRecordResponse,
    summary="Get payroll record",
)
async def get_payroll_record(
    record_id: int,
    admin: SessionIdentity = Depends(require_admin),
    db: AsyncSession = Depends(get_async_session),
):
    record = await PayrollService(db).get_record(record_id)
    if not record:
        raise NotFoundException("Payroll record", record_id)
    return PayrollRecordResponse.from_record(record)


@router.put(
    "/payroll/{record_id}",
    response_model=PayrollRecordResponse,
    summary="Update payroll record",
)
async def update_payroll_record(
    record_id: int,
    request: PayrollRecordUpdate,
    admin: SessionIdentity = Depends(require_admin),
    db: AsyncSession = Depends(get_async_session),
):
    try:
        record = await PayrollService(db).update_record(record_id, request.model_dump())
    except LookupError:
        raise NotFoundException("Employee", request.employee_id)

    if not record:
        raise NotFoundException("Payroll record", record_id)
    return PayrollRecordResponse.from_record(record)


@router.delete(
    "/payroll/{record_id}",
    response_model=MessageResponse,
    summary="Delete payroll record",
)
async def delete_payroll_record(
    record_id: int,
    admin: SessionIdentity = Depends(require_admin),
    db: AsyncSession = Depends(get_async_session),
):
    deleted = await PayrollService(db).delete_record(record_id)
    if not deleted:
        raise NotFoundException("Payroll record", record_id)
    return MessageResponse(message="Payroll record deleted successfully")
