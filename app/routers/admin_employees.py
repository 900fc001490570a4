"""
Haulpay - Admin Employee Router

Employee account management. Every endpoint requires the admin role.
"""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_async_session
from app.dependencies import require_admin
from app.schemas.common import MessageResponse
from app.schemas.employee import (
    EmployeeCreate,
    EmployeeResponse,
    EmployeeUpdate,
    RoleUpdate,
)
from app.services.employee_service import EmployeeService
from app.utils.error_handling import NotFoundException, ValidationException
from app.utils.security import SessionIdentity


router = APIRouter()


@router.get(
    "/employees",
    response_model=List[EmployeeResponse],
    summary="List employees",
)
async def list_employees(
    admin: SessionIdentity = Depends(require_admin),
    db: AsyncSession = Depends(get_async_session),
):
    """All employees, newest first."""
    return await EmployeeService(db).list_employees()


@router.post(
    "/employees",
    response_model=EmployeeResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create employee",
)
async def create_employee(
    request: EmployeeCreate,
    admin: SessionIdentity = Depends(require_admin),
    db: AsyncSession = Depends(get_async_session),
):
    try:
        return await EmployeeService(db).create_employee(request.model_dump())
    except ValueError as e:
        raise ValidationException(str(e))


@router.put(
    "/employees/{employee_id}",
    response_model=EmployeeResponse,
    summary="Update employee",
    description="Update name and email. The password is only changed when provided.",
)
async def update_employee(
    employee_id: int,
    request: EmployeeUpdate,
    admin: SessionIdentity = Depends(require_admin),
    db: AsyncSession = Depends(get_async_session),
):
    try:
        employee = await EmployeeService(db).update_employee(employee_id, request.model_dump())
    except ValueError as e:
        raise ValidationException(str(e))
    if not employee:
        raise NotFoundException("Employee", employee_id)
    return employee


@router.put(
    "/employees/{employee_id}/role",
    response_model=EmployeeResponse,
    summary="Change employee role",
)
async def update_employee_role(
    employee_id: int,
    request: RoleUpdate,
    admin: SessionIdentity = Depends(require_admin),
    db: AsyncSession = Depends(get_async_session),
):
    try:
        employee = await EmployeeService(db).update_role(employee_id, request.role, actor=admin)
    except ValueError as e:
        raise ValidationException(str(e))
    if not employee:
        raise NotFoundException("Employee", employee_id)
    return employee


@router.delete(
    "/employees/{employee_id}",
    response_model=MessageResponse,
    summary="Delete employee",
    description="Delete an employee and all of their payroll records.",
)
async def delete_employee(
    employee_id: int,
    admin: SessionIdentity = Depends(require_admin),
    db: AsyncSession = Depends(get_async_session),
):
    try:
        deleted = await EmployeeService(db).delete_employee(employee_id, actor=admin)
    except ValueError as e:
        raise ValidationException(str(e))
    if not deleted:
        raise NotFoundException("Employee", employee_id)
    return MessageResponse(message="Employee deleted successfully")
