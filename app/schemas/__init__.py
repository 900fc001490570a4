"""
Haulpay - Schemas Package

Pydantic schemas for request/response validation.
"""

from app.schemas.common import CamelModel, MessageResponse
from app.schemas.auth import LoginRequest, LoginResponse, EmployeeProfile
from app.schemas.employee import (
    EmployeeCreate,
    EmployeeUpdate,
    EmployeeResponse,
    RoleUpdate,
)
from app.schemas.payroll import (
    PayrollRecordCreate,
    PayrollRecordUpdate,
    PayrollRecordResponse,
    TotalsResponse,
    WeekSummaryResponse,
    EmployeePayrollSummaryResponse,
    WeeklyPayrollResponse,
)

__all__ = [
    "CamelModel",
    "MessageResponse",
    "LoginRequest",
    "LoginResponse",
    "EmployeeProfile",
    "EmployeeCreate",
    "EmployeeUpdate",
    "EmployeeResponse",
    "RoleUpdate",
    "PayrollRecordCreate",
    "PayrollRecordUpdate",
    "PayrollRecordResponse",
    "TotalsResponse",
    "WeekSummaryResponse",
    "EmployeePayrollSummaryResponse",
    "WeeklyPayrollResponse",
]
