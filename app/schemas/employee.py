"""
Haulpay - Employee Schemas

Pydantic schemas for employee management requests and responses.
"""

from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field, field_validator

from app.models.employee import EmployeeRole
from app.schemas.common import CamelModel


# ===========================================
# REQUEST SCHEMAS
# ===========================================

class EmployeeBase(CamelModel):
    email: EmailStr
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("first_name", "last_name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class EmployeeCreate(EmployeeBase):
    """Schema for creating an employee account."""
    password: str = Field(..., min_length=6, max_length=100)
    role: EmployeeRole = EmployeeRole.EMPLOYEE


class EmployeeUpdate(EmployeeBase):
    """Profile update; the password is only changed when supplied."""
    password: Optional[str] = Field(None, min_length=6, max_length=100)


class RoleUpdate(CamelModel):
    role: EmployeeRole


# ===========================================
# RESPONSE SCHEMAS
# ===========================================

class EmployeeResponse(CamelModel):
    """Schema for employee response. Never carries the password hash."""
    id: int
    email: str
    first_name: str
    last_name: str
    role: EmployeeRole
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
