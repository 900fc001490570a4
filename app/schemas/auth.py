"""
Haulpay - Authentication Schemas

Pydantic schemas for login requests and responses.
"""

from pydantic import Field, field_validator

from app.models.employee import EmployeeRole
from app.schemas.common import CamelModel


# ===========================================
# REQUEST SCHEMAS
# ===========================================

class LoginRequest(CamelModel):
    """Schema for login request."""
    email: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


# ===========================================
# RESPONSE SCHEMAS
# ===========================================

class EmployeeProfile(CamelModel):
    """Public view of an authenticated employee."""
    id: int
    email: str
    first_name: str
    last_name: str
    role: EmployeeRole


class LoginResponse(CamelModel):
    """Schema for login response."""
    token: str
    user: EmployeeProfile
