"""
Haulpay - Authentication Router

API endpoints for login and the current session.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_async_session
from app.dependencies import get_current_identity
from app.schemas.auth import EmployeeProfile, LoginRequest, LoginResponse
from app.services.auth_service import AuthService
from app.utils.error_handling import InvalidCredentialsException, NotFoundException
from app.utils.security import SessionIdentity


router = APIRouter()


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Login",
    description="Authenticate with email and password. Returns a 24-hour session token and the employee profile.",
)
async def login(
    request: LoginRequest,
    db: AsyncSession = Depends(get_async_session),
):
    """Login with email and password."""
    auth_service = AuthService(db)

    employee = await auth_service.authenticate(
        email=request.email,
        password=request.password,
    )
    if not employee:
        raise InvalidCredentialsException()

    return LoginResponse(
        token=auth_service.create_session_token(employee),
        user=EmployeeProfile.model_validate(employee),
    )


@router.get(
    "/me",
    response_model=EmployeeProfile,
    summary="Current employee",
)
async def get_me(
    identity: SessionIdentity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_async_session),
):
    employee = await AuthService(db).get_employee_by_id(identity.id)
    if not employee:
        raise NotFoundException("Employee")
    return employee
