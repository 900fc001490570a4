"""
Haulpay - Authentication Service

Business logic for credential checks, session tokens and the root admin account.
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.employee import Employee, EmployeeRole
from app.utils.security import (
    create_access_token,
    get_password_hash,
    verify_password,
)

logger = logging.getLogger(__name__)

# Verified on unknown emails; login cost must not reveal whether an email exists
DUMMY_PASSWORD_HASH = get_password_hash("haulpay-unknown-employee")


class AuthService:
    """Service for authentication operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_employee_by_email(self, email: str) -> Optional[Employee]:
        """Get employee by email address."""
        result = await self.db.execute(
            select(Employee).where(Employee.email == email.strip().lower())
        )
        return result.scalar_one_or_none()

    async def get_employee_by_id(self, employee_id: int) -> Optional[Employee]:
        """Get employee by ID."""
        return await self.db.get(Employee, employee_id)

    async def authenticate(self, email: str, password: str) -> Optional[Employee]:
        """
        Authenticate employee with email and password.

        Unknown email and wrong password are indistinguishable to the caller.

        Returns:
            Employee if authentication successful, None otherwise
        """
        employee = await self.get_employee_by_email(email)

        if not employee:
            verify_password(password, DUMMY_PASSWORD_HASH)
            logger.info(f"Login failed for {email}: unknown email")
            return None

        if not verify_password(password, employee.hashed_password):
            logger.info(f"Login failed for {email}: wrong password")
            return None

        logger.info(f"Login succeeded for {employee.email} ({employee.role.value})")
        return employee

    def create_session_token(self, employee: Employee) -> str:
        """Mint the session token carried by the client."""
        return create_access_token({
            "sub": str(employee.id),
            "email": employee.email,
            "role": employee.role.value,
        })

    async def get_or_create_root_admin(self) -> Employee:
        """
        Get or create the root admin account.

        Called during application startup so a fresh database always has
        one administrator. Credentials come from settings.

        Returns:
            Employee: The root admin
        """
        existing = await self.get_employee_by_email(settings.root_admin_email)
        if existing:
            return existing

        root_admin = Employee(
            email=settings.root_admin_email.lower(),
            hashed_password=get_password_hash(settings.root_admin_password),
            first_name=settings.root_admin_first_name,
            last_name=settings.root_admin_last_name,
            role=EmployeeRole.ADMIN,
        )

        self.db.add(root_admin)
        await self.db.commit()
        await self.db.refresh(root_admin)

        logger.info(f"Root admin account created: {root_admin.email}")
        return root_admin
