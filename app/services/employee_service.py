"""
Haulpay - Employee Service

Business logic for managing employee accounts.

Protection rules (violations raise ValueError, mapped to 400):
- An admin cannot delete their own account or change their own role
- The root admin account cannot be edited, demoted or deleted
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.employee import Employee, EmployeeRole
from app.models.payroll import PayrollRecord
from app.utils.security import SessionIdentity, get_password_hash

logger = logging.getLogger(__name__)


DUPLICATE_EMAIL_MESSAGE = "Employee with this email already exists"
SELF_DELETE_MESSAGE = "Cannot delete your own account"
SELF_ROLE_MESSAGE = "Cannot change your own role"
ROOT_ADMIN_MESSAGE = "The root admin account cannot be modified"


def is_root_admin(employee: Employee) -> bool:
    return employee.email == settings.root_admin_email.lower()


class EmployeeService:
    """Service for employee account management."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_employees(self) -> List[Employee]:
        """All employees, newest first."""
        result = await self.db.execute(
            select(Employee).order_by(Employee.created_at.desc(), Employee.id.desc())
        )
        return list(result.scalars().all())

    async def get_employee(self, employee_id: int) -> Optional[Employee]:
        return await self.db.get(Employee, employee_id)

    async def _email_taken(self, email: str, exclude_id: Optional[int] = None) -> bool:
        query = select(Employee.id).where(Employee.email == email.lower())
        if exclude_id is not None:
            query = query.where(Employee.id != exclude_id)
        result = await self.db.execute(query)
        return result.first() is not None

    async def create_employee(self, data: Dict[str, Any]) -> Employee:
        """
        Create a new employee account.

        Args:
            data: email, password, first_name, last_name and optional role

        Raises:
            ValueError: If the email is already registered
        """
        email = data["email"].strip().lower()
        if await self._email_taken(email):
            raise ValueError(DUPLICATE_EMAIL_MESSAGE)

        employee = Employee(
            email=email,
            hashed_password=get_password_hash(data["password"]),
            first_name=data["first_name"],
            last_name=data["last_name"],
            role=data.get("role") or EmployeeRole.EMPLOYEE,
        )
        self.db.add(employee)
        await self.db.commit()
        await self.db.refresh(employee)

        logger.info(f"Employee created: {employee.email} ({employee.role.value})")
        return employee

    async def update_employee(
        self,
        employee_id: int,
        data: Dict[str, Any],
    ) -> Optional[Employee]:
        """
        Update profile fields; the password only when one is given.

        Returns:
            Updated employee, or None if it does not exist
        """
        employee = await self.get_employee(employee_id)
        if not employee:
            return None

        if is_root_admin(employee):
            raise ValueError(ROOT_ADMIN_MESSAGE)

        email = data["email"].strip().lower()
        if await self._email_taken(email, exclude_id=employee.id):
            raise ValueError(DUPLICATE_EMAIL_MESSAGE)

        employee.email = email
        employee.first_name = data["first_name"]
        employee.last_name = data["last_name"]
        if data.get("password"):
            employee.hashed_password = get_password_hash(data["password"])

        await self.db.commit()
        await self.db.refresh(employee)

        logger.info(f"Employee updated: {employee.id}")
        return employee

    async def update_role(
        self,
        employee_id: int,
        role: EmployeeRole,
        actor: SessionIdentity,
    ) -> Optional[Employee]:
        """Change an employee's role. Admins cannot change their own."""
        if employee_id == actor.id:
            raise ValueError(SELF_ROLE_MESSAGE)

        employee = await self.get_employee(employee_id)
        if not employee:
            return None

        if is_root_admin(employee):
            raise ValueError(ROOT_ADMIN_MESSAGE)

        employee.role = role
        await self.db.commit()
        await self.db.refresh(employee)

        logger.info(f"Employee {employee.id} role set to {role.value} by {actor.email}")
        return employee

    async def delete_employee(self, employee_id: int, actor: SessionIdentity) -> bool:
        """
        Delete an employee together with their payroll records.

        Returns:
            True if deleted, False if the employee does not exist
        """
        if employee_id == actor.id:
            raise ValueError(SELF_DELETE_MESSAGE)

        employee = await self.get_employee(employee_id)
        if not employee:
            return False

        if is_root_admin(employee):
            raise ValueError(ROOT_ADMIN_MESSAGE)

        await self.db.execute(
            delete(PayrollRecord).where(PayrollRecord.employee_id == employee_id)
        )
        await self.db.delete(employee)
        await self.db.commit()

        logger.info(f"Employee {employee_id} deleted by {actor.email}")
        return True
