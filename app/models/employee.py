"""
Haulpay - Employee Model

Employees double as the credential store: every employee can log in,
and the role decides which dashboard and API surface they get.

Roles:
- admin: manages employees and payroll records
- employee: read-only access to their own payroll history
"""

from enum import Enum
from typing import TYPE_CHECKING, List

from sqlalchemy import String, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import BaseModel

if TYPE_CHECKING:
    from app.models.payroll import PayrollRecord


class EmployeeRole(str, Enum):
    """Access role carried in the session token."""
    ADMIN = "admin"
    EMPLOYEE = "employee"


class Employee(BaseModel):
    """Employee account with login credentials and role."""

    __tablename__ = "employees"

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )
    hashed_password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)

    role: Mapped[EmployeeRole] = mapped_column(
        SQLEnum(
            EmployeeRole,
            name="employee_role",
            values_callable=lambda enum: [member.value for member in enum],
        ),
        default=EmployeeRole.EMPLOYEE,
        nullable=False,
    )

    # Relationships
    payroll_records: Mapped[List["PayrollRecord"]] = relationship(
        "PayrollRecord",
        back_populates="employee",
        passive_deletes=True,
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def is_admin(self) -> bool:
        return self.role == EmployeeRole.ADMIN

    def __repr__(self) -> str:
        return f"<Employee(id={self.id}, email={self.email}, role={self.role.value if self.role else None})>"
