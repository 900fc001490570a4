"""
Haulpay - SQLAlchemy Models Package

This package contains all database models for the application.
"""

from app.models.base import BaseModel, TimestampMixin
from app.models.employee import Employee, EmployeeRole
from app.models.payroll import PayrollRecord, TripType

__all__ = [
    "BaseModel",
    "TimestampMixin",
    "Employee",
    "EmployeeRole",
    "PayrollRecord",
    "TripType",
]
