"""
Haulpay - Routers Package

FastAPI route handlers.

Routers:
- auth: Login and current session
- admin_employees: Employee account management (admin)
- admin_payroll: Payroll records, summaries and payslips (admin)
- employee_payroll: Own payroll and payslips (any employee)
- views: HTML page views
"""

from app.routers import (
    auth,
    admin_employees,
    admin_payroll,
    employee_payroll,
    views,
)

__all__ = [
    "auth",
    "admin_employees",
    "admin_payroll",
    "employee_payroll",
    "views",
]
