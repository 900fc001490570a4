"""
Haulpay - Services Package

Business logic services.
"""

from app.services.auth_service import AuthService
from app.services.employee_service import EmployeeService
from app.services.payroll_service import PayrollService, calculate_net_pay
from app.services.payslip_pdf_service import PayslipPDFService

__all__ = [
    "AuthService",
    "EmployeeService",
    "PayrollService",
    "calculate_net_pay",
    "PayslipPDFService",
]
