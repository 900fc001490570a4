"""
Haulpay - Views Router

Server-side rendered pages using Jinja2 templates.
Authentication is persistent across all pages via an HTTP-only cookie
holding the same session token the JSON API accepts.
"""

from typing import Optional, Tuple

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_async_session
from app.dependencies import ACCESS_TOKEN_COOKIE, get_optional_identity
from app.models.payroll import TripType
from app.services.auth_service import AuthService
from app.services.employee_service import EmployeeService
from app.services.payroll_aggregation import format_amount, group_by_employee, group_by_week, overall_totals
from app.services.payroll_service import PayrollService
from app.services.payslip_pdf_service import build_week_payslip
from app.utils.security import SessionIdentity

router = APIRouter()
templates = Jinja2Templates(directory="templates")
templates.env.filters["money"] = lambda value: format_amount(value, settings.currency_symbol)


def home_for(identity: SessionIdentity) -> str:
    return "/admin" if identity.is_admin else "/dashboard"


def require_page_auth(
    request: Request,
    admin_only: bool = False,
) -> Tuple[Optional[SessionIdentity], Optional[RedirectResponse]]:
    """
    Check authentication for protected pages.

    Returns:
        Tuple of (identity, redirect_response)
        If redirect_response is not None, the caller should return it.
    """
    identity = get_optional_identity(request)
    if identity is None:
        return None, RedirectResponse(url="/login", status_code=status.HTTP_302_FOUND)

    if admin_only and not identity.is_admin:
        return identity, RedirectResponse(url="/dashboard", status_code=status.HTTP_302_FOUND)

    request.state.identity = identity
    return identity, None


def get_auth_context(identity: Optional[SessionIdentity]) -> dict:
    """Common template context for the navigation bar."""
    return {
        "identity": identity,
        "is_authenticated": identity is not None,
        "is_admin": identity.is_admin if identity else False,
        "app_name": settings.app_name,
        "company_name": settings.company_name,
    }


def render_error(request: Request, identity: SessionIdentity, message: str, status_code: int):
    return templates.TemplateResponse(
        request,
        "error.html",
        {"message": message, "back_url": home_for(identity), **get_auth_context(identity)},
        status_code=status_code,
    )


# ===========================================
# PUBLIC PAGES
# ===========================================

@router.get("/", response_class=HTMLResponse)
async def home(request: Request):
    """Send the visitor to the dashboard matching their role."""
    identity = get_optional_identity(request)
    if identity:
        return RedirectResponse(url=home_for(identity), status_code=status.HTTP_302_FOUND)
    return RedirectResponse(url="/login", status_code=status.HTTP_302_FOUND)


@router.get("/login", response_class=HTMLResponse)
async def login_page(request: Request):
    """Login page."""
    identity = get_optional_identity(request)
    if identity:
        return RedirectResponse(url=home_for(identity), status_code=status.HTTP_302_FOUND)
    return templates.TemplateResponse(request, "login.html", get_auth_context(None))


@router.post("/login", response_class=HTMLResponse)
async def login_submit(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    db: AsyncSession = Depends(get_async_session),
):
    """Form login. Sets the session cookie and redirects by role."""
    auth_service = AuthService(db)

    employee = None
    if email and password:
        employee = await auth_service.authenticate(email=email, password=password)

    if not employee:
        return templates.TemplateResponse(
            request,
            "login.html",
            {"error": "Invalid credentials", "email": email, **get_auth_context(None)},
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    token = auth_service.create_session_token(employee)
    target = "/admin" if employee.is_admin else "/dashboard"
    response = RedirectResponse(url=target, status_code=status.HTTP_302_FOUND)
    response.set_cookie(
        key=ACCESS_TOKEN_COOKIE,
        value=token,
        httponly=True,
        max_age=settings.access_token_expire_hours * 60 * 60,
        samesite="lax",
        secure=settings.is_production,
    )
    return response


@router.get("/logout")
async def logout(request: Request):
    """Logout - clear session and redirect to login."""
    response = RedirectResponse(url="/login", status_code=status.HTTP_302_FOUND)
    response.delete_cookie(ACCESS_TOKEN_COOKIE)
    return response


# ===========================================
# PROTECTED PAGES (require authentication)
# ===========================================

@router.get("/admin", response_class=HTMLResponse)
async def admin_dashboard(
    request: Request,
    db: AsyncSession = Depends(get_async_session),
):
    """
    Admin dashboard:
    - Employees table with edit, role and delete actions
    - Payroll grouped by employee, then by week, with subtotals
    - Forms for new employees and payroll records
    """
    identity, redirect = require_page_auth(request, admin_only=True)
    if redirect:
        return redirect

    employees = await EmployeeService(db).list_employees()
    records = await PayrollService(db).list_records()
    summaries = group_by_employee(records, sort_by_name=True)

    return templates.TemplateResponse(request, "admin_dashboard.html", {
        "employees": employees,
        "summaries": summaries,
        "grand_totals": overall_totals(w for s in summaries for w in s.weeks),
        "trip_types": list(TripType),
        "root_admin_email": settings.root_admin_email.lower(),
        **get_auth_context(identity),
    })


@router.get("/dashboard", response_class=HTMLResponse)
async def employee_dashboard(
    request: Request,
    db: AsyncSession = Depends(get_async_session),
):
    """Employee dashboard: own payroll by week with totals."""
    identity, redirect = require_page_auth(request)
    if redirect:
        return redirect
    if identity.is_admin:
        return RedirectResponse(url="/admin", status_code=status.HTTP_302_FOUND)

    records = await PayrollService(db).list_employee_records(identity.id)
    weeks = group_by_week(records)

    return templates.TemplateResponse(request, "employee_dashboard.html", {
        "weeks": weeks,
        "totals": overall_totals(weeks),
        **get_auth_context(identity),
    })


@router.get("/payslip/{week_key}", response_class=HTMLResponse)
async def my_payslip_page(
    week_key: str,
    request: Request,
    db: AsyncSession = Depends(get_async_session),
):
    """Printable payslip for one of the caller's own weeks."""
    identity, redirect = require_page_auth(request)
    if redirect:
        return redirect

    return await _render_payslip(
        request, db, identity,
        employee_id=identity.id,
        week_key=week_key,
        pdf_url=f"/api/employee/payroll/payslip/{week_key}",
    )


@router.get("/admin/payslip/{employee_id}/{week_key}", response_class=HTMLResponse)
async def employee_payslip_page(
    employee_id: int,
    week_key: str,
    request: Request,
    db: AsyncSession = Depends(get_async_session),
):
    """Printable payslip for any employee's week (admin only)."""
    identity, redirect = require_page_auth(request, admin_only=True)
    if redirect:
        return redirect

    return await _render_payslip(
        request, db, identity,
        employee_id=employee_id,
        week_key=week_key,
        pdf_url=f"/api/admin/payroll/payslip/{employee_id}/{week_key}",
    )


async def _render_payslip(
    request: Request,
    db: AsyncSession,
    identity: SessionIdentity,
    employee_id: int,
    week_key: str,
    pdf_url: str,
):
    employee = await EmployeeService(db).get_employee(employee_id)
    if not employee:
        return render_error(request, identity, "Employee not found", status.HTTP_404_NOT_FOUND)

    records = await PayrollService(db).list_employee_records(employee_id)
    try:
        payslip = build_week_payslip(employee, records, week_key)
    except ValueError as e:
        return render_error(request, identity, str(e), status.HTTP_400_BAD_REQUEST)

    if payslip is None:
        return render_error(
            request, identity,
            f"No payroll records for week {week_key}",
            status.HTTP_404_NOT_FOUND,
        )

    return templates.TemplateResponse(request, "payslip.html", {
        "payslip": payslip,
        "pdf_url": pdf_url,
        **get_auth_context(identity),
    })
