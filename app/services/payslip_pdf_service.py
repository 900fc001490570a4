"""
Haulpay - Payslip PDF Service

Generates weekly payslips for drivers and staff.
Uses ReportLab for PDF generation.

A payslip covers one employee and one ISO week:
- Company header
- Employee and pay week details
- One row per trip / pay date with its pay components
- Week totals (base, allowances, earnings, deductions, net pay)
"""

import io
import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, List, Optional
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import mm
from reportlab.platypus import (
    SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer, HRFlowable
)

from app.config import settings
from app.services.payroll_aggregation import (
    PayrollTotals,
    WeekBucket,
    find_week,
    format_amount,
    group_by_week,
    parse_week_key,
)

logger = logging.getLogger(__name__)


BRAND_COLOR = '#1a365d'


@dataclass
class PayslipLine:
    """One trip / pay date on the payslip."""
    pay_period: date
    trip_type: str
    description: str
    base_salary: Decimal
    allowances: Decimal
    deductions: Decimal
    net_pay: Decimal


@dataclass
class PayslipData:
    """Data structure for payslip generation."""
    employee_id: int
    employee_name: str
    employee_email: str

    week_key: str
    week_label: str
    week_start: date
    week_end: date

    lines: List[PayslipLine] = field(default_factory=list)
    totals: PayrollTotals = field(default_factory=PayrollTotals)

    company_name: str = ""
    company_address: str = ""
    company_email: str = ""
    currency_symbol: str = "$"
    generated_at: Optional[datetime] = None

    def money(self, value: Any) -> str:
        return format_amount(value, self.currency_symbol)

    @property
    def filename(self) -> str:
        slug = "-".join(self.employee_name.lower().split()) or f"employee-{self.employee_id}"
        return f"payslip-{slug}-{self.week_key}.pdf"


def build_payslip(employee: Any, week: WeekBucket) -> PayslipData:
    """Assemble payslip data for one employee's week of records."""
    lines = [
        PayslipLine(
            pay_period=record.pay_period,
            trip_type=_trip_type_display(record.trip_type),
            description=record.trip_description or "",
            base_salary=record.base_salary,
            allowances=record.total_allowances,
            deductions=record.deductions,
            net_pay=record.net_pay,
        )
        for record in sorted(week.records, key=lambda r: (r.pay_period, r.id))
    ]

    return PayslipData(
        employee_id=employee.id,
        employee_name=f"{employee.first_name} {employee.last_name}",
        employee_email=employee.email,
        week_key=week.key,
        week_label=week.label,
        week_start=week.week_start,
        week_end=week.week_end,
        lines=lines,
        totals=week.totals,
        company_name=settings.company_name,
        company_address=settings.company_address,
        company_email=settings.company_email,
        currency_symbol=settings.currency_symbol,
        generated_at=datetime.now(),
    )


def _trip_type_display(trip_type: Any) -> str:
    if trip_type is None:
        return "-"
    value = getattr(trip_type, "value", trip_type)
    return str(value).replace("_", " ").title()


class PayslipPDFService:
    """Service for generating PDF payslips."""

    def generate_payslip_pdf(self, payslip: PayslipData) -> bytes:
        """
        Generate a PDF payslip.

        Args:
            payslip: PayslipData with the week's lines and totals

        Returns:
            PDF bytes
        """
        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            rightMargin=20*mm,
            leftMargin=20*mm,
            topMargin=20*mm,
            bottomMargin=20*mm,
            title=f"Payslip {payslip.week_key}",
            author=payslip.company_name,
        )

        styles = getSampleStyleSheet()

        title_style = ParagraphStyle(
            'PayslipTitle',
            parent=styles['Heading1'],
            fontSize=22,
            textColor=colors.HexColor(BRAND_COLOR),
            spaceAfter=8,
        )

        heading_style = ParagraphStyle(
            'PayslipHeading',
            parent=styles['Heading2'],
            fontSize=13,
            textColor=colors.HexColor(BRAND_COLOR),
            spaceBefore=10,
            spaceAfter=6,
        )

        normal_style = ParagraphStyle(
            'PayslipNormal',
            parent=styles['Normal'],
            fontSize=10,
            spaceAfter=3,
        )

        small_style = ParagraphStyle(
            'PayslipSmall',
            parent=styles['Normal'],
            fontSize=8,
            leading=10,
        )

        right_style = ParagraphStyle(
            'RightAlign',
            parent=styles['Normal'],
            fontSize=10,
            alignment=TA_RIGHT,
        )

        elements = []

        elements.append(self._build_header(payslip, title_style, normal_style))
        elements.append(HRFlowable(width="100%", thickness=1, color=colors.HexColor(BRAND_COLOR)))
        elements.append(Spacer(1, 12))

        elements.append(Paragraph("PAYSLIP", title_style))
        elements.append(self._build_info_section(payslip, normal_style))
        elements.append(Spacer(1, 16))

        elements.append(Paragraph("Trips", heading_style))
        elements.append(self._build_lines_table(payslip, small_style))
        elements.append(Spacer(1, 16))

        elements.append(Paragraph("Week Totals", heading_style))
        elements.append(self._build_totals_section(payslip))
        elements.append(Spacer(1, 24))

        elements.append(self._build_footer(payslip, right_style))

        doc.build(elements)

        pdf_bytes = buffer.getvalue()
        buffer.close()

        logger.info(
            f"Payslip generated for employee {payslip.employee_id} week {payslip.week_key}"
        )
        return pdf_bytes

    def _build_header(self, payslip: PayslipData, title_style, normal_style):
        """Company block."""
        rows = [[Paragraph(f"<b>{escape(payslip.company_name)}</b>", title_style)]]
        if payslip.company_address:
            rows.append([Paragraph(escape(payslip.company_address), normal_style)])
        if payslip.company_email:
            rows.append([Paragraph(f"Email: {escape(payslip.company_email)}", normal_style)])

        header_table = Table(rows, colWidths=[500])
        header_table.setStyle(TableStyle([
            ('ALIGN', (0, 0), (-1, -1), 'LEFT'),
            ('VALIGN', (0, 0), (-1, -1), 'TOP'),
        ]))
        return header_table

    def _build_info_section(self, payslip: PayslipData, normal_style):
        """Employee details on the left, pay week on the right."""
        employee_info = (
            f"<b>Employee:</b> {escape(payslip.employee_name)}<br/>"
            f"<b>Email:</b> {escape(payslip.employee_email)}<br/>"
            f"<b>Employee ID:</b> {payslip.employee_id}<br/>"
        )
        week_info = (
            f"<b>Pay Week:</b> {payslip.week_key}<br/>"
            f"<b>Period:</b> {payslip.week_label}<br/>"
            f"<b>Trips:</b> {len(payslip.lines)}<br/>"
        )

        info_table = Table(
            [[Paragraph(employee_info, normal_style), Paragraph(week_info, normal_style)]],
            colWidths=[250, 250],
        )
        info_table.setStyle(TableStyle([
            ('ALIGN', (0, 0), (0, 0), 'LEFT'),
            ('ALIGN', (1, 0), (1, 0), 'RIGHT'),
            ('VALIGN', (0, 0), (-1, -1), 'TOP'),
        ]))
        return info_table

    def _build_lines_table(self, payslip: PayslipData, small_style):
        """One row per trip."""
        data = [
            ['Date', 'Trip', 'Description', 'Base', 'Allowances', 'Deductions', 'Net']
        ]

        for line in payslip.lines:
            data.append([
                line.pay_period.strftime('%a %b %d'),
                line.trip_type,
                Paragraph(escape(line.description), small_style),
                payslip.money(line.base_salary),
                payslip.money(line.allowances),
                payslip.money(line.deductions),
                payslip.money(line.net_pay),
            ])

        table = Table(data, colWidths=[55, 55, 120, 65, 70, 65, 70], repeatRows=1)
        table.setStyle(TableStyle([
            # Header styling
            ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor(BRAND_COLOR)),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.whitesmoke),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('FONTSIZE', (0, 0), (-1, 0), 9),
            ('BOTTOMPADDING', (0, 0), (-1, 0), 8),
            ('TOPPADDING', (0, 0), (-1, 0), 8),

            # Row styling
            ('FONTNAME', (0, 1), (-1, -1), 'Helvetica'),
            ('FONTSIZE', (0, 1), (-1, -1), 8),
            ('BOTTOMPADDING', (0, 1), (-1, -1), 6),
            ('TOPPADDING', (0, 1), (-1, -1), 6),

            ('ALIGN', (3, 0), (-1, -1), 'RIGHT'),
            ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
            ('GRID', (0, 0), (-1, -1), 0.5, colors.grey),
            ('ROWBACKGROUNDS', (0, 1), (-1, -1), [colors.white, colors.HexColor('#f8f9fa')]),
        ]))
        return table

    def _build_totals_section(self, payslip: PayslipData):
        totals = payslip.totals
        totals_data = [
            ['', 'Base Salary:', payslip.money(totals.base)],
            ['', 'Allowances:', payslip.money(totals.allowances)],
            ['', 'Gross Earnings:', payslip.money(totals.earnings)],
            ['', 'Deductions:', payslip.money(totals.deductions)],
            ['', 'NET PAY:', payslip.money(totals.net)],
        ]

        totals_table = Table(totals_data, colWidths=[280, 110, 110])
        totals_table.setStyle(TableStyle([
            ('ALIGN', (1, 0), (-1, -1), 'RIGHT'),
            ('FONTNAME', (1, 0), (1, -1), 'Helvetica-Bold'),
            ('FONTNAME', (1, -1), (-1, -1), 'Helvetica-Bold'),
            ('FONTSIZE', (1, -1), (-1, -1), 12),
            ('TEXTCOLOR', (1, -1), (-1, -1), colors.HexColor(BRAND_COLOR)),
            ('LINEABOVE', (1, -1), (-1, -1), 1, colors.HexColor(BRAND_COLOR)),
            ('TOPPADDING', (0, -1), (-1, -1), 8),
        ]))
        return totals_table

    def _build_footer(self, payslip: PayslipData, right_style):
        generated = payslip.generated_at or datetime.now()
        return Paragraph(
            f"Generated on {generated.strftime('%B %d, %Y at %H:%M')}. "
            f"This payslip is computer generated and requires no signature.",
            right_style,
        )


def build_week_payslip(
    employee: Any,
    records: List[Any],
    week_key: str,
) -> Optional[PayslipData]:
    """
    Payslip for the week named by ``week_key``.

    Raises:
        ValueError: If the week key is malformed

    Returns:
        PayslipData, or None when the employee has no records that week
    """
    parse_week_key(week_key)
    week = find_week(group_by_week(records), week_key)
    if week is None:
        return None
    return build_payslip(employee, week)
