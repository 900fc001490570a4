"""
Haulpay - Payroll Aggregation

Pure grouping of payroll records for dashboards and payslips:
1. By employee - one bucket per employee id with grand totals
2. By ISO week - records keyed by ISO-8601 week, labelled Monday to Sunday

Week numbering follows the ISO rule: the week belongs to the year of its
Thursday, so 2024-12-30 is "2025-W01" while its label still reads
"Dec 30, 2024 - Jan 05, 2025".

Amounts are summed as Decimal and only rounded when formatted for display.
Nothing here touches the database; any object exposing ``employee_id``,
``pay_period``, ``base_salary``, ``total_allowances``, ``deductions`` and
``net_pay`` can be grouped.
"""

import re
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple


TWO_PLACES = Decimal("0.01")
WEEK_KEY_PATTERN = re.compile(r"^(\d{4})-W(\d{2})$")

# Last Sunday on or before date.max; later weeks would end past the calendar
LAST_SUPPORTED_DAY = date.max - timedelta(days=(date.max.weekday() + 1) % 7)


def to_decimal(value: Any) -> Decimal:
    """Coerce a numeric value to Decimal without float noise."""
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def quantize_amount(value: Any) -> Decimal:
    """Round a currency amount to 2 decimal places."""
    return to_decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def format_amount(value: Any, currency_symbol: str = "$") -> str:
    """Format an amount for display, e.g. $1,500.50"""
    amount = quantize_amount(value)
    sign = "-" if amount < 0 else ""
    return f"{sign}{currency_symbol}{abs(amount):,.2f}"


# ===========================================
# WEEK HELPERS
# ===========================================

def week_thursday(d: date) -> date:
    """Thursday of the Monday-based week containing ``d``."""
    return d + timedelta(days=3 - d.weekday())


def week_number(d: date) -> Tuple[int, int]:
    """
    ISO-8601 (year, week) for a date.

    The date is shifted to the Thursday of its week, which settles which
    year the week belongs to; the ordinal is then counted from January 1
    of that year.
    """
    thursday = week_thursday(d)
    ordinal = (thursday.timetuple().tm_yday - 1) // 7 + 1
    return thursday.year, ordinal


def week_key(d: date) -> str:
    """Sortable week key such as '2024-W01'."""
    year, ordinal = week_number(d)
    return f"{year}-W{ordinal:02d}"


def week_bounds(d: date) -> Tuple[date, date]:
    """Monday and Sunday of the calendar week containing ``d``."""
    monday = d - timedelta(days=d.weekday())
    return monday, monday + timedelta(days=6)


def week_in_range(d: date) -> bool:
    """True when the whole Monday-to-Sunday week of ``d`` is a valid date range."""
    return d <= LAST_SUPPORTED_DAY


def week_label(d: date) -> str:
    monday, sunday = week_bounds(d)
    return f"{monday:%b %d, %Y} - {sunday:%b %d, %Y}"


def parse_week_key(key: str) -> date:
    """
    Return the Monday of the week named by a key like '2024-W01'.

    Raises:
        ValueError: If the key is malformed or the week does not exist
    """
    match = WEEK_KEY_PATTERN.match(key or "")
    if not match:
        raise ValueError(f"Invalid week key '{key}'. Expected format YYYY-Www")

    year, ordinal = int(match.group(1)), int(match.group(2))
    # January 4 is always in week 1
    jan4 = date(year, 1, 4)
    try:
        monday = jan4 - timedelta(days=jan4.weekday()) + timedelta(weeks=ordinal - 1)
    except OverflowError:
        raise ValueError(f"Week {ordinal} of {year} is out of range")
    if not week_in_range(monday):
        raise ValueError(f"Week {ordinal} of {year} is out of range")
    if ordinal < 1 or week_number(monday) != (year, ordinal):
        raise ValueError(f"Week {ordinal} does not exist in {year}")
    return monday


# ===========================================
# TOTALS
# ===========================================

@dataclass
class PayrollTotals:
    """Running totals of the pay components."""
    base: Decimal = Decimal("0")
    allowances: Decimal = Decimal("0")
    deductions: Decimal = Decimal("0")
    net: Decimal = Decimal("0")

    @property
    def earnings(self) -> Decimal:
        return self.base + self.allowances

    def add_record(self, record: Any) -> None:
        self.base += to_decimal(record.base_salary)
        self.allowances += to_decimal(record.total_allowances)
        self.deductions += to_decimal(record.deductions)
        self.net += to_decimal(record.net_pay)

    def add_totals(self, other: "PayrollTotals") -> None:
        self.base += other.base
        self.allowances += other.allowances
        self.deductions += other.deductions
        self.net += other.net

    def to_dict(self) -> Dict[str, Decimal]:
        return {
            "base": quantize_amount(self.base),
            "allowances": quantize_amount(self.allowances),
            "deductions": quantize_amount(self.deductions),
            "earnings": quantize_amount(self.earnings),
            "net": quantize_amount(self.net),
        }


@dataclass
class WeekBucket:
    """Records falling in one ISO week."""
    key: str
    label: str
    week_start: date
    week_end: date
    records: List[Any] = field(default_factory=list)
    totals: PayrollTotals = field(default_factory=PayrollTotals)

    def add(self, record: Any) -> None:
        self.records.append(record)
        self.totals.add_record(record)


@dataclass
class EmployeeSummary:
    """All records of one employee, split into weeks."""
    employee_id: int
    employee_name: str = ""
    email: str = ""
    records: List[Any] = field(default_factory=list)
    weeks: List[WeekBucket] = field(default_factory=list)
    totals: PayrollTotals = field(default_factory=PayrollTotals)


# ===========================================
# GROUPING
# ===========================================

def group_by_week(records: Iterable[Any]) -> List[WeekBucket]:
    """
    Partition records by ISO week of their pay period.

    Buckets are returned newest first (descending key); records keep
    their input order inside a bucket.
    """
    buckets: Dict[str, WeekBucket] = {}
    for record in records:
        key = week_key(record.pay_period)
        bucket = buckets.get(key)
        if bucket is None:
            start, end = week_bounds(record.pay_period)
            bucket = WeekBucket(
                key=key,
                label=week_label(record.pay_period),
                week_start=start,
                week_end=end,
            )
            buckets[key] = bucket
        bucket.add(record)

    return [buckets[key] for key in sorted(buckets, reverse=True)]


def _employee_identity(record: Any) -> Tuple[str, str]:
    employee = getattr(record, "employee", None)
    if employee is None:
        return "", ""
    return f"{employee.first_name} {employee.last_name}", employee.email


def group_by_employee(
    records: Iterable[Any],
    employees: Optional[Sequence[Any]] = None,
    sort_by_name: bool = False,
) -> List[EmployeeSummary]:
    """
    Partition records by employee, each with weekly sub-groups.

    Args:
        records: Payroll records in any order
        employees: Optional employee list fixing the output order; employees
            without records still get an (empty) bucket
        sort_by_name: Re-sort the result by employee name

    Returns:
        One EmployeeSummary per employee, in first-encountered order unless
        an employee list or name sorting says otherwise
    """
    summaries: Dict[int, EmployeeSummary] = {}

    for employee in employees or []:
        summaries[employee.id] = EmployeeSummary(
            employee_id=employee.id,
            employee_name=f"{employee.first_name} {employee.last_name}",
            email=employee.email,
        )

    for record in records:
        summary = summaries.get(record.employee_id)
        if summary is None:
            name, email = _employee_identity(record)
            summary = EmployeeSummary(
                employee_id=record.employee_id,
                employee_name=name,
                email=email,
            )
            summaries[record.employee_id] = summary
        summary.records.append(record)

    result = list(summaries.values())
    for summary in result:
        summary.weeks = group_by_week(summary.records)
        for week in summary.weeks:
            summary.totals.add_totals(week.totals)

    if sort_by_name:
        result.sort(key=lambda s: (s.employee_name.lower(), s.employee_id))

    return result


def find_week(buckets: Sequence[WeekBucket], key: str) -> Optional[WeekBucket]:
    for bucket in buckets:
        if bucket.key == key:
            return bucket
    return None


def overall_totals(buckets: Iterable[WeekBucket]) -> PayrollTotals:
    totals = PayrollTotals()
    for bucket in buckets:
        totals.add_totals(bucket.totals)
    return totals
