from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Dict, Iterable, List

from calc.pay_calculator import overtime_pay
from model.PayBreakdown import OvertimeResult
from model.RecurringEvent import as_day
from model.Shift import SHIFT_TYPES, Shift
from model.money import ZERO

MINUTES_PER_DAY = 24 * 60
MONTHS_PER_YEAR = 12


def _minutes_since_midnight(value: str, name: str) -> int:
    """Parse 'HH:MM' (or a full ISO datetime) into minutes after midnight."""
    text = value.strip()
    try:
        if 'T' in text:
            parsed = datetime.fromisoformat(text)
            return parsed.hour * 60 + parsed.minute
        hours, minutes = text.split(':')[:2]
        hours, minutes = int(hours), int(minutes)
    except ValueError:
        raise ValueError(f"{name} must look like HH:MM, got {value!r}")
    if not (0 <= hours < 24 and 0 <= minutes < 60):
        raise ValueError(f"{name} must look like HH:MM, got {value!r}")
    return hours * 60 + minutes


def shift_hours(shift: Shift) -> Decimal:
    """Hours worked in a shift.

    Shifts without both times count as zero hours. An end time before the
    start time means the shift crosses midnight.
    """
    if not shift.start_time or not shift.end_time:
        return ZERO
    start = _minutes_since_midnight(shift.start_time, 'start_time')
    end = _minutes_since_midnight(shift.end_time, 'end_time')
    minutes = end - start
    if minutes < 0:
        minutes += MINUTES_PER_DAY
    return Decimal(minutes) / Decimal(60)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First day of the month and first day of the following month."""
    if not 1 <= month <= 12:
        raise ValueError(f"month must be between 1 and 12, got {month}")
    start = date(year, month, 1)
    end = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
    return start, end


def shifts_in_range(shifts: Iterable[Shift], range_start, range_end) -> List[Shift]:
    """Shifts dated in [range_start, range_end), ordered by date and start time."""
    start = as_day(range_start, 'range_start')
    end = as_day(range_end, 'range_end')
    selected = [s for s in shifts if start <= s.date < end]
    return sorted(selected, key=lambda s: (s.date, s.start_time))


def shifts_on(shifts: Iterable[Shift], day) -> List[Shift]:
    day = as_day(day, 'day')
    return shifts_in_range(shifts, day, day + timedelta(days=1))


@dataclass
class MonthSummary:
    """Counts, hours and pay for the shifts of one calendar month."""
    year: int
    month: int
    total_shifts: int
    pay: OvertimeResult
    counts_by_type: Dict[str, int] = field(default_factory=dict)
    regular_hours: Decimal = ZERO
    overtime_hours: Decimal = ZERO

    @property
    def total_hours(self) -> Decimal:
        return self.regular_hours + self.overtime_hours

    @property
    def average_hours_per_shift(self) -> Decimal:
        if self.total_shifts == 0:
            return ZERO
        return self.total_hours / self.total_shifts

    @property
    def annualized_income(self) -> Decimal:
        """Monthly pay scaled to a year, the input for tax estimates."""
        return self.pay.total_pay * MONTHS_PER_YEAR

    def to_dict(self) -> dict:
        return {
            'year': self.year,
            'month': self.month,
            'total_shifts': self.total_shifts,
            'counts_by_type': dict(self.counts_by_type),
            'regular_hours': float(self.regular_hours),
            'overtime_hours': float(self.overtime_hours),
            'total_hours': float(self.total_hours),
            'pay': self.pay.to_dict(),
            'annualized_income': float(self.annualized_income),
        }


def summarize_month(shifts: Iterable[Shift], year: int, month: int, hourly_rate, multiplier) -> MonthSummary:
    """Summarize one month of shifts.

    Overtime shifts are paid at `multiplier` times `hourly_rate`; every
    other shift type counts as regular hours.
    """
    start, end = month_bounds(year, month)
    month_shifts = shifts_in_range(shifts, start, end)

    counts = {shift_type: 0 for shift_type in SHIFT_TYPES}
    regular = ZERO
    overtime = ZERO
    for shift in month_shifts:
        counts[shift.type] += 1
        hours = shift_hours(shift)
        if shift.type == 'overtime':
            overtime += hours
        else:
            regular += hours

    return MonthSummary(
        year=year,
        month=month,
        total_shifts=len(month_shifts),
        counts_by_type=counts,
        regular_hours=regular,
        overtime_hours=overtime,
        pay=overtime_pay(regular, overtime, hourly_rate, multiplier),
    )
