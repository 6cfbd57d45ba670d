"""Renderer classes for displaying schedule and pay results.

Renderers only present values computed by the calc modules. Console
renderers print fixed-width text; the CSV renderer writes spreadsheet rows.
"""

import calendar
import csv
import sys
from abc import ABC, abstractmethod
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional, TextIO

from calc.recurrence import describe, format_event_date
from calc.shift_stats import MonthSummary, shift_hours
from calc.pay_calculator import effective_hourly_rate
from model.PayBreakdown import PayBreakdown
from model.RecurringEvent import RecurringEvent
from model.Shift import Shift

# Marker letters drawn next to calendar days
EVENT_MARKERS = {
    'payday': 'P',
    'paycard': 'C',
    'other': 'E',
}
SHIFT_MARKER = '*'
MARKER_WIDTH = 3

CSV_COLUMNS = ['Date', 'Type', 'StartTime', 'EndTime', 'Location', 'Notes', 'Completed']


def format_currency(amount) -> str:
    """Format as '$1,234.56'; negative amounts as '-$1,234.56'."""
    amount = Decimal(str(amount))
    sign = '-' if amount < 0 else ''
    return f"{sign}${abs(amount):,.2f}"


def format_percentage(fraction) -> str:
    """Format a fraction (0.123) as '12.3%'."""
    return f"{Decimal(str(fraction)) * 100:.1f}%"


def format_hours(hours) -> str:
    return f"{Decimal(str(hours)):.2f}".rstrip('0').rstrip('.')


class BaseRenderer(ABC):
    """Abstract base class for all renderers."""

    @abstractmethod
    def render(self, data) -> None:
        """Render the data to output."""
        pass


class TaxBreakdownRenderer(BaseRenderer):
    """Detailed tax and contribution breakdown for one gross income."""

    def __init__(self, jurisdiction_name: str, tax_year: int):
        self.jurisdiction_name = jurisdiction_name
        self.tax_year = tax_year

    def _line(self, label: str, amount, gross: Decimal) -> None:
        share = format_percentage(amount / gross) if gross else format_percentage(0)
        print(f"  {label:<32} {format_currency(amount):>14}  ({share} of gross)")

    def render(self, data: PayBreakdown) -> None:
        title = f"{self.jurisdiction_name.upper()} TAX ESTIMATE {self.tax_year}"
        print()
        print("=" * 60)
        print(f"{title:^60}")
        print("=" * 60)
        print(f"  {'Gross Income:':<32} {format_currency(data.gross_income):>14}")

        print()
        print("-" * 60)
        print("DEDUCTIONS")
        print("-" * 60)
        self._line('Federal Tax:', data.federal_tax, data.gross_income)
        self._line('Provincial Tax:', data.provincial_tax, data.gross_income)
        self._line('Pension (CPP):', data.pension_contribution, data.gross_income)
        self._line('Employment Insurance (EI):', data.insurance_contribution, data.gross_income)
        print(f"  {'-' * 32}")
        print(f"  {'Total Deductions:':<32} {format_currency(data.total_deductions):>14}")

        print()
        print("=" * 60)
        print("SUMMARY")
        print("=" * 60)
        print(f"  {'Net Income:':<32} {format_currency(data.net_income):>14}")
        print(f"  {'Effective Rate:':<32} {format_percentage(data.effective_rate):>14}")
        print(f"  {'Federal Bracket:':<32} {data.federal_bracket:>14}")
        print(f"  {'Provincial Bracket:':<32} {data.provincial_bracket:>14}")
        print()


class OvertimeRenderer(BaseRenderer):
    """Regular and overtime pay for a month of shifts."""

    def __init__(self, hourly_rate, multiplier):
        self.hourly_rate = Decimal(str(hourly_rate))
        self.multiplier = Decimal(str(multiplier))

    def render(self, data: MonthSummary) -> None:
        pay = data.pay
        overtime_rate = self.hourly_rate * self.multiplier
        print()
        print("=" * 60)
        print(f"{'OVERTIME PAY ' + f'{data.year}-{data.month:02d}':^60}")
        print("=" * 60)
        print(f"  {'Total Hours:':<32} {format_hours(data.total_hours):>14}")
        print(f"    {format_hours(data.regular_hours)} regular + {format_hours(data.overtime_hours)} overtime")
        print()
        print(f"  {'Regular Hours Pay:':<32} {format_currency(pay.regular_pay):>14}")
        print(f"    {format_hours(data.regular_hours)} hours x {format_currency(self.hourly_rate)}/hour")
        print(f"  {'Overtime Pay:':<32} {format_currency(pay.overtime_pay):>14}")
        print(f"    {format_hours(data.overtime_hours)} hours x {format_currency(overtime_rate)}/hour ({self.multiplier}x)")
        print(f"  {'-' * 32}")
        print(f"  {'Total Pay:':<32} {format_currency(pay.total_pay):>14}")
        average = effective_hourly_rate(pay, data.total_hours)
        if average is not None:
            print(f"  {'Average Hourly:':<32} {format_currency(average):>14}")
        print()


class MonthSummaryRenderer(BaseRenderer):
    """Shift counts and hours for one month."""

    def render(self, data: MonthSummary) -> None:
        month_name = f"{calendar.month_name[data.month]} {data.year}"
        print()
        print("=" * 60)
        print(f"{'SHIFT SUMMARY ' + month_name.upper():^60}")
        print("=" * 60)
        print(f"  {'Total Shifts:':<32} {data.total_shifts:>14}")
        for shift_type, count in data.counts_by_type.items():
            if count:
                print(f"    {shift_type.capitalize() + ':':<30} {count:>14}")
        print(f"  {'Hours Worked:':<32} {format_hours(data.total_hours):>14}")
        print(f"  {'Hours per Shift:':<32} {format_hours(data.average_hours_per_shift):>14}")
        print(f"  {'Estimated Pay:':<32} {format_currency(data.pay.total_pay):>14}")
        print(f"  {'Annualized Income:':<32} {format_currency(data.annualized_income):>14}")
        print()


class UpcomingEventsRenderer(BaseRenderer):
    """Next occurrence of each recurring event plus tomorrow's reminders.

    Expects a dict with 'events' (RecurringEvent list) and 'reminders'
    (Reminder list).
    """

    def __init__(self, reference_date: date):
        self.reference_date = reference_date

    def render(self, data: dict) -> None:
        events: List[RecurringEvent] = data.get('events', [])
        reminders = data.get('reminders', [])
        print()
        print("=" * 60)
        print(f"{'UPCOMING EVENTS FROM ' + format_event_date(self.reference_date).upper():^60}")
        print("=" * 60)
        if not events:
            print("  No recurring events configured.")
        for event in events:
            every = "week" if event.interval_weeks == 1 else f"{event.interval_weeks} weeks"
            print(f"  {describe(event, self.reference_date)}")
            print(f"    every {every} from {format_event_date(event.anchor_date)}")
        if reminders:
            print()
            print("-" * 60)
            print("REMINDERS")
            print("-" * 60)
            for reminder in reminders:
                print(f"  {reminder.title}: {reminder.body}")
        print()


class CalendarRenderer(BaseRenderer):
    """Month grid with recurring event and shift markers.

    Expects a dict with 'events_by_day' ({date: [RecurringEvent]}) and
    'shifts' (Shift list already limited to the month).
    """

    def __init__(self, year: int, month: int):
        self.year = year
        self.month = month

    def _cell(self, day: date, events_by_day: Dict[date, List[RecurringEvent]], shift_days: set) -> str:
        markers = ''.join(EVENT_MARKERS.get(e.kind, 'E') for e in events_by_day.get(day, []))
        # cells hold three markers; the shift marker always keeps its slot
        if day in shift_days:
            markers = markers[:MARKER_WIDTH - 1] + SHIFT_MARKER
        return f"{day.day:>2}{markers[:MARKER_WIDTH]:<{MARKER_WIDTH}}"

    def render(self, data: dict) -> None:
        events_by_day = data.get('events_by_day', {})
        shifts: List[Shift] = data.get('shifts', [])
        shift_days = {s.date for s in shifts}
        grid = calendar.Calendar(firstweekday=calendar.SUNDAY)

        print()
        print(f"{calendar.month_name[self.month] + ' ' + str(self.year):^35}")
        print(' '.join(f"{name[:2]:<4}" for name in ['Sun', 'Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat']))
        for week in grid.monthdatescalendar(self.year, self.month):
            cells = []
            for day in week:
                if day.month != self.month:
                    cells.append(' ' * 5)
                else:
                    cells.append(self._cell(day, events_by_day, shift_days))
            print(''.join(cells).rstrip())
        print()
        print(f"  P = payday   C = pay card due   E = other event   {SHIFT_MARKER} = shift")

        if events_by_day:
            print()
            for day, events in events_by_day.items():
                titles = ', '.join(e.title for e in events)
                print(f"  {format_event_date(day):<14} {titles}")
        if shifts:
            print()
            for shift in shifts:
                hours = format_hours(shift_hours(shift))
                print(f"  {format_event_date(shift.date):<14} {shift.type:<9} "
                      f"{shift.start_time or '--':>5}-{shift.end_time or '--':<5} {hours:>5}h  {shift.location}")
        print()


class ShiftCsvRenderer(BaseRenderer):
    """Write shifts as CSV rows, to a file path or stdout."""

    def __init__(self, output_path: Optional[str] = None):
        self.output_path = output_path

    def write(self, shifts: List[Shift], stream: TextIO) -> None:
        writer = csv.DictWriter(stream, fieldnames=CSV_COLUMNS)
        writer.writeheader()
        for shift in shifts:
            writer.writerow({
                'Date': shift.date.isoformat(),
                'Type': shift.type,
                'StartTime': shift.start_time,
                'EndTime': shift.end_time,
                'Location': shift.location,
                'Notes': shift.notes,
                'Completed': 'Yes' if shift.completed else 'No',
            })

    def render(self, data: List[Shift]) -> None:
        if self.output_path:
            with open(self.output_path, 'w', newline='') as f:
                self.write(data, f)
            print(f"Exported {len(data)} shifts to {self.output_path}")
        else:
            self.write(data, sys.stdout)


# Registry mapping mode names to renderer classes
RENDERER_REGISTRY = {
    'TaxBreakdown': TaxBreakdownRenderer,
    'Overtime': OvertimeRenderer,
    'MonthSummary': MonthSummaryRenderer,
    'UpcomingEvents': UpcomingEventsRenderer,
    'Calendar': CalendarRenderer,
    'ExportCsv': ShiftCsvRenderer,
}
