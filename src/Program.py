import sys
import os
import argparse
from datetime import date

sys.path.insert(0, os.path.dirname(__file__))

from calc.pay_calculator import compute_breakdown
from calc.recurrence import occurrences_by_day
from calc.reminders import upcoming_reminders
from calc.shift_stats import month_bounds, shifts_in_range, summarize_month
from model.Profile import Profile
from model.RecurringEvent import as_day
from profile_loader import load_profile
from render.renderers import (
    CalendarRenderer,
    MonthSummaryRenderer,
    OvertimeRenderer,
    ShiftCsvRenderer,
    TaxBreakdownRenderer,
    UpcomingEventsRenderer,
    RENDERER_REGISTRY,
)
from tax.TaxBracketTable import TaxBracketTable


def parse_date(value: str) -> date:
    try:
        return as_day(value, 'date')
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def parse_month(value: str) -> tuple:
    """Parse 'YYYY-MM' into (year, month)."""
    try:
        year, month = value.split('-')
        year, month = int(year), int(month)
    except ValueError:
        raise argparse.ArgumentTypeError(f"month must look like YYYY-MM, got {value!r}")
    if not 1 <= month <= 12:
        raise argparse.ArgumentTypeError(f"month must be between 01 and 12, got {value!r}")
    return year, month


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Shift schedule, payday and pay estimate reports',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Modes:
  UpcomingEvents  Next payday / pay card dates and tomorrow's reminders (default)
  Calendar        Month grid with event and shift markers
  MonthSummary    Shift counts, hours and estimated pay for a month
  Overtime        Regular vs overtime pay for a month
  TaxBreakdown    Tax and contribution estimate for annualized (or given) income
  ExportCsv       Shifts in a date range as CSV

Examples:
  python src/Program.py example
  python src/Program.py example --mode Calendar --month 2025-05
  python src/Program.py example --mode TaxBreakdown --income 60000
  python src/Program.py example --mode ExportCsv --start 2025-05-01 --end 2025-06-01 --output may.csv
        """
    )
    parser.add_argument('profile_name', help='Name of the profile (folder in input-parameters)')
    parser.add_argument('--mode', '-m',
                        choices=list(RENDERER_REGISTRY.keys()),
                        default='UpcomingEvents',
                        help='Output mode (default: UpcomingEvents)')
    parser.add_argument('--date', '-d', type=parse_date, default=None,
                        help='Reference date YYYY-MM-DD (default: today)')
    parser.add_argument('--month', type=parse_month, default=None,
                        help='Month YYYY-MM for Calendar, MonthSummary, Overtime and TaxBreakdown (default: month of --date)')
    parser.add_argument('--income', type=float, default=None,
                        help='Annual gross income for TaxBreakdown (default: month pay x 12)')
    parser.add_argument('--start', type=parse_date, default=None,
                        help='ExportCsv range start, inclusive (default: first of the month)')
    parser.add_argument('--end', type=parse_date, default=None,
                        help='ExportCsv range end, exclusive (default: first of next month)')
    parser.add_argument('--output', '-o', default=None,
                        help='ExportCsv output file (default: stdout)')
    return parser


def run(profile: Profile, args) -> None:
    """Compute and render the selected report for a loaded profile."""
    reference = args.date or date.today()
    year, month = args.month or (reference.year, reference.month)
    start, end = month_bounds(year, month)

    if args.mode == 'UpcomingEvents':
        reminders = upcoming_reminders(
            profile.recurring_events, profile.shifts, reference,
            notify_before_shift=profile.notify_before_shift,
            notify_recurring_events=profile.notify_recurring_events,
        )
        renderer = UpcomingEventsRenderer(reference)
        renderer.render({'events': profile.recurring_events, 'reminders': reminders})
    elif args.mode == 'Calendar':
        renderer = CalendarRenderer(year, month)
        renderer.render({
            'events_by_day': occurrences_by_day(profile.recurring_events, start, end),
            'shifts': shifts_in_range(profile.shifts, start, end),
        })
    elif args.mode == 'MonthSummary':
        summary = summarize_month(profile.shifts, year, month, profile.hourly_rate, profile.overtime_multiplier)
        MonthSummaryRenderer().render(summary)
    elif args.mode == 'Overtime':
        summary = summarize_month(profile.shifts, year, month, profile.hourly_rate, profile.overtime_multiplier)
        OvertimeRenderer(profile.hourly_rate, profile.overtime_multiplier).render(summary)
    elif args.mode == 'TaxBreakdown':
        table = TaxBracketTable.load(profile.jurisdiction, profile.tax_year)
        if args.income is not None:
            income = args.income
        else:
            summary = summarize_month(profile.shifts, year, month, profile.hourly_rate, profile.overtime_multiplier)
            income = summary.annualized_income
        renderer = TaxBreakdownRenderer(table.name, table.year)
        renderer.render(compute_breakdown(income, table))
    elif args.mode == 'ExportCsv':
        export_start = args.start or start
        export_end = args.end or end
        renderer = ShiftCsvRenderer(args.output)
        renderer.render(shifts_in_range(profile.shifts, export_start, export_end))


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        profile = load_profile(args.profile_name)
    except FileNotFoundError as e:
        print(str(e))
        sys.exit(1)
    except (ValueError, TypeError) as e:
        print(f"Invalid profile {args.profile_name!r}: {e}")
        sys.exit(1)

    try:
        run(profile, args)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
