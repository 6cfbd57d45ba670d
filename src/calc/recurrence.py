"""Occurrence dates for week-interval recurring events.

Every occurrence is `anchor_date + k * interval_weeks * 7` days for some
k >= 0. All inputs are reduced to calendar dates first, so a step is always
a whole number of days and DST changes cannot shift a result by a day.
"""

from datetime import date, timedelta
from typing import Dict, Iterable, List

from model.RecurringEvent import RecurringEvent, as_day

DEFAULT_RANGE_DAYS = 90
DEFAULT_MAX_COUNT = 10


def _interval_days(event: RecurringEvent) -> int:
    # duck-typed events bypass RecurringEvent validation
    interval = getattr(event, 'interval_weeks', None)
    if isinstance(interval, bool) or not isinstance(interval, int) or interval < 1:
        raise ValueError(f"interval_weeks must be an integer >= 1, got {interval!r}")
    return interval * 7


def next_occurrence(event: RecurringEvent, reference_date=None) -> date:
    """Return the first occurrence on or after `reference_date`.

    Args:
        event: The recurring event
        reference_date: date, datetime or ISO string; defaults to today

    Returns:
        The anchor date itself when `reference_date` is on or before it,
        otherwise the earliest later occurrence not before `reference_date`.
    """
    step = _interval_days(event)
    anchor = as_day(event.anchor_date, 'anchor_date')
    reference = date.today() if reference_date is None else as_day(reference_date, 'reference_date')

    elapsed = (reference - anchor).days
    if elapsed <= 0:
        return anchor
    # ceiling division
    k = -(-elapsed // step)
    return anchor + timedelta(days=k * step)


def occurrences_in_range(event: RecurringEvent, range_start=None, range_end=None,
                         max_count: int = DEFAULT_MAX_COUNT) -> List[date]:
    """List occurrences with range_start <= d < range_end, oldest first.

    Args:
        event: The recurring event
        range_start: Inclusive start; defaults to today
        range_end: Exclusive end; defaults to 90 days after range_start
        max_count: Maximum number of dates returned

    Returns:
        Up to `max_count` dates. Empty if the range is empty or the anchor
        is on or after `range_end`.
    """
    if isinstance(max_count, bool) or not isinstance(max_count, int):
        raise TypeError(f"max_count must be an integer, got {max_count!r}")
    if max_count < 0:
        raise ValueError(f"max_count must not be negative, got {max_count}")

    step = _interval_days(event)
    start = date.today() if range_start is None else as_day(range_start, 'range_start')
    end = start + timedelta(days=DEFAULT_RANGE_DAYS) if range_end is None else as_day(range_end, 'range_end')

    dates = []
    current = next_occurrence(event, start)
    while current < end and len(dates) < max_count:
        dates.append(current)
        current += timedelta(days=step)
    return dates


def occurrences_by_day(events: Iterable[RecurringEvent], range_start, range_end) -> Dict[date, List[RecurringEvent]]:
    """Group every event occurrence in [range_start, range_end) by date.

    Used to place markers on a month grid. No per-event cap applies: the
    range itself bounds the work.
    """
    start = as_day(range_start, 'range_start')
    end = as_day(range_end, 'range_end')
    span = max((end - start).days, 0)

    by_day: Dict[date, List[RecurringEvent]] = {}
    for event in events:
        limit = span // _interval_days(event) + 1
        for day in occurrences_in_range(event, start, end, max_count=limit):
            by_day.setdefault(day, []).append(event)
    return dict(sorted(by_day.items()))


def format_event_date(day: date) -> str:
    """Format as 'May 2, 2025'."""
    return f"{day:%b} {day.day}, {day.year}"


def describe(event: RecurringEvent, reference_date=None) -> str:
    """One-line description of the event's next occurrence."""
    when = format_event_date(next_occurrence(event, reference_date))
    if event.kind == 'payday':
        description = f"Payday on {when}"
        if event.amount:
            description += f" - ${event.amount}"
    elif event.kind == 'paycard':
        description = f"Submit pay card on {when}"
        if event.destination:
            description += f" to {event.destination}"
    else:
        description = f"{event.title} on {when}"
    return description
