"""Day-before reminders for shifts and recurring events.

Only computes what should be announced; delivering the reminder (push,
email, console) is the caller's job.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, List

from calc.recurrence import occurrences_in_range
from calc.shift_stats import shifts_on
from model.RecurringEvent import RecurringEvent, as_day
from model.Shift import Shift


@dataclass
class Reminder:
    title: str
    body: str
    due_date: date

    def to_dict(self) -> dict:
        return {'title': self.title, 'body': self.body, 'due_date': self.due_date.isoformat()}


def event_reminder_body(event: RecurringEvent) -> str:
    if event.kind == 'payday':
        if event.amount:
            return f"Tomorrow is pay day! Expected amount: ${event.amount}"
        return "Tomorrow is pay day!"
    if event.kind == 'paycard':
        if event.destination:
            return f"Don't forget to submit your pay card tomorrow to {event.destination}"
        return "Don't forget to submit your pay card tomorrow"
    return f"{event.title} is tomorrow"


def upcoming_reminders(events: Iterable[RecurringEvent], shifts: Iterable[Shift], today=None,
                       notify_before_shift: bool = True,
                       notify_recurring_events: bool = True) -> List[Reminder]:
    """Reminders for everything happening the day after `today`.

    Args:
        events: Recurring events to check
        shifts: Scheduled shifts to check
        today: Reference day (date, datetime or ISO string); defaults to today
        notify_before_shift: Include the shift reminder
        notify_recurring_events: Include recurring event reminders

    Returns:
        At most one shift reminder followed by one reminder per event
        occurring tomorrow.
    """
    today = date.today() if today is None else as_day(today, 'today')
    tomorrow = today + timedelta(days=1)
    reminders = []

    if notify_before_shift:
        count = len(shifts_on(shifts, tomorrow))
        if count:
            plural = 's' if count > 1 else ''
            reminders.append(Reminder(
                title="Upcoming Shifts",
                body=f"You have {count} shift{plural} scheduled for tomorrow.",
                due_date=tomorrow,
            ))

    if notify_recurring_events:
        for event in events:
            if occurrences_in_range(event, tomorrow, tomorrow + timedelta(days=1), max_count=1):
                reminders.append(Reminder(
                    title=f"Reminder: {event.title}",
                    body=event_reminder_body(event),
                    due_date=tomorrow,
                ))

    return reminders
