import os
import sys
from datetime import date, datetime

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))
from calc.reminders import Reminder, event_reminder_body, upcoming_reminders
from model.RecurringEvent import RecurringEvent
from model.Shift import Shift
from profile_loader import load_profile


@pytest.fixture(scope="module")
def example_profile():
    return load_profile('example')


def test_shift_and_paycard_reminders(example_profile):
    reminders = upcoming_reminders(example_profile.recurring_events, example_profile.shifts, date(2025, 5, 1))
    assert [r.title for r in reminders] == ["Upcoming Shifts", "Reminder: Submit Pay Card"]
    assert reminders[0].body == "You have 1 shift scheduled for tomorrow."
    assert reminders[1].body == "Don't forget to submit your pay card tomorrow to HR Department"
    assert all(r.due_date == date(2025, 5, 2) for r in reminders)


def test_payday_reminder_with_amount(example_profile):
    reminders = upcoming_reminders(example_profile.recurring_events, example_profile.shifts, '2025-05-08')
    assert len(reminders) == 1
    assert reminders[0].title == "Reminder: Pay Day"
    assert reminders[0].body == "Tomorrow is pay day! Expected amount: $2,500.00"


def test_no_reminders_on_quiet_day(example_profile):
    assert upcoming_reminders(example_profile.recurring_events, example_profile.shifts, date(2025, 5, 11)) == []


def test_reference_time_of_day_is_ignored(example_profile):
    reminders = upcoming_reminders(example_profile.recurring_events, example_profile.shifts,
                                   datetime(2025, 5, 8, 23, 30))
    assert [r.title for r in reminders] == ["Reminder: Pay Day"]


def test_multiple_shifts_pluralized():
    shifts = [
        Shift(id=1, date=date(2025, 6, 2), type='day', start_time='07:00', end_time='11:00'),
        Shift(id=2, date=date(2025, 6, 2), type='meeting', start_time='13:00', end_time='14:00'),
    ]
    reminders = upcoming_reminders([], shifts, date(2025, 6, 1))
    assert reminders[0].body == "You have 2 shifts scheduled for tomorrow."


def test_notification_switches(example_profile):
    only_events = upcoming_reminders(example_profile.recurring_events, example_profile.shifts,
                                     date(2025, 5, 1), notify_before_shift=False)
    assert [r.title for r in only_events] == ["Reminder: Submit Pay Card"]

    only_shifts = upcoming_reminders(example_profile.recurring_events, example_profile.shifts,
                                     date(2025, 5, 1), notify_recurring_events=False)
    assert [r.title for r in only_shifts] == ["Upcoming Shifts"]


def test_event_reminder_bodies():
    payday = RecurringEvent('p', 'Pay Day', 'payday', date(2025, 1, 3), 2)
    paycard = RecurringEvent('c', 'Pay Card', 'paycard', date(2025, 1, 3), 2)
    other = RecurringEvent('o', 'Range Qualification', 'other', date(2025, 1, 3), 4)
    assert event_reminder_body(payday) == "Tomorrow is pay day!"
    assert event_reminder_body(paycard) == "Don't forget to submit your pay card tomorrow"
    assert event_reminder_body(other) == "Range Qualification is tomorrow"


def test_reminder_to_dict():
    reminder = Reminder("Upcoming Shifts", "You have 1 shift scheduled for tomorrow.", date(2025, 5, 2))
    assert reminder.to_dict() == {
        'title': "Upcoming Shifts",
        'body': "You have 1 shift scheduled for tomorrow.",
        'due_date': '2025-05-02',
    }
