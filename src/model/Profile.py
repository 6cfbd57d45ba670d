"""Per-user settings consumed by the calculators.

A profile is the explicit input to every report: the calculators never
read settings from anywhere else.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List

from model.RecurringEvent import RecurringEvent
from model.Shift import Shift
from model.money import to_decimal


@dataclass
class Profile:
    name: str
    hourly_rate: Decimal = Decimal('25')
    overtime_multiplier: Decimal = Decimal('1.5')
    jurisdiction: str = 'SK'
    tax_year: int = 2025
    recurring_events: List[RecurringEvent] = field(default_factory=list)
    shifts: List[Shift] = field(default_factory=list)
    notify_before_shift: bool = True
    notify_recurring_events: bool = True

    @classmethod
    def from_dict(cls, name: str, data: dict) -> 'Profile':
        """Build a profile from the contents of a profile.json file.

        Args:
            name: Profile name (the folder the file was read from)
            data: Parsed JSON with optional `financialSettings`,
                  `notifications`, `recurringEvents` and `shifts` sections

        Raises:
            ValueError: If any section holds invalid values.
        """
        financial = data.get('financialSettings', {})
        notifications = data.get('notifications', {})
        return cls(
            name=name,
            hourly_rate=to_decimal(financial.get('hourlyRate', 25), 'hourlyRate'),
            overtime_multiplier=to_decimal(financial.get('overtimeMultiplier', 1.5), 'overtimeMultiplier'),
            jurisdiction=financial.get('taxProvince', 'SK'),
            tax_year=int(financial.get('taxYear', 2025)),
            recurring_events=[RecurringEvent.from_dict(e) for e in data.get('recurringEvents', [])],
            shifts=[Shift.from_dict(s) for s in data.get('shifts', [])],
            notify_before_shift=bool(notifications.get('beforeShift', True)),
            notify_recurring_events=bool(notifications.get('recurringEvents', True)),
        )

    def get_event(self, event_id: str) -> RecurringEvent:
        for event in self.recurring_events:
            if event.id == event_id:
                return event
        raise ValueError(f"No recurring event {event_id!r} in profile {self.name!r}")
