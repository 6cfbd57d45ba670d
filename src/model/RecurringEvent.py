"""Recurring schedule items such as paydays and pay card deadlines."""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

EVENT_KINDS = ('payday', 'paycard', 'other')


def as_day(value, name: str = 'date') -> date:
    """Reduce a date, datetime or ISO string to a calendar date.

    Time of day is discarded so that all comparisons and week stepping
    happen at day granularity.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip()).date()
        except ValueError:
            raise ValueError(f"{name} must be an ISO date (YYYY-MM-DD), got {value!r}")
    raise TypeError(f"{name} must be a date, datetime or ISO string, got {type(value).__name__}")


@dataclass(frozen=True)
class RecurringEvent:
    """An event repeating every `interval_weeks` weeks from `anchor_date`."""
    id: str
    title: str
    kind: str
    anchor_date: date
    interval_weeks: int
    amount: Optional[str] = None       # payday only
    destination: Optional[str] = None  # paycard only
    notes: Optional[str] = None

    def __post_init__(self):
        if self.kind not in EVENT_KINDS:
            raise ValueError(f"Unknown event kind {self.kind!r} for event {self.id!r}; expected one of {EVENT_KINDS}")
        # bool is an int subclass, reject it explicitly
        if isinstance(self.interval_weeks, bool) or not isinstance(self.interval_weeks, int):
            raise ValueError(f"interval_weeks must be an integer for event {self.id!r}, got {self.interval_weeks!r}")
        if self.interval_weeks < 1:
            raise ValueError(f"interval_weeks must be at least 1 for event {self.id!r}, got {self.interval_weeks}")
        object.__setattr__(self, 'anchor_date', as_day(self.anchor_date, 'anchor_date'))

    @property
    def interval_days(self) -> int:
        return self.interval_weeks * 7

    @classmethod
    def from_dict(cls, data: dict) -> 'RecurringEvent':
        """Build an event from its profile JSON representation.

        Accepts both the stored keys (`type`, `firstDate`, `interval`) and
        the long names (`kind`, `anchorDate`, `intervalWeeks`).
        """
        anchor = data.get('anchorDate', data.get('firstDate'))
        if anchor is None:
            raise ValueError(f"Recurring event {data.get('id')!r} is missing 'firstDate'")
        interval = data.get('intervalWeeks', data.get('interval'))
        if interval is None:
            raise ValueError(f"Recurring event {data.get('id')!r} is missing 'interval'")
        return cls(
            id=str(data.get('id', '')),
            title=data.get('title', ''),
            kind=data.get('kind', data.get('type', 'other')),
            anchor_date=as_day(anchor, 'firstDate'),
            interval_weeks=interval,
            amount=data.get('amount'),
            destination=data.get('destination'),
            notes=data.get('notes'),
        )

    def to_dict(self) -> dict:
        result = {
            'id': self.id,
            'title': self.title,
            'type': self.kind,
            'firstDate': self.anchor_date.isoformat(),
            'interval': self.interval_weeks,
        }
        for key in ('amount', 'destination', 'notes'):
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        return result
