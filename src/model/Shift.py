from dataclasses import dataclass
from datetime import date

from model.RecurringEvent import as_day

SHIFT_TYPES = ('day', 'night', 'overtime', 'sick', 'vacation', 'meeting')


@dataclass
class Shift:
    """A single scheduled shift.

    `start_time` and `end_time` are wall-clock strings ("07:00", "19:00").
    A shift ending earlier than it starts runs past midnight.
    """
    id: int
    date: date
    type: str
    start_time: str = ""
    end_time: str = ""
    notes: str = ""
    completed: bool = False
    location: str = ""

    def __post_init__(self):
        if self.type not in SHIFT_TYPES:
            raise ValueError(f"Unknown shift type {self.type!r} for shift {self.id}; expected one of {SHIFT_TYPES}")
        self.date = as_day(self.date, 'shift date')

    @classmethod
    def from_dict(cls, data: dict) -> 'Shift':
        if 'date' not in data:
            raise ValueError(f"Shift {data.get('id')!r} is missing 'date'")
        return cls(
            id=data.get('id', 0),
            date=as_day(data['date'], 'shift date'),
            type=data.get('type', 'day'),
            start_time=data.get('startTime', '') or '',
            end_time=data.get('endTime', '') or '',
            notes=data.get('notes', '') or '',
            completed=bool(data.get('completed', False)),
            location=data.get('location', '') or '',
        )

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'date': self.date.isoformat(),
            'type': self.type,
            'startTime': self.start_time,
            'endTime': self.end_time,
            'notes': self.notes,
            'completed': self.completed,
            'location': self.location,
        }
