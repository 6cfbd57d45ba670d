"""Render module for schedule and pay output display."""

from render.renderers import (
    BaseRenderer,
    TaxBreakdownRenderer,
    OvertimeRenderer,
    MonthSummaryRenderer,
    UpcomingEventsRenderer,
    CalendarRenderer,
    ShiftCsvRenderer,
    format_currency,
    format_percentage,
    RENDERER_REGISTRY,
)

__all__ = [
    'BaseRenderer',
    'TaxBreakdownRenderer',
    'OvertimeRenderer',
    'MonthSummaryRenderer',
    'UpcomingEventsRenderer',
    'CalendarRenderer',
    'ShiftCsvRenderer',
    'format_currency',
    'format_percentage',
    'RENDERER_REGISTRY',
]
