"""Schedio Tools for MCP Server.

This module provides the tool implementations that wrap the schedule and
pay calculators and expose their data through MCP.
"""

import os
import sys
import logging
from datetime import date
from typing import Dict, Optional

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from calc.pay_calculator import compute_breakdown, overtime_pay
from calc.recurrence import describe, next_occurrence, occurrences_in_range
from calc.reminders import upcoming_reminders
from calc.shift_stats import summarize_month
from model.Profile import Profile
from model.RecurringEvent import as_day
from profile_loader import list_profiles, load_profile
from tax.TaxBracketTable import TaxBracketTable

logger = logging.getLogger(__name__)


class ScheduleTools:
    """Tools that wrap the calculators for one profile."""

    def __init__(self, base_path: str, profile_name: str):
        """Load the profile and its tax table.

        Args:
            base_path: Path to the repository root (holding input-parameters and reference)
            profile_name: Name of the profile folder in input-parameters
        """
        self.base_path = base_path
        self.profile_name = profile_name
        self.profile: Profile = load_profile(profile_name, base_path)
        self.table = TaxBracketTable.load(
            self.profile.jurisdiction,
            self.profile.tax_year,
            os.path.join(base_path, 'reference', 'tax-tables.json'),
        )

    def _reference(self, reference_date: Optional[str]) -> date:
        return date.today() if reference_date is None else as_day(reference_date, 'reference_date')

    def _events(self, event_id: Optional[str]) -> list:
        if event_id is None:
            return list(self.profile.recurring_events)
        return [self.profile.get_event(event_id)]

    def get_profile_overview(self) -> dict:
        return {
            "profile": self.profile_name,
            "hourly_rate": float(self.profile.hourly_rate),
            "overtime_multiplier": float(self.profile.overtime_multiplier),
            "jurisdiction": self.table.name,
            "tax_year": self.table.year,
            "recurring_events": [e.to_dict() for e in self.profile.recurring_events],
            "shift_count": len(self.profile.shifts),
        }

    def get_next_occurrence(self, event_id: Optional[str] = None, reference_date: Optional[str] = None) -> dict:
        """Next occurrence of one event, or of every event when event_id is omitted."""
        reference = self._reference(reference_date)
        return {
            "reference_date": reference.isoformat(),
            "events": [
                {
                    "id": event.id,
                    "title": event.title,
                    "type": event.kind,
                    "next_date": next_occurrence(event, reference).isoformat(),
                    "description": describe(event, reference),
                }
                for event in self._events(event_id)
            ],
        }

    def get_occurrences_in_range(self, start: str, end: str, event_id: Optional[str] = None,
                                 max_count: int = 10) -> dict:
        range_start = as_day(start, 'start')
        range_end = as_day(end, 'end')
        return {
            "start": range_start.isoformat(),
            "end": range_end.isoformat(),
            "occurrences": {
                event.id: [d.isoformat() for d in occurrences_in_range(event, range_start, range_end, max_count)]
                for event in self._events(event_id)
            },
        }

    def get_upcoming_reminders(self, reference_date: Optional[str] = None) -> dict:
        reference = self._reference(reference_date)
        reminders = upcoming_reminders(
            self.profile.recurring_events, self.profile.shifts, reference,
            notify_before_shift=self.profile.notify_before_shift,
            notify_recurring_events=self.profile.notify_recurring_events,
        )
        return {
            "reference_date": reference.isoformat(),
            "reminders": [r.to_dict() for r in reminders],
        }

    def get_month_summary(self, year: int, month: int) -> dict:
        summary = summarize_month(self.profile.shifts, year, month,
                                  self.profile.hourly_rate, self.profile.overtime_multiplier)
        return summary.to_dict()

    def get_tax_breakdown(self, gross_income: Optional[float] = None,
                          year: Optional[int] = None, month: Optional[int] = None) -> dict:
        """Tax estimate for an explicit income, or for one month of shifts annualized."""
        if gross_income is None:
            if year is None or month is None:
                return {"error": "Provide gross_income, or year and month to annualize shift pay"}
            gross_income = self.get_month_summary(year, month)["annualized_income"]
        breakdown = compute_breakdown(gross_income, self.table)
        result = breakdown.to_dict()
        result["jurisdiction"] = self.table.name
        result["tax_year"] = self.table.year
        return result

    def get_overtime_pay(self, regular_hours: float, overtime_hours: float,
                         hourly_rate: Optional[float] = None, multiplier: Optional[float] = None) -> dict:
        """Overtime pay using the profile's rate and multiplier unless overridden."""
        rate = self.profile.hourly_rate if hourly_rate is None else hourly_rate
        factor = self.profile.overtime_multiplier if multiplier is None else multiplier
        result = overtime_pay(regular_hours, overtime_hours, rate, factor)
        return {
            "regular_hours": regular_hours,
            "overtime_hours": overtime_hours,
            "hourly_rate": float(rate),
            "multiplier": float(factor),
            **result.to_dict(),
        }


class MultiProfileTools:
    """Manages ScheduleTools for every profile under input-parameters."""

    def __init__(self, base_path: str, default_profile: Optional[str] = None):
        self.base_path = base_path
        self.profiles: Dict[str, ScheduleTools] = {}
        self.errors: Dict[str, str] = {}
        self.default_profile = default_profile
        self._discover_profiles()

    def _discover_profiles(self) -> None:
        for name in list_profiles(self.base_path):
            try:
                self.profiles[name] = ScheduleTools(self.base_path, name)
            except (ValueError, TypeError, FileNotFoundError) as e:
                logger.warning("Skipping profile %s: %s", name, e)
                self.errors[name] = str(e)
        logger.info("Loaded %d profiles from %s", len(self.profiles), self.base_path)
        if self.default_profile is None and self.profiles:
            self.default_profile = sorted(self.profiles)[0]

    def _get_profile(self, profile: Optional[str] = None) -> ScheduleTools:
        name = profile or self.default_profile
        if name is None:
            raise ValueError("No profile specified and no default profile available")
        if name not in self.profiles:
            if name in self.errors:
                raise ValueError(f"Profile '{name}' failed to load: {self.errors[name]}")
            raise ValueError(f"Profile '{name}' not found. Available: {sorted(self.profiles)}")
        return self.profiles[name]

    def _tagged(self, result: dict, profile: Optional[str]) -> dict:
        result["profile"] = profile or self.default_profile
        return result

    def list_profiles(self) -> dict:
        return {
            "available_profiles": sorted(self.profiles),
            "default_profile": self.default_profile,
            "profiles_info": {name: tools.get_profile_overview() for name, tools in self.profiles.items()},
            "failed_profiles": dict(self.errors),
        }

    def reload_profiles(self) -> dict:
        """Reload all profiles from disk."""
        old_profiles = set(self.profiles)
        self.profiles.clear()
        self.errors.clear()
        self._discover_profiles()
        new_profiles = set(self.profiles)
        return {
            "status": "success",
            "message": f"Reloaded {len(self.profiles)} profiles",
            "profiles_loaded": sorted(new_profiles),
            "default_profile": self.default_profile,
            "changes": {
                "added": sorted(new_profiles - old_profiles),
                "removed": sorted(old_profiles - new_profiles),
                "reloaded": sorted(old_profiles & new_profiles),
            },
        }

    def get_next_occurrence(self, event_id: Optional[str] = None, reference_date: Optional[str] = None,
                            profile: Optional[str] = None) -> dict:
        result = self._get_profile(profile).get_next_occurrence(event_id, reference_date)
        return self._tagged(result, profile)

    def get_occurrences_in_range(self, start: str, end: str, event_id: Optional[str] = None,
                                 max_count: int = 10, profile: Optional[str] = None) -> dict:
        result = self._get_profile(profile).get_occurrences_in_range(start, end, event_id, max_count)
        return self._tagged(result, profile)

    def get_upcoming_reminders(self, reference_date: Optional[str] = None, profile: Optional[str] = None) -> dict:
        result = self._get_profile(profile).get_upcoming_reminders(reference_date)
        return self._tagged(result, profile)

    def get_month_summary(self, year: int, month: int, profile: Optional[str] = None) -> dict:
        result = self._get_profile(profile).get_month_summary(year, month)
        return self._tagged(result, profile)

    def get_tax_breakdown(self, gross_income: Optional[float] = None, year: Optional[int] = None,
                          month: Optional[int] = None, profile: Optional[str] = None) -> dict:
        result = self._get_profile(profile).get_tax_breakdown(gross_income, year, month)
        return self._tagged(result, profile)

    def get_overtime_pay(self, regular_hours: float, overtime_hours: float, hourly_rate: Optional[float] = None,
                         multiplier: Optional[float] = None, profile: Optional[str] = None) -> dict:
        result = self._get_profile(profile).get_overtime_pay(regular_hours, overtime_hours, hourly_rate, multiplier)
        return self._tagged(result, profile)
