import json
import os
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional, Tuple

from model.money import to_decimal, ZERO

DEFAULT_REFERENCE_PATH = os.path.normpath(os.path.join(os.path.dirname(__file__), '..', '..', 'reference', 'tax-tables.json'))


@dataclass(frozen=True)
class Bracket:
    """One marginal bracket: income at or above `threshold` is taxed at `rate`."""
    threshold: Decimal
    rate: Decimal


@dataclass(frozen=True)
class ContributionSchedule:
    """Fixed-rate statutory deduction (pension or insurance).

    annual_maximum of None means the contribution is uncapped.
    """
    rate: Decimal
    annual_maximum: Optional[Decimal] = None
    exemption: Decimal = ZERO


def validate_rate(rate, name: str) -> Decimal:
    rate = to_decimal(rate, name)
    if rate < 0 or rate > 1:
        raise ValueError(f"{name} must be between 0 and 1, got {rate}")
    return rate


def build_brackets(pairs: Iterable, name: str = 'brackets') -> Tuple[Bracket, ...]:
    """Validate (threshold, rate) pairs and return them as Brackets.

    Accepts Bracket instances, (threshold, rate) tuples or dicts with
    `threshold` and `rate` keys. Thresholds must start at 0 and be strictly
    increasing; rates must lie within [0, 1].

    Raises:
        ValueError: If the list is empty or violates the ordering rules.
    """
    brackets = []
    for i, pair in enumerate(pairs):
        if isinstance(pair, Bracket):
            threshold, rate = pair.threshold, pair.rate
        elif isinstance(pair, dict):
            threshold, rate = pair.get('threshold'), pair.get('rate')
        else:
            threshold, rate = pair
        threshold = to_decimal(threshold, f"{name}[{i}] threshold")
        rate = validate_rate(rate, f"{name}[{i}] rate")
        if i == 0 and threshold != 0:
            raise ValueError(f"{name}[0] threshold must be 0, got {threshold}")
        if brackets and threshold <= brackets[-1].threshold:
            raise ValueError(
                f"{name} thresholds must be strictly increasing: "
                f"{name}[{i}] = {threshold} follows {brackets[-1].threshold}")
        brackets.append(Bracket(threshold, rate))
    if not brackets:
        raise ValueError(f"{name} must contain at least one bracket")
    return tuple(brackets)


def build_schedule(data: dict, name: str) -> ContributionSchedule:
    """Build a ContributionSchedule from its reference JSON entry.

    The cap is either given directly as `annualMaximumContribution` or
    derived from `maximumInsurableEarnings` times the rate.
    """
    rate = validate_rate(data.get('rate', 0), f"{name} rate")
    exemption = to_decimal(data.get('exemptionAmount', 0), f"{name} exemptionAmount")
    if exemption < 0:
        raise ValueError(f"{name} exemptionAmount must not be negative, got {exemption}")
    if data.get('annualMaximumContribution') is not None:
        maximum = to_decimal(data['annualMaximumContribution'], f"{name} annualMaximumContribution")
    elif data.get('maximumInsurableEarnings') is not None:
        maximum = to_decimal(data['maximumInsurableEarnings'], f"{name} maximumInsurableEarnings") * rate
    else:
        maximum = None
    if maximum is not None and maximum < 0:
        raise ValueError(f"{name} annual maximum must not be negative, got {maximum}")
    return ContributionSchedule(rate=rate, annual_maximum=maximum, exemption=exemption)


class TaxBracketTable:
    """Bracket and contribution configuration for one jurisdiction and tax year.

    Validated once at construction; read-only afterwards.
    """

    def __init__(self, jurisdiction: str, year: int,
                 federal_brackets: Iterable, provincial_brackets: Iterable,
                 pension: ContributionSchedule, insurance: ContributionSchedule,
                 name: Optional[str] = None):
        self._jurisdiction = jurisdiction
        self._year = year
        self._name = name or jurisdiction
        self._federal = build_brackets(federal_brackets, 'federalBrackets')
        self._provincial = build_brackets(provincial_brackets, 'provincialBrackets')
        self._pension = pension
        self._insurance = insurance

    @property
    def jurisdiction(self) -> str:
        return self._jurisdiction

    @property
    def year(self) -> int:
        return self._year

    @property
    def name(self) -> str:
        return self._name

    @property
    def federal_brackets(self) -> Tuple[Bracket, ...]:
        return self._federal

    @property
    def provincial_brackets(self) -> Tuple[Bracket, ...]:
        return self._provincial

    @property
    def pension(self) -> ContributionSchedule:
        return self._pension

    @property
    def insurance(self) -> ContributionSchedule:
        return self._insurance

    def __repr__(self):
        return f"TaxBracketTable({self._jurisdiction!r}, {self._year})"

    @classmethod
    def from_dict(cls, jurisdiction: str, year_data: dict, name: Optional[str] = None) -> 'TaxBracketTable':
        year = year_data.get('year')
        if year is None:
            raise ValueError(f"Tax year entry for {jurisdiction} is missing 'year'")
        return cls(
            jurisdiction=jurisdiction,
            year=year,
            federal_brackets=year_data.get('federalBrackets', []),
            provincial_brackets=year_data.get('provincialBrackets', []),
            pension=build_schedule(year_data.get('pension', {}), 'pension'),
            insurance=build_schedule(year_data.get('insurance', {}), 'insurance'),
            name=name,
        )

    @classmethod
    def load(cls, jurisdiction: str = 'SK', year: int = 2025, ref_path: Optional[str] = None) -> 'TaxBracketTable':
        """Load the table for a jurisdiction and year from the reference file.

        Raises:
            FileNotFoundError: If the reference file does not exist.
            ValueError: If the jurisdiction or year is not defined, or the
                        entry fails validation.
        """
        path = ref_path or DEFAULT_REFERENCE_PATH
        with open(path, 'r') as f:
            data = json.load(f)

        jurisdictions = data.get('jurisdictions', {})
        if jurisdiction not in jurisdictions:
            raise ValueError(f"No tax tables for jurisdiction {jurisdiction!r}. Available: {sorted(jurisdictions)}")
        entry = jurisdictions[jurisdiction]
        for year_data in entry.get('taxYears', []):
            if year_data.get('year') == year:
                return cls.from_dict(jurisdiction, year_data, name=entry.get('name'))
        available = sorted(y.get('year') for y in entry.get('taxYears', []))
        raise ValueError(f"No {jurisdiction} tax tables for year {year}. Available years: {available}")


def available_tables(ref_path: Optional[str] = None) -> dict:
    """Return {jurisdiction: [years]} for every table in the reference file."""
    path = ref_path or DEFAULT_REFERENCE_PATH
    with open(path, 'r') as f:
        data = json.load(f)
    return {
        code: sorted(y['year'] for y in entry.get('taxYears', []))
        for code, entry in data.get('jurisdictions', {}).items()
    }
