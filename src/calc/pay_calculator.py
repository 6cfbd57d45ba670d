"""Tax, statutory contribution and overtime calculations.

All amounts are Decimals rounded half-up to cents, so totals add up exactly:
`net_income + total_deductions == gross_income` and
`regular_pay + overtime_pay == total_pay` hold without tolerance.
"""

from decimal import Decimal
from typing import Iterable, Optional

from model.PayBreakdown import OvertimeResult, PayBreakdown
from model.money import ZERO, check_magnitude, to_cents, to_decimal
from tax.TaxBracketTable import ContributionSchedule, TaxBracketTable, build_brackets, validate_rate

# Time-and-a-half or double-time
ALLOWED_OVERTIME_MULTIPLIERS = (Decimal('1.5'), Decimal('2'))

RATE_PLACES = Decimal('0.0001')


def _non_negative(value, name: str) -> Decimal:
    amount = to_decimal(value, name)
    if amount < 0:
        raise ValueError(f"{name} must not be negative, got {amount}")
    return check_magnitude(amount, name)


def progressive_tax(income, brackets: Iterable) -> Decimal:
    """Marginal-bracket tax on `income`.

    Each slice of income is taxed only at the rate of the bracket it falls
    into; the last bracket is unbounded.

    Args:
        income: Non-negative taxable income
        brackets: (threshold, rate) pairs, first threshold 0, thresholds
                  strictly increasing

    Returns:
        Tax rounded to cents.

    Example:
        progressive_tax(60000, [(0, 0.15), (53359, 0.205)])
        = 53359 * 0.15 + 6641 * 0.205 = 9365.26
    """
    income = _non_negative(income, 'income')
    brackets = build_brackets(brackets)

    tax = ZERO
    for i, bracket in enumerate(brackets):
        if income <= bracket.threshold:
            break
        upper = brackets[i + 1].threshold if i + 1 < len(brackets) else None
        top = income if upper is None else min(income, upper)
        tax += (top - bracket.threshold) * bracket.rate
    return to_cents(tax)


def contribution(income, rate, exemption=0, annual_max=None) -> Decimal:
    """Statutory contribution: min(max(income - exemption, 0) * rate, annual_max).

    `annual_max` of None leaves the contribution uncapped.
    """
    income = _non_negative(income, 'income')
    rate = validate_rate(rate, 'rate')
    exemption = _non_negative(exemption, 'exemption')

    amount = max(income - exemption, ZERO) * rate
    if annual_max is not None:
        amount = min(amount, _non_negative(annual_max, 'annual_max'))
    return to_cents(amount)


def schedule_contribution(income, schedule: ContributionSchedule) -> Decimal:
    return contribution(income, schedule.rate, schedule.exemption, schedule.annual_maximum)


def marginal_rate(income, brackets: Iterable) -> Decimal:
    """Rate of the highest bracket whose threshold does not exceed `income`."""
    income = _non_negative(income, 'income')
    brackets = build_brackets(brackets)
    for bracket in reversed(brackets):
        if income >= bracket.threshold:
            return bracket.rate
    return ZERO


def bracket_description(income, brackets: Iterable) -> str:
    """Marginal rate formatted for display, e.g. '20.5%'."""
    rate = marginal_rate(income, brackets) * 100
    return f"{rate:.1f}%"


def compute_breakdown(gross_income, table: TaxBracketTable) -> PayBreakdown:
    """Federal and provincial tax plus pension and insurance for one income.

    Args:
        gross_income: Non-negative annual gross income
        table: Bracket and contribution configuration to apply

    Returns:
        PayBreakdown with effective_rate 0 when gross_income is 0.
    """
    gross = to_cents(_non_negative(gross_income, 'gross_income'))

    federal_tax = progressive_tax(gross, table.federal_brackets)
    provincial_tax = progressive_tax(gross, table.provincial_brackets)
    pension = schedule_contribution(gross, table.pension)
    insurance = schedule_contribution(gross, table.insurance)

    total_deductions = federal_tax + provincial_tax + pension + insurance
    net_income = gross - total_deductions
    if gross == 0:
        effective_rate = ZERO
    else:
        effective_rate = (total_deductions / gross).quantize(RATE_PLACES)

    return PayBreakdown(
        gross_income=gross,
        federal_tax=federal_tax,
        provincial_tax=provincial_tax,
        pension_contribution=pension,
        insurance_contribution=insurance,
        total_deductions=total_deductions,
        net_income=net_income,
        effective_rate=effective_rate,
        federal_bracket=bracket_description(gross, table.federal_brackets),
        provincial_bracket=bracket_description(gross, table.provincial_brackets),
    )


def validate_multiplier(multiplier) -> Decimal:
    value = to_decimal(multiplier, 'multiplier')
    if value not in ALLOWED_OVERTIME_MULTIPLIERS:
        allowed = ', '.join(str(m) for m in ALLOWED_OVERTIME_MULTIPLIERS)
        raise ValueError(f"Overtime multiplier must be one of {allowed}, got {value}")
    return value


def overtime_pay(regular_hours, overtime_hours, hourly_rate, multiplier) -> OvertimeResult:
    """Pay for regular hours at the base rate plus overtime at `multiplier` times it."""
    regular_hours = _non_negative(regular_hours, 'regular_hours')
    overtime_hours = _non_negative(overtime_hours, 'overtime_hours')
    hourly_rate = _non_negative(hourly_rate, 'hourly_rate')
    multiplier = validate_multiplier(multiplier)

    regular = to_cents(regular_hours * hourly_rate)
    overtime = to_cents(overtime_hours * hourly_rate * multiplier)
    return OvertimeResult(regular_pay=regular, overtime_pay=overtime, total_pay=regular + overtime)


def effective_hourly_rate(result: OvertimeResult, total_hours) -> Optional[Decimal]:
    """Average pay per hour worked, or None when no hours were worked."""
    hours = _non_negative(total_hours, 'total_hours')
    if hours == 0:
        return None
    return to_cents(result.total_pay / hours)
