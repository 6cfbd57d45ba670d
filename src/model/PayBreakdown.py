from dataclasses import dataclass
from decimal import Decimal


@dataclass
class PayBreakdown:
    """Tax and statutory deductions for one gross income figure.

    Derived values only; recompute from the gross income whenever it changes.
    `effective_rate` is a fraction (0.25 for 25%).
    """
    gross_income: Decimal
    federal_tax: Decimal
    provincial_tax: Decimal
    pension_contribution: Decimal
    insurance_contribution: Decimal
    total_deductions: Decimal
    net_income: Decimal
    effective_rate: Decimal
    federal_bracket: str = "0%"
    provincial_bracket: str = "0%"

    def to_dict(self) -> dict:
        return {
            'gross_income': float(self.gross_income),
            'federal_tax': float(self.federal_tax),
            'provincial_tax': float(self.provincial_tax),
            'pension_contribution': float(self.pension_contribution),
            'insurance_contribution': float(self.insurance_contribution),
            'total_deductions': float(self.total_deductions),
            'net_income': float(self.net_income),
            'effective_rate': float(self.effective_rate),
            'tax_brackets': {
                'federal': self.federal_bracket,
                'provincial': self.provincial_bracket,
            },
        }


@dataclass
class OvertimeResult:
    regular_pay: Decimal
    overtime_pay: Decimal
    total_pay: Decimal

    def to_dict(self) -> dict:
        return {
            'regular_pay': float(self.regular_pay),
            'overtime_pay': float(self.overtime_pay),
            'total_pay': float(self.total_pay),
        }
