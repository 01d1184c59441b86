"""Data models for the arbitrage calculator.

This module defines dataclasses representing the entities used by the
projection engine: the caller-owned inputs (incomes, loans, investment plans
and one-time investments) and the derived outputs (yearly projections,
allocation recommendations and the overall result). All records are frozen;
an edit produces a new record through ``dataclasses.replace``.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

INCOME_TYPES: Tuple[str, ...] = ("Salary", "Freelance", "Farming", "Business", "Rental", "Other")
INCOME_FREQUENCIES: Tuple[str, ...] = ("Monthly", "Quarterly", "One-time")
LOAN_TYPES: Tuple[str, ...] = ("Tractor", "KCC", "Home", "Personal", "Relatives", "Credit Card", "Other")
INTEREST_TYPES: Tuple[str, ...] = ("Simple", "Compound")
SIP_TYPES: Tuple[str, ...] = ("Equity", "Hybrid", "Debt")


@dataclass(frozen=True)
class Income:
    """A recurring or one-off income source.

    Attributes
    ----------
    amount: Decimal
        The amount received per ``frequency`` period.
    type: str
        One of ``INCOME_TYPES``.
    frequency: str
        ``"Monthly"``, ``"Quarterly"`` or ``"One-time"``. One-time incomes are
        smoothed over a year when converted to a monthly figure.
    """

    id: str
    amount: Decimal
    type: str = "Salary"
    frequency: str = "Monthly"


@dataclass(frozen=True)
class Loan:
    """An outstanding loan repaid through a fixed EMI.

    The remaining tenure is split into whole years plus 0-11 extra months, so
    the total remaining tenure in months is
    ``tenure_remaining_years * 12 + tenure_remaining_months``.
    """

    id: str
    principal_remaining: Decimal
    emi: Decimal
    interest_rate: Decimal  # annual percent
    tenure_remaining_years: int
    tenure_remaining_months: int = 0
    type: str = "Personal"
    interest_type: str = "Compound"  # 'Simple' or 'Compound'
    prepayment_allowed: bool = True
    prepayment_penalty: Decimal = Decimal("0")  # percent of the prepaid amount

    @property
    def total_months(self) -> int:
        return max(0, self.tenure_remaining_years * 12 + self.tenure_remaining_months)


@dataclass(frozen=True)
class Sip:
    """A systematic investment plan with a fixed monthly contribution.

    Contributions begin after ``start_delay`` whole years and compound monthly
    at ``expected_return`` (annual percent).
    """

    id: str
    monthly_amount: Decimal
    expected_return: Decimal  # annual percent
    investment_horizon: int  # years
    start_delay: int = 0  # years
    name: str = ""
    type: str = "Equity"


@dataclass(frozen=True)
class OneTimeInvestment:
    """A lump sum the caller may apply on a given date.

    The engine accepts these as part of the input snapshot but does not move
    balances with them; distributing them is up to the caller.
    """

    id: str
    amount: Decimal
    date: date
    name: str = ""
    auto_apply: bool = True


@dataclass(frozen=True)
class YearlyProjection:
    """Balances at the end of one projected year.

    ``total_income``, ``total_emi``, ``total_sip`` and ``surplus`` are annual
    figures. ``loans`` maps loan id to remaining balance and ``sips`` maps
    plan id to accumulated corpus.
    """

    year: int
    total_income: Decimal
    total_emi: Decimal
    total_sip: Decimal
    surplus: Decimal
    net_worth: Decimal
    loans: Dict[str, Decimal] = field(default_factory=dict)
    sips: Dict[str, Decimal] = field(default_factory=dict)


@dataclass(frozen=True)
class OptimalAllocation:
    """A share of the surplus directed at exactly one loan or one plan."""

    percentage: Decimal
    reason: str
    loan_id: Optional[str] = None
    sip_id: Optional[str] = None


@dataclass(frozen=True)
class ArbitrageResult:
    yearly_projections: List[YearlyProjection]
    optimal_allocations: List[OptimalAllocation]
    arbitrage_score: Decimal
    alerts: List[str]
