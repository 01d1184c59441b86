"""Monthly cash-flow totals over the input collections."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from .data_models import Income, Loan, Sip
from .utils import ZERO, non_negative, total

# Months an income of each frequency is spread over
_FREQUENCY_MONTHS = {
    "Monthly": Decimal("1"),
    "Quarterly": Decimal("3"),
    "One-time": Decimal("12"),
}


@dataclass(frozen=True)
class MonthlyTotals:
    monthly_income: Decimal
    total_emi: Decimal
    total_sip: Decimal
    monthly_surplus: Decimal  # may be negative


def monthly_equivalent(income: Income) -> Decimal:
    """Return the monthly figure for an income.

    Quarterly amounts are divided by three and one-time amounts are smoothed
    over a year. Unknown frequencies contribute nothing.
    """
    months = _FREQUENCY_MONTHS.get(income.frequency)
    if months is None:
        return ZERO
    return non_negative(income.amount) / months


def monthly_income(incomes: Iterable[Income]) -> Decimal:
    return total(monthly_equivalent(i) for i in incomes)


def total_emi(loans: Iterable[Loan]) -> Decimal:
    return total(non_negative(loan.emi) for loan in loans)


def total_sip(sips: Iterable[Sip]) -> Decimal:
    return total(non_negative(sip.monthly_amount) for sip in sips)


def aggregate(incomes: Iterable[Income], loans: Iterable[Loan], sips: Iterable[Sip]) -> MonthlyTotals:
    """Compute the monthly income, EMI, SIP and surplus totals."""
    income = monthly_income(incomes)
    emi = total_emi(loans)
    sip = total_sip(sips)
    return MonthlyTotals(
        monthly_income=income,
        total_emi=emi,
        total_sip=sip,
        monthly_surplus=income - emi - sip,
    )
