"""Loan balance projection.

Balances are evaluated in closed form so that a query for any year gives the
same answer regardless of which years were evaluated before it. For a
compound-interest loan with monthly rate ``r`` and ``m`` payments made:

    balance = P * (1 + r)^m - EMI * ((1 + r)^m - 1) / r

which degrades to ``P - EMI * m`` when ``r`` is zero. Simple-interest loans
charge a fixed monthly interest on the remaining principal at the start of
the projection, so every EMI retires the same principal portion.

Negative amortization is not modelled: when the EMI does not cover the
interest, the balance is held at its starting value until the tenure ends.
"""

from __future__ import annotations

from decimal import Decimal

from .data_models import Loan
from .utils import ZERO, non_negative

MONTHS_PER_YEAR = 12


def monthly_rate(loan: Loan) -> Decimal:
    return non_negative(loan.interest_rate) / Decimal(100) / Decimal(MONTHS_PER_YEAR)


def effective_interest_rate(loan: Loan) -> Decimal:
    """Return the annualized cost of a loan in percent.

    Simple-interest loans cost their nominal rate. Compound-interest loans
    compound monthly, so their effective annual rate is
    ``(1 + rate / 12)^12 - 1``.
    """
    if loan.interest_type == "Simple":
        return non_negative(loan.interest_rate)
    return ((1 + monthly_rate(loan)) ** MONTHS_PER_YEAR - 1) * Decimal(100)


def _amortize(loan: Loan, balance: Decimal, months: int) -> Decimal:
    """Apply ``months`` EMIs to ``balance`` and clamp into ``[0, balance]``."""
    emi = non_negative(loan.emi)
    rate = monthly_rate(loan)
    if loan.interest_type == "Simple":
        # interest is fixed on the principal outstanding when the projection starts
        principal_portion = emi - non_negative(loan.principal_remaining) * rate
        remaining = balance - principal_portion * months
    elif rate == 0:
        remaining = balance - emi * months
    else:
        factor = (1 + rate) ** months
        remaining = balance * factor - emi * (factor - 1) / rate
    if remaining < ZERO:
        return ZERO
    return min(remaining, balance)


def loan_balance_at(loan: Loan, years_elapsed: int) -> Decimal:
    """Return the remaining balance of ``loan`` after ``years_elapsed`` years.

    The balance is zero once the elapsed months reach the remaining tenure.
    """
    months = max(0, years_elapsed) * MONTHS_PER_YEAR
    if months >= loan.total_months:
        return ZERO
    return _amortize(loan, non_negative(loan.principal_remaining), months)


def advance_loan_year(loan: Loan, balance: Decimal, year: int) -> Decimal:
    """Carry ``balance`` from the end of ``year - 1`` to the end of ``year``.

    Applies twelve EMIs to the carried balance. Starting from the principal
    remaining and chaining this for years ``1..n`` gives the same balance as
    :func:`loan_balance_at` for year ``n``; the difference is that the
    carried balance may already include prepayments.
    """
    if balance <= ZERO or year * MONTHS_PER_YEAR >= loan.total_months:
        return ZERO
    return _amortize(loan, balance, MONTHS_PER_YEAR)
