"""Arbitrage score: investment return opportunity versus debt cost."""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Sequence, Tuple

from .data_models import Loan, Sip
from .loans import effective_interest_rate
from .utils import ZERO, non_negative


def weighted_average(pairs: Iterable[Tuple[Decimal, Decimal]]) -> Decimal:
    """Return the weighted mean of ``(value, weight)`` pairs.

    Falls back to the plain mean when every weight is zero, and to zero for
    an empty input.
    """
    items = list(pairs)
    if not items:
        return ZERO
    weight_total = sum((weight for _, weight in items), ZERO)
    if weight_total == ZERO:
        return sum((value for value, _ in items), ZERO) / len(items)
    return sum((value * weight for value, weight in items), ZERO) / weight_total


def arbitrage_score(loans: Sequence[Loan], sips: Sequence[Sip]) -> Decimal:
    """Compare the weighted plan return with the weighted loan cost.

    Plans are weighted by monthly contribution and loans by principal
    remaining, using each loan's effective interest rate. A positive score
    favours investing, a negative one favours repaying debt. Returns zero
    when either collection is empty.
    """
    if not loans or not sips:
        return ZERO
    sip_return = weighted_average(
        (non_negative(s.expected_return), non_negative(s.monthly_amount)) for s in sips
    )
    loan_cost = weighted_average(
        (effective_interest_rate(loan), non_negative(loan.principal_remaining)) for loan in loans
    )
    return sip_return - loan_cost
