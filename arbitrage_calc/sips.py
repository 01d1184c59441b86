"""Investment plan (SIP) corpus projection.

Contributions are made at the start of each month, so the corpus after ``n``
contributions at monthly rate ``r`` is the future value of an annuity due:

    corpus = A * ((1 + r)^n - 1) / r * (1 + r)

With a zero rate this is simply ``A * n``.
"""

from __future__ import annotations

from decimal import Decimal

from .data_models import Sip
from .utils import ZERO, non_negative

MONTHS_PER_YEAR = 12


def monthly_rate(sip: Sip) -> Decimal:
    return non_negative(sip.expected_return) / Decimal(100) / Decimal(MONTHS_PER_YEAR)


def _annuity_due(amount: Decimal, rate: Decimal, months: int) -> Decimal:
    if months <= 0:
        return ZERO
    if rate == 0:
        return amount * months
    return amount * ((1 + rate) ** months - 1) / rate * (1 + rate)


def sip_corpus_at(sip: Sip, years_elapsed: int) -> Decimal:
    """Return the corpus accumulated by ``sip`` after ``years_elapsed`` years.

    Nothing accumulates until the start delay has passed.
    """
    start_delay = max(0, sip.start_delay)
    if years_elapsed <= start_delay:
        return ZERO
    months = (years_elapsed - start_delay) * MONTHS_PER_YEAR
    return _annuity_due(non_negative(sip.monthly_amount), monthly_rate(sip), months)


def advance_sip_year(sip: Sip, corpus: Decimal, year: int) -> Decimal:
    """Carry ``corpus`` from the end of ``year - 1`` to the end of ``year``.

    The carried corpus compounds for twelve months and a year of
    contributions is added. Years inside the start delay leave the corpus
    untouched.
    """
    if year <= max(0, sip.start_delay):
        return corpus
    rate = monthly_rate(sip)
    grown = corpus * (1 + rate) ** MONTHS_PER_YEAR
    return non_negative(grown + _annuity_due(non_negative(sip.monthly_amount), rate, MONTHS_PER_YEAR))
