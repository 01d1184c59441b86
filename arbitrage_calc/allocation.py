"""Surplus allocation heuristic.

The heuristic compares the most expensive prepayable loan against the best
returning plan and splits the surplus between them, favouring whichever side
wins by ``primary_share`` percent. Equal rates favour the loan. When only one
asset class exists the whole surplus goes to its top instrument.
"""

from __future__ import annotations

from decimal import Decimal
from typing import List, Optional, Sequence

from .config import EngineSettings
from .data_models import Loan, OptimalAllocation, Sip
from .loans import effective_interest_rate
from .logging_config import get_logger
from .utils import ZERO, non_negative

logger = get_logger(__name__)

FULL_SHARE = Decimal("100")


def _fmt(value: Decimal) -> str:
    return f"{value:.2f}".rstrip("0").rstrip(".")


def _loan_label(loan: Loan) -> str:
    return f"{loan.type} loan"


def _sip_label(sip: Sip) -> str:
    label = f"{sip.type} SIP"
    return f"{label} '{sip.name}'" if sip.name else label


def _penalty_note(loan: Loan) -> str:
    penalty = non_negative(loan.prepayment_penalty)
    if penalty > ZERO:
        return f" Prepayment carries a {_fmt(penalty)}% penalty."
    return ""


def _amount_note(share: Decimal, monthly_surplus: Optional[Decimal]) -> str:
    if monthly_surplus is None or monthly_surplus <= ZERO:
        return ""
    return f" That is about {monthly_surplus * share / FULL_SHARE:,.2f} per month."


def rank_loans(loans: Sequence[Loan]) -> List[Loan]:
    """Return prepayable loans with a balance, highest effective rate first."""
    eligible = [
        loan for loan in loans
        if loan.prepayment_allowed and non_negative(loan.principal_remaining) > ZERO
    ]
    return sorted(eligible, key=effective_interest_rate, reverse=True)


def rank_sips(sips: Sequence[Sip]) -> List[Sip]:
    """Return plans ordered by expected return, highest first."""
    return sorted(sips, key=lambda s: non_negative(s.expected_return), reverse=True)


def optimal_allocations(
    loans: Sequence[Loan],
    sips: Sequence[Sip],
    monthly_surplus: Optional[Decimal] = None,
    settings: Optional[EngineSettings] = None,
) -> List[OptimalAllocation]:
    """Recommend how the surplus should be split between debt and investment.

    Parameters
    ----------
    loans, sips:
        The input collections. Only loans that allow prepayment and still
        carry a balance are considered.
    monthly_surplus:
        Used only to quote the monthly amount in each reason.

    Returns
    -------
    List[OptimalAllocation]
        Favoured instrument first. Percentages sum to 100 whenever the list
        is not empty.
    """
    settings = settings or EngineSettings()
    ranked_loans = rank_loans(loans)
    ranked_sips = rank_sips(sips)
    top_loan = ranked_loans[0] if ranked_loans else None
    top_sip = ranked_sips[0] if ranked_sips else None

    if top_loan is None and top_sip is None:
        return []

    if top_sip is None:
        rate = effective_interest_rate(top_loan)
        return [
            OptimalAllocation(
                loan_id=top_loan.id,
                percentage=FULL_SHARE,
                reason=(
                    f"Direct the full surplus to your {_loan_label(top_loan)} at an effective "
                    f"{_fmt(rate)}%, the costliest prepayable debt, since there is no investment plan to fund."
                    + _penalty_note(top_loan)
                    + _amount_note(FULL_SHARE, monthly_surplus)
                ),
            )
        ]

    if top_loan is None:
        ret = non_negative(top_sip.expected_return)
        return [
            OptimalAllocation(
                sip_id=top_sip.id,
                percentage=FULL_SHARE,
                reason=(
                    f"Invest the full surplus in your {_sip_label(top_sip)} with an expected return of "
                    f"{_fmt(ret)}%, since there is no prepayable loan to reduce."
                    + _amount_note(FULL_SHARE, monthly_surplus)
                ),
            )
        ]

    loan_rate = effective_interest_rate(top_loan)
    sip_return = non_negative(top_sip.expected_return)
    primary = settings.primary_share
    secondary = settings.secondary_share
    logger.debug(
        "Allocation inputs: top loan %s at %s%%, top plan %s at %s%%",
        top_loan.id, loan_rate, top_sip.id, sip_return,
    )

    if loan_rate >= sip_return:
        return [
            OptimalAllocation(
                loan_id=top_loan.id,
                percentage=primary,
                reason=(
                    f"Prioritize prepaying your {_loan_label(top_loan)}: its effective {_fmt(loan_rate)}% "
                    f"cost is at least the {_fmt(sip_return)}% your best plan is expected to earn."
                    + _penalty_note(top_loan)
                    + _amount_note(primary, monthly_surplus)
                ),
            ),
            OptimalAllocation(
                sip_id=top_sip.id,
                percentage=secondary,
                reason=(
                    f"Keep investing part of the surplus in your {_sip_label(top_sip)} at an expected "
                    f"{_fmt(sip_return)}% for diversification."
                    + _amount_note(secondary, monthly_surplus)
                ),
            ),
        ]

    return [
        OptimalAllocation(
            sip_id=top_sip.id,
            percentage=primary,
            reason=(
                f"Prioritize investing in your {_sip_label(top_sip)}: its expected {_fmt(sip_return)}% "
                f"return beats the effective {_fmt(loan_rate)}% cost of your costliest loan."
                + _amount_note(primary, monthly_surplus)
            ),
        ),
        OptimalAllocation(
            loan_id=top_loan.id,
            percentage=secondary,
            reason=(
                f"Keep prepaying part of your {_loan_label(top_loan)} at an effective {_fmt(loan_rate)}% "
                f"to steadily cut debt."
                + _penalty_note(top_loan)
                + _amount_note(secondary, monthly_surplus)
            ),
        ),
    ]
