"""Core projection engine for the arbitrage calculator.

This module ties the components together. ``project`` aggregates the inputs
once, decides on a single surplus allocation and then walks the years
``1..horizon``. Each year every loan is amortized by its own EMI and every
plan grows by its own contributions, after which the fixed allocation
percentages of that year's surplus are applied as loan prepayments or extra
plan contributions. The resulting balances are carried into the next year.

The allocation is decided once per calculation and reapplied every year; it
is not re-ranked as loans are retired.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Dict, List, Optional, Sequence, Tuple

from .aggregator import MonthlyTotals, aggregate
from .alerts import generate_alerts
from .allocation import optimal_allocations
from .config import EngineSettings
from .data_models import (
    ArbitrageResult,
    Income,
    Loan,
    OneTimeInvestment,
    OptimalAllocation,
    Sip,
    YearlyProjection,
)
from .loans import advance_loan_year
from .logging_config import get_logger
from .scoring import arbitrage_score
from .sips import advance_sip_year
from .utils import ZERO, non_negative, total

logger = get_logger(__name__)

MONTHS_PER_YEAR = 12


def resolve_horizon(loans: Sequence[Loan], sips: Sequence[Sip], requested_years: int) -> int:
    """Return the number of years to simulate.

    The horizon covers the longest remaining loan tenure (rounded up to whole
    years), the longest plan horizon and the requested number of years, and
    is never less than one.
    """
    candidates = [max(1, requested_years)]
    candidates.extend(-(-loan.total_months // MONTHS_PER_YEAR) for loan in loans)
    candidates.extend(max(0, sip.investment_horizon) for sip in sips)
    return max(candidates)


def _allocated_amounts(
    allocations: Sequence[OptimalAllocation], annual_surplus: Decimal
) -> Tuple[Dict[str, Decimal], Dict[str, Decimal]]:
    loan_extra: Dict[str, Decimal] = {}
    sip_extra: Dict[str, Decimal] = {}
    for allocation in allocations:
        amount = annual_surplus * allocation.percentage / Decimal(100)
        if allocation.loan_id is not None:
            loan_extra[allocation.loan_id] = loan_extra.get(allocation.loan_id, ZERO) + amount
        elif allocation.sip_id is not None:
            sip_extra[allocation.sip_id] = sip_extra.get(allocation.sip_id, ZERO) + amount
    return loan_extra, sip_extra


def project_years(
    loans: Sequence[Loan],
    sips: Sequence[Sip],
    totals: MonthlyTotals,
    allocations: Sequence[OptimalAllocation],
    horizon: int,
) -> List[YearlyProjection]:
    """Simulate ``horizon`` years and return one projection per year.

    Only a positive surplus is allocated. A loan whose balance reaches zero
    stays at zero for the remaining years.
    """
    annual_surplus = totals.monthly_surplus * MONTHS_PER_YEAR
    loan_extra, sip_extra = _allocated_amounts(allocations, non_negative(annual_surplus))

    loan_balances: Dict[str, Decimal] = {loan.id: non_negative(loan.principal_remaining) for loan in loans}
    sip_balances: Dict[str, Decimal] = {sip.id: ZERO for sip in sips}

    projections: List[YearlyProjection] = []
    for year in range(1, horizon + 1):
        next_loans: Dict[str, Decimal] = {}
        for loan in loans:
            balance = advance_loan_year(loan, loan_balances[loan.id], year)
            prepayment = loan_extra.get(loan.id, ZERO)
            next_loans[loan.id] = non_negative(balance - prepayment)

        next_sips: Dict[str, Decimal] = {}
        for sip in sips:
            corpus = advance_sip_year(sip, sip_balances[sip.id], year)
            next_sips[sip.id] = corpus + sip_extra.get(sip.id, ZERO)

        loan_balances, sip_balances = next_loans, next_sips
        projections.append(
            YearlyProjection(
                year=year,
                total_income=totals.monthly_income * MONTHS_PER_YEAR,
                total_emi=totals.total_emi * MONTHS_PER_YEAR,
                total_sip=totals.total_sip * MONTHS_PER_YEAR,
                surplus=annual_surplus,
                net_worth=total(sip_balances.values()) - total(loan_balances.values()),
                loans=dict(loan_balances),
                sips=dict(sip_balances),
            )
        )
    return projections


def project(
    incomes: Sequence[Income],
    loans: Sequence[Loan],
    sips: Sequence[Sip],
    one_time_investments: Sequence[OneTimeInvestment] = (),
    horizon_years: int = 10,
    settings: Optional[EngineSettings] = None,
) -> ArbitrageResult:
    """Project balances year by year and recommend a surplus allocation.

    Parameters
    ----------
    incomes, loans, sips:
        The input snapshot. The collections are only read.
    one_time_investments:
        Accepted as part of the snapshot; they do not move balances.
    horizon_years:
        The minimum number of years to project. Longer loan tenures or plan
        horizons extend it. Clamping to a sensible range is up to the caller.
    settings:
        Thresholds for the allocation heuristic and alerts.

    Returns
    -------
    ArbitrageResult
        Yearly projections ordered by year, the allocation recommendation,
        the arbitrage score and any alerts.
    """
    settings = settings or EngineSettings()
    totals = aggregate(incomes, loans, sips)
    horizon = resolve_horizon(loans, sips, horizon_years)
    logger.debug(
        "Projecting %d years: income=%s emi=%s sip=%s surplus=%s (%d one-time items ignored)",
        horizon, totals.monthly_income, totals.total_emi, totals.total_sip,
        totals.monthly_surplus, len(one_time_investments),
    )

    allocations = optimal_allocations(loans, sips, totals.monthly_surplus, settings)
    logger.debug(
        "Allocation: %s",
        ", ".join(f"{a.loan_id or a.sip_id}={a.percentage}%" for a in allocations) or "none",
    )

    return ArbitrageResult(
        yearly_projections=project_years(loans, sips, totals, allocations, horizon),
        optimal_allocations=allocations,
        arbitrage_score=arbitrage_score(loans, sips),
        alerts=generate_alerts(totals, loans, sips, settings),
    )


def summarize(
    incomes: Sequence[Income],
    loans: Sequence[Loan],
    sips: Sequence[Sip],
    result: ArbitrageResult,
) -> Dict[str, object]:
    """Compute aggregate metrics for a projection.

    The comparison block contrasts the projection with a baseline in which
    the surplus is not allocated, showing what following the recommendation
    is worth by the final year.
    """
    projections = result.yearly_projections
    if not projections:
        return {"horizon_years": 0}
    final = projections[-1]
    totals = aggregate(incomes, loans, sips)
    baseline = project_years(loans, sips, totals, [], len(projections))[-1]

    annual_extra = non_negative(totals.monthly_surplus) * MONTHS_PER_YEAR
    allocated_to_sips = total(
        a.percentage for a in result.optimal_allocations if a.sip_id is not None
    ) / Decimal(100) * annual_extra
    contributed = total(
        non_negative(sip.monthly_amount) * MONTHS_PER_YEAR * max(0, final.year - max(0, sip.start_delay))
        for sip in sips
    ) + allocated_to_sips * final.year

    final_corpus = total(final.sips.values())
    final_debt = total(final.loans.values())
    debt_free_year = None
    if loans:
        debt_free_year = next(
            (p.year for p in projections if total(p.loans.values()) == ZERO), None
        )

    return {
        "horizon_years": final.year,
        "monthly_surplus": float(totals.monthly_surplus),
        "final_net_worth": float(final.net_worth),
        "final_loan_balance": float(final_debt),
        "final_sip_corpus": float(final_corpus),
        "total_contributed": float(contributed),
        "investment_growth": float(final_corpus - contributed),
        "debt_free_year": debt_free_year,
        "arbitrage_score": float(result.arbitrage_score),
        "comparison": {
            "baseline_net_worth": float(baseline.net_worth),
            "net_worth_gain": float(final.net_worth - baseline.net_worth),
        },
    }
