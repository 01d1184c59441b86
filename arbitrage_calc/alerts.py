"""Threshold checks that produce human-readable warnings.

Rules run in a fixed order: overspending, high-interest loans (one alert per
loan), unrealistic plan returns (one alert per plan), then the EMI burden.
"""

from __future__ import annotations

from decimal import Decimal
from typing import List, Optional, Sequence

from .aggregator import MonthlyTotals
from .config import EngineSettings
from .data_models import Loan, Sip
from .utils import ZERO, non_negative


def _fmt(value: Decimal) -> str:
    return f"{value:.2f}".rstrip("0").rstrip(".")


def generate_alerts(
    totals: MonthlyTotals,
    loans: Sequence[Loan],
    sips: Sequence[Sip],
    settings: Optional[EngineSettings] = None,
) -> List[str]:
    settings = settings or EngineSettings()
    alerts: List[str] = []

    if totals.monthly_surplus < ZERO:
        alerts.append(
            f"Warning: your monthly EMIs and SIPs exceed your income by "
            f"{-totals.monthly_surplus:,.2f}. Consider reducing EMIs or SIPs."
        )

    for loan in loans:
        rate = non_negative(loan.interest_rate)
        if rate > settings.high_interest_rate:
            alerts.append(
                f"High interest alert: your {loan.type} loan has a very high interest rate of "
                f"{_fmt(rate)}%. Consider prepaying or refinancing it."
            )

    for sip in sips:
        benchmark = settings.return_benchmarks.get(sip.type)
        if benchmark is None:
            continue
        expected = non_negative(sip.expected_return)
        if expected - benchmark > settings.return_slack:
            name = f" for {sip.name}" if sip.name else ""
            alerts.append(
                f"Unrealistic return alert: an expected return of {_fmt(expected)}%{name} is well above "
                f"the {_fmt(benchmark)}% typical for {sip.type} SIPs and may be too optimistic."
            )

    if totals.monthly_income > ZERO:
        ratio = totals.total_emi / totals.monthly_income
        if ratio > settings.emi_income_ratio:
            alerts.append(
                f"High EMI alert: your EMIs take {ratio * 100:.1f}% of your monthly income, "
                f"which is very high."
            )
    elif totals.total_emi > ZERO:
        alerts.append(
            f"High EMI alert: you pay {totals.total_emi:,.2f} in EMIs each month with no recorded income."
        )

    return alerts
