"""Output helpers for the arbitrage calculator.

This module renders projections, allocation recommendations, alerts and
summaries as plain text tables for the terminal. Currency symbols and locale
grouping are left out; amounts are printed with two decimals.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Sequence

from .data_models import Loan, OptimalAllocation, Sip, YearlyProjection


def _label(item_id: str, names: Dict[str, str]) -> str:
    return names.get(item_id, item_id[:8])


def loan_names(loans: Sequence[Loan]) -> Dict[str, str]:
    """Map loan ids to short column labels, numbering repeated types."""
    names: Dict[str, str] = {}
    seen: Dict[str, int] = {}
    for loan in loans:
        seen[loan.type] = seen.get(loan.type, 0) + 1
        names[loan.id] = loan.type if seen[loan.type] == 1 else f"{loan.type} #{seen[loan.type]}"
    return names


def sip_names(sips: Sequence[Sip]) -> Dict[str, str]:
    names: Dict[str, str] = {}
    for index, sip in enumerate(sips, start=1):
        names[sip.id] = sip.name or f"{sip.type} SIP #{index}"
    return names


def print_summary(summary: Dict[str, object]) -> None:
    """Print projection metrics in a human-readable format."""
    print("Summary")
    print("-" * 72)
    print(f"Horizon (years)    : {summary['horizon_years']}")
    if not summary["horizon_years"]:
        print("-" * 72)
        return
    print(f"Monthly surplus    : {summary['monthly_surplus']:.2f}")
    print(f"Final net worth    : {summary['final_net_worth']:.2f}")
    print(f"Final loan balance : {summary['final_loan_balance']:.2f}")
    print(f"Final SIP corpus   : {summary['final_sip_corpus']:.2f}")
    print(f"Total contributed  : {summary['total_contributed']:.2f}")
    print(f"Investment growth  : {summary['investment_growth']:.2f}")
    if summary.get("debt_free_year"):
        print(f"Debt free in year  : {summary['debt_free_year']}")
    print(f"Arbitrage score    : {summary['arbitrage_score']:.2f}")
    comparison = summary.get("comparison")
    if comparison:
        print(f"Baseline net worth : {comparison['baseline_net_worth']:.2f}")
        print(f"Net worth gain     : {comparison['net_worth_gain']:.2f}")
    print("-" * 72)


def print_projection(
    projections: Iterable[YearlyProjection],
    loans: Sequence[Loan],
    sips: Sequence[Sip],
) -> None:
    """Print the yearly projection as a tab separated table.

    One column per loan balance and per plan corpus follows the totals.
    """
    loan_labels = loan_names(loans)
    sip_labels = sip_names(sips)
    headers: List[str] = ["Year", "Income", "EMI", "SIP", "Surplus", "NetWorth"]
    headers.extend(_label(loan.id, loan_labels) for loan in loans)
    headers.extend(_label(sip.id, sip_labels) for sip in sips)
    print("\t".join(headers))
    for entry in projections:
        row = [
            str(entry.year),
            f"{entry.total_income:.2f}",
            f"{entry.total_emi:.2f}",
            f"{entry.total_sip:.2f}",
            f"{entry.surplus:.2f}",
            f"{entry.net_worth:.2f}",
        ]
        row.extend(f"{entry.loans[loan.id]:.2f}" for loan in loans)
        row.extend(f"{entry.sips[sip.id]:.2f}" for sip in sips)
        print("\t".join(row))


def print_allocations(
    allocations: Sequence[OptimalAllocation],
    loans: Sequence[Loan],
    sips: Sequence[Sip],
) -> None:
    print("Recommended allocation")
    print("-" * 72)
    if not allocations:
        print("No loans or investment plans to allocate the surplus to.")
    labels = {**loan_names(loans), **sip_names(sips)}
    for allocation in allocations:
        target = allocation.loan_id or allocation.sip_id or ""
        print(f"{allocation.percentage:>5.0f}%  {_label(target, labels)}")
        print(f"        {allocation.reason}")
    print("-" * 72)


def print_alerts(alerts: Sequence[str]) -> None:
    if not alerts:
        return
    print("Alerts")
    print("-" * 72)
    for alert in alerts:
        print(f"! {alert}")
    print("-" * 72)


def print_comparison(s1: Dict[str, object], s2: Dict[str, object]) -> None:
    """Print a comparison of two projection summaries side by side.

    The difference column is scenario2 - scenario1, so a positive difference
    in net worth means the second scenario ends up wealthier.
    """
    print("Comparison")
    print("=" * 72)
    keys = [
        "final_net_worth",
        "final_loan_balance",
        "final_sip_corpus",
        "investment_growth",
        "arbitrage_score",
    ]
    print(f"{'Metric':20s} {'Scenario1':>15s} {'Scenario2':>15s} {'Difference':>15s}")
    for key in keys:
        v1 = s1.get(key, 0.0)
        v2 = s2.get(key, 0.0)
        diff = v2 - v1
        print(f"{key:20s} {v1:15.2f} {v2:15.2f} {diff:15.2f}")
    print("=" * 72)
