"""Keyed, copy-on-write collections of calculator inputs.

A :class:`Portfolio` holds the four input collections as tuples. Every edit
returns a new portfolio; records are replaced by id and never mutated, so a
projection can safely run on a portfolio while the caller keeps editing.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional, Tuple, TypeVar
from uuid import uuid4

from .aggregator import MonthlyTotals, aggregate
from .config import EngineSettings
from .data_models import ArbitrageResult, Income, Loan, OneTimeInvestment, Sip
from .engine import project

T = TypeVar("T", Income, Loan, Sip, OneTimeInvestment)


def new_id() -> str:
    """Return an opaque identifier for a new record."""
    return uuid4().hex


def _replace_by_id(items: Tuple[T, ...], updated: T) -> Tuple[T, ...]:
    if not any(item.id == updated.id for item in items):
        raise KeyError(updated.id)
    return tuple(updated if item.id == updated.id else item for item in items)


def _remove_by_id(items: Tuple[T, ...], item_id: str) -> Tuple[T, ...]:
    return tuple(item for item in items if item.id != item_id)


@dataclass(frozen=True)
class Portfolio:
    incomes: Tuple[Income, ...] = ()
    loans: Tuple[Loan, ...] = ()
    sips: Tuple[Sip, ...] = ()
    one_time_investments: Tuple[OneTimeInvestment, ...] = ()

    def add_income(self, income: Income) -> "Portfolio":
        return replace(self, incomes=self.incomes + (income,))

    def update_income(self, income: Income) -> "Portfolio":
        """Replace the income with the same id; raises ``KeyError`` if absent."""
        return replace(self, incomes=_replace_by_id(self.incomes, income))

    def remove_income(self, income_id: str) -> "Portfolio":
        return replace(self, incomes=_remove_by_id(self.incomes, income_id))

    def add_loan(self, loan: Loan) -> "Portfolio":
        return replace(self, loans=self.loans + (loan,))

    def update_loan(self, loan: Loan) -> "Portfolio":
        return replace(self, loans=_replace_by_id(self.loans, loan))

    def remove_loan(self, loan_id: str) -> "Portfolio":
        return replace(self, loans=_remove_by_id(self.loans, loan_id))

    def add_sip(self, sip: Sip) -> "Portfolio":
        return replace(self, sips=self.sips + (sip,))

    def update_sip(self, sip: Sip) -> "Portfolio":
        return replace(self, sips=_replace_by_id(self.sips, sip))

    def remove_sip(self, sip_id: str) -> "Portfolio":
        return replace(self, sips=_remove_by_id(self.sips, sip_id))

    def add_one_time_investment(self, investment: OneTimeInvestment) -> "Portfolio":
        return replace(self, one_time_investments=self.one_time_investments + (investment,))

    def update_one_time_investment(self, investment: OneTimeInvestment) -> "Portfolio":
        return replace(
            self, one_time_investments=_replace_by_id(self.one_time_investments, investment)
        )

    def remove_one_time_investment(self, investment_id: str) -> "Portfolio":
        return replace(
            self, one_time_investments=_remove_by_id(self.one_time_investments, investment_id)
        )

    def reset(self) -> "Portfolio":
        return Portfolio()

    def summary_stats(self) -> MonthlyTotals:
        return aggregate(self.incomes, self.loans, self.sips)

    def project(self, horizon_years: int = 10, settings: Optional[EngineSettings] = None) -> ArbitrageResult:
        return project(
            self.incomes,
            self.loans,
            self.sips,
            self.one_time_investments,
            horizon_years=horizon_years,
            settings=settings,
        )
