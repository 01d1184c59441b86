"""Tests for the copy-on-write input collections."""

from __future__ import annotations

from dataclasses import replace
from datetime import date
from decimal import Decimal

import pytest

from arbitrage_calc.data_models import OneTimeInvestment
from arbitrage_calc.portfolio import Portfolio, new_id
from tests.conftest import make_income, make_loan, make_sip


def test_new_ids_are_unique():
    assert len({new_id() for _ in range(50)}) == 50


def test_add_returns_a_new_portfolio():
    empty = Portfolio()
    loaded = empty.add_income(make_income()).add_loan(make_loan()).add_sip(make_sip())

    assert empty.incomes == () and empty.loans == () and empty.sips == ()
    assert len(loaded.incomes) == len(loaded.loans) == len(loaded.sips) == 1


def test_update_replaces_by_id_and_keeps_order():
    portfolio = Portfolio(
        loans=(make_loan(loan_id="a"), make_loan(loan_id="b"), make_loan(loan_id="c"))
    )
    edited = replace(portfolio.loans[1], emi=Decimal("4000"))

    updated = portfolio.update_loan(edited)

    assert [loan.id for loan in updated.loans] == ["a", "b", "c"]
    assert updated.loans[1].emi == Decimal("4000")
    assert portfolio.loans[1].emi == Decimal("2000")


def test_update_unknown_id_raises():
    with pytest.raises(KeyError):
        Portfolio().update_sip(make_sip(sip_id="missing"))


def test_remove_by_id():
    portfolio = Portfolio(sips=(make_sip(sip_id="x"), make_sip(sip_id="y")))
    assert [s.id for s in portfolio.remove_sip("x").sips] == ["y"]
    assert portfolio.remove_sip("unknown") == portfolio


def test_one_time_investments_round_trip():
    item = OneTimeInvestment(id="fd", amount=Decimal("25000"), date=date(2027, 4, 1), name="FD maturity")
    portfolio = Portfolio().add_one_time_investment(item)
    portfolio = portfolio.update_one_time_investment(replace(item, auto_apply=False))
    assert portfolio.one_time_investments[0].auto_apply is False
    assert portfolio.remove_one_time_investment("fd").one_time_investments == ()


def test_summary_stats_and_reset():
    portfolio = Portfolio(
        incomes=(make_income("60000"),),
        loans=(make_loan(emi="15000"),),
        sips=(make_sip(amount="5000"),),
    )
    stats = portfolio.summary_stats()
    assert stats.monthly_surplus == Decimal("40000")
    assert portfolio.reset() == Portfolio()


def test_project_delegates_to_engine():
    portfolio = Portfolio(incomes=(make_income("60000"),), loans=(make_loan(rate="18"),), sips=(make_sip(),))
    result = portfolio.project(horizon_years=4)
    assert len(result.yearly_projections) == 10  # the plan horizon is longer
    assert result.optimal_allocations[0].loan_id == "loan-1"
