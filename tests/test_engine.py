"""Tests for the yearly projection engine and its summary."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from arbitrage_calc.data_models import OneTimeInvestment
from arbitrage_calc.engine import project, resolve_horizon, summarize
from arbitrage_calc.loans import loan_balance_at
from arbitrage_calc.sips import sip_corpus_at
from tests.conftest import assert_float_equal, make_income, make_loan, make_sip


class TestResolveHorizon:
    def test_requested_years_is_a_floor(self):
        assert resolve_horizon([make_loan(years=2)], [make_sip(horizon=3)], 10) == 10

    def test_longest_loan_tenure_rounds_up(self):
        assert resolve_horizon([make_loan(years=5, months=3)], [], 3) == 6

    def test_longest_sip_horizon(self):
        assert resolve_horizon([make_loan(years=2)], [make_sip(horizon=7)], 3) == 7

    def test_never_below_one_year(self):
        assert resolve_horizon([], [], 0) == 1


class TestProject:
    def test_empty_snapshot(self):
        result = project([], [], [], [], horizon_years=3)
        assert [p.year for p in result.yearly_projections] == [1, 2, 3]
        assert all(p.net_worth == 0 for p in result.yearly_projections)
        assert result.optimal_allocations == []
        assert result.arbitrage_score == 0
        assert result.alerts == []

    def test_without_surplus_balances_follow_closed_form(self):
        loan = make_loan(principal="200000", emi="4500", rate="11", years=6)
        sip = make_sip(amount="5500", expected_return="12", horizon=8, delay=1)
        income = make_income("10000")

        result = project([income], [loan], [sip], [], horizon_years=5)

        assert len(result.yearly_projections) == 8
        for entry in result.yearly_projections:
            assert_float_equal(entry.loans[loan.id], loan_balance_at(loan, entry.year))
            assert_float_equal(entry.sips[sip.id], sip_corpus_at(sip, entry.year))

    def test_negative_surplus_is_not_allocated(self):
        loan = make_loan(principal="100000", emi="3000", rate="12", years=5, interest_type="Simple")
        result = project([make_income("1000")], [loan], [], [], horizon_years=5)
        assert_float_equal(result.yearly_projections[0].loans[loan.id], 76000)
        assert result.yearly_projections[0].surplus == Decimal("-24000")

    def test_surplus_prepays_the_loan_until_retired(self):
        loan = make_loan(principal="100000", emi="3000", rate="12", years=5, interest_type="Simple")

        result = project([make_income("4000")], [loan], [], [], horizon_years=5)

        balances = [p.loans[loan.id] for p in result.yearly_projections]
        # 24000 of principal from EMIs plus 12000 of surplus each year
        assert [float(b) for b in balances] == pytest.approx([64000, 28000, 0, 0, 0])
        assert [float(p.net_worth) for p in result.yearly_projections] == pytest.approx(
            [-64000, -28000, 0, 0, 0]
        )

    def test_surplus_is_added_to_the_plan(self):
        sip = make_sip(amount="5000", expected_return="0", horizon=2)

        result = project([make_income("6000")], [], [sip], [], horizon_years=2)

        assert [p.sips[sip.id] for p in result.yearly_projections] == [
            Decimal("72000"),
            Decimal("144000"),
        ]

    def test_fixed_split_is_applied_every_year(self):
        loan = make_loan(principal="500000", emi="8000", rate="18", years=10, loan_id="card")
        sip = make_sip(amount="2000", expected_return="12", horizon=10, sip_id="eq")
        income = make_income("20000")  # surplus 10000 a month

        result = project([income], [loan], [sip], [], horizon_years=10)

        assert [(a.loan_id, a.sip_id, a.percentage) for a in result.optimal_allocations] == [
            ("card", None, Decimal("70")),
            (None, "eq", Decimal("30")),
        ]
        first = result.yearly_projections[0]
        assert_float_equal(first.loans["card"], loan_balance_at(loan, 1) - 84000)
        assert_float_equal(first.sips["eq"], sip_corpus_at(sip, 1) + 36000)

    def test_retired_loans_stay_at_zero(self):
        loan = make_loan(principal="50000", emi="3000", rate="10", years=4)
        result = project([make_income("100000")], [loan], [], [], horizon_years=8)
        balances = [p.loans[loan.id] for p in result.yearly_projections]
        first_zero = balances.index(Decimal("0"))
        assert all(b == 0 for b in balances[first_zero:])

    def test_records_annual_totals_and_net_worth(self, salary, home_loan, equity_sip):
        result = project([salary], [home_loan], [equity_sip], [], horizon_years=3)

        for entry in result.yearly_projections:
            assert entry.total_income == Decimal("600000")
            assert entry.total_emi == Decimal("180000")
            assert entry.total_sip == Decimal("60000")
            assert entry.surplus == Decimal("360000")
            assert_float_equal(
                entry.net_worth, sum(entry.sips.values()) - sum(entry.loans.values())
            )
        years = [p.year for p in result.yearly_projections]
        assert years == sorted(years)

    def test_one_time_investments_do_not_move_balances(self, salary, home_loan, equity_sip):
        bonus = OneTimeInvestment(id="bonus", amount=Decimal("100000"), date=date(2026, 1, 1))
        with_bonus = project([salary], [home_loan], [equity_sip], [bonus], horizon_years=3)
        without = project([salary], [home_loan], [equity_sip], [], horizon_years=3)
        assert with_bonus == without

    def test_scenario_alert_fires_for_emi_burden(self):
        result = project([make_income("50000")], [make_loan(emi="30000", rate="9")], [], [])
        assert any(a.startswith("High EMI alert") for a in result.alerts)


class TestSummarize:
    def test_contributions_and_growth(self):
        sip = make_sip(amount="5000", expected_return="0", horizon=2)
        incomes = [make_income("6000")]
        result = project(incomes, [], [sip], [], horizon_years=2)

        summary = summarize(incomes, [], [sip], result)

        assert summary["horizon_years"] == 2
        assert summary["total_contributed"] == pytest.approx(144000)
        assert summary["investment_growth"] == pytest.approx(0)
        assert summary["final_sip_corpus"] == pytest.approx(144000)
        assert summary["debt_free_year"] is None

    def test_following_the_allocation_beats_the_baseline(self):
        loan = make_loan(principal="100000", emi="3000", rate="12", years=5, interest_type="Simple")
        incomes = [make_income("4000")]
        result = project(incomes, [loan], [], [], horizon_years=5)

        summary = summarize(incomes, [loan], [], result)

        assert summary["debt_free_year"] == 3
        assert summary["final_net_worth"] == pytest.approx(0)
        assert summary["comparison"]["baseline_net_worth"] == pytest.approx(0)
        assert summary["comparison"]["net_worth_gain"] == pytest.approx(0)

    def test_gain_over_baseline_before_payoff(self):
        loan = make_loan(principal="500000", emi="8000", rate="14", years=10)
        incomes = [make_income("12000")]
        result = project(incomes, [loan], [], [], horizon_years=3)

        summary = summarize(incomes, [loan], [], result)

        assert summary["comparison"]["net_worth_gain"] > 0
        assert summary["final_loan_balance"] < -summary["comparison"]["baseline_net_worth"]
