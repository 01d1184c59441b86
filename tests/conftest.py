"""Shared builders and helpers for the test suite."""

from __future__ import annotations

from decimal import Decimal

import pytest

from arbitrage_calc.data_models import Income, Loan, Sip


def assert_float_equal(actual, expected, tolerance: float = 0.01) -> None:
    """Assert two amounts match within ``tolerance``."""
    assert abs(float(actual) - float(expected)) <= tolerance, f"{actual} != {expected}"


def make_income(amount="50000", frequency="Monthly", income_type="Salary", income_id="inc-1") -> Income:
    return Income(id=income_id, amount=Decimal(str(amount)), type=income_type, frequency=frequency)


def make_loan(
    principal="100000",
    emi="2000",
    rate="10",
    years=5,
    months=0,
    interest_type="Compound",
    loan_type="Personal",
    loan_id="loan-1",
    prepayment_allowed=True,
    penalty="0",
) -> Loan:
    return Loan(
        id=loan_id,
        principal_remaining=Decimal(str(principal)),
        emi=Decimal(str(emi)),
        interest_rate=Decimal(str(rate)),
        tenure_remaining_years=years,
        tenure_remaining_months=months,
        type=loan_type,
        interest_type=interest_type,
        prepayment_allowed=prepayment_allowed,
        prepayment_penalty=Decimal(str(penalty)),
    )


def make_sip(
    amount="5000",
    expected_return="12",
    horizon=10,
    delay=0,
    sip_type="Equity",
    sip_id="sip-1",
    name="Index Fund",
) -> Sip:
    return Sip(
        id=sip_id,
        monthly_amount=Decimal(str(amount)),
        expected_return=Decimal(str(expected_return)),
        investment_horizon=horizon,
        start_delay=delay,
        type=sip_type,
        name=name,
    )


@pytest.fixture
def salary():
    return make_income()


@pytest.fixture
def home_loan():
    return make_loan(
        principal="1000000", emi="15000", rate="9", years=10, loan_type="Home", loan_id="home"
    )


@pytest.fixture
def equity_sip():
    return make_sip()


@pytest.fixture
def scenario_dict():
    """A scenario in the camelCase shape a browser client sends."""
    return {
        "horizonYears": 5,
        "incomes": [{"id": "salary", "amount": 80000, "type": "Salary", "frequency": "Monthly"}],
        "loans": [
            {
                "id": "card",
                "type": "Credit Card",
                "principalRemaining": 60000,
                "emi": 5000,
                "interestType": "Compound",
                "interestRate": 18,
                "tenureRemainingYears": 1,
                "tenureRemainingMonths": 2,
                "prepaymentAllowed": True,
                "prepaymentPenalty": 0,
            }
        ],
        "sips": [
            {
                "id": "nifty",
                "name": "Nifty 50",
                "type": "Equity",
                "monthlyAmount": 10000,
                "expectedReturn": 12,
                "investmentHorizon": 5,
                "startDelay": 0,
            }
        ],
        "oneTimeInvestments": [
            {"id": "bonus", "name": "Bonus", "amount": 50000, "date": "2026-03", "autoApply": True}
        ],
    }
