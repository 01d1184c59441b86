"""Tests for engine settings and caller-side helpers."""

from __future__ import annotations

from decimal import Decimal

import pytest

from arbitrage_calc.config import EngineSettings, clamp_horizon, suggested_return


class TestEngineSettings:
    def test_defaults(self):
        settings = EngineSettings()
        assert settings.primary_share == Decimal("70")
        assert settings.secondary_share == Decimal("30")
        assert settings.return_benchmarks == {
            "Equity": Decimal("12"),
            "Hybrid": Decimal("9"),
            "Debt": Decimal("7"),
        }

    def test_from_env_overrides(self):
        settings = EngineSettings.from_env(
            {
                "ARBITRAGE_PRIMARY_SHARE": "60",
                "ARBITRAGE_HIGH_INTEREST_RATE": "12.5",
                "ARBITRAGE_DEFAULT_HORIZON": "15",
            }
        )
        assert settings.primary_share == Decimal("60")
        assert settings.secondary_share == Decimal("40")
        assert settings.high_interest_rate == Decimal("12.5")
        assert settings.default_horizon == 15
        assert settings.emi_income_ratio == Decimal("0.5")

    def test_from_env_without_variables_uses_defaults(self):
        assert EngineSettings.from_env({}) == EngineSettings()

    @pytest.mark.parametrize(
        "env",
        [
            {"ARBITRAGE_PRIMARY_SHARE": "abc"},
            {"ARBITRAGE_PRIMARY_SHARE": "150"},
            {"ARBITRAGE_DEFAULT_HORIZON": "ten"},
        ],
    )
    def test_from_env_rejects_bad_values(self, env):
        with pytest.raises(ValueError):
            EngineSettings.from_env(env)


class TestHelpers:
    @pytest.mark.parametrize(
        "requested, expected",
        [(None, 10), (0, 10), (-3, 10), (1, 1), (12, 12), (30, 30), (45, 30)],
    )
    def test_clamp_horizon(self, requested, expected):
        assert clamp_horizon(requested) == expected

    def test_suggested_returns(self):
        assert suggested_return("Equity") == Decimal("12")
        assert suggested_return("Hybrid") == Decimal("10")
        assert suggested_return("Debt") == Decimal("7")
