"""Tunable constants for the projection engine.

The thresholds used by the allocation heuristic and the alert rules are kept
together in :class:`EngineSettings`. The engine only ever receives an
``EngineSettings`` instance; reading ``ARBITRAGE_*`` environment variables is
left to the command-line and web front ends through :meth:`EngineSettings.from_env`.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Dict, Mapping, Optional

from .utils import decimal_from_str

ENV_PREFIX = "ARBITRAGE_"


def _default_benchmarks() -> Dict[str, Decimal]:
    return {"Equity": Decimal("12"), "Hybrid": Decimal("9"), "Debt": Decimal("7")}


def _default_suggested_returns() -> Dict[str, Decimal]:
    return {"Equity": Decimal("12"), "Hybrid": Decimal("10"), "Debt": Decimal("7")}


@dataclass(frozen=True)
class EngineSettings:
    """Thresholds and defaults shared by the engine components.

    Attributes
    ----------
    primary_share: Decimal
        Percentage of the surplus given to the favoured instrument when both
        a loan and a plan are recommended. The other instrument receives
        ``100 - primary_share``.
    high_interest_rate: Decimal
        Loans with an annual rate above this percent raise an alert.
    return_slack: Decimal
        Points a plan may exceed its type benchmark before it is flagged as
        unrealistic.
    emi_income_ratio: Decimal
        Maximum share of monthly income that EMIs may take before an alert.
    """

    primary_share: Decimal = Decimal("70")
    high_interest_rate: Decimal = Decimal("15")
    return_slack: Decimal = Decimal("3")
    emi_income_ratio: Decimal = Decimal("0.5")
    default_horizon: int = 10
    min_horizon: int = 1
    max_horizon: int = 30
    max_term_years: int = 50
    return_benchmarks: Dict[str, Decimal] = field(default_factory=_default_benchmarks)
    suggested_returns: Dict[str, Decimal] = field(default_factory=_default_suggested_returns)

    @property
    def secondary_share(self) -> Decimal:
        return Decimal("100") - self.primary_share

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EngineSettings":
        """Build settings, overriding defaults from ``ARBITRAGE_*`` variables.

        Recognised variables: ``ARBITRAGE_PRIMARY_SHARE``,
        ``ARBITRAGE_HIGH_INTEREST_RATE``, ``ARBITRAGE_RETURN_SLACK``,
        ``ARBITRAGE_EMI_INCOME_RATIO``, ``ARBITRAGE_DEFAULT_HORIZON``.
        Malformed values raise ``ValueError``.
        """
        env = os.environ if environ is None else environ
        settings = cls()
        overrides = {}
        for name in ("primary_share", "high_interest_rate", "return_slack", "emi_income_ratio"):
            raw = env.get(ENV_PREFIX + name.upper())
            if raw:
                overrides[name] = decimal_from_str(raw)
        raw_horizon = env.get(ENV_PREFIX + "DEFAULT_HORIZON")
        if raw_horizon:
            try:
                overrides["default_horizon"] = int(raw_horizon)
            except ValueError as exc:
                raise ValueError(f"Invalid horizon: {raw_horizon}") from exc
        if "primary_share" in overrides and not Decimal("0") <= overrides["primary_share"] <= Decimal("100"):
            raise ValueError("ARBITRAGE_PRIMARY_SHARE must be between 0 and 100")
        return replace(settings, **overrides) if overrides else settings


def clamp_horizon(years: Optional[int], settings: Optional[EngineSettings] = None) -> int:
    """Clamp a caller-requested horizon into the supported range.

    Missing or non-positive values fall back to the default horizon.
    """
    settings = settings or EngineSettings()
    if years is None or years <= 0:
        return settings.default_horizon
    return max(settings.min_horizon, min(settings.max_horizon, years))


def check_term(years: int, label: str, settings: Optional[EngineSettings] = None) -> int:
    """Validate a loan tenure, plan horizon or start delay given in years.

    Every such value stretches the projection, so it must lie within
    ``0..max_term_years``. Raises ``ValueError`` otherwise.
    """
    settings = settings or EngineSettings()
    if not 0 <= years <= settings.max_term_years:
        raise ValueError(f"{label} must be between 0 and {settings.max_term_years} years; got {years}")
    return years


def suggested_return(sip_type: str, settings: Optional[EngineSettings] = None) -> Decimal:
    """Return the default expected return for a new plan of ``sip_type``."""
    settings = settings or EngineSettings()
    return settings.suggested_returns.get(sip_type, settings.suggested_returns["Equity"])
