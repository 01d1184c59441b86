"""Command-line interface for the arbitrage calculator.

This module uses the ``click`` library to implement a multi-command
interface. Inputs come from a JSON scenario file, from colon-delimited
options, or both. Users can print the full yearly projection, view only the
summary or the allocation recommendation, compare two scenarios, or look up
the suggested return for a plan type.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

import click

from .config import EngineSettings, check_term, clamp_horizon, suggested_return
from .data_models import (
    INCOME_FREQUENCIES,
    INCOME_TYPES,
    INTEREST_TYPES,
    LOAN_TYPES,
    SIP_TYPES,
    ArbitrageResult,
    Income,
    Loan,
    OneTimeInvestment,
    Sip,
)
from .engine import summarize
from .formatter import (
    print_alerts,
    print_allocations,
    print_comparison,
    print_projection,
    print_summary,
)
from .logging_config import get_logger, setup_logging
from .portfolio import Portfolio, new_id
from .utils import decimal_from_str, parse_choice, parse_date, parse_flag, to_decimal, whole_number

logger = get_logger(__name__)

_TENURE_RE = re.compile(r"^(?:(\d+)y)?(?:(\d+)m)?$")
_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")


def parse_amount(value: str) -> float:
    """Parse a numeric string with optional suffixes.

    Accepts plain floats ("50000") and shorthand with ``k``/``m``/``l``
    suffixes (e.g., "50k" meaning 50_000, "2l" meaning one lakh times two).
    Returns a float.
    """
    value = value.strip().lower()
    value = value.replace(",", "")
    factor = 1.0
    if value.endswith("k"):
        factor = 1_000.0
        value = value[:-1]
    elif value.endswith("l"):
        factor = 100_000.0
        value = value[:-1]
    elif value.endswith("m"):
        factor = 1_000_000.0
        value = value[:-1]
    try:
        return float(value) * factor
    except ValueError:
        raise click.BadParameter(f"Invalid amount: {value}")


def _amount(value: str):
    try:
        return decimal_from_str(str(parse_amount(value)))
    except ValueError as exc:
        raise click.BadParameter(str(exc))


def _term(years: int, label: str, settings: Optional[EngineSettings]) -> int:
    try:
        return check_term(years, label, settings)
    except ValueError as exc:
        raise click.BadParameter(str(exc))


def _rate(value: str):
    value = value.strip()
    if value.endswith("%"):
        value = value[:-1]
    try:
        return decimal_from_str(value)
    except ValueError as exc:
        raise click.BadParameter(str(exc))


def parse_tenure(value: str) -> Tuple[int, int]:
    """Parse a tenure such as ``5y``, ``5y6m`` or ``18m`` into (years, months).

    A bare number is taken as years. Months beyond eleven roll into years.
    """
    value = value.strip().lower()
    if value.isdigit():
        return int(value), 0
    match = _TENURE_RE.match(value)
    if not value or not match:
        raise click.BadParameter(f"Tenure must look like 5y, 5y6m or 18m; got {value}")
    years = int(match.group(1) or 0)
    months = int(match.group(2) or 0)
    return years + months // 12, months % 12


def _choice(value: str, choices: Tuple[str, ...], label: str) -> str:
    try:
        return parse_choice(value, choices, label)
    except ValueError as exc:
        raise click.BadParameter(str(exc))


def parse_income_strings(values: Tuple[str, ...]) -> List[Income]:
    incomes: List[Income] = []
    for item in values:
        parts = item.split(":")
        if not 1 <= len(parts) <= 3:
            raise click.BadParameter(
                f"Income must be in AMOUNT[:TYPE[:FREQUENCY]] format; got {item}"
            )
        income_type = _choice(parts[1], INCOME_TYPES, "income type") if len(parts) > 1 else "Salary"
        frequency = (
            _choice(parts[2], INCOME_FREQUENCIES, "income frequency") if len(parts) > 2 else "Monthly"
        )
        incomes.append(
            Income(id=new_id(), amount=_amount(parts[0]), type=income_type, frequency=frequency)
        )
    return incomes


def parse_loan_strings(
    values: Tuple[str, ...], settings: Optional[EngineSettings] = None
) -> List[Loan]:
    loans: List[Loan] = []
    for item in values:
        parts = item.split(":")
        if not 4 <= len(parts) <= 6:
            raise click.BadParameter(
                "Loan must be in PRINCIPAL:EMI:RATE:TENURE[:TYPE[:INTEREST_TYPE]] format; "
                f"got {item}"
            )
        years, months = parse_tenure(parts[3])
        _term(years + (1 if months else 0), "Loan tenure", settings)
        loans.append(
            Loan(
                id=new_id(),
                principal_remaining=_amount(parts[0]),
                emi=_amount(parts[1]),
                interest_rate=_rate(parts[2]),
                tenure_remaining_years=years,
                tenure_remaining_months=months,
                type=_choice(parts[4], LOAN_TYPES, "loan type") if len(parts) > 4 else "Personal",
                interest_type=(
                    _choice(parts[5], INTEREST_TYPES, "interest type") if len(parts) > 5 else "Compound"
                ),
            )
        )
    return loans


def parse_sip_strings(values: Tuple[str, ...], settings: EngineSettings) -> List[Sip]:
    """Parse AMOUNT:RETURN:HORIZON[:TYPE[:DELAY[:NAME]]] strings.

    ``RETURN`` may be ``auto`` to use the suggested return for the type.
    """
    sips: List[Sip] = []
    for item in values:
        parts = item.split(":", 5)
        if len(parts) < 3:
            raise click.BadParameter(
                f"SIP must be in AMOUNT:RETURN:HORIZON[:TYPE[:DELAY[:NAME]]] format; got {item}"
            )
        sip_type = _choice(parts[3], SIP_TYPES, "SIP type") if len(parts) > 3 else "Equity"
        if parts[1].strip().lower() == "auto":
            expected = suggested_return(sip_type, settings)
        else:
            expected = _rate(parts[1])
        try:
            horizon = int(parts[2])
            delay = int(parts[4]) if len(parts) > 4 and parts[4] else 0
        except ValueError:
            raise click.BadParameter(f"SIP horizon and delay must be whole years; got {item}")
        _term(horizon, "SIP horizon", settings)
        _term(delay, "SIP start delay", settings)
        sips.append(
            Sip(
                id=new_id(),
                monthly_amount=_amount(parts[0]),
                expected_return=expected,
                investment_horizon=horizon,
                start_delay=delay,
                type=sip_type,
                name=parts[5] if len(parts) > 5 else "",
            )
        )
    return sips


def parse_one_time_strings(values: Tuple[str, ...]) -> List[OneTimeInvestment]:
    investments: List[OneTimeInvestment] = []
    for item in values:
        parts = item.split(":", 2)
        if len(parts) < 2:
            raise click.BadParameter(f"One-time item must be in AMOUNT:DATE[:NAME] format; got {item}")
        try:
            when = parse_date(parts[1])
        except ValueError as exc:
            raise click.BadParameter(str(exc))
        investments.append(
            OneTimeInvestment(
                id=new_id(),
                amount=_amount(parts[0]),
                date=when,
                name=parts[2] if len(parts) > 2 else "",
            )
        )
    return investments


def _snake_keys(record: Mapping[str, Any]) -> Dict[str, Any]:
    """Accept both ``principalRemaining`` and ``principal_remaining`` keys."""
    return {_CAMEL_RE.sub("_", key).lower(): value for key, value in record.items()}


def _record(data: Mapping[str, Any], required: Tuple[str, ...], label: str) -> Dict[str, Any]:
    if not isinstance(data, Mapping):
        raise ValueError(f"{label} must be a JSON object; got {data!r}")
    record = _snake_keys(data)
    missing = [name for name in required if record.get(name) is None]
    if missing:
        raise ValueError(f"{label} is missing {', '.join(missing)}")
    record["id"] = str(record.get("id") or new_id())
    return record


def income_from_dict(data: Mapping[str, Any]) -> Income:
    r = _record(data, ("amount",), "Income")
    return Income(
        id=r["id"],
        amount=to_decimal(r["amount"]),
        type=parse_choice(str(r.get("type", "Salary")), INCOME_TYPES, "income type"),
        frequency=parse_choice(str(r.get("frequency", "Monthly")), INCOME_FREQUENCIES, "income frequency"),
    )


def loan_from_dict(data: Mapping[str, Any], settings: Optional[EngineSettings] = None) -> Loan:
    r = _record(data, ("principal_remaining", "emi", "interest_rate"), "Loan")
    years = whole_number(r.get("tenure_remaining_years", 0), "tenure_remaining_years")
    months = whole_number(r.get("tenure_remaining_months", 0), "tenure_remaining_months")
    if not 0 <= months <= 11:
        raise ValueError(f"tenure_remaining_months must be between 0 and 11; got {months}")
    check_term(years + (1 if months else 0), "Loan tenure", settings)
    return Loan(
        id=r["id"],
        principal_remaining=to_decimal(r["principal_remaining"]),
        emi=to_decimal(r["emi"]),
        interest_rate=to_decimal(r["interest_rate"]),
        tenure_remaining_years=years,
        tenure_remaining_months=months,
        type=parse_choice(str(r.get("type", "Personal")), LOAN_TYPES, "loan type"),
        interest_type=parse_choice(str(r.get("interest_type", "Compound")), INTEREST_TYPES, "interest type"),
        prepayment_allowed=parse_flag(r.get("prepayment_allowed", True), "prepayment_allowed"),
        prepayment_penalty=to_decimal(r.get("prepayment_penalty", 0)),
    )


def sip_from_dict(data: Mapping[str, Any], settings: Optional[EngineSettings] = None) -> Sip:
    r = _record(data, ("monthly_amount",), "SIP")
    sip_type = parse_choice(str(r.get("type", "Equity")), SIP_TYPES, "SIP type")
    expected = r.get("expected_return")
    horizon = whole_number(r.get("investment_horizon", 5), "investment_horizon")
    delay = whole_number(r.get("start_delay", 0), "start_delay")
    return Sip(
        id=r["id"],
        monthly_amount=to_decimal(r["monthly_amount"]),
        expected_return=suggested_return(sip_type, settings) if expected is None else to_decimal(expected),
        investment_horizon=check_term(horizon, "SIP horizon", settings),
        start_delay=check_term(delay, "SIP start delay", settings),
        name=str(r.get("name", "")),
        type=sip_type,
    )


def one_time_from_dict(data: Mapping[str, Any]) -> OneTimeInvestment:
    r = _record(data, ("amount", "date"), "One-time investment")
    return OneTimeInvestment(
        id=r["id"],
        amount=to_decimal(r["amount"]),
        date=parse_date(str(r["date"])),
        name=str(r.get("name", "")),
        auto_apply=parse_flag(r.get("auto_apply", True), "auto_apply"),
    )


def _records(scenario: Mapping[str, Any], key: str) -> List[Any]:
    items = scenario.get(key)
    if items is None:
        return []
    if not isinstance(items, list):
        raise ValueError(f"{key} must be a JSON array")
    return items


def scenario_from_dict(
    data: Mapping[str, Any], settings: Optional[EngineSettings] = None
) -> Tuple[Portfolio, Optional[int]]:
    """Build a portfolio and the requested horizon from a scenario mapping.

    Raises ``ValueError`` for malformed records.
    """
    if not isinstance(data, Mapping):
        raise ValueError("Scenario must be a JSON object")
    scenario = _snake_keys(data)
    portfolio = Portfolio(
        incomes=tuple(income_from_dict(i) for i in _records(scenario, "incomes")),
        loans=tuple(loan_from_dict(i, settings) for i in _records(scenario, "loans")),
        sips=tuple(sip_from_dict(i, settings) for i in _records(scenario, "sips")),
        one_time_investments=tuple(
            one_time_from_dict(i) for i in _records(scenario, "one_time_investments")
        ),
    )
    horizon = scenario.get("horizon_years")
    return portfolio, whole_number(horizon, "horizon_years") if horizon is not None else None


def load_scenario_file(path: Path, settings: Optional[EngineSettings] = None) -> Tuple[Portfolio, Optional[int]]:
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        return scenario_from_dict(data, settings)
    except (OSError, json.JSONDecodeError, ValueError, TypeError) as exc:
        raise click.BadParameter(f"Could not load scenario {path}: {exc}")


def build_portfolio_from_options(
    scenario: Optional[str],
    income: Tuple[str, ...],
    loan: Tuple[str, ...],
    sip: Tuple[str, ...],
    one_time: Tuple[str, ...],
    settings: EngineSettings,
) -> Tuple[Portfolio, Optional[int]]:
    """Combine a scenario file with any inline records."""
    portfolio, horizon = (
        load_scenario_file(Path(scenario), settings) if scenario else (Portfolio(), None)
    )
    for item in parse_income_strings(income):
        portfolio = portfolio.add_income(item)
    for item in parse_loan_strings(loan, settings):
        portfolio = portfolio.add_loan(item)
    for item in parse_sip_strings(sip, settings):
        portfolio = portfolio.add_sip(item)
    for item in parse_one_time_strings(one_time):
        portfolio = portfolio.add_one_time_investment(item)
    return portfolio, horizon


def result_to_dict(result: ArbitrageResult) -> Dict[str, Any]:
    """Convert a result into JSON-serialisable primitives."""
    return {
        "yearly_projections": [
            {
                "year": p.year,
                "total_income": float(p.total_income),
                "total_emi": float(p.total_emi),
                "total_sip": float(p.total_sip),
                "surplus": float(p.surplus),
                "net_worth": float(p.net_worth),
                "loans": {k: float(v) for k, v in p.loans.items()},
                "sips": {k: float(v) for k, v in p.sips.items()},
            }
            for p in result.yearly_projections
        ],
        "optimal_allocations": [
            {
                "loan_id": a.loan_id,
                "sip_id": a.sip_id,
                "percentage": float(a.percentage),
                "reason": a.reason,
            }
            for a in result.optimal_allocations
        ],
        "arbitrage_score": float(result.arbitrage_score),
        "alerts": list(result.alerts),
    }


def scenario_options(func: Callable) -> Callable:
    """Attach the shared input options to a command."""
    options = [
        click.option("--scenario", "-f", "scenario", type=click.Path(exists=True, dir_okay=False), help="Scenario JSON file"),
        click.option("--income", "income", multiple=True, help="Income in AMOUNT[:TYPE[:FREQUENCY]] format"),
        click.option("--loan", "loan", multiple=True, help="Loan in PRINCIPAL:EMI:RATE:TENURE[:TYPE[:INTEREST_TYPE]] format, e.g. 500k:12k:9.5:5y6m:Home"),
        click.option("--sip", "sip", multiple=True, help="SIP in AMOUNT:RETURN:HORIZON[:TYPE[:DELAY[:NAME]]] format; RETURN may be 'auto'"),
        click.option("--one-time", "one_time", multiple=True, help="One-time investment in AMOUNT:DATE[:NAME] format"),
        click.option("--years", "-y", "years", type=int, help="Projection horizon in years (1-30, default 10)"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _run(ctx: click.Context, scenario, income, loan, sip, one_time, years):
    settings: EngineSettings = ctx.obj["settings"]
    portfolio, file_horizon = build_portfolio_from_options(scenario, income, loan, sip, one_time, settings)
    horizon = clamp_horizon(years if years is not None else file_horizon, settings)
    logger.info(
        "Running projection",
        extra={"incomes": len(portfolio.incomes), "loans": len(portfolio.loans), "sips": len(portfolio.sips), "horizon": horizon},
    )
    result = portfolio.project(horizon, settings)
    summary_data = summarize(portfolio.incomes, portfolio.loans, portfolio.sips, result)
    return portfolio, result, summary_data


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log engine details to stderr")
@click.option("--json-logs", "json_logs", is_flag=True, help="Write console logs as JSON")
@click.option("--log-file", "log_file", type=click.Path(dir_okay=False), help="Also write JSON logs to this file")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, json_logs: bool, log_file: Optional[str]) -> None:
    """Project loans against SIPs and recommend how to split your surplus."""
    setup_logging(verbose=verbose, json_output=json_logs, log_file=Path(log_file) if log_file else None)
    try:
        settings = EngineSettings.from_env()
    except ValueError as exc:
        raise click.UsageError(str(exc))
    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings


@cli.command()
@scenario_options
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
@click.pass_context
def project(ctx, scenario, income, loan, sip, one_time, years, as_json) -> None:
    """Compute and print the full yearly projection."""
    portfolio, result, summary_data = _run(ctx, scenario, income, loan, sip, one_time, years)
    if as_json:
        payload = result_to_dict(result)
        payload["summary"] = summary_data
        click.echo(json.dumps(payload, indent=2))
        return
    print_summary(summary_data)
    print_allocations(result.optimal_allocations, portfolio.loans, portfolio.sips)
    print_alerts(result.alerts)
    print_projection(result.yearly_projections, portfolio.loans, portfolio.sips)


@cli.command()
@scenario_options
@click.option("--json", "as_json", is_flag=True, help="Print the summary as JSON")
@click.pass_context
def summary(ctx, scenario, income, loan, sip, one_time, years, as_json) -> None:
    """Compute and print only the summary metrics."""
    _, _, summary_data = _run(ctx, scenario, income, loan, sip, one_time, years)
    if as_json:
        click.echo(json.dumps({"summary": summary_data}, indent=2))
    else:
        print_summary(summary_data)


@cli.command()
@scenario_options
@click.pass_context
def allocate(ctx, scenario, income, loan, sip, one_time, years) -> None:
    """Print the surplus allocation recommendation and alerts."""
    portfolio, result, _ = _run(ctx, scenario, income, loan, sip, one_time, years)
    print_allocations(result.optimal_allocations, portfolio.loans, portfolio.sips)
    click.echo(f"Arbitrage score: {result.arbitrage_score:.2f}")
    print_alerts(result.alerts)


@cli.command()
@click.option("--scenario1", "scenario1", required=True, type=click.Path(exists=True, dir_okay=False), help="First scenario JSON file")
@click.option("--scenario2", "scenario2", required=True, type=click.Path(exists=True, dir_okay=False), help="Second scenario JSON file")
@click.option("--years", "-y", "years", type=int, help="Projection horizon applied to both scenarios")
@click.pass_context
def compare(ctx, scenario1: str, scenario2: str, years: Optional[int]) -> None:
    """Compare two scenarios, for example with and without a new loan."""
    summaries = []
    for path in (scenario1, scenario2):
        _, _, summary_data = _run(ctx, path, (), (), (), (), years)
        summaries.append(summary_data)
    print_comparison(summaries[0], summaries[1])


@cli.command("suggest-return")
@click.argument("sip_type", type=click.Choice(list(SIP_TYPES), case_sensitive=False))
@click.pass_context
def suggest_return(ctx, sip_type: str) -> None:
    """Print the suggested expected return for a SIP type."""
    canonical = parse_choice(sip_type, SIP_TYPES, "SIP type")
    click.echo(f"{canonical}: {suggested_return(canonical, ctx.obj['settings'])}%")


if __name__ == "__main__":
    cli()
