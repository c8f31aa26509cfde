"""Data-quality checks for rate tables produced by the refresh tooling.

Schema validation in :mod:`finsalary.backend.config.schema` rejects tables the
calculator cannot work with. The checks here go further and flag values that
load fine but look suspicious for Finnish taxation, so contributors can review
a regenerated table before it ships.
"""

from __future__ import annotations

import argparse
from collections import defaultdict
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from .rate_table import load_rate_table_from, resolve_rate_table_path
from .schema import ConfigurationError, ContributionRates, RateTable

REQUIRED_MUNICIPALITIES = ("helsinki", "espoo", "vantaa", "tampere", "turku", "oulu")
SAMPLE_INCOME = 50_000.0
SAMPLE_MUNICIPALITY = "helsinki"

_MUNICIPAL_RANGE = (0.05, 0.25)
_EMPLOYEE_PENSION_RANGE = (0.05, 0.15)
_SELF_EMPLOYED_PENSION_RANGE = (0.15, 0.35)
_HEALTH_INSURANCE_RANGE = (0.005, 0.025)
_EFFECTIVE_RATE_RANGE = (20.0, 50.0)
_SHARED_RATE_THRESHOLD = 10


@dataclass
class RateTableReport:
    """Outcome of validating a rate table."""

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    statistics: dict[str, int] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def _percent(value: float, digits: int = 1) -> str:
    return f"{value * 100:.{digits}f}%"


def _check_municipal_rates(table: RateTable, report: RateTableReport) -> None:
    missing = [key for key in REQUIRED_MUNICIPALITIES if key not in table.municipal_rates]
    if missing:
        report.errors.append(f"Missing required municipalities: {', '.join(missing)}")

    low, high = _MUNICIPAL_RANGE
    shared: dict[float, list[str]] = defaultdict(list)
    for key, rate in table.municipal_rates.items():
        if rate < low or rate > high:
            report.warnings.append(f"Unusual rate for {key}: {_percent(rate)}")
        shared[rate].append(key)

    for rate, keys in shared.items():
        if len(keys) > _SHARED_RATE_THRESHOLD:
            report.warnings.append(
                f"Many municipalities have the same rate {_percent(rate)}: "
                f"{len(keys)} municipalities"
            )


def _check_national_brackets(table: RateTable, report: RateTableReport) -> None:
    brackets = table.national_brackets
    if len(brackets) < 2:
        report.errors.append("Too few tax brackets")
    if not brackets:
        return

    if brackets[0].minimum != 0:
        report.warnings.append(f"First tax bracket starts at {brackets[0].minimum:g}, not 0")
    if brackets[-1].maximum is not None:
        report.warnings.append("Last tax bracket has an upper bound; higher incomes go untaxed")

    previous = None
    for index, bracket in enumerate(brackets, start=1):
        if previous is not None and previous.maximum is not None:
            # Adjacent brackets either share a bound or continue one euro later.
            if bracket.minimum - previous.maximum > 1:
                report.warnings.append(
                    f"Gap in tax brackets: {previous.maximum + 1:g} - {bracket.minimum - 1:g}"
                )
            if bracket.rate < previous.rate:
                report.warnings.append(
                    f"Tax rate decreased in bracket {index}: "
                    f"{_percent(previous.rate)} -> {_percent(bracket.rate)}"
                )
        previous = bracket


def _check_contributions(table: RateTable, report: RateTableReport) -> None:
    contributions = table.contributions
    rates = {
        "employee_pension": contributions.employee_pension,
        "self_employed_pension": contributions.self_employed_pension,
        "health_insurance": contributions.health_insurance,
        "unemployment_insurance": contributions.unemployment_insurance,
    }
    for label, value in rates.items():
        if value < 0 or value > 1:
            report.errors.append(f"contributions.{label}: rate must be between 0 and 1")

    for label, value, (low, high) in (
        ("TyEL", contributions.employee_pension, _EMPLOYEE_PENSION_RANGE),
        ("YEL", contributions.self_employed_pension, _SELF_EMPLOYED_PENSION_RANGE),
        ("health insurance", contributions.health_insurance, _HEALTH_INSURANCE_RANGE),
    ):
        if value < low or value > high:
            report.warnings.append(f"Unusual {label} rate: {_percent(value, 2)}")

    if contributions.self_employed_pension <= contributions.employee_pension:
        report.warnings.append(
            "YEL rate should be higher than TyEL rate (self-employed vs employee)"
        )


def _cross_validate(table: RateTable, report: RateTableReport) -> None:
    # Imported lazily: the calculator package depends on this configuration package.
    from finsalary.backend.app.models import SalaryInput
    from finsalary.backend.app.services.calculators import compute_breakdown

    if SAMPLE_MUNICIPALITY not in table.municipal_rates:
        return

    breakdown = compute_breakdown(
        SalaryInput(gross_salary=SAMPLE_INCOME, municipality=SAMPLE_MUNICIPALITY),
        table,
    )
    low, high = _EFFECTIVE_RATE_RANGE
    if breakdown.effective_tax_rate < low or breakdown.effective_tax_rate > high:
        report.warnings.append(
            f"Unusual effective tax rate for €{SAMPLE_INCOME:,.0f} income: "
            f"{breakdown.effective_tax_rate:.1f}%"
        )


def validate_rate_table(table: RateTable) -> RateTableReport:
    """Run every data-quality check against ``table``."""

    report = RateTableReport(
        statistics={
            "municipal_rates": len(table.municipal_rates),
            "national_brackets": len(table.national_brackets),
            "contribution_rates": len(ContributionRates.model_fields),
        }
    )
    _check_municipal_rates(table, report)
    _check_national_brackets(table, report)
    _check_contributions(table, report)
    _cross_validate(table, report)
    return report


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Validate the rate table and report issues helpful to contributors."
    )
    parser.add_argument(
        "path",
        nargs="?",
        type=Path,
        help="Rate table file to validate (defaults to the configured table)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for running validations from the command line."""

    parser = _build_argument_parser()
    args = parser.parse_args(argv)
    path: Path = args.path or resolve_rate_table_path()

    try:
        table = load_rate_table_from(path)
    except (FileNotFoundError, ConfigurationError) as error:
        print(f"[{path.name}] failed to load rate table: {error}")
        return 1

    report = validate_rate_table(table)
    stats = report.statistics
    print(f"[{path.name}] version {table.meta.version}")
    print(f"  municipal rates: {stats['municipal_rates']} municipalities")
    print(f"  national brackets: {stats['national_brackets']} brackets")
    print(f"  contribution rates: {stats['contribution_rates']} rates")

    if report.errors:
        print(f"{len(report.errors)} error(s) detected:")
        for issue in report.errors:
            print(f"  - {issue}")
    if report.warnings:
        print(f"{len(report.warnings)} warning(s):")
        for issue in report.warnings:
            print(f"  - {issue}")

    if not report.is_valid:
        return 1

    print("OK")
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    raise SystemExit(main())
