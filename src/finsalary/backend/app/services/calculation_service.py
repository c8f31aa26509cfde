"""Orchestrate request validation, tax calculation and response assembly.

The calculation service glues the request models, the translation layer and
the rate table together so that the calculator modules can stay pure
arithmetic. Routes call :func:`calculate_salary` with the raw JSON payload and
the rate table injected into the Flask app.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from contextlib import contextmanager
from time import perf_counter
from typing import Any

from pydantic import ValidationError

from finsalary.backend.app.errors import InvalidInput
from finsalary.backend.app.localization import Translator, get_translator
from finsalary.backend.app.models import (
    CalculationRequest,
    CalculationResponse,
    MonthlyView,
    SalaryInput,
    TaxBreakdown,
    format_validation_error,
)
from finsalary.backend.config.keys import MunicipalityKey
from finsalary.backend.config.rate_table import load_rate_table
from finsalary.backend.config.schema import RateTable

from .calculators import (
    compute_monthly_breakdown,
    describe_bracket,
    format_currency,
    format_percentage,
    round_currency,
    round_rate,
    share_of,
)

_LOGGER = logging.getLogger(__name__)

PROFILE_ENV = "FINSALARY_PROFILE_CALCULATIONS"


def _profiling_enabled() -> bool:
    """Return ``True`` when calculation profiling should be captured."""

    flag = os.getenv(PROFILE_ENV, "")
    return flag.strip().lower() in {"1", "true", "yes", "on"}


@contextmanager
def _profile_section(name: str, store: dict[str, float] | None):
    """Capture the duration of a named section when profiling is enabled."""

    if store is None:
        yield
        return

    start = perf_counter()
    try:
        yield
    finally:
        store[name] = perf_counter() - start


def _parse_request(payload: Mapping[str, Any] | CalculationRequest) -> CalculationRequest:
    if isinstance(payload, CalculationRequest):
        return payload
    if not isinstance(payload, Mapping):
        raise InvalidInput("Payload must be a mapping")
    try:
        return CalculationRequest.model_validate(payload)
    except ValidationError as exc:
        raise InvalidInput(format_validation_error(exc)) from exc


def _detail_rows(breakdown: TaxBreakdown) -> list[tuple[str, float]]:
    pension_category = "self_employed_pension" if breakdown.self_employed else "employee_pension"
    return [
        ("national_tax", breakdown.national_tax),
        ("municipal_tax", breakdown.municipal_tax),
        (pension_category, breakdown.pension_contribution),
        ("unemployment_insurance", breakdown.unemployment_insurance),
        ("health_insurance", breakdown.health_insurance),
    ]


def build_details(breakdown: TaxBreakdown, translator: Translator) -> list[dict[str, Any]]:
    """Return the non-zero line items of ``breakdown`` ready for display."""

    details: list[dict[str, Any]] = []
    for category, amount in _detail_rows(breakdown):
        if amount <= 0:
            continue
        share = share_of(amount, breakdown.gross_salary)
        details.append(
            {
                "category": category,
                "label": translator(f"details.{category}"),
                "amount": round_currency(amount),
                "share": round_rate(share),
                "formatted_amount": format_currency(amount),
                "formatted_share": format_percentage(share),
            }
        )
    return details


def build_summary(monthly: MonthlyView, translator: Translator) -> dict[str, Any]:
    """Return annual and monthly totals with labels and display strings."""

    breakdown = monthly.breakdown
    amounts = {
        "gross_salary": breakdown.gross_salary,
        "total_taxes": breakdown.total_taxes,
        "net_salary": breakdown.net_salary,
        "deductions": breakdown.deductions,
        "gross_monthly": monthly.gross_monthly,
        "net_monthly": monthly.net_monthly,
        "tax_monthly": monthly.tax_monthly,
    }

    summary: dict[str, Any] = {key: round_currency(value) for key, value in amounts.items()}
    summary["effective_tax_rate"] = round_rate(breakdown.effective_tax_rate)

    formatted = {key: format_currency(value) for key, value in amounts.items()}
    formatted["effective_tax_rate"] = format_percentage(breakdown.effective_tax_rate)
    summary["formatted"] = formatted

    summary["labels"] = translator.labels("summary", formatted)
    return summary


def calculate_salary(
    payload: Mapping[str, Any] | CalculationRequest,
    rates: RateTable | None = None,
) -> dict[str, Any]:
    """Compute the salary breakdown response for the provided payload."""

    request = _parse_request(payload)
    table = rates if rates is not None else load_rate_table()

    timings: dict[str, float] | None = {} if _profiling_enabled() else None
    overall_start = perf_counter() if timings is not None else None

    with _profile_section("breakdown", timings):
        monthly = compute_monthly_breakdown(SalaryInput.from_request(request), table)
    breakdown = monthly.breakdown

    translator = get_translator(request.locale)

    with _profile_section("presentation", timings):
        summary = build_summary(monthly, translator)
        details = build_details(breakdown, translator)

    last_updated = table.meta.last_updated
    meta_payload: dict[str, Any] = {
        "locale": translator.locale,
        "municipality": breakdown.municipality,
        "municipality_name": table.display_name(MunicipalityKey(breakdown.municipality)),
        "municipal_rate": breakdown.municipal_rate,
        "municipality_fallback": breakdown.municipality_fallback,
        "self_employed": breakdown.self_employed,
        "tax_bracket": describe_bracket(
            breakdown.gross_salary,
            table.national_brackets,
            none_label=translator("brackets.none"),
        ),
        "rates_version": table.meta.version,
        "rates_last_updated": last_updated.isoformat() if last_updated else None,
    }

    if timings is not None and overall_start is not None:
        timings["total"] = perf_counter() - overall_start
        _LOGGER.debug(
            "calculate_salary timings (ms): %s",
            {name: round(duration * 1000, 3) for name, duration in timings.items()},
        )

    response_model = CalculationResponse.model_validate(
        {
            "summary": summary,
            "details": details,
            "meta": meta_payload,
        }
    )

    return response_model.model_dump(mode="json", exclude_none=True)


__all__ = ["build_details", "build_summary", "calculate_salary"]
