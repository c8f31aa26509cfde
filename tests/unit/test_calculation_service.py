"""Unit tests for the calculation service facade."""

from __future__ import annotations

import logging

import pytest

from finsalary.backend.app.errors import InvalidInput, InvalidMunicipality
from finsalary.backend.app.models import CalculationRequest
from finsalary.backend.app.services import calculation_service
from finsalary.backend.app.services.calculation_service import calculate_salary
from finsalary.backend.config.schema import RateTable

NBSP = "\u00a0"


def test_calculate_salary_returns_summary_details_and_meta(rate_table: RateTable) -> None:
    result = calculate_salary(
        {"gross_salary": 50_000, "municipality": "Helsinki"}, rate_table
    )

    summary = result["summary"]
    assert summary["gross_salary"] == pytest.approx(50_000)
    assert summary["total_taxes"] == pytest.approx(16_249.875, abs=0.01)
    assert summary["net_salary"] == pytest.approx(33_750.125, abs=0.01)
    assert summary["effective_tax_rate"] == round(32.49975, 4)
    assert summary["gross_monthly"] == pytest.approx(4_166.67, abs=0.01)
    assert summary["formatted"]["gross_salary"] == f"50{NBSP}000{NBSP}€"
    assert summary["formatted"]["effective_tax_rate"] == "32.5%"

    categories = [item["category"] for item in result["details"]]
    assert categories == [
        "national_tax",
        "municipal_tax",
        "employee_pension",
        "unemployment_insurance",
        "health_insurance",
    ]
    municipal = result["details"][1]
    assert municipal["amount"] == pytest.approx(8_800)
    assert municipal["share"] == pytest.approx(17.6)
    assert municipal["formatted_share"] == "17.6%"

    meta = result["meta"]
    assert meta["locale"] == "fi"
    assert meta["municipality"] == "helsinki"
    assert meta["municipality_name"] == "Helsinki"
    assert meta["municipality_fallback"] is False
    assert meta["self_employed"] is False
    assert meta["rates_version"] == "1.0.0"
    assert meta["rates_last_updated"].startswith("2025-10-07")
    assert meta["tax_bracket"] == f"40{NBSP}001{NBSP}€ - 70{NBSP}000{NBSP}€ (12.5%)"


def test_self_employed_detail_uses_yel_category(rate_table: RateTable) -> None:
    result = calculate_salary(
        {
            "gross_salary": 100_000,
            "municipality": "tampere",
            "self_employed": True,
            "deduction_amount": 1_000,
            "locale": "en",
        },
        rate_table,
    )

    details = {item["category"]: item for item in result["details"]}
    assert "employee_pension" not in details
    assert details["self_employed_pension"]["amount"] == pytest.approx(24_500)
    assert details["self_employed_pension"]["label"] == "YEL pension contribution"
    assert result["summary"]["deductions"] == pytest.approx(1_000)
    assert result["summary"]["net_salary"] == pytest.approx(44_050.3)


def test_zero_salary_omits_zero_rows(rate_table: RateTable) -> None:
    result = calculate_salary({"gross_salary": 0, "municipality": "oulu"}, rate_table)

    assert result["details"] == []
    assert result["summary"]["effective_tax_rate"] == 0.0
    assert result["meta"]["tax_bracket"] == "Ei valtion tuloveroa"


def test_labels_follow_locale(rate_table: RateTable) -> None:
    english = calculate_salary(
        {"gross_salary": 30_000, "municipality": "espoo", "locale": "en"}, rate_table
    )
    finnish = calculate_salary(
        {"gross_salary": 30_000, "municipality": "espoo", "locale": "fi"}, rate_table
    )

    assert english["meta"]["locale"] == "en"
    assert english["summary"]["labels"]["net_salary"] == "Net salary / year"
    assert finnish["details"][0]["label"] == "Kansallinen vero"
    assert english["summary"]["labels"] != finnish["summary"]["labels"]


def test_unsupported_locale_falls_back_to_finnish(rate_table: RateTable) -> None:
    result = calculate_salary(
        {"gross_salary": 30_000, "municipality": "espoo", "locale": "sv-FI"}, rate_table
    )

    assert result["meta"]["locale"] == "fi"


def test_unknown_municipality_is_reported_in_meta(
    rate_table: RateTable, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.WARNING):
        result = calculate_salary({"gross_salary": 30_000, "municipality": "Atlantis"}, rate_table)

    assert result["meta"]["municipality"] == "helsinki"
    assert result["meta"]["municipality_fallback"] is True
    assert result["summary"]["total_taxes"] == pytest.approx(8_870)
    assert "Atlantis" in caplog.text


def test_strict_table_rejects_unknown_municipality(rate_table: RateTable) -> None:
    strict = rate_table.model_copy(update={"default_municipality": None})

    with pytest.raises(InvalidMunicipality):
        calculate_salary({"gross_salary": 30_000, "municipality": "Atlantis"}, strict)


def test_request_models_are_accepted(rate_table: RateTable) -> None:
    request = CalculationRequest(gross_salary=15_000, municipality="Jyväskylä")

    result = calculate_salary(request, rate_table)

    assert result["meta"]["municipality"] == "jyvaskyla"
    assert result["meta"]["municipality_name"] == "Jyväskylä"
    assert result["summary"]["total_taxes"] == pytest.approx(4_395)


@pytest.mark.parametrize(
    "payload",
    [
        {"gross_salary": -1, "municipality": "helsinki"},
        {"gross_salary": "lots", "municipality": "helsinki"},
        {"gross_salary": True, "municipality": "helsinki"},
        {"gross_salary": 1_000, "municipality": "   "},
        {"gross_salary": 1_000, "municipality": "helsinki", "deduction_amount": -10},
        {"gross_salary": 1_000, "municipality": "helsinki", "church": True},
        {"municipality": "helsinki"},
    ],
)
def test_invalid_payloads_raise_invalid_input(rate_table: RateTable, payload: dict) -> None:
    with pytest.raises(InvalidInput, match="Invalid calculation payload"):
        calculate_salary(payload, rate_table)


def test_non_mapping_payload_is_rejected(rate_table: RateTable) -> None:
    with pytest.raises(InvalidInput):
        calculate_salary(["not", "a", "mapping"], rate_table)  # type: ignore[arg-type]


def test_missing_deduction_defaults_to_zero(rate_table: RateTable) -> None:
    result = calculate_salary(
        {"gross_salary": 20_000, "municipality": "vantaa", "deduction_amount": None},
        rate_table,
    )

    assert result["summary"]["deductions"] == 0.0


def test_profiling_logs_timings(
    rate_table: RateTable,
    monkeypatch: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
) -> None:
    monkeypatch.setenv(calculation_service.PROFILE_ENV, "true")

    with caplog.at_level(logging.DEBUG, logger=calculation_service.__name__):
        calculate_salary({"gross_salary": 40_000, "municipality": "turku"}, rate_table)

    assert "calculate_salary timings" in caplog.text
