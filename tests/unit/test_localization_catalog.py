"""Unit tests for the translation catalogue helpers."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from finsalary.backend.app.localization import (
    Catalogue,
    available_locales,
    get_translator,
    load_catalogue,
    load_translations,
    negotiate_locale,
    normalise_locale,
)

TRANSLATIONS_DIR = Path(__file__).resolve().parents[2] / "src" / "finsalary" / "translations"


def _read_catalogue(locale: str) -> dict:
    with (TRANSLATIONS_DIR / f"{locale}.json").open("r", encoding="utf-8") as handle:
        return json.load(handle)


@pytest.mark.parametrize(
    ("requested", "expected"),
    [
        (None, "fi"),
        ("", "fi"),
        ("fi", "fi"),
        ("FI-fi", "fi"),
        ("en", "en"),
        ("en_US", "en"),
        ("sv", "fi"),
    ],
)
def test_normalise_locale(requested: str | None, expected: str) -> None:
    assert normalise_locale(requested) == expected


def test_catalogues_share_backend_and_frontend_keys() -> None:
    finnish = _read_catalogue("fi")
    english = _read_catalogue("en")

    assert set(finnish["backend"]) == set(english["backend"])
    assert set(finnish["frontend"]) == set(english["frontend"])


def test_backend_catalogue_covers_every_detail_category() -> None:
    backend = _read_catalogue("fi")["backend"]

    for category in (
        "national_tax",
        "municipal_tax",
        "employee_pension",
        "self_employed_pension",
        "unemployment_insurance",
        "health_insurance",
    ):
        assert f"details.{category}" in backend


def test_translator_returns_localised_strings() -> None:
    translator = get_translator("en")

    assert translator.locale == "en"
    assert translator("summary.net_salary") == "Net salary / year"
    assert get_translator("fi")("details.employee_pension") == "TyEL maksut"


def test_translator_falls_back_to_key_for_unknown_entries() -> None:
    assert get_translator("en")("summary.unknown") == "summary.unknown"


def test_load_translations_includes_fallback_catalogue() -> None:
    payload = load_translations("en")

    assert payload["locale"] == "en"
    assert payload["available_locales"] == ["en", "fi"]
    assert payload["fallback"]["locale"] == "fi"
    assert payload["backend"]["brackets.none"] == "No national income tax"
    assert payload["fallback"]["backend"]["brackets.none"] == "Ei valtion tuloveroa"
    assert payload["frontend"]["form.submit"] == "Calculate net salary"


@pytest.mark.parametrize(
    ("header", "expected"),
    [
        (None, None),
        ("", None),
        ("en-GB,en;q=0.9", "en"),
        ("de-DE, fi;q=0.5", "fi"),
        ("sv, de", None),
    ],
)
def test_negotiate_locale_picks_first_published_language(
    header: str | None, expected: str | None
) -> None:
    assert negotiate_locale(header) == expected


def test_published_catalogues_have_no_missing_keys() -> None:
    base = load_catalogue("fi")

    for locale in available_locales():
        assert load_catalogue(locale).missing_keys(base) == set(), locale


def test_missing_keys_reports_both_sections() -> None:
    base = load_catalogue("fi")
    partial = Catalogue(locale="xx", backend={"brackets.none": "-"}, frontend={})

    missing = partial.missing_keys(base)

    assert "backend.summary.net_salary" in missing
    assert "backend.brackets.none" not in missing
    assert "frontend.form.submit" in missing


def test_translator_labels_use_prefix() -> None:
    labels = get_translator("en").labels("summary", ["gross_salary", "net_salary"])

    assert labels == {"gross_salary": "Gross salary / year", "net_salary": "Net salary / year"}
