"""Unit tests for municipality key normalisation and rate lookups."""

from __future__ import annotations

import logging

import pytest

from finsalary.backend.app.errors import InvalidMunicipality
from finsalary.backend.app.services.calculators import (
    list_municipalities,
    municipality_statistics,
    resolve_municipality,
)
from finsalary.backend.config.keys import normalise_municipality_key
from finsalary.backend.config.schema import RateTable


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("Helsinki", "helsinki"),
        ("HELSINKI", "helsinki"),
        ("helsinki", "helsinki"),
        ("Jyväskylä", "jyvaskyla"),
        ("HÄMEENLINNA", "hameenlinna"),
        ("Seinäjoki ", "seinajoki"),
        ("Maarianhamina-Åland", "maarianhaminaaland"),
        ("Pieksämäki (kaupunki)", "pieksamakikaupunki"),
        ("", ""),
    ],
)
def test_normalise_municipality_key(raw: str, expected: str) -> None:
    assert normalise_municipality_key(raw) == expected


@pytest.mark.parametrize("raw", ["Jyväskylä", "HELSINKI", "Lappeen-ranta", "Öja"])
def test_normalisation_is_idempotent(raw: str) -> None:
    once = normalise_municipality_key(raw)

    assert normalise_municipality_key(once) == once


def test_resolve_known_municipality(rate_table: RateTable) -> None:
    lookup = resolve_municipality("Tampere", rate_table)

    assert lookup.key == "tampere"
    assert lookup.rate == pytest.approx(0.195)
    assert lookup.fallback_used is False


def test_resolve_diacritics_variant(rate_table: RateTable) -> None:
    lookup = resolve_municipality("Jyväskylä", rate_table)

    assert lookup.key == "jyvaskyla"
    assert lookup.fallback_used is False


def test_unknown_municipality_falls_back_to_default(
    rate_table: RateTable, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.WARNING):
        first = resolve_municipality("unknown-city", rate_table)
        second = resolve_municipality("unknown-city", rate_table)

    assert first == second
    assert first.key == "helsinki"
    assert first.rate == pytest.approx(0.176)
    assert first.fallback_used is True
    assert "unknown-city" in caplog.text


def test_unknown_municipality_without_default_is_rejected(rate_table: RateTable) -> None:
    strict = rate_table.model_copy(update={"default_municipality": None})

    with pytest.raises(InvalidMunicipality) as excinfo:
        resolve_municipality("atlantis", strict)

    assert excinfo.value.municipality == "atlantis"


def test_list_municipalities_uses_display_names(rate_table: RateTable) -> None:
    entries = {entry["key"]: entry for entry in list_municipalities(rate_table)}

    assert entries["jyvaskyla"]["name"] == "Jyväskylä"
    assert entries["espoo"]["name"] == "Espoo"
    assert entries["helsinki"]["rate_percentage"] == pytest.approx(17.6)
    assert entries["helsinki"]["is_default"] is True
    assert entries["tampere"]["is_default"] is False


def test_municipality_statistics(rate_table: RateTable) -> None:
    stats = municipality_statistics(rate_table)

    assert stats["count"] == len(rate_table.municipal_rates)
    assert sum(stats["bands"].values()) == stats["count"]
    assert stats["bands"]["above_21_5"] == 0
    assert stats["average_rate_percentage"] == pytest.approx(19.1, abs=0.05)
