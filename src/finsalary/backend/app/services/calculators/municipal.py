"""Municipality lookups with an explicit fallback policy."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from finsalary.backend.app.errors import InvalidMunicipality
from finsalary.backend.config.keys import MunicipalityKey, normalise_municipality_key
from finsalary.backend.config.schema import RateTable

_LOGGER = logging.getLogger(__name__)

# Upper edges (in percent) of the bands used by the municipality overview.
RATE_BANDS: tuple[tuple[str, float | None], ...] = (
    ("up_to_19", 19.0),
    ("up_to_20_5", 20.5),
    ("up_to_21_5", 21.5),
    ("above_21_5", None),
)


@dataclass(frozen=True)
class MunicipalityLookup:
    """Outcome of resolving a requested municipality against a rate table."""

    requested: str
    key: MunicipalityKey
    rate: float
    fallback_used: bool


def resolve_municipality(requested: str, table: RateTable) -> MunicipalityLookup:
    """Resolve ``requested`` to a declared municipality and its flat rate.

    Unknown keys resolve to ``table.default_municipality`` and the substitution
    is logged. Without a default, :class:`InvalidMunicipality` is raised.
    """

    key = normalise_municipality_key(requested)
    rate = table.municipal_rate(key)
    if rate is not None:
        return MunicipalityLookup(requested=requested, key=key, rate=rate, fallback_used=False)

    default = table.default_municipality
    if default is None:
        raise InvalidMunicipality(requested)

    default_key = MunicipalityKey(default)
    _LOGGER.warning(
        "Unknown municipality %r (normalised %r); using default municipality %r",
        requested,
        key,
        default_key,
    )
    return MunicipalityLookup(
        requested=requested,
        key=default_key,
        rate=table.municipal_rates[default_key],
        fallback_used=True,
    )


def list_municipalities(table: RateTable) -> list[dict[str, Any]]:
    """Return every municipality with its display name and percentage rate."""

    entries = [
        {
            "key": key,
            "name": table.display_name(MunicipalityKey(key)),
            "rate": rate,
            "rate_percentage": round(rate * 100, 2),
            "is_default": key == table.default_municipality,
        }
        for key, rate in table.municipal_rates.items()
    ]
    entries.sort(key=lambda entry: entry["name"])
    return entries


def _band_for(percentage: float) -> str:
    for band, upper in RATE_BANDS:
        if upper is None or percentage <= upper:
            return band
    raise AssertionError("rate bands must end with an open band")  # pragma: no cover


def municipality_statistics(table: RateTable) -> dict[str, Any]:
    """Summarise municipal rates: count, average percentage and band counts."""

    percentages = [rate * 100 for rate in table.municipal_rates.values()]
    bands = {band: 0 for band, _ in RATE_BANDS}
    for percentage in percentages:
        bands[_band_for(percentage)] += 1

    average = sum(percentages) / len(percentages) if percentages else 0.0
    return {
        "count": len(percentages),
        "average_rate_percentage": round(average, 1),
        "bands": bands,
    }


__all__ = [
    "MunicipalityLookup",
    "RATE_BANDS",
    "list_municipalities",
    "municipality_statistics",
    "resolve_municipality",
]
