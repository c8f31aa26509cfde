"""Expose rate table metadata consumed by the static pages.

The pages render municipality listings, bracket tables and contribution rates
straight from these endpoints, so the YAML rate table stays the single source
of those numbers.
"""

from __future__ import annotations

from typing import Any

from flask import Blueprint, current_app, jsonify

from finsalary.backend.app.http import problem_response
from finsalary.backend.app.services.calculators import (
    list_municipalities,
    municipality_statistics,
)
from finsalary.backend.config.keys import normalise_municipality_key
from finsalary.backend.config.schema import RateTable
from finsalary.backend.version import get_project_version

RATE_TABLE_CONFIG_KEY = "RATE_TABLE"

blueprint = Blueprint("config", __name__, url_prefix="/api/v1/config")


def current_rate_table() -> RateTable:
    """Return the rate table injected into the running application."""

    return current_app.config[RATE_TABLE_CONFIG_KEY]


def get_configuration_metadata(table: RateTable) -> dict[str, Any]:
    """Expose version and provenance details of the loaded rate table."""

    last_updated = table.meta.last_updated
    return {
        "version": get_project_version(),
        "rates_version": table.meta.version,
        "schema_version": table.meta.schema_version,
        "last_updated": last_updated.isoformat() if last_updated else None,
        "data_sources": list(table.meta.data_sources),
    }


def _serialise_brackets(table: RateTable) -> list[dict[str, Any]]:
    return [
        {
            "min": bracket.minimum,
            "max": bracket.maximum,
            "rate": bracket.rate,
        }
        for bracket in table.national_brackets
    ]


@blueprint.get("/meta")
def get_meta():
    """Return the project version and rate table provenance."""

    return jsonify(get_configuration_metadata(current_rate_table())), 200


@blueprint.get("/rates")
def get_rates():
    """Return the national brackets, contribution rates and fallback policy."""

    table = current_rate_table()
    payload = {
        "national_brackets": _serialise_brackets(table),
        "contributions": table.contributions.model_dump(),
        "default_municipality": table.default_municipality,
        "meta": get_configuration_metadata(table),
    }
    return jsonify(payload), 200


@blueprint.get("/municipalities")
def get_municipalities():
    """Return every municipality with its rate plus overview statistics."""

    table = current_rate_table()
    payload = {
        "municipalities": list_municipalities(table),
        "statistics": municipality_statistics(table),
        "default_municipality": table.default_municipality,
    }
    return jsonify(payload), 200


@blueprint.get("/municipalities/<name>")
def get_municipality(name: str):
    """Return a single municipality; unknown names are 404s, not fallbacks."""

    table = current_rate_table()
    key = normalise_municipality_key(name)
    entry = next(
        (item for item in list_municipalities(table) if item["key"] == key),
        None,
    )
    if entry is None:
        return problem_response(
            "not_found",
            status=404,
            message=f"Unknown municipality: {name!r}",
        ).to_response()
    return jsonify(entry), 200
