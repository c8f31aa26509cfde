"""Rate table loader wrapping the shared schema models."""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .keys import MunicipalityKey, normalise_municipality_key
from .schema import (
    ConfigurationError,
    ContributionRates,
    RateTable,
    RateTableMeta,
    TaxBracket,
)

_LOGGER = logging.getLogger(__name__)

CONFIG_DIRECTORY = Path(__file__).resolve().parent / "data"
RATE_TABLE_FILE = CONFIG_DIRECTORY / "rates.yaml"
RATE_TABLE_ENV = "FINSALARY_RATE_TABLE"


def _load_yaml(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ConfigurationError("Rate table file must define a mapping at the top level")
    return data


def resolve_rate_table_path() -> Path:
    """Return the rate table location, honouring ``FINSALARY_RATE_TABLE``."""

    override = os.getenv(RATE_TABLE_ENV, "").strip()
    if override:
        return Path(override).expanduser()
    return RATE_TABLE_FILE


def load_rate_table_from(path: Path) -> RateTable:
    """Load and validate the rate table stored at ``path``."""

    if not path.exists():
        raise FileNotFoundError(f"Rate table file missing: {path}")

    raw_table = _load_yaml(path)

    try:
        table = RateTable.model_validate(raw_table)
    except ValidationError as error:
        raise ConfigurationError(f"Rate table validation failed for {path.name}: {error}") from error

    _LOGGER.debug(
        "Loaded rate table %s (version %s, %d municipalities, %d brackets)",
        path,
        table.meta.version,
        len(table.municipal_rates),
        len(table.national_brackets),
    )
    return table


@lru_cache(maxsize=1)
def load_rate_table() -> RateTable:
    """Load and cache the rate table used by the HTTP layer."""

    return load_rate_table_from(resolve_rate_table_path())


__all__ = [
    "CONFIG_DIRECTORY",
    "ConfigurationError",
    "ContributionRates",
    "MunicipalityKey",
    "RATE_TABLE_ENV",
    "RATE_TABLE_FILE",
    "RateTable",
    "RateTableMeta",
    "TaxBracket",
    "load_rate_table",
    "load_rate_table_from",
    "normalise_municipality_key",
    "resolve_rate_table_path",
]
