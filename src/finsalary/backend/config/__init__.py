"""Rate table configuration: schema, loader and data-quality checks."""

from .keys import MunicipalityKey, normalise_municipality_key
from .rate_table import load_rate_table, load_rate_table_from
from .schema import ConfigurationError, ContributionRates, RateTable, RateTableMeta, TaxBracket

__all__ = [
    "ConfigurationError",
    "ContributionRates",
    "MunicipalityKey",
    "RateTable",
    "RateTableMeta",
    "TaxBracket",
    "load_rate_table",
    "load_rate_table_from",
    "normalise_municipality_key",
]
