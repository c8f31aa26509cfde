"""Domain-specific calculation helpers."""

from .brackets import describe_bracket, find_bracket
from .breakdown import compute_breakdown, compute_monthly_breakdown
from .municipal import (
    MunicipalityLookup,
    list_municipalities,
    municipality_statistics,
    resolve_municipality,
)
from .utils import (
    calculate_progressive_tax,
    format_currency,
    format_percentage,
    round_currency,
    round_rate,
    share_of,
)

__all__ = [
    "MunicipalityLookup",
    "calculate_progressive_tax",
    "compute_breakdown",
    "compute_monthly_breakdown",
    "describe_bracket",
    "find_bracket",
    "format_currency",
    "format_percentage",
    "list_municipalities",
    "municipality_statistics",
    "resolve_municipality",
    "round_currency",
    "round_rate",
    "share_of",
]
