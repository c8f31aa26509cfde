"""Pydantic models describing the rate table schema."""

from __future__ import annotations

from datetime import datetime
from types import MappingProxyType
from typing import Any, Literal, Mapping, Sequence

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)
from typing_extensions import Self

from .keys import MunicipalityKey, normalise_municipality_key


class ConfigurationError(ValueError):
    """Raised when rate table values violate schema expectations."""


class ImmutableModel(BaseModel):
    """Base class that freezes instances and rejects unknown fields."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


# Field names emitted by the data refresh tooling before the schema settled on
# snake_case. They are accepted on load and mapped onto the canonical names.
_LEGACY_TABLE_KEYS = {
    "nationalBrackets": "national_brackets",
    "municipalRates": "municipal_rates",
    "municipalityNames": "municipality_names",
    "defaultMunicipality": "default_municipality",
    "metadata": "meta",
}
_LEGACY_CONTRIBUTION_KEYS = {
    "TyEL": "employee_pension",
    "YEL": "self_employed_pension",
    "healthInsurance": "health_insurance",
    "unemploymentInsurance": "unemployment_insurance",
}
_LEGACY_META_KEYS = {
    "lastUpdated": "last_updated",
    "dataSources": "data_sources",
    "schemaVersion": "schema_version",
    "rateFormat": "rate_format",
}


def _rename_keys(data: Mapping[str, Any], renames: Mapping[str, str]) -> dict[str, Any]:
    prepared: dict[str, Any] = {}
    for key, value in data.items():
        canonical = renames.get(key, key)
        if canonical in prepared:
            raise ConfigurationError(f"Duplicate definitions for '{canonical}'")
        prepared[canonical] = value
    return prepared


class TaxBracket(ImmutableModel):
    """A contiguous income range taxed at a single marginal rate."""

    minimum: float = Field(alias="min")
    maximum: float | None = Field(default=None, alias="max")
    rate: float

    @model_validator(mode="after")
    def _validate_values(self) -> Self:
        if self.rate < 0:
            raise ConfigurationError("Tax rates must be non-negative")
        if self.minimum < 0:
            raise ConfigurationError("Bracket lower bounds must be non-negative")
        if self.maximum is not None and self.maximum < self.minimum:
            raise ConfigurationError("Bracket upper bounds must not be below the lower bound")
        return self

    @property
    def is_unbounded(self) -> bool:
        return self.maximum is None

    def contains(self, income: float) -> bool:
        """Return ``True`` when ``income`` lies inside this bracket (bounds inclusive)."""

        if income < self.minimum:
            return False
        return self.maximum is None or income <= self.maximum


class ContributionRates(ImmutableModel):
    """Flat social contribution rates applied to gross salary."""

    employee_pension: float
    self_employed_pension: float
    health_insurance: float
    unemployment_insurance: float

    @model_validator(mode="before")
    @classmethod
    def _accept_legacy_names(cls, data: Any) -> Any:
        if isinstance(data, ContributionRates):
            return data
        if isinstance(data, Mapping):
            return _rename_keys(data, _LEGACY_CONTRIBUTION_KEYS)
        raise ConfigurationError("'contributions' section must be a mapping")

    @model_validator(mode="after")
    def _validate_rates(self) -> Self:
        for name in (
            "employee_pension",
            "self_employed_pension",
            "health_insurance",
            "unemployment_insurance",
        ):
            if getattr(self, name) < 0:
                raise ConfigurationError(f"Contribution rate '{name}' must be non-negative")
        return self


class RateTableMeta(ImmutableModel):
    """Provenance metadata recorded by the data refresh tooling."""

    last_updated: datetime | None = None
    data_sources: Sequence[str] = Field(default_factory=tuple)
    version: str = "0.0.0"
    schema_version: int = 1
    rate_format: Literal["fraction", "percentage"] = "fraction"

    @model_validator(mode="before")
    @classmethod
    def _accept_legacy_names(cls, data: Any) -> Any:
        if data is None:
            return {}
        if isinstance(data, RateTableMeta):
            return data
        if isinstance(data, Mapping):
            return _rename_keys(data, _LEGACY_META_KEYS)
        raise ConfigurationError("'meta' section must be a mapping if provided")

    @field_validator("data_sources", mode="before")
    @classmethod
    def _coerce_sources(cls, value: Any) -> Sequence[str]:
        if value is None:
            return ()
        if isinstance(value, str):
            return (value,)
        if isinstance(value, Sequence):
            return tuple(str(entry) for entry in value)
        raise ConfigurationError("'data_sources' must be a list of URLs")


def _scale_percentages(prepared: dict[str, Any]) -> None:
    """Convert whole-number percentages to fractions in place."""

    brackets = prepared.get("national_brackets")
    if isinstance(brackets, Sequence):
        scaled_brackets = []
        for bracket in brackets:
            if isinstance(bracket, Mapping) and "rate" in bracket:
                bracket = {**bracket, "rate": float(bracket["rate"]) / 100}
            scaled_brackets.append(bracket)
        prepared["national_brackets"] = scaled_brackets

    rates = prepared.get("municipal_rates")
    if isinstance(rates, Mapping):
        prepared["municipal_rates"] = {
            key: float(value) / 100 for key, value in rates.items()
        }

    contributions = prepared.get("contributions")
    if isinstance(contributions, Mapping):
        prepared["contributions"] = {
            key: float(value) / 100
            for key, value in _rename_keys(contributions, _LEGACY_CONTRIBUTION_KEYS).items()
        }


class RateTable(ImmutableModel):
    """Immutable reference data consumed by the tax breakdown calculator.

    Rates are always stored as fractions (``0.176`` for 17.6 %). Files declaring
    ``meta.rate_format: percentage`` are scaled while loading and re-labelled as
    fractions, so downstream code never needs to check the representation.
    """

    national_brackets: Sequence[TaxBracket]
    municipal_rates: Mapping[str, float]
    contributions: ContributionRates
    municipality_names: Mapping[str, str] = Field(default_factory=dict)
    default_municipality: str | None = None
    meta: RateTableMeta = Field(default_factory=RateTableMeta)

    @model_validator(mode="before")
    @classmethod
    def _prepare(cls, data: Any) -> Mapping[str, Any]:
        if not isinstance(data, Mapping):
            raise ConfigurationError("Rate table must define a mapping at the top level")

        prepared = _rename_keys(data, _LEGACY_TABLE_KEYS)

        meta = prepared.get("meta")
        if meta is None:
            meta = {}
        elif isinstance(meta, RateTableMeta):
            meta = meta.model_dump()
        elif isinstance(meta, Mapping):
            meta = _rename_keys(meta, _LEGACY_META_KEYS)
        else:
            raise ConfigurationError("'meta' section must be a mapping if provided")

        if meta.get("rate_format") == "percentage":
            _scale_percentages(prepared)
            meta["rate_format"] = "fraction"
        prepared["meta"] = meta

        rates = prepared.get("municipal_rates")
        if not isinstance(rates, Mapping) or not rates:
            raise ConfigurationError("Rate table requires a non-empty 'municipal_rates' mapping")
        prepared["municipal_rates"] = cls._normalise_keys(rates, "municipal_rates")

        names = prepared.get("municipality_names")
        if names is None:
            prepared["municipality_names"] = {}
        elif isinstance(names, Mapping):
            prepared["municipality_names"] = cls._normalise_keys(names, "municipality_names")
        else:
            raise ConfigurationError("'municipality_names' must be a mapping when provided")

        default = prepared.get("default_municipality")
        if default is not None:
            prepared["default_municipality"] = normalise_municipality_key(str(default))

        return prepared

    @staticmethod
    def _normalise_keys(values: Mapping[Any, Any], section: str) -> dict[str, Any]:
        normalised: dict[str, Any] = {}
        for raw_key, value in values.items():
            key = normalise_municipality_key(str(raw_key))
            if not key:
                raise ConfigurationError(f"Empty municipality key in '{section}': {raw_key!r}")
            if key in normalised:
                raise ConfigurationError(
                    f"Municipality keys collide after normalisation in '{section}': {key}"
                )
            normalised[key] = value
        return normalised

    @field_validator("national_brackets", mode="after")
    @classmethod
    def _freeze_brackets(cls, value: Sequence[TaxBracket]) -> tuple[TaxBracket, ...]:
        return tuple(value)

    @field_validator("municipal_rates", "municipality_names", mode="after")
    @classmethod
    def _freeze_mapping(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return MappingProxyType(dict(value))

    @model_validator(mode="after")
    def _validate_table(self) -> Self:
        self._validate_bracket_sequence(self.national_brackets)

        for key, rate in self.municipal_rates.items():
            if rate < 0:
                raise ConfigurationError(f"Municipal rate for '{key}' must be non-negative")

        unknown_names = set(self.municipality_names) - set(self.municipal_rates)
        if unknown_names:
            raise ConfigurationError(
                "Display names declared for municipalities without rates: "
                + ", ".join(sorted(unknown_names))
            )

        if (
            self.default_municipality is not None
            and self.default_municipality not in self.municipal_rates
        ):
            raise ConfigurationError(
                f"Default municipality '{self.default_municipality}' has no municipal rate"
            )
        return self

    @staticmethod
    def _validate_bracket_sequence(brackets: Sequence[TaxBracket]) -> None:
        if not brackets:
            raise ConfigurationError("At least one national tax bracket must be defined")
        if brackets[0].minimum != 0:
            raise ConfigurationError("The first national tax bracket must start at 0")
        previous: TaxBracket | None = None
        for bracket in brackets:
            if previous is not None:
                if previous.maximum is None:
                    raise ConfigurationError("Only the final tax bracket may be unbounded")
                if bracket.minimum < previous.maximum:
                    raise ConfigurationError("Tax brackets must be ascending and non-overlapping")
            previous = bracket
        if brackets[-1].maximum is not None:
            raise ConfigurationError("Final tax bracket must have an open upper bound")

    def municipal_rate(self, key: MunicipalityKey) -> float | None:
        """Return the flat rate for an already normalised key, if declared."""

        return self.municipal_rates.get(key)

    def display_name(self, key: MunicipalityKey) -> str:
        """Return the human-readable municipality name for ``key``."""

        return self.municipality_names.get(key) or key[:1].upper() + key[1:]

    @property
    def municipality_keys(self) -> tuple[str, ...]:
        return tuple(self.municipal_rates)


__all__ = [
    "ConfigurationError",
    "ContributionRates",
    "ImmutableModel",
    "RateTable",
    "RateTableMeta",
    "TaxBracket",
    "ValidationError",
]
