"""Domain errors raised by the tax breakdown calculator."""

from __future__ import annotations


class CalculationError(ValueError):
    """Base class for errors reported back to calculation callers."""

    error_code = "validation_error"


class InvalidInput(CalculationError):
    """Raised for negative, non-finite or non-numeric salary inputs."""


class InvalidMunicipality(CalculationError):
    """Raised when a municipality is unknown and no fallback is configured."""

    error_code = "unknown_municipality"

    def __init__(self, municipality: str) -> None:
        super().__init__(f"Unknown municipality: {municipality!r}")
        self.municipality = municipality


__all__ = ["CalculationError", "InvalidInput", "InvalidMunicipality"]
