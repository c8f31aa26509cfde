"""Pydantic models for the calculation endpoint's request and response bodies."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

__all__ = [
    "CalculationRequest",
    "CalculationResponse",
    "DetailEntry",
    "FormattedSummary",
    "ResponseMeta",
    "Summary",
    "SummaryLabels",
    "format_validation_error",
]


class _StrictModel(BaseModel):
    model_config = ConfigDict(extra="forbid")


class CalculationRequest(_StrictModel):
    """A salary to break down: annual EUR amounts and a municipality name or key."""

    gross_salary: float = Field(..., ge=0, allow_inf_nan=False)
    municipality: str = Field(..., min_length=1)
    self_employed: bool = False
    deduction_amount: float = Field(default=0.0, ge=0, allow_inf_nan=False)
    locale: str | None = None

    @field_validator("gross_salary", "deduction_amount", mode="before")
    @classmethod
    def _numbers_only(cls, value: Any) -> Any:
        # ``True`` would otherwise be accepted as 1 EUR.
        if isinstance(value, bool):
            raise ValueError("value must be a number")
        return value

    @field_validator("deduction_amount", mode="before")
    @classmethod
    def _null_deduction_is_zero(cls, value: Any) -> Any:
        return 0.0 if value is None else value

    @field_validator("municipality")
    @classmethod
    def _strip_municipality(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("municipality cannot be blank")
        return stripped


class SummaryLabels(_StrictModel):
    """Localised caption for each summary figure."""

    gross_salary: str
    total_taxes: str
    net_salary: str
    effective_tax_rate: str
    deductions: str
    gross_monthly: str
    net_monthly: str
    tax_monthly: str


class FormattedSummary(_StrictModel):
    """Summary figures as Finnish display strings (``50 000 €``, ``32.5%``)."""

    gross_salary: str
    total_taxes: str
    net_salary: str
    effective_tax_rate: str
    deductions: str
    gross_monthly: str
    net_monthly: str
    tax_monthly: str


class Summary(_StrictModel):
    """Rounded totals of a breakdown with their captions and display strings."""

    gross_salary: float
    total_taxes: float
    net_salary: float
    effective_tax_rate: float
    deductions: float
    gross_monthly: float
    net_monthly: float
    tax_monthly: float
    labels: SummaryLabels
    formatted: FormattedSummary


class DetailEntry(_StrictModel):
    """One tax or contribution line and its share of gross salary (percent)."""

    category: str
    label: str
    amount: float
    share: float
    formatted_amount: str
    formatted_share: str


class ResponseMeta(_StrictModel):
    """How the request was resolved: locale, municipality, bracket and rate table version."""

    locale: str
    municipality: str
    municipality_name: str
    municipal_rate: float
    municipality_fallback: bool
    self_employed: bool
    tax_bracket: str
    rates_version: str
    rates_last_updated: str | None = None


class CalculationResponse(_StrictModel):
    summary: Summary
    details: list[DetailEntry]
    meta: ResponseMeta


def format_validation_error(error: ValidationError) -> str:
    """Flatten ``error`` into ``"field: problem; field: problem"`` for API clients."""

    problems: list[str] = []
    for issue in error.errors():
        field_path = ".".join(str(part) for part in issue.get("loc", ()))
        message = issue.get("msg", "Invalid value")
        if issue.get("type") == "greater_than_equal":
            message = "value cannot be negative"
        problems.append(f"{field_path}: {message}" if field_path else message)

    return "Invalid calculation payload: " + ("; ".join(problems) or str(error))
