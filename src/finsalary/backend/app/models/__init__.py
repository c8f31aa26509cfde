"""Typed request/response models shared across the calculation services.

Pydantic models in :mod:`.api` validate what crosses the HTTP boundary. The
calculator itself works on the small frozen dataclasses below: a
:class:`SalaryInput` goes in, a :class:`TaxBreakdown` comes out, and
:class:`MonthlyView` divides the annual figures for display. None of them are
cached or persisted; each calculation builds fresh instances.
"""

from __future__ import annotations

from dataclasses import dataclass

from .api import (
    CalculationRequest,
    CalculationResponse,
    DetailEntry,
    FormattedSummary,
    ResponseMeta,
    Summary,
    SummaryLabels,
    format_validation_error,
)

__all__ = [
    "CalculationRequest",
    "CalculationResponse",
    "DetailEntry",
    "FormattedSummary",
    "MonthlyView",
    "ResponseMeta",
    "SalaryInput",
    "Summary",
    "SummaryLabels",
    "TaxBreakdown",
    "format_validation_error",
]

MONTHS_PER_YEAR = 12


@dataclass(frozen=True)
class SalaryInput:
    """A single calculation request, in EUR per year."""

    gross_salary: float
    municipality: str
    self_employed: bool = False
    deduction_amount: float = 0.0

    @classmethod
    def from_request(cls, request: CalculationRequest) -> SalaryInput:
        return cls(
            gross_salary=request.gross_salary,
            municipality=request.municipality,
            self_employed=request.self_employed,
            deduction_amount=request.deduction_amount,
        )


@dataclass(frozen=True)
class TaxBreakdown:
    """Annual taxes and contributions derived from a :class:`SalaryInput`.

    ``total_taxes`` is the sum of the five components and ``net_salary`` is
    ``gross_salary - total_taxes + deductions``. Only one of the pension
    fields is ever non-zero. ``effective_tax_rate`` is a percentage.
    """

    gross_salary: float
    national_tax: float
    municipal_tax: float
    employee_pension: float
    self_employed_pension: float
    unemployment_insurance: float
    health_insurance: float
    total_taxes: float
    net_salary: float
    effective_tax_rate: float
    deductions: float
    self_employed: bool
    municipality: str
    municipal_rate: float
    municipality_fallback: bool = False

    @property
    def pension_contribution(self) -> float:
        return self.employee_pension + self.self_employed_pension


@dataclass(frozen=True)
class MonthlyView:
    """Monthly gross, net and tax amounts wrapping an annual breakdown."""

    gross_monthly: float
    net_monthly: float
    tax_monthly: float
    breakdown: TaxBreakdown

    @classmethod
    def from_breakdown(cls, breakdown: TaxBreakdown) -> MonthlyView:
        return cls(
            gross_monthly=breakdown.gross_salary / MONTHS_PER_YEAR,
            net_monthly=breakdown.net_salary / MONTHS_PER_YEAR,
            tax_monthly=breakdown.total_taxes / MONTHS_PER_YEAR,
            breakdown=breakdown,
        )
