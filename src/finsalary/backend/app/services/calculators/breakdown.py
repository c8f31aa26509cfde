"""Annual tax breakdown for a single salary."""

from __future__ import annotations

import math
from decimal import Decimal
from numbers import Real

from finsalary.backend.app.errors import InvalidInput
from finsalary.backend.app.models import MonthlyView, SalaryInput, TaxBreakdown
from finsalary.backend.config.schema import RateTable

from .municipal import resolve_municipality
from .utils import calculate_progressive_tax


def _validate_amount(value: object, field_name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (Real, Decimal)):
        raise InvalidInput(f"Field '{field_name}' must be a number")
    amount = float(value)
    if not math.isfinite(amount):
        raise InvalidInput(f"Field '{field_name}' must be a finite number")
    if amount < 0:
        raise InvalidInput(f"Field '{field_name}' cannot be negative")
    return amount


def compute_breakdown(salary: SalaryInput, rates: RateTable) -> TaxBreakdown:
    """Compute national and municipal tax plus contributions for ``salary``.

    Deductions are added back to the net salary after tax. They never lower
    the taxable income, so bracket placement ignores them.
    """

    gross = _validate_amount(salary.gross_salary, "gross_salary")
    deductions = _validate_amount(salary.deduction_amount, "deduction_amount")
    if not isinstance(salary.municipality, str):
        raise InvalidInput("Field 'municipality' must be a string")

    municipality = resolve_municipality(salary.municipality, rates)
    contributions = rates.contributions

    national_tax = calculate_progressive_tax(gross, rates.national_brackets)
    municipal_tax = gross * municipality.rate

    if salary.self_employed:
        employee_pension = 0.0
        self_employed_pension = gross * contributions.self_employed_pension
    else:
        employee_pension = gross * contributions.employee_pension
        self_employed_pension = 0.0

    unemployment_insurance = gross * contributions.unemployment_insurance
    health_insurance = gross * contributions.health_insurance

    total_taxes = (
        national_tax
        + municipal_tax
        + employee_pension
        + self_employed_pension
        + unemployment_insurance
        + health_insurance
    )
    net_salary = gross - total_taxes + deductions
    effective_tax_rate = total_taxes / gross * 100 if gross > 0 else 0.0

    return TaxBreakdown(
        gross_salary=gross,
        national_tax=national_tax,
        municipal_tax=municipal_tax,
        employee_pension=employee_pension,
        self_employed_pension=self_employed_pension,
        unemployment_insurance=unemployment_insurance,
        health_insurance=health_insurance,
        total_taxes=total_taxes,
        net_salary=net_salary,
        effective_tax_rate=effective_tax_rate,
        deductions=deductions,
        self_employed=bool(salary.self_employed),
        municipality=municipality.key,
        municipal_rate=municipality.rate,
        municipality_fallback=municipality.fallback_used,
    )


def compute_monthly_breakdown(salary: SalaryInput, rates: RateTable) -> MonthlyView:
    """Return :func:`compute_breakdown` with gross, net and tax split over 12 months."""

    return MonthlyView.from_breakdown(compute_breakdown(salary, rates))


__all__ = ["compute_breakdown", "compute_monthly_breakdown"]
