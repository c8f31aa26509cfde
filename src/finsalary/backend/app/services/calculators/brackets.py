"""Lookups over the national bracket table."""

from __future__ import annotations

from collections.abc import Sequence

from finsalary.backend.config.schema import TaxBracket

from .utils import format_currency, format_percentage

NO_NATIONAL_TAX_LABEL = "No national tax"


def find_bracket(income: float, brackets: Sequence[TaxBracket]) -> TaxBracket | None:
    """Return the bracket whose inclusive range contains ``income``.

    Tables that continue one euro after the previous upper bound leave
    fractional gaps (e.g. ``19 999.50``); such incomes belong to no bracket.
    """

    return next((bracket for bracket in brackets if bracket.contains(income)), None)


def describe_bracket(
    income: float,
    brackets: Sequence[TaxBracket],
    none_label: str = NO_NATIONAL_TAX_LABEL,
) -> str:
    """Label the highest bracket whose lower bound lies below ``income``."""

    for bracket in reversed(brackets):
        if income > bracket.minimum:
            rate = format_percentage(bracket.rate * 100)
            lower = format_currency(bracket.minimum)
            if bracket.maximum is None:
                return f"{lower}+ ({rate})"
            return f"{lower} - {format_currency(bracket.maximum)} ({rate})"
    return none_label


__all__ = ["NO_NATIONAL_TAX_LABEL", "describe_bracket", "find_bracket"]
