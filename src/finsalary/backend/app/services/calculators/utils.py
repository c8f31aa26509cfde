"""Utility helpers for calculator modules."""

from __future__ import annotations

from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal

from finsalary.backend.config.schema import TaxBracket

NBSP = "\u00a0"


def calculate_progressive_tax(amount: float, brackets: Sequence[TaxBracket]) -> float:
    """Calculate progressive tax for ``amount`` using ``brackets``.

    Every bracket whose lower bound lies strictly below ``amount`` taxes the
    slice between that bound and ``min(amount, upper)`` at its own rate. An
    amount equal to a bracket's lower bound therefore owes nothing in it.
    """

    if amount <= 0:
        return 0.0

    total = 0.0
    for bracket in brackets:
        if amount <= bracket.minimum:
            continue
        upper = amount if bracket.maximum is None else min(amount, bracket.maximum)
        taxable = upper - bracket.minimum
        if taxable > 0:
            total += taxable * bracket.rate

    return total


def round_currency(value: float) -> float:
    """Round monetary amounts to two decimals."""

    return round(value, 2)


def round_rate(value: float) -> float:
    """Round rate values to four decimals."""

    return round(value, 4)


def format_currency(amount: float) -> str:
    """Return ``amount`` as whole euros in Finnish notation, e.g. ``50 000 €``.

    Digit groups and the currency sign are separated by no-break spaces and
    halves round away from zero.
    """

    rounded = int(Decimal(str(amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    sign = "-" if rounded < 0 else ""
    grouped = f"{abs(rounded):,}".replace(",", NBSP)
    return f"{sign}{grouped}{NBSP}€"


def format_percentage(value: float) -> str:
    """Return a percentage (already scaled to 0-100) with one decimal."""

    return f"{value:.1f}%"


def share_of(amount: float, total: float) -> float:
    """Return ``amount`` as a percentage of ``total``; zero when ``total`` is zero."""

    if total <= 0:
        return 0.0
    return amount / total * 100
