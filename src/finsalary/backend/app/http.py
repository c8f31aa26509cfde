"""JSON error payloads returned by the API."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from flask import jsonify

from finsalary.backend.app.errors import CalculationError, InvalidMunicipality


@dataclass(frozen=True)
class ProblemResponse:
    """An RFC 7807-style error: a machine-readable code plus optional context.

    ``context`` entries are merged into the top level of the payload, e.g. the
    rejected ``municipality`` of an ``unknown_municipality`` error.
    """

    error: str
    status: int
    message: str | None = None
    context: Mapping[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.error, "status": self.status}
        if self.message:
            payload["message"] = self.message
        payload.update(self.context)
        return payload

    def to_response(self) -> tuple[Any, int]:
        return jsonify(self.as_dict()), self.status


def problem_response(
    error: str,
    *,
    status: int,
    message: str | None = None,
    **context: Any,
) -> ProblemResponse:
    """Build a :class:`ProblemResponse`; keyword arguments become ``context``."""

    return ProblemResponse(error=error, status=status, message=message, context=context)


def problem_from_error(error: CalculationError) -> ProblemResponse:
    """Report a rejected calculation as a 400 keyed by the error's code."""

    context: dict[str, Any] = {}
    if isinstance(error, InvalidMunicipality):
        context["municipality"] = error.municipality
    return problem_response(error.error_code, status=400, message=str(error), **context)


__all__ = ["ProblemResponse", "problem_from_error", "problem_response"]
