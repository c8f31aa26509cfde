"""REST endpoints for salary calculations."""

from __future__ import annotations

from typing import Any

from flask import Blueprint, jsonify, request

from finsalary.backend.app.services.calculation_service import calculate_salary
from finsalary.backend.app.services.request_parser import parse_calculation_payload

from .config import current_rate_table

blueprint = Blueprint("calculations", __name__, url_prefix="/api/v1")


@blueprint.post("/calculations")
def create_calculation() -> tuple[Any, int]:
    """Compute a salary breakdown from the submitted JSON payload."""

    payload = parse_calculation_payload(request)
    result = calculate_salary(payload, current_rate_table())

    return jsonify(result), 200
