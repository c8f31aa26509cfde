"""Extract calculation payloads from incoming Flask requests."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from flask import Request
from werkzeug.exceptions import BadRequest

from finsalary.backend.app.localization import negotiate_locale, normalise_locale


def _requested_locale(req: Request, payload: Mapping[str, Any]) -> str | None:
    """Return the locale hint with the highest precedence, if any.

    The body's ``locale`` wins over ``?locale=``, which wins over the
    ``Accept-Language`` header.
    """

    explicit = payload.get("locale")
    if isinstance(explicit, str) and explicit.strip():
        return normalise_locale(explicit)

    query = req.args.get("locale", "").strip()
    if query:
        return normalise_locale(query)

    return negotiate_locale(req.headers.get("Accept-Language"))


def parse_calculation_payload(req: Request) -> dict[str, Any]:
    """Return the request's JSON object with its locale resolved.

    Raises :class:`~werkzeug.exceptions.BadRequest` when the body is not a
    JSON object; field validation is left to the calculation service.
    """

    data = req.get_json(silent=True)
    if data is None:
        raise BadRequest("Request body must be valid JSON")
    if not isinstance(data, Mapping):
        raise BadRequest("Request JSON must be an object")

    payload = dict(data)
    locale = _requested_locale(req, payload)
    if locale is not None:
        payload["locale"] = locale

    return payload
