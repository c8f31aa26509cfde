"""Serve label catalogues to the calculator pages."""

from __future__ import annotations

from flask import Blueprint, jsonify, request

from finsalary.backend.app.localization import load_translations, negotiate_locale

blueprint = Blueprint("translations", __name__, url_prefix="/api/v1/translations")


@blueprint.get("/", defaults={"locale": None})
@blueprint.get("/<locale>")
def get_translations(locale: str | None):
    """Return the catalogue for the path locale, ``?locale=`` or ``Accept-Language``.

    Unpublished locales are answered with the Finnish catalogue.
    """

    requested = (
        locale
        or request.args.get("locale")
        or negotiate_locale(request.headers.get("Accept-Language"))
    )
    return jsonify(load_translations(requested)), 200
