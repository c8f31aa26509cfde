"""Flask application serving FinSalary calculations and rate table data."""

from __future__ import annotations

import os
from warnings import warn

from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import BadRequest

from finsalary.backend.config.rate_table import load_rate_table
from finsalary.backend.config.schema import RateTable

from .errors import CalculationError
from .http import problem_from_error, problem_response
from .routes import register_routes
from .routes.config import RATE_TABLE_CONFIG_KEY, current_rate_table, get_configuration_metadata

ALLOWED_ORIGINS_ENV = "FINSALARY_ALLOWED_ORIGINS"


def allowed_origins_from_env() -> list[str]:
    """Return the CORS allow-list from ``FINSALARY_ALLOWED_ORIGINS``, sorted."""

    raw = os.getenv(ALLOWED_ORIGINS_ENV, "")
    return sorted({origin.strip() for origin in raw.split(",") if origin.strip()})


def _configure_cors(app: Flask) -> None:
    origins = allowed_origins_from_env()
    if not origins:
        warn(
            f"{ALLOWED_ORIGINS_ENV} is empty; browsers on other origins cannot call the API.",
            stacklevel=2,
        )

    # Only the JSON API is shared; /health stays same-origin.
    CORS(
        app,
        resources={r"/api/*": {"origins": origins}},
        methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Accept-Language"],
        supports_credentials=False,
    )


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(BadRequest)
    def handle_bad_request(error: BadRequest):
        message = error.description or "Malformed request"
        return problem_response("bad_request", status=400, message=message).to_response()

    @app.errorhandler(CalculationError)
    def handle_calculation_error(error: CalculationError):
        return problem_from_error(error).to_response()


def create_app(rate_table: RateTable | None = None) -> Flask:
    """Build the API around ``rate_table``.

    Without an explicit table the packaged one (or the file named by
    ``FINSALARY_RATE_TABLE``) is loaded once and shared read-only by every
    request.
    """

    app = Flask(__name__)
    app.config[RATE_TABLE_CONFIG_KEY] = rate_table if rate_table is not None else load_rate_table()

    _configure_cors(app)
    register_routes(app)
    _register_error_handlers(app)

    @app.get("/health")
    def health_check():
        """Report liveness together with the code and rate table versions."""

        metadata = get_configuration_metadata(current_rate_table())
        return jsonify(
            {
                "status": "ok",
                "version": metadata["version"],
                "rates_version": metadata["rates_version"],
                "last_updated": metadata["last_updated"],
            }
        )

    return app


__all__ = ["ALLOWED_ORIGINS_ENV", "allowed_origins_from_env", "create_app"]
