"""Test configuration utilities and shared fixtures."""

import sys
from pathlib import Path

# Ensure the ``src`` directory is importable when tests are executed without an
# editable install.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import pytest  # noqa: E402
from flask import Flask  # noqa: E402
from flask.testing import FlaskClient  # noqa: E402

from finsalary.backend.app import create_app  # noqa: E402
from finsalary.backend.config.rate_table import (  # noqa: E402
    RATE_TABLE_FILE,
    load_rate_table_from,
)
from finsalary.backend.config.schema import RateTable  # noqa: E402


@pytest.fixture()
def rate_table() -> RateTable:
    """Return the rate table shipped with the package."""

    return load_rate_table_from(RATE_TABLE_FILE)


@pytest.fixture()
def app(rate_table: RateTable) -> Flask:
    """Return a configured Flask application for integration tests."""

    application = create_app(rate_table)
    application.config.update(TESTING=True)
    return application


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    """Provide a test client bound to the configured Flask app."""

    return app.test_client()
