"""Blueprints making up the ``/api/v1`` surface."""

from flask import Flask

from . import calculations, config, localization

BLUEPRINTS = (calculations.blueprint, config.blueprint, localization.blueprint)


def register_routes(app: Flask) -> None:
    """Attach the calculation, rate table and translation blueprints to ``app``."""

    for blueprint in BLUEPRINTS:
        app.register_blueprint(blueprint)
