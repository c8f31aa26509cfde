"""WSGI entrypoint for deploying the FinSalary backend behind Passenger or gunicorn."""

from finsalary.backend.app import create_app

# Passenger looks for a module-level variable named ``application``.
application = create_app()
