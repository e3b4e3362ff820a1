"""Application factory for the Ki app."""

import logging

from flask import Flask

from ki.app_logging import setup_logger
from ki.controllers.account import AccountController
from ki.routes import ui
from ki.services import datastore
from ki.services.authentication import FormsAuthenticationService
from ki.services.membership import AccountMembershipService


def create_web_app() -> Flask:
    """Initialize and configure the Ki application."""
    app = Flask('ki')
    app.config.from_pyfile('config.py')

    if not logging.getLogger().handlers:
        setup_logger(app.config['LOGLEVEL'], json=app.config['LOG_JSON'])

    datastore.init_app(app)

    provider = datastore.SqlMembershipProvider(
        application_name=app.config['MEMBERSHIP_APPLICATION_NAME'],
        min_required_password_length=app.config['MIN_REQUIRED_PASSWORD_LENGTH'],
        requires_unique_email=app.config['REQUIRES_UNIQUE_EMAIL']
    )
    app.extensions[ui.CONTROLLER_EXTENSION] = AccountController(
        FormsAuthenticationService(),
        AccountMembershipService(provider)
    )
    app.register_blueprint(ui.blueprint)

    if app.config['CREATE_DB']:
        with app.app_context():
            datastore.create_all()

    return app
