"""Provides Flask integration for the external user interface."""

from typing import Any
from http import HTTPStatus
import logging

from flask import Blueprint, current_app, jsonify, make_response, redirect, \
    request, url_for, Response

from ..controllers import home
from ..controllers.account import AccountController, ActionResult
from ..domain import RedirectResult, RedirectToRouteResult
from ..services.authentication import current_identity
from ..services.exceptions import Unavailable

logger = logging.getLogger(__name__)
blueprint = Blueprint('ui', __name__, url_prefix='')

CONTROLLER_EXTENSION = 'ki.account_controller'


def get_controller() -> AccountController:
    """Get the account controller configured for this application."""
    controller: AccountController = \
        current_app.extensions[CONTROLLER_EXTENSION]
    return controller


def endpoint_for(controller: str, action: str) -> str:
    """Endpoint name for a controller action, e.g. ``Account_LogOn``."""
    return f'{controller}_{action}'


def to_response(result: ActionResult) -> Response:
    """Turn the result of a controller action into a response."""
    if isinstance(result, RedirectResult):
        logger.debug('Redirecting to %s', result.url)
        return redirect(result.url, code=HTTPStatus.SEE_OTHER)
    if isinstance(result, RedirectToRouteResult):
        values = dict(result.route_values)
        endpoint = endpoint_for(values.pop('controller'),
                                values.pop('action'))
        location = url_for(f'{blueprint.name}.{endpoint}', **values)
        logger.debug('Redirecting to %s', location)
        return redirect(location, code=HTTPStatus.SEE_OTHER)
    code = HTTPStatus.OK if result.is_valid else HTTPStatus.BAD_REQUEST
    content = jsonify(view=result.view_name, errors=result.errors,
                      view_data=result.view_data)
    return make_response(content, code)


def _as_bool(value: Any) -> bool:
    # Checkbox helpers post "true,false" when checked.
    return str(value).split(',')[0].strip().lower() in ('true', 'on', '1')


@blueprint.after_request
def apply_response_headers(response: Response) -> Response:
    """Prevent UI redress attacks."""
    response.headers['Content-Security-Policy'] = "frame-ancestors 'none'"
    response.headers['X-Frame-Options'] = 'DENY'
    return response


@blueprint.errorhandler(Unavailable)
def handle_unavailable(error: Unavailable) -> Response:
    """The database could not be reached."""
    logger.error('Service unavailable: %s', error)
    content = jsonify(reason='Service temporarily unavailable')
    return make_response(content, HTTPStatus.SERVICE_UNAVAILABLE)


@blueprint.route('/Home/Index', methods=['GET'], endpoint='Home_Index')
@blueprint.route('/', methods=['GET'], endpoint='Home_Index')
def index() -> Response:
    """Home page."""
    return to_response(home.index())


@blueprint.route('/Account/LogOn', methods=['GET', 'POST'],
                 endpoint='Account_LogOn')
def log_on() -> Response:
    """User can log on with username and password."""
    controller = get_controller()
    if request.method == 'GET':
        return to_response(controller.show_log_on())
    return_url = request.values.get('returnUrl')
    logger.debug('Request to log on, then redirect to %s', return_url)
    result = controller.log_on(request.form.get('username'),
                               request.form.get('password'),
                               _as_bool(request.form.get('rememberMe')),
                               return_url)
    return to_response(result)


@blueprint.route('/Account/LogOff', methods=['GET'],
                 endpoint='Account_LogOff')
def log_off() -> Response:
    """Log out of Ki."""
    return to_response(get_controller().log_off())


@blueprint.route('/Account/Register', methods=['GET', 'POST'],
                 endpoint='Account_Register')
def register() -> Response:
    """Interface for creating new accounts."""
    controller = get_controller()
    if request.method == 'GET':
        return to_response(controller.show_register())
    result = controller.register(request.form.get('username'),
                                 request.form.get('email'),
                                 request.form.get('password'),
                                 request.form.get('confirmPassword'))
    return to_response(result)


@blueprint.route('/Account/ChangePassword', methods=['GET', 'POST'],
                 endpoint='Account_ChangePassword')
def change_password() -> Response:
    """Authenticated users can change their password."""
    controller = get_controller()
    identity = current_identity()
    if request.method == 'GET':
        return to_response(controller.show_change_password(identity))
    result = controller.change_password(identity,
                                        request.form.get('currentPassword'),
                                        request.form.get('newPassword'),
                                        request.form.get('confirmPassword'))
    return to_response(result)


@blueprint.route('/Account/ChangePasswordSuccess', methods=['GET'],
                 endpoint='Account_ChangePasswordSuccess')
def change_password_success() -> Response:
    """Confirmation that the password was changed."""
    return to_response(get_controller().change_password_success())
