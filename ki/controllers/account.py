"""
Controllers for log on, log off, registration and password changes.

Each workflow validates the submitted form first; only valid input reaches
the membership service. The outcome is either a redirect (the workflow
succeeded) or a :class:`.ViewResult` that redisplays the form with its
errors. Nothing is changed when a workflow fails.
"""

from typing import Callable, Dict, List, Optional, Union
import logging

from ..domain import CreateStatus, Identity, RedirectResult, \
    RedirectToRouteResult, ViewResult
from ..next_page import is_local_url
from ..services.authentication import FormsAuthenticationService
from ..services.membership import AccountMembershipService
from .forms import ChangePasswordForm, FORM_ERRORS, LogOnForm, \
    RegisterForm, error_map

logger = logging.getLogger(__name__)

ActionResult = Union[ViewResult, RedirectToRouteResult, RedirectResult]

INCORRECT_CREDENTIALS = 'The username or password provided is incorrect.'
CHANGE_PASSWORD_FAILED = \
    'The current password is incorrect or the new password is invalid.'

UNKNOWN_CREATE_ERROR = (
    'An unknown error occurred. Please verify your entry and try again. If'
    ' the problem persists, please contact your system administrator.'
)
CREATE_STATUS_MESSAGES = {
    CreateStatus.DUPLICATE_USER_NAME:
        'Username already exists. Please enter a different user name.',
    CreateStatus.DUPLICATE_EMAIL:
        'A username for that e-mail address already exists. Please enter a'
        ' different e-mail address.',
    CreateStatus.INVALID_PASSWORD:
        'The password provided is invalid. Please enter a valid password'
        ' value.',
    CreateStatus.INVALID_EMAIL:
        'The e-mail address provided is invalid. Please check the value and'
        ' try again.',
    CreateStatus.INVALID_ANSWER:
        'The password retrieval answer provided is invalid. Please check the'
        ' value and try again.',
    CreateStatus.INVALID_QUESTION:
        'The password retrieval question provided is invalid. Please check'
        ' the value and try again.',
    CreateStatus.INVALID_USER_NAME:
        'The user name provided is invalid. Please check the value and try'
        ' again.',
    CreateStatus.INVALID_PROVIDER_USER_KEY:
        'The user key provided is invalid. Please check the value and try'
        ' again.',
    CreateStatus.DUPLICATE_PROVIDER_USER_KEY:
        'The user key provided already exists. Please verify your entry and'
        ' try again.',
    CreateStatus.PROVIDER_ERROR:
        'The authentication provider returned an error. Please verify your'
        ' entry and try again. If the problem persists, please contact your'
        ' system administrator.',
    CreateStatus.USER_REJECTED:
        'The user creation request has been canceled. Please verify your'
        ' entry and try again. If the problem persists, please contact your'
        ' system administrator.',
}


def error_code_to_string(status: CreateStatus) -> str:
    """Get the message to show a user whose registration failed."""
    return CREATE_STATUS_MESSAGES.get(status, UNKNOWN_CREATE_ERROR)


def home() -> RedirectToRouteResult:
    """Redirect to the home page."""
    return RedirectToRouteResult({'controller': 'Home', 'action': 'Index'})


class AccountController(object):
    """
    Account workflows.

    Parameters
    ----------
    forms_auth : :class:`.FormsAuthenticationService`
        Issues and revokes the authentication cookie.
    membership_service : :class:`.AccountMembershipService`
        Creates and checks members.
    url_is_local : callable
        Decides whether a return URL may be followed after log on.

    """

    def __init__(self,
                 forms_auth: Optional[FormsAuthenticationService] = None,
                 membership_service: Optional[AccountMembershipService] = None,
                 url_is_local: Callable[[str], bool] = is_local_url) -> None:
        self.forms_auth = forms_auth or FormsAuthenticationService()
        self.membership_service = membership_service \
            or AccountMembershipService()
        self.url_is_local = url_is_local

    @property
    def password_length(self) -> int:
        """Shortest password accepted by the membership service."""
        return self.membership_service.min_password_length

    def show_log_on(self) -> ViewResult:
        """Provide the log on form."""
        return ViewResult('LogOn', {}, {})

    def log_on(self, username: Optional[str], password: Optional[str],
               remember_me: bool = False,
               return_url: Optional[str] = None) -> ActionResult:
        """
        Log a user on.

        Parameters
        ----------
        username : str
        password : str
        remember_me : bool
            Issue a persistent authentication cookie.
        return_url : str or None
            Page to which the user should be redirected upon log on; only
            followed if it is local to this application.

        Returns
        -------
        :class:`.RedirectResult` or :class:`.RedirectToRouteResult`
            If the user was logged on.
        :class:`.ViewResult`
            The log on form, with errors.

        """
        logger.debug('Log on form submitted')
        form = LogOnForm(data={'username': username, 'password': password,
                               'remember_me': remember_me,
                               'return_url': return_url})
        if not form.validate():
            logger.debug('Log on form is not valid')
            return ViewResult('LogOn', error_map(form), {})

        if not self.membership_service.validate_user(username, password):
            logger.debug('Authentication failed for %s', username)
            return ViewResult('LogOn',
                              {FORM_ERRORS: [INCORRECT_CREDENTIALS]}, {})

        self.forms_auth.sign_in(username, remember_me)
        if return_url and self.url_is_local(return_url):
            return RedirectResult(return_url)
        return home()

    def log_off(self) -> RedirectToRouteResult:
        """Log the user off, and redirect home."""
        logger.debug('Request to log off')
        self.forms_auth.sign_out()
        return home()

    def show_register(self) -> ViewResult:
        """Provide the registration form."""
        return ViewResult('Register', {},
                          {'password_length': self.password_length})

    def register(self, username: Optional[str], email: Optional[str],
                 password: Optional[str],
                 confirm_password: Optional[str]) -> ActionResult:
        """Create a new account, then log the new user on."""
        logger.debug('Registration form submitted')
        view_data = {'password_length': self.password_length}
        form = RegisterForm(data={'username': username, 'email': email,
                                  'password': password,
                                  'confirm_password': confirm_password},
                            min_password_length=self.password_length)
        if not form.validate():
            logger.debug('Registration form is not valid')
            return ViewResult('Register', error_map(form), view_data)

        result = self.membership_service.create_user(username, password,
                                                     email)
        if not result.succeeded:
            errors: Dict[str, List[str]] = {
                FORM_ERRORS: [error_code_to_string(result.status)]
            }
            return ViewResult('Register', errors, view_data)

        logger.debug('Registered %s', username)
        self.forms_auth.sign_in(username, False)
        return home()

    def show_change_password(self,
                             identity: Optional[Identity]) -> ActionResult:
        """Provide the password change form."""
        if not _is_authenticated(identity):
            return _log_on_first()
        return ViewResult('ChangePassword', {},
                          {'password_length': self.password_length})

    def change_password(self, identity: Optional[Identity],
                        current_password: Optional[str],
                        new_password: Optional[str],
                        confirm_password: Optional[str]) -> ActionResult:
        """
        Change the password of the authenticated user.

        Parameters
        ----------
        identity : :class:`.Identity`
            The user making the request. Anonymous users are sent to the
            log on page.

        """
        if not _is_authenticated(identity):
            return _log_on_first()

        logger.debug('Password change form submitted by %s', identity.name)
        view_data = {'password_length': self.password_length}
        form = ChangePasswordForm(
            data={'current_password': current_password,
                  'new_password': new_password,
                  'confirm_password': confirm_password},
            min_password_length=self.password_length
        )
        if not form.validate():
            logger.debug('Password change form is not valid')
            return ViewResult('ChangePassword', error_map(form), view_data)

        if not self.membership_service.change_password(identity.name,
                                                       current_password,
                                                       new_password):
            return ViewResult('ChangePassword',
                              {FORM_ERRORS: [CHANGE_PASSWORD_FAILED]},
                              view_data)

        logger.debug('Password changed for %s', identity.name)
        return RedirectToRouteResult({'controller': 'Account',
                                      'action': 'ChangePasswordSuccess'})

    def change_password_success(self) -> ViewResult:
        """Confirm that the password was changed."""
        return ViewResult('ChangePasswordSuccess', {}, {})


def _is_authenticated(identity: Optional[Identity]) -> bool:
    return identity is not None and identity.is_authenticated


def _log_on_first() -> RedirectToRouteResult:
    return RedirectToRouteResult({'controller': 'Account', 'action': 'LogOn'})
