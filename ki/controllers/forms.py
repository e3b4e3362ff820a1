"""
Provides forms for log on, registration and password changes.

Each form validates the raw values submitted by the user. Field names (as
opposed to Python attribute names) match the names of the inputs on the
account pages, and are the keys of :func:`error_map`. Errors that concern
the form as a whole are reported under :const:`FORM_ERRORS`.

Passwords are taken as entered: a password made of spaces is not missing.
"""

from typing import Any, Dict, List

from wtforms import BooleanField, Form, HiddenField, PasswordField, \
    StringField
from wtforms.validators import DataRequired, Length, ValidationError

FORM_ERRORS = '_FORM'

USERNAME_REQUIRED = 'You must specify a username.'
PASSWORD_REQUIRED = 'You must specify a password.'
EMAIL_REQUIRED = 'You must specify an email address.'
CURRENT_PASSWORD_REQUIRED = 'You must specify a current password.'
PASSWORD_TOO_SHORT = 'You must specify a password of {} or more characters.'
NEW_PASSWORD_TOO_SHORT = \
    'You must specify a new password of {} or more characters.'
PASSWORDS_DO_NOT_MATCH = \
    'The new password and confirmation password do not match.'

DEFAULT_MIN_PASSWORD_LENGTH = 6


def error_map(form: Form) -> Dict[str, List[str]]:
    """Get the errors on ``form``, keyed by field name."""
    errors = {field.name: list(field.errors) for field in form
              if field.errors}
    if form.form_errors:
        errors[FORM_ERRORS] = list(form.form_errors)
    return errors


class _PasswordPolicyForm(Form):
    """Checks a password against a minimum length, then its confirmation."""

    _password_field = 'password'
    _too_short = PASSWORD_TOO_SHORT

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        """Grab `min_password_length`, if provided."""
        self.min_password_length = kwargs.pop('min_password_length',
                                              DEFAULT_MIN_PASSWORD_LENGTH)
        super(_PasswordPolicyForm, self).__init__(*args, **kwargs)

    def check_password_length(self, field: PasswordField) -> None:
        """Password must be present and long enough."""
        if not field.data or len(field.data) < self.min_password_length:
            raise ValidationError(
                self._too_short.format(self.min_password_length)
            )

    def validate(self, extra_validators: Any = None) -> bool:
        """Only well-formed passwords are compared to the confirmation."""
        valid = super(_PasswordPolicyForm, self).validate(
            extra_validators=extra_validators
        )
        password = self[self._password_field]
        if not password.errors \
                and password.data != self.confirm_password.data:
            self.form_errors.append(PASSWORDS_DO_NOT_MATCH)
            return False
        return valid


class LogOnForm(Form):
    """Log on form."""

    username = StringField('Username', validators=[
        DataRequired(message=USERNAME_REQUIRED)
    ])
    password = PasswordField('Password', validators=[
        Length(min=1, message=PASSWORD_REQUIRED)
    ])
    remember_me = BooleanField('Remember me?', name='rememberMe')
    return_url = HiddenField(name='returnUrl')


class RegisterForm(_PasswordPolicyForm):
    """User registration form."""

    username = StringField('Username', validators=[
        DataRequired(message=USERNAME_REQUIRED)
    ])
    email = StringField('Email address', validators=[
        DataRequired(message=EMAIL_REQUIRED)
    ])
    password = PasswordField('Password')
    confirm_password = PasswordField('Confirm password',
                                     name='confirmPassword')

    def validate_password(self, field: PasswordField) -> None:
        """Verify that the password is long enough."""
        self.check_password_length(field)


class ChangePasswordForm(_PasswordPolicyForm):
    """Password change form."""

    _password_field = 'new_password'
    _too_short = NEW_PASSWORD_TOO_SHORT

    current_password = PasswordField('Current password', validators=[
        Length(min=1, message=CURRENT_PASSWORD_REQUIRED)
    ], name='currentPassword')
    new_password = PasswordField('New password', name='newPassword')
    confirm_password = PasswordField('Confirm new password',
                                     name='confirmPassword')

    def validate_new_password(self, field: PasswordField) -> None:
        """Verify that the new password is long enough."""
        self.check_password_length(field)
