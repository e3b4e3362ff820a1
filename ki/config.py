"""Flask configuration."""
import secrets
import os

#################### General config for app ####################
SECRET_KEY = os.environ.get('SECRET_KEY', secrets.token_urlsafe(16))
"""Sets the `Flask` secret key used to sign the session cookie.

The session cookie carries the authenticated username, so this must be set
explicitly in any deployment with more than one worker."""

APPLICATION_ROOT = os.environ.get('APPLICATION_ROOT', '/')


#################### Database ####################
DATABASE_URI = os.environ.get('DATABASE_URI', 'sqlite:///ki.db')
"""Connection string for the blog database."""

SQLALCHEMY_DATABASE_URI = DATABASE_URI

SQLALCHEMY_TRACK_MODIFICATIONS = False

CREATE_DB = bool(int(os.environ.get('CREATE_DB', 0)))
"""Create all tables when the application starts."""


#################### Membership ####################
MEMBERSHIP_APPLICATION_NAME = os.environ.get('MEMBERSHIP_APPLICATION_NAME',
                                             '/')
"""Users are scoped to an application name, as in the legacy schema."""

MIN_REQUIRED_PASSWORD_LENGTH = int(
    os.environ.get('MIN_REQUIRED_PASSWORD_LENGTH', '6')
)
"""Shortest password accepted at registration and password change."""

REQUIRES_UNIQUE_EMAIL = bool(int(os.environ.get('REQUIRES_UNIQUE_EMAIL', 0)))


#################### Session cookie ####################
SESSION_COOKIE_NAME = os.environ.get('SESSION_COOKIE_NAME', 'KI_AUTH')
SESSION_COOKIE_SECURE = bool(int(os.environ.get('SESSION_COOKIE_SECURE', '1')))
SESSION_COOKIE_HTTPONLY = True
SESSION_COOKIE_SAMESITE = 'Lax'

SESSION_DURATION = os.environ.get('SESSION_DURATION', '1209600')
"""Lifetime in seconds of a persistent ("remember me") session cookie."""

PERMANENT_SESSION_LIFETIME = int(SESSION_DURATION)


#################### Logging ####################
LOGLEVEL = int(os.environ.get('LOGLEVEL', 20))

LOG_JSON = bool(int(os.environ.get('LOG_JSON', 0)))
"""Emit structured JSON log records instead of plain text."""
