"""
Authenticated sessions, carried in Flask's signed session cookie.

When a user logs on, their username is written to the session. If they
asked to be remembered, the session is marked permanent, so that the cookie
outlives the browser session (see ``PERMANENT_SESSION_LIFETIME``).
"""

from typing import Optional
import logging

from flask import session

from ..domain import Identity

logger = logging.getLogger(__name__)

SESSION_USER_KEY = 'username'


class FormsAuthenticationService(object):
    """Issues and revokes the authentication cookie."""

    def sign_in(self, username: str, create_persistent_cookie: bool) -> None:
        """Establish an authenticated session for ``username``."""
        session.clear()
        session[SESSION_USER_KEY] = username
        session.permanent = bool(create_persistent_cookie)
        logger.debug('Signed in %s (persistent: %s)', username,
                     create_persistent_cookie)

    def sign_out(self) -> None:
        """End the authenticated session, if there is one."""
        username = session.pop(SESSION_USER_KEY, None)
        session.permanent = False
        if username is not None:
            logger.debug('Signed out %s', username)


def current_identity() -> Optional[Identity]:
    """Get the :class:`.Identity` of the signed-in user, if any."""
    username = session.get(SESSION_USER_KEY)
    if not username:
        return None
    return Identity(name=username)
