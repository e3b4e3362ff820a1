"""
The capabilities that a membership provider must offer.

A membership provider is responsible for storing user credentials and
checking them. :class:`MembershipProvider` names the handful of operations
that the account workflows actually use; a concrete provider overrides all
of them. Anything left un-overridden fails loudly with
:class:`.UnsupportedOperation`, since calling it is a configuration error
rather than something a request can recover from.
"""

from typing import Optional

from ..domain import CreateUserResult, MembershipUser
from .exceptions import UnsupportedOperation


class MembershipProvider(object):
    """Base class for membership providers."""

    @property
    def min_required_password_length(self) -> int:
        """Shortest password that the provider will accept."""
        raise UnsupportedOperation('min_required_password_length')

    def create_user(self, username: str, password: str,
                    email: str) -> CreateUserResult:
        """Add a new member."""
        raise UnsupportedOperation('create_user')

    def validate_user(self, username: str, password: str) -> bool:
        """Check a username and password."""
        raise UnsupportedOperation('validate_user')

    def get_user(self, username: str,
                 user_is_online: bool = False) -> Optional[MembershipUser]:
        """Look up a member by username."""
        raise UnsupportedOperation('get_user')

    def change_password(self, username: str, old_password: str,
                        new_password: str) -> bool:
        """Replace a member's password."""
        raise UnsupportedOperation('change_password')
