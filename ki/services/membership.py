"""Membership service used by the account controller."""

from typing import Optional
import logging

from ..domain import CreateUserResult
from .exceptions import PasswordRejected
from .provider import MembershipProvider

logger = logging.getLogger(__name__)


class AccountMembershipService(object):
    """
    Adapts a :class:`.MembershipProvider` for the account workflows.

    Parameters
    ----------
    provider : :class:`.MembershipProvider`
        If not provided, a :class:`.SqlMembershipProvider` is used.

    """

    def __init__(self, provider: Optional[MembershipProvider] = None) -> None:
        if provider is None:
            from .datastore import SqlMembershipProvider
            provider = SqlMembershipProvider()
        self.provider = provider

    @property
    def min_password_length(self) -> int:
        """Shortest password that the provider will accept."""
        return self.provider.min_required_password_length

    def validate_user(self, username: str, password: str) -> bool:
        """Check the credentials against the provider."""
        return self.provider.validate_user(username, password)

    def create_user(self, username: str, password: str,
                    email: str) -> CreateUserResult:
        """
        Ask the provider to create a new member.

        Returns
        -------
        :class:`.CreateUserResult`
            Carries the provider's status; check
            :attr:`.CreateUserResult.succeeded`.

        """
        result = self.provider.create_user(username, password, email)
        if not result.succeeded:
            logger.debug('Could not create user %s: %s', username,
                         result.status.value)
        return result

    def change_password(self, username: str, old_password: str,
                        new_password: str) -> bool:
        """
        Change a member's password.

        Returns ``False`` if the member does not exist, the old password is
        wrong, or the provider rejects the new password.
        """
        user = self.provider.get_user(username, user_is_online=True)
        if user is None:
            logger.debug('No such user: %s', username)
            return False
        try:
            return self.provider.change_password(username, old_password,
                                                 new_password)
        except (ValueError, PasswordRejected) as e:
            logger.debug('Password change rejected for %s: %s', username, e)
            return False
