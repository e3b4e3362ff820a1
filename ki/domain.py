"""Defines the core data structures for the Ki application."""

from typing import Any, Optional, NamedTuple, Dict, List
from datetime import datetime
from enum import Enum


class CreateStatus(Enum):
    """Outcome of a request to create a new member."""

    SUCCESS = 'Success'
    INVALID_USER_NAME = 'InvalidUserName'
    INVALID_PASSWORD = 'InvalidPassword'
    INVALID_QUESTION = 'InvalidQuestion'
    INVALID_ANSWER = 'InvalidAnswer'
    INVALID_EMAIL = 'InvalidEmail'
    DUPLICATE_USER_NAME = 'DuplicateUserName'
    DUPLICATE_EMAIL = 'DuplicateEmail'
    USER_REJECTED = 'UserRejected'
    INVALID_PROVIDER_USER_KEY = 'InvalidProviderUserKey'
    DUPLICATE_PROVIDER_USER_KEY = 'DuplicateProviderUserKey'
    PROVIDER_ERROR = 'ProviderError'


class MembershipUser(NamedTuple):
    """A member, as reported by a membership provider."""

    user_id: str
    username: str
    email: Optional[str] = None
    is_approved: bool = True
    created: Optional[datetime] = None
    last_login: Optional[datetime] = None
    last_activity: Optional[datetime] = None


class CreateUserResult(NamedTuple):
    """Result of asking a membership provider to create a user."""

    user: Optional[MembershipUser]
    status: CreateStatus

    @property
    def succeeded(self) -> bool:
        """Only :attr:`CreateStatus.SUCCESS` counts as success."""
        return self.status is CreateStatus.SUCCESS


class Identity(NamedTuple):
    """The authenticated caller of a request."""

    name: str
    is_authenticated: bool = True
    authentication_type: str = 'Forms'


class ViewResult(NamedTuple):
    """
    Render (or re-render) a view.

    ``errors`` maps form field names to lists of messages; errors that
    belong to the form as a whole are keyed by ``_FORM``.
    """

    view_name: str
    errors: Dict[str, List[str]]
    view_data: Dict[str, Any]

    @property
    def is_valid(self) -> bool:
        """No errors were recorded for this view."""
        return not self.errors


class RedirectToRouteResult(NamedTuple):
    """Redirect to a named controller action."""

    route_values: Dict[str, Any]


class RedirectResult(NamedTuple):
    """Redirect to an explicit URL."""

    url: str
