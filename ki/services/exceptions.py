"""Provides exceptions occurring with external services."""


class Unavailable(RuntimeError):
    """The user database is temporarily unavailable."""


class UnsupportedOperation(NotImplementedError):
    """The membership provider does not implement this operation."""


class PasswordRejected(RuntimeError):
    """The provider's password policy rejected a new password."""
