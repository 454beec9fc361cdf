# lifetrack/app/core/errors.py
"""
Domain errors raised by the security and service layers.

The API layer maps these onto HTTP responses; nothing below the API
layer knows about status codes.
"""


class LifetrackError(Exception):
    """Base class for all domain errors."""


class HashingError(LifetrackError):
    """The password could not be hashed (entropy source or KDF failure)."""


class DecodeError(LifetrackError):
    """A stored password hash is malformed."""


class NotAuthenticated(LifetrackError):
    """No usable session for the request."""


class SessionNotFound(NotAuthenticated):
    pass


class SessionExpired(NotAuthenticated):
    pass


class NotFound(LifetrackError):
    """Record does not exist or is not owned by the requesting user."""


class AlreadyCheckedIn(LifetrackError):
    """The habit already has a check-in for the current calendar day."""


class RegistrationError(LifetrackError):
    """Registration input was rejected."""


class InvalidTodo(LifetrackError):
    """Todo content is empty or its due date is not in the future."""
