# helpdesk/core/errors.py


class NotFoundError(LookupError):
    """A referenced record does not exist."""


class ConflictError(Exception):
    """The write would break a uniqueness rule."""
