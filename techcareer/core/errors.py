"""Domain errors raised by business rules.

Every rule violation is a ``BusinessError``. The two subclasses tell a
duplicate unique field apart from a missing record.
"""


class BusinessError(Exception):
    """A business rule was violated."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConflictError(BusinessError):
    """A unique field (event title, instructor name) is already taken."""


class NotFoundError(BusinessError):
    """The referenced record does not exist or has been soft-deleted."""
