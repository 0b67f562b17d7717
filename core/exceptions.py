# core/exceptions.py
"""
Domain errors raised by the db_manager modules.

Views translate them to HTTP responses:
- ValidationError -> 422 with a field -> message map
- NotFoundError -> 404
- TransactionError -> 503 (the write was rolled back, retrying is safe)
- SelfDeletionError -> 400
"""


class ValidationError(Exception):
    """One or more submitted fields are invalid."""

    def __init__(self, errors: dict[str, str], message: str = "Validation failed"):
        super().__init__(message)
        self.errors = errors
        self.message = message


class NotFoundError(Exception):
    """A referenced APAR, inspection or user does not exist."""
    pass


class TransactionError(Exception):
    """The database rejected a write; nothing from the operation was persisted."""
    pass


class SelfDeletionError(Exception):
    """An admin tried to delete their own account."""
    pass
