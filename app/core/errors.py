"""
Application error taxonomy.

Repositories raise these; main.py maps them to HTTP responses using
`status_code`. Storage-level exceptions are never wrapped here and surface
as 500s.
"""


class AppError(Exception):
    """Base class for client-facing errors."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BadRequestError(AppError):
    status_code = 400


class EmptyUpdateError(BadRequestError):
    """Update requested with no fields to change."""

    def __init__(self, message: str = "No data"):
        super().__init__(message)


class BadFieldError(BadRequestError):
    """Update names a field outside the entity's allow-list."""

    def __init__(self, field: str):
        super().__init__(f"Invalid field: {field}")
        self.field = field


class InvalidRangeError(BadRequestError):
    """Filter lower bound exceeds its upper bound."""


class DuplicateEntityError(BadRequestError):
    """Natural key already taken."""


class NotFoundError(AppError):
    status_code = 404


class UnauthorizedError(AppError):
    status_code = 401
