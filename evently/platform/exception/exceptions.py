class CustomBaseError(Exception):
    """Base class for all custom exceptions - controls logging behavior in @Logger.io"""

    def __init__(self, message: str, status_code: int) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class ValidationError(CustomBaseError):
    """Missing or malformed field, enum violation, empty required sequence."""

    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message, status_code)


class DuplicateSlugError(ValidationError):
    def __init__(self, slug: str) -> None:
        super().__init__(f'An event with slug "{slug}" already exists', 409)
        self.slug = slug


class NormalizationError(CustomBaseError):
    """A date or time value that cannot be reduced to its canonical form."""

    def __init__(self, message: str) -> None:
        super().__init__(message, 400)


class ReferentialIntegrityError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 404)


class NotFoundError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 404)


class DatabaseConnectionError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 503)
