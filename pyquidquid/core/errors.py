"""Exceptions raised by field accessors."""


class FieldError(ValueError):
    """Base class for field extraction failures.

    Attributes:
        field (str): The fully-qualified name of the field that failed, or
            "body" when the accessor's own value was being read.
    """

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field


class MissingFieldError(FieldError):
    """Raised when a required field is absent."""

    def __init__(self, field: str) -> None:
        super().__init__(field, f"{field} must not be empty")


class InvalidTypeError(FieldError):
    """Raised when a field is present but is not of the expected kind.

    Attributes:
        expected (str): Human-readable description of the expected kind,
            e.g. "a string" or "an array of objects".
    """

    def __init__(self, field: str, expected: str) -> None:
        super().__init__(field, f"{field} must be {expected}")
        self.expected = expected
