"""API errors and validation helpers."""

from app.errors import InputValidationError


class NotFoundError(Exception):
    """Resource not found."""

    def __init__(self, message: str = "Resource not found"):
        self.message = message
        super().__init__(self.message)


class ValidationError(Exception):
    """Validation error."""

    def __init__(self, message: str = "Validation error"):
        self.message = message
        super().__init__(self.message)


# Proportional elections on a 4-year cycle with records from 2002 onwards
MIN_TARGET_YEAR = 2006
MAX_TARGET_YEAR = 2050


def validate_target_year(year: int) -> None:
    """Validate forecast target year is in a supported range."""
    if not MIN_TARGET_YEAR <= year <= MAX_TARGET_YEAR:
        raise ValidationError(f"Invalid target_year: {year}. Must be between {MIN_TARGET_YEAR} and {MAX_TARGET_YEAR}")


def as_validation_error(exc: InputValidationError) -> ValidationError:
    """Surface an engine input error verbatim."""
    return ValidationError(exc.message)
