"""
Errors raised by the scheduling engine.

Generation either fully succeeds or fails with a ValidationError; partial
schedules are never returned.
"""


class ValidationError(ValueError):
    """Invalid input, or a schedule that could not be generated."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.message = message
        self.field = field  # Offending input field, when known
