"""Root of the loco exception hierarchy."""

from typing import Dict


class LocoError(Exception):
    """Base exception for all loco errors.

    Keyword context is stored in ``details`` as strings and appended to the
    message when printed. ``None`` values are dropped, so optional context
    can be passed unconditionally.
    """

    def __init__(self, message: str, **context: object):
        super().__init__(message)
        self.message = message
        self.details: Dict[str, str] = {key: str(value) for key, value in context.items() if value is not None}

    def __str__(self) -> str:
        if not self.details:
            return self.message
        context = ", ".join(f"{key}={value}" for key, value in self.details.items())
        return f"{self.message} ({context})"
