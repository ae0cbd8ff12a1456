"""
Exceptions for setup, state and persistence errors.
"""

from typing import List, Optional


class GameError(Exception):
    """Base class for every error raised by the match engine."""

    def __init__(self, message: str = ""):
        self.message = message
        super().__init__(self.message)


class ValidationError(GameError):
    """Raised when a setup or house-rules configuration is rejected."""

    def __init__(self, problems: List[str], message: str = ""):
        self.problems = list(problems)
        self.message = message or "Invalid setup: " + "; ".join(self.problems)
        super().__init__(self.message)


class StateError(GameError):
    """Raised when an action is out of stage or targets an ineligible player."""


class PersistenceError(GameError):
    """Raised when the record store cannot load or commit."""

    def __init__(self, kind: Optional[str] = None, cause: Optional[BaseException] = None, message: str = ""):
        self.kind = kind
        self.cause = cause
        self.message = message or f"Persistence failure for {kind or 'store'}: {cause}"
        super().__init__(self.message)
