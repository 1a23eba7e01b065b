"""
Solo Leveling Life System - Domain Errors
Raised by the quest/progression services, mapped to HTTP responses in main.py
"""

from typing import Any, Dict, Optional


class QuestSystemError(Exception):
    """
    Base class for all quest system errors.

    Args:
        message: Human-readable reason shown to the caller
        details: Extra structured context for logs and API responses
    """

    status_code: int = 500
    is_retryable: bool = False

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "detail": self.message,
            "details": self.details,
            "retryable": self.is_retryable,
        }

    def __str__(self) -> str:
        details_str = f" | {self.details}" if self.details else ""
        return f"{self.message}{details_str}"


class NotFound(QuestSystemError):
    """Quest or profile is absent, or not owned by the caller."""

    status_code = 404


class AlreadyCompleted(NotFound):
    """Quest exists and belongs to the caller but was already completed."""

    status_code = 409

    def __init__(self, quest_id: int, user_id: int):
        super().__init__(
            "Quest already completed",
            {"quest_id": quest_id, "user_id": user_id},
        )


class ValidationError(QuestSystemError):
    """Required profile data is missing (e.g. no field of interest)."""

    status_code = 400


class PersistenceFailure(QuestSystemError):
    """A transactional write failed and was rolled back."""

    status_code = 503
    is_retryable = True

    def to_dict(self) -> Dict[str, Any]:
        # Driver messages stay in the logs
        return {
            "error": self.__class__.__name__,
            "detail": "Temporary storage failure, please retry",
            "details": {},
            "retryable": True,
        }
