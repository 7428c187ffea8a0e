"""Common types and enums for the comment guard."""

from enum import Enum
from typing import Any, Tuple
from dataclasses import dataclass


class SubmissionField(Enum):
    """Submission fields that can be scanned for stopwords."""
    CONTENT = "content"
    AUTHOR = "author"
    AUTHOR_EMAIL = "author_email"
    AUTHOR_URL = "author_url"
    AUTHOR_IP = "author_ip"


# Evaluation order; the first matching field decides the report.
FIELD_ORDER: Tuple[SubmissionField, ...] = (
    SubmissionField.CONTENT,
    SubmissionField.AUTHOR,
    SubmissionField.AUTHOR_EMAIL,
    SubmissionField.AUTHOR_URL,
    SubmissionField.AUTHOR_IP,
)


class GuardStage(Enum):
    """Processing stages of a single submission."""
    LOADING = "loading"
    SCANNING = "scanning"
    NOTIFYING = "notifying"


class LogLevel(Enum):
    """Logging levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


@dataclass
class ConfigValidationError(Exception):
    """Configuration validation error."""
    field: str
    message: str
    value: Any = None

    def __str__(self):
        return f"Configuration error in '{self.field}': {self.message}"
