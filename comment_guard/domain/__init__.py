"""Domain layer containing the guard's value objects."""

from .models import *

__all__ = [
    "HOST_FIELD_KEYS",
    "SubmissionFields", "Clean", "Blocked", "MatchResult", "CLEAN",
    "PostContext", "NotificationPayload",
]
