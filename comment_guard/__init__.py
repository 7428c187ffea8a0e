"""
Comment Guard

Blocks comment submissions that contain a configured stopword and notifies
an operator.

Processing per submission:
1. Load and batch the stopword list
2. Scan content, author, email, URL and IP in that order
3. On a match: run hooks, notify the operator, reject with 403
"""

__version__ = "1.0.0"

from .domain import SubmissionFields, Clean, Blocked, MatchResult, PostContext, NotificationPayload
from .filtering import StopwordSet, SubmissionScanner, FileStopwordSource, StaticStopwordSource
from .notification import build_notification
from .core import HookRegistry, EventType, SubmissionBlocked
from .guard import CommentGuard

__all__ = [
    # Domain
    'SubmissionFields',
    'Clean',
    'Blocked',
    'MatchResult',
    'PostContext',
    'NotificationPayload',

    # Filtering
    'StopwordSet',
    'SubmissionScanner',
    'FileStopwordSource',
    'StaticStopwordSource',

    # Notification
    'build_notification',

    # Hooks and control flow
    'HookRegistry',
    'EventType',
    'SubmissionBlocked',

    'CommentGuard'
]
