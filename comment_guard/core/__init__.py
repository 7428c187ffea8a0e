"""
Core components of the comment guard: collaborator interfaces, exceptions
and the hook registry.
"""

from .interfaces import (
    StopwordSource,
    PostLookup,
    RecipientResolver,
    MailSender
)

from .exceptions import (
    GuardError,
    ConfigurationError,
    NotificationDeliveryError,
    SubmissionBlocked
)

from .events import (
    Event,
    EventType,
    HookRegistry,
    SubmissionEvent,
    BlockedSubmissionEvent
)

__all__ = [
    # Interfaces
    'StopwordSource',
    'PostLookup',
    'RecipientResolver',
    'MailSender',

    # Exceptions
    'GuardError',
    'ConfigurationError',
    'NotificationDeliveryError',
    'SubmissionBlocked',

    # Events
    'Event',
    'EventType',
    'HookRegistry',
    'SubmissionEvent',
    'BlockedSubmissionEvent'
]
