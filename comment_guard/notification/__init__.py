"""
Notification Module

Composes the operator notification for a blocked submission and provides
mail transports and recipient resolvers.
"""

from .composer import NotificationComposer, build_notification
from .mailers import SmtpMailSender, LoggingMailSender
from .recipients import StaticRecipientResolver, EnvRecipientResolver

__all__ = [
    'NotificationComposer',
    'build_notification',
    'SmtpMailSender',
    'LoggingMailSender',
    'StaticRecipientResolver',
    'EnvRecipientResolver'
]
