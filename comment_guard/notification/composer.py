"""
Operator notification composition.

Every submission value and post detail placed in the body is HTML-escaped so
the message is safe to render in an HTML-capable mail client or admin page.
"""

import html
from typing import Optional

from comment_guard.core.exceptions import ConfigurationError
from comment_guard.core.interfaces import RecipientResolver
from comment_guard.domain.models import NotificationPayload, PostContext, SubmissionFields
from comment_guard.foundation.config import NotificationConfig
from comment_guard.foundation.types import SubmissionField

BODY_TEMPLATE = (
    "A comment was blocked due to prohibited words.\n\n"
    "Matched Term: {matched_term}\n"
    "Matched Field: {matched_field}\n\n"
    "Commenter Details:\n"
    "Comment Author: {author}\n"
    "Author Email: {author_email}\n"
    "Author URL: {author_url}\n"
    "Comment Content: {content}\n"
    "Author IP: {author_ip}\n\n"
    "Post Details:\n"
    "Post Title: {post_title}\n"
    "Post URL: {post_url}\n"
    "Post ID: {post_id}\n"
)


def escape(value) -> str:
    if value is None:
        return ""
    return html.escape(str(value), quote=True)


class NotificationComposer:
    """Builds the payload sent to the operator for a blocked submission."""

    def __init__(
        self,
        config: Optional[NotificationConfig] = None,
        recipient_resolver: Optional[RecipientResolver] = None
    ):
        self.config = config or NotificationConfig()
        self.recipient_resolver = recipient_resolver

    def resolve_recipient(self) -> str:
        """Configured override, else the platform default looked up now."""
        if self.config.override_recipient:
            return self.config.override_recipient

        default = self.recipient_resolver.default_recipient() if self.recipient_resolver else None
        if default and default.strip():
            return default.strip()

        raise ConfigurationError(
            "No notification recipient configured",
            config_key="notification.override_recipient"
        )

    def build(
        self,
        fields: SubmissionFields,
        matched_field: SubmissionField,
        matched_term: str,
        post_context: Optional[PostContext] = None
    ) -> NotificationPayload:
        post_context = post_context or PostContext()

        body = BODY_TEMPLATE.format(
            matched_term=escape(matched_term),
            matched_field=escape(matched_field.value),
            author=escape(fields.author),
            author_email=escape(fields.author_email),
            author_url=escape(fields.author_url),
            content=escape(fields.content),
            author_ip=escape(fields.author_ip),
            post_title=escape(post_context.title),
            post_url=escape(post_context.url),
            post_id=escape(post_context.post_id),
        )

        return NotificationPayload(
            recipient=self.resolve_recipient(),
            subject=self.config.subject,
            body=body,
        )


def build_notification(
    fields: SubmissionFields,
    matched_field: SubmissionField,
    matched_term: str,
    post_context: Optional[PostContext] = None,
    config: Optional[NotificationConfig] = None,
    recipient_resolver: Optional[RecipientResolver] = None
) -> NotificationPayload:
    """Convenience wrapper around NotificationComposer.build."""
    composer = NotificationComposer(config, recipient_resolver)
    return composer.build(fields, matched_field, matched_term, post_context)
