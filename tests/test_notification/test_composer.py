"""
Unit tests for notification composition and recipient resolution.
"""

import os
import pytest
from unittest.mock import patch

from comment_guard.core.exceptions import ConfigurationError
from comment_guard.domain.models import PostContext, SubmissionFields
from comment_guard.foundation.config import NotificationConfig, DEFAULT_SUBJECT
from comment_guard.foundation.types import SubmissionField
from comment_guard.notification.composer import NotificationComposer, build_notification, escape
from comment_guard.notification.recipients import StaticRecipientResolver, EnvRecipientResolver


@pytest.fixture
def hostile_fields() -> SubmissionFields:
    return SubmissionFields(
        content='<script>alert("x")</script> buy SPAM',
        author="Eve & Mallory",
        author_email="eve@example.com",
        author_url="https://evil.example/?a=1&b=2",
        author_ip="203.0.113.9",
    )


@pytest.mark.unit
class TestEscape:

    @pytest.mark.parametrize("value, expected", [
        ("<b>", "&lt;b&gt;"),
        ("a & b", "a &amp; b"),
        ('"quoted"', "&quot;quoted&quot;"),
        ("it's", "it&#x27;s"),
        (None, ""),
        (42, "42"),
    ])
    def test_escape(self, value, expected):
        assert escape(value) == expected


@pytest.mark.unit
class TestNotificationComposer:

    def test_body_contains_escaped_fields(self, hostile_fields):
        composer = NotificationComposer(NotificationConfig(override_recipient="ops@example.com"))
        payload = composer.build(
            hostile_fields,
            SubmissionField.CONTENT,
            "SPAM",
            PostContext(post_id="42", title="Hello <world>", url="https://example.com/?p=42&x=1"),
        )

        assert payload.recipient == "ops@example.com"
        assert payload.subject == DEFAULT_SUBJECT
        assert "Matched Term: SPAM\n" in payload.body
        assert "Matched Field: content\n" in payload.body
        assert "&lt;script&gt;alert(&quot;x&quot;)&lt;/script&gt; buy SPAM" in payload.body
        assert "Comment Author: Eve &amp; Mallory\n" in payload.body
        assert "Author URL: https://evil.example/?a=1&amp;b=2\n" in payload.body
        assert "Author IP: 203.0.113.9\n" in payload.body
        assert "Post Title: Hello &lt;world&gt;\n" in payload.body
        assert "Post URL: https://example.com/?p=42&amp;x=1\n" in payload.body
        assert "Post ID: 42\n" in payload.body
        assert "<script>" not in payload.body

    def test_matched_term_is_escaped(self, hostile_fields):
        payload = build_notification(
            hostile_fields,
            SubmissionField.AUTHOR,
            "Eve & Mallory",
            config=NotificationConfig(override_recipient="ops@example.com"),
        )
        assert "Matched Term: Eve &amp; Mallory\n" in payload.body

    def test_missing_post_context(self, hostile_fields):
        payload = build_notification(
            hostile_fields,
            SubmissionField.CONTENT,
            "SPAM",
            config=NotificationConfig(override_recipient="ops@example.com"),
        )
        assert "Post Title: \n" in payload.body
        assert "Post ID: \n" in payload.body

    def test_custom_subject(self, hostile_fields):
        config = NotificationConfig(override_recipient="ops@example.com", subject="Blocked!")
        payload = build_notification(hostile_fields, SubmissionField.CONTENT, "SPAM", config=config)
        assert payload.subject == "Blocked!"


@pytest.mark.unit
class TestRecipientResolution:

    def test_override_wins(self):
        composer = NotificationComposer(
            NotificationConfig(override_recipient="override@example.com"),
            StaticRecipientResolver("admin@example.com"),
        )
        assert composer.resolve_recipient() == "override@example.com"

    def test_fallback_to_default(self):
        composer = NotificationComposer(NotificationConfig(override_recipient="  "),
                                        StaticRecipientResolver(" admin@example.com "))
        assert composer.resolve_recipient() == "admin@example.com"

    def test_no_recipient(self):
        composer = NotificationComposer(NotificationConfig(), StaticRecipientResolver(""))
        with pytest.raises(ConfigurationError) as exc_info:
            composer.resolve_recipient()
        assert exc_info.value.details["config_key"] == "notification.override_recipient"

    def test_no_resolver(self):
        with pytest.raises(ConfigurationError):
            NotificationComposer().resolve_recipient()

    def test_default_is_read_at_notification_time(self, clean_env):
        composer = NotificationComposer(NotificationConfig(), EnvRecipientResolver())

        with patch.dict(os.environ, {"COMMENT_GUARD_DEFAULT_ADMIN_EMAIL": "first@example.com"}):
            assert composer.resolve_recipient() == "first@example.com"
        with patch.dict(os.environ, {"COMMENT_GUARD_DEFAULT_ADMIN_EMAIL": "second@example.com"}):
            assert composer.resolve_recipient() == "second@example.com"

    def test_env_resolver_blank(self, clean_env):
        with patch.dict(os.environ, {"SITE_ADMIN": "   "}):
            assert EnvRecipientResolver("SITE_ADMIN").default_recipient() is None
