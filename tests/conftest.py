"""
Pytest configuration and shared fixtures for the test suite.
"""

import pytest
import tempfile
from pathlib import Path
from typing import Callable, Generator, Iterable, List, Tuple

from comment_guard.core.interfaces import MailSender, PostLookup
from comment_guard.domain.models import PostContext, SubmissionFields
from comment_guard.foundation.config import GuardConfig, NotificationConfig, StopwordListConfig


class RecordingMailSender(MailSender):
    """Mail sender that keeps every message instead of delivering it."""

    def __init__(self, fail_with: Exception = None):
        self.sent: List[Tuple[str, str, str]] = []
        self.fail_with = fail_with

    def send(self, recipient: str, subject: str, body: str) -> bool:
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append((recipient, subject, body))
        return True


class DictPostLookup(PostLookup):
    """Post lookup backed by a dict of post_id -> (title, url)."""

    def __init__(self, posts=None):
        self.posts = posts or {}
        self.calls: List[str] = []

    def get_post_context(self, post_id: str) -> PostContext:
        self.calls.append(post_id)
        title, url = self.posts.get(post_id, ("", ""))
        return PostContext(post_id=post_id, title=title, url=url)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def write_stopwords(temp_dir: Path) -> Callable[..., Path]:
    """Factory writing a stopword list file and returning its path."""
    def _write(lines: Iterable[str], name: str = "stopwords.txt") -> Path:
        path = temp_dir / name
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path
    return _write


@pytest.fixture
def mail_sender() -> RecordingMailSender:
    return RecordingMailSender()


@pytest.fixture
def failing_mail_sender() -> Callable[[Exception], RecordingMailSender]:
    """Factory for a sender whose every send raises the given exception."""
    return RecordingMailSender


@pytest.fixture
def post_lookup() -> DictPostLookup:
    return DictPostLookup({
        "42": ("Hello <world>", "https://example.com/?p=42&x=1"),
    })


@pytest.fixture
def clean_fields() -> SubmissionFields:
    return SubmissionFields(
        content="A perfectly friendly remark",
        author="Alice",
        author_email="alice@example.com",
        author_url="https://alice.example.com",
        author_ip="192.0.2.10",
    )


@pytest.fixture
def guard_config_factory() -> Callable[..., GuardConfig]:
    """Build a GuardConfig pointing at a stopword file."""
    def _build(path, max_batch_size: int = 1000, recipient: str = "ops@example.com", **kwargs) -> GuardConfig:
        return GuardConfig(
            stopwords=StopwordListConfig(path=str(path), max_batch_size=max_batch_size),
            notification=NotificationConfig(override_recipient=recipient),
            **kwargs
        )
    return _build


@pytest.fixture
def clean_env(monkeypatch):
    """Remove guard-related environment variables."""
    for key in (
        'LOG_LEVEL',
        'COMMENT_GUARD_STOPWORDS_FILE', 'COMMENT_GUARD_STOPWORDS_ENCODING',
        'COMMENT_GUARD_MAX_BATCH_SIZE', 'COMMENT_GUARD_CACHE_STOPWORDS',
        'COMMENT_GUARD_SCANNED_FIELDS', 'COMMENT_GUARD_NOTIFY',
        'COMMENT_GUARD_ADMIN_EMAIL', 'COMMENT_GUARD_NOTIFY_SUBJECT',
        'COMMENT_GUARD_DEFAULT_ADMIN_EMAIL',
        'SMTP_HOST', 'SMTP_PORT', 'SMTP_USERNAME', 'SMTP_PASSWORD',
        'SMTP_USE_TLS', 'SMTP_FROM', 'SMTP_TIMEOUT',
    ):
        monkeypatch.delenv(key, raising=False)


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
