"""Test configuration specific to foundation layer tests."""

import pytest
import tempfile
import os


@pytest.fixture
def temp_env_file():
    """Create a temporary .env file for testing."""
    with tempfile.NamedTemporaryFile(mode='w', suffix='.env', delete=False) as f:
        f.write("COMMENT_GUARD_STOPWORDS_FILE=/srv/lists/blocked.txt\n")
        f.write("COMMENT_GUARD_MAX_BATCH_SIZE=250\n")
        f.write("COMMENT_GUARD_ADMIN_EMAIL=super@example.com\n")
        f.write("SMTP_HOST=mail.example.com\n")
        env_file = f.name

    yield env_file
    os.unlink(env_file)
