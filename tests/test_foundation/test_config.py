"""Tests for the configuration system."""

import os
import pytest
import tempfile
import yaml
from unittest.mock import patch

from comment_guard.foundation.config import (
    ConfigManager, GuardConfig, NotificationConfig, ScanConfig, StopwordListConfig,
    load_config, DEFAULT_SUBJECT
)
from comment_guard.foundation.types import SubmissionField, FIELD_ORDER, LogLevel, ConfigValidationError


class TestSectionModels:
    """Test validation of individual configuration sections."""

    def test_stopword_defaults(self):
        config = StopwordListConfig()
        assert config.path == "stopwords.txt"
        assert config.max_batch_size == 1000
        assert config.cache_by_mtime is False

    def test_batch_size_must_be_positive(self):
        with pytest.raises(ValueError):
            StopwordListConfig(max_batch_size=0)

    def test_scanned_fields_default_to_all_in_order(self):
        assert ScanConfig().scanned_fields == list(FIELD_ORDER)

    def test_scanned_fields_are_put_in_evaluation_order(self):
        config = ScanConfig(scanned_fields=["author_url", "content"])
        assert config.scanned_fields == [SubmissionField.CONTENT, SubmissionField.AUTHOR_URL]

    def test_scanned_fields_cannot_be_empty(self):
        with pytest.raises(ValueError, match="At least one submission field"):
            ScanConfig(scanned_fields=[])

    def test_blank_override_recipient_is_none(self):
        assert NotificationConfig(override_recipient="   ").override_recipient is None
        assert NotificationConfig(override_recipient=" a@b.c ").override_recipient == "a@b.c"


class TestGuardConfig:
    """Test GuardConfig functionality."""

    def test_default_config(self):
        config = GuardConfig()
        assert config.notification.subject == DEFAULT_SUBJECT
        assert config.block_response.status_code == 403
        assert config.log_level == LogLevel.INFO

    def test_validation_reports_missing_path(self):
        config = GuardConfig(stopwords=StopwordListConfig(path=None))
        issues = config.validate_configuration()
        assert any("path is empty" in issue for issue in issues)


class TestConfigManager:
    """Test ConfigManager functionality."""

    def setup_method(self):
        self.manager = ConfigManager()

    def test_load_from_env_basic(self, clean_env):
        with patch.dict(os.environ, {
            'COMMENT_GUARD_STOPWORDS_FILE': '/etc/guard/words.txt',
            'COMMENT_GUARD_MAX_BATCH_SIZE': '10',
            'COMMENT_GUARD_SCANNED_FIELDS': 'content, author_url',
            'COMMENT_GUARD_ADMIN_EMAIL': 'admin@example.com',
            'SMTP_USE_TLS': 'true',
            'SMTP_PORT': '587',
            'LOG_LEVEL': 'debug',
        }):
            self.manager.load_from_env()
            config = self.manager.get_config()

        assert config.stopwords.path == '/etc/guard/words.txt'
        assert config.stopwords.max_batch_size == 10
        assert config.scan.scanned_fields == [SubmissionField.CONTENT, SubmissionField.AUTHOR_URL]
        assert config.notification.override_recipient == 'admin@example.com'
        assert config.smtp.use_tls is True
        assert config.smtp.port == 587
        assert config.log_level == LogLevel.DEBUG

    def test_load_from_env_defaults(self, clean_env):
        self.manager.load_from_env()
        config = self.manager.get_config()

        assert config.stopwords.path == 'stopwords.txt'
        assert config.scan.scanned_fields == list(FIELD_ORDER)
        assert config.notification.override_recipient is None

    def test_load_from_env_file(self, clean_env, temp_env_file):
        with patch.dict(os.environ, {}):
            self.manager.load_from_env(temp_env_file)
            config = self.manager.get_config()

        assert config.stopwords.path == '/srv/lists/blocked.txt'
        assert config.stopwords.max_batch_size == 250
        assert config.notification.override_recipient == 'super@example.com'
        assert config.smtp.host == 'mail.example.com'

    def test_load_from_yaml(self, clean_env):
        yaml_data = {
            'stopwords': {'path': 'lists/words.txt', 'max_batch_size': 500},
            'scan': {'scanned_fields': ['content', 'author_url']},
            'notification': {'override_recipient': 'yaml@example.com'},
        }

        with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
            yaml.dump(yaml_data, f)
            yaml_file = f.name

        try:
            self.manager.load_from_yaml(yaml_file)
            config = self.manager.get_config()

            assert config.stopwords.path == 'lists/words.txt'
            assert config.stopwords.max_batch_size == 500
            assert config.scan.scanned_fields == [SubmissionField.CONTENT, SubmissionField.AUTHOR_URL]
            assert config.notification.override_recipient == 'yaml@example.com'
        finally:
            os.unlink(yaml_file)

    def test_yaml_overlays_env(self, clean_env):
        with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
            yaml.dump({'stopwords': {'max_batch_size': 5}}, f)
            yaml_file = f.name

        try:
            with patch.dict(os.environ, {'COMMENT_GUARD_STOPWORDS_FILE': 'env.txt', 'SMTP_HOST': 'relay'}):
                self.manager.load_from_env()
                self.manager.load_from_yaml(yaml_file)
            config = self.manager.get_config()

            # Untouched keys of an overlaid section survive
            assert config.stopwords.path == 'env.txt'
            assert config.stopwords.max_batch_size == 5
            assert config.smtp.host == 'relay'
        finally:
            os.unlink(yaml_file)

    def test_missing_yaml_file(self):
        with pytest.raises(FileNotFoundError):
            self.manager.load_from_yaml('/nonexistent/guard.yaml')

    def test_get_config_without_loading(self):
        with pytest.raises(ConfigValidationError):
            self.manager.get_config()

    def test_validate_without_loading(self):
        with pytest.raises(ConfigValidationError):
            self.manager.validate()


class TestConvenienceFunctions:

    def test_load_config(self, clean_env):
        config = load_config()
        assert isinstance(config, GuardConfig)
