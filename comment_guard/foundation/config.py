"""Unified configuration management for the comment guard."""

import os
import yaml
from typing import Dict, List, Optional, Any
from pathlib import Path
import logging
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from .types import SubmissionField, LogLevel, ConfigValidationError, FIELD_ORDER

DEFAULT_SUBJECT = "Blocked Comment Notification - Prohibited Words Detected"
DEFAULT_BLOCK_MESSAGE = "Your comment contains prohibited words and cannot be posted."
DEFAULT_BLOCK_TITLE = "Comment Blocked"

_TRUE_VALUES = ("1", "true", "yes", "y", "on")


class StopwordListConfig(BaseModel):
    """Where the stopword list lives and how it is batched."""
    path: Optional[str] = "stopwords.txt"
    encoding: str = "utf-8"
    max_batch_size: int = Field(default=1000, gt=0)
    cache_by_mtime: bool = False


class ScanConfig(BaseModel):
    """Which submission fields get scanned."""
    scanned_fields: List[SubmissionField] = Field(default_factory=lambda: list(FIELD_ORDER))

    @field_validator('scanned_fields')
    @classmethod
    def validate_scanned_fields(cls, v):
        if not v:
            raise ValueError("At least one submission field must be scanned")
        # Evaluation order is fixed regardless of how the list was written
        return [f for f in FIELD_ORDER if f in v]


class NotificationConfig(BaseModel):
    """Operator notification settings."""
    enabled: bool = True
    override_recipient: Optional[str] = None
    subject: str = DEFAULT_SUBJECT

    @field_validator('override_recipient')
    @classmethod
    def blank_to_none(cls, v):
        if v is None or not v.strip():
            return None
        return v.strip()


class SmtpConfig(BaseModel):
    """SMTP transport used by the bundled mail sender."""
    host: str = "localhost"
    port: int = Field(default=25, gt=0, le=65535)
    username: str = ""
    password: str = ""
    use_tls: bool = False
    from_address: str = ""
    timeout: int = Field(default=10, gt=0)


class BlockResponseConfig(BaseModel):
    """What the submitter sees when a submission is rejected."""
    message: str = DEFAULT_BLOCK_MESSAGE
    title: str = DEFAULT_BLOCK_TITLE
    status_code: int = Field(default=403, ge=400, le=599)


class GuardConfig(BaseModel):
    """Main comment guard configuration."""

    stopwords: StopwordListConfig = Field(default_factory=StopwordListConfig)
    scan: ScanConfig = Field(default_factory=ScanConfig)
    notification: NotificationConfig = Field(default_factory=NotificationConfig)
    smtp: SmtpConfig = Field(default_factory=SmtpConfig)
    block_response: BlockResponseConfig = Field(default_factory=BlockResponseConfig)

    log_level: LogLevel = LogLevel.INFO

    def validate_configuration(self) -> List[str]:
        """Validate cross-section settings and return any issues."""
        issues = []

        if not self.stopwords.path:
            issues.append("Stopword list path is empty; every submission will pass")

        if self.notification.enabled and self.smtp.use_tls and not self.smtp.username:
            issues.append("SMTP TLS is enabled but no SMTP username is configured")

        return issues


class ConfigManager:
    """Loads GuardConfig from the environment and YAML files."""

    def __init__(self):
        self.config: Optional[GuardConfig] = None
        self.logger = logging.getLogger(__name__)
        self._env_loaded = False
        self._yaml_loaded = False

    def load_from_env(self, env_file: Optional[str] = None) -> None:
        """Load configuration from environment variables."""
        if env_file and Path(env_file).exists():
            load_dotenv(env_file, override=True)

        self.config = self._create_config_from_env()
        self._env_loaded = True
        self.logger.info("Configuration loaded from environment variables")

    def load_from_yaml(self, yaml_file: str) -> None:
        """Load configuration from YAML file."""
        yaml_path = Path(yaml_file)
        if not yaml_path.exists():
            raise FileNotFoundError(f"YAML config file not found: {yaml_file}")

        with open(yaml_path, 'r', encoding='utf-8') as f:
            yaml_data = yaml.safe_load(f) or {}

        if self.config:
            self._merge_yaml_config(yaml_data)
        else:
            self.config = GuardConfig(**yaml_data)

        self._yaml_loaded = True
        self.logger.info(f"Configuration loaded from YAML file: {yaml_file}")

    def validate(self) -> None:
        """Log configuration issues; raise if nothing is loaded."""
        if not self.config:
            raise ConfigValidationError("config", "No configuration loaded")

        for issue in self.config.validate_configuration():
            self.logger.warning(f"Configuration issue: {issue}")

    def get_config(self) -> GuardConfig:
        """Get the current configuration."""
        if not self.config:
            raise ConfigValidationError("config", "No configuration loaded")
        return self.config

    def _create_config_from_env(self) -> GuardConfig:
        """Create configuration from environment variables."""
        config_data: Dict[str, Any] = {
            'log_level': LogLevel(os.getenv('LOG_LEVEL', 'INFO').upper()),
        }

        config_data['stopwords'] = StopwordListConfig(
            path=os.getenv('COMMENT_GUARD_STOPWORDS_FILE', 'stopwords.txt'),
            encoding=os.getenv('COMMENT_GUARD_STOPWORDS_ENCODING', 'utf-8'),
            max_batch_size=int(os.getenv('COMMENT_GUARD_MAX_BATCH_SIZE', '1000')),
            cache_by_mtime=os.getenv('COMMENT_GUARD_CACHE_STOPWORDS', '0').lower() in _TRUE_VALUES,
        )

        fields_env = os.getenv('COMMENT_GUARD_SCANNED_FIELDS')
        if fields_env:
            config_data['scan'] = ScanConfig(scanned_fields=[
                SubmissionField(name.strip().lower())
                for name in fields_env.split(',') if name.strip()
            ])

        config_data['notification'] = NotificationConfig(
            enabled=os.getenv('COMMENT_GUARD_NOTIFY', '1').lower() in _TRUE_VALUES,
            override_recipient=os.getenv('COMMENT_GUARD_ADMIN_EMAIL'),
            subject=os.getenv('COMMENT_GUARD_NOTIFY_SUBJECT', DEFAULT_SUBJECT),
        )

        config_data['smtp'] = SmtpConfig(
            host=os.getenv('SMTP_HOST', 'localhost'),
            port=int(os.getenv('SMTP_PORT', '25')),
            username=os.getenv('SMTP_USERNAME', ''),
            password=os.getenv('SMTP_PASSWORD', ''),
            use_tls=os.getenv('SMTP_USE_TLS', '0').lower() in _TRUE_VALUES,
            from_address=os.getenv('SMTP_FROM', ''),
            timeout=int(os.getenv('SMTP_TIMEOUT', '10')),
        )

        return GuardConfig(**config_data)

    def _merge_yaml_config(self, yaml_data: Dict[str, Any]) -> None:
        """Overlay YAML sections onto the already loaded config."""
        merged = self.config.model_dump()
        for section, values in yaml_data.items():
            if isinstance(values, dict) and isinstance(merged.get(section), dict):
                merged[section].update(values)
            else:
                merged[section] = values
        self.config = GuardConfig(**merged)


# Global configuration instance
_config_manager = ConfigManager()


def get_config_manager() -> ConfigManager:
    """Get the global configuration manager."""
    return _config_manager


def load_config(env_file: Optional[str] = None, yaml_file: Optional[str] = None) -> GuardConfig:
    """Load configuration from files and return the config."""
    manager = get_config_manager()

    if env_file or not manager._env_loaded:
        manager.load_from_env(env_file)

    if yaml_file:
        manager.load_from_yaml(yaml_file)

    manager.validate()
    return manager.get_config()
