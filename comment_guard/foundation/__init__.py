"""Foundation layer for the comment guard."""

from .config import ConfigManager, GuardConfig, load_config
from .logging import get_logger, setup_logging
from .types import SubmissionField, FIELD_ORDER, GuardStage, LogLevel, ConfigValidationError

__all__ = [
    "ConfigManager",
    "GuardConfig",
    "load_config",
    "get_logger",
    "setup_logging",
    "SubmissionField",
    "FIELD_ORDER",
    "GuardStage",
    "LogLevel",
    "ConfigValidationError",
]
