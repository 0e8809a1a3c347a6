"""
Utility modules for SkillSync.

This package contains shared utilities used across the package:
- config: Configuration management
- logger: Logging infrastructure
- constants: Package-wide constants and enums
"""

from skillsync.utils.config import (
    AppSettings,
    get_settings,
    reload_settings,
    ROOT_DIR,
    DATA_DIR,
)
from skillsync.utils.constants import (
    APP_NAME,
    VERSION,
    DEFAULT_PIPELINE,
    ApplicationStatus,
    AuditAction,
    BadgeCategory,
    EventStatus,
    MatchTier,
    Stage,
)
from skillsync.utils.logger import (
    setup_logging,
    get_logger,
    audit_log,
    LoggerMixin,
    log,
)

__all__ = [
    # Config
    "AppSettings",
    "get_settings",
    "reload_settings",
    "ROOT_DIR",
    "DATA_DIR",
    # Constants
    "APP_NAME",
    "VERSION",
    "DEFAULT_PIPELINE",
    "ApplicationStatus",
    "AuditAction",
    "BadgeCategory",
    "EventStatus",
    "MatchTier",
    "Stage",
    # Logger
    "setup_logging",
    "get_logger",
    "audit_log",
    "LoggerMixin",
    "log",
]
