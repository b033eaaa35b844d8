"""
Utility modules for the referral matching service.

This package contains shared utilities used across the application:
- config: Configuration management
- logger: Logging infrastructure
- constants: Application-wide constants
"""

from referral_match.utils.config import (
    AppSettings,
    LoggingSettings,
    MatchingSettings,
    get_settings,
    reload_settings,
    ROOT_DIR,
    PACKAGE_DIR,
    DATA_DIR,
)
from referral_match.utils.constants import (
    APP_NAME,
    APP_DISPLAY_NAME,
    VERSION,
    DEFAULT_WEIGHTS,
    DEFAULT_CONSTRAINTS,
    DEFAULT_THRESHOLDS,
    FACTOR_KEYS,
    LicenseStatus,
    MatchQuality,
    OpeningStatus,
    UrgencyLevel,
    ViolationType,
)
from referral_match.utils.logger import (
    setup_logging,
    get_logger,
    log,
)

__all__ = [
    # Config
    "AppSettings",
    "LoggingSettings",
    "MatchingSettings",
    "get_settings",
    "reload_settings",
    "ROOT_DIR",
    "PACKAGE_DIR",
    "DATA_DIR",
    # Constants
    "APP_NAME",
    "APP_DISPLAY_NAME",
    "VERSION",
    "DEFAULT_WEIGHTS",
    "DEFAULT_CONSTRAINTS",
    "DEFAULT_THRESHOLDS",
    "FACTOR_KEYS",
    "LicenseStatus",
    "MatchQuality",
    "OpeningStatus",
    "UrgencyLevel",
    "ViolationType",
    # Logger
    "setup_logging",
    "get_logger",
    "log",
]
