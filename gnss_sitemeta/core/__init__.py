"""Core configuration and error types."""

from gnss_sitemeta.core.config import (
    Settings,
    LoggingConfig,
    SitelogConfig,
    CleanerConfig,
    ReconcileConfig,
    load_settings,
)
from gnss_sitemeta.core.exceptions import (
    SiteMetaError,
    ConfigurationError,
    FormatError,
    MandatoryBlockNotFoundError,
    DuplicateBlockError,
    UnknownFieldError,
    ChronologicalError,
    IncompleteHistoryError,
    InternalError,
)

__all__ = [
    "Settings",
    "LoggingConfig",
    "SitelogConfig",
    "CleanerConfig",
    "ReconcileConfig",
    "load_settings",
    "SiteMetaError",
    "ConfigurationError",
    "FormatError",
    "MandatoryBlockNotFoundError",
    "DuplicateBlockError",
    "UnknownFieldError",
    "ChronologicalError",
    "IncompleteHistoryError",
    "InternalError",
]
