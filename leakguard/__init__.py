"""LeakGuard: detect credentials, keys and PII in outbound text.

Public API:

    from leakguard import (
        ConfigurationStore,
        FilterConfig,
        SensitiveDataFilterService,
        extract_text_from_messages,
        get_unique_categories,
    )

Only category and pattern names are ever reported; matched text is not
returned, logged or stored.
"""

from leakguard.config import Config, FilterConfig, load_config
from leakguard.config_store import ConfigChangeEvent, ConfigKey, ConfigurationStore
from leakguard.messages import extract_text_from_messages, get_unique_categories
from leakguard.scanner.definitions import BUILT_IN_RULES, DetectionRule
from leakguard.scanner.regex_engine import SensitiveDataMatch
from leakguard.service import (
    NullSensitiveDataFilterService,
    SensitiveDataFilter,
    SensitiveDataFilterService,
    create_filter_service,
)

__version__ = "0.1.0"

__all__ = [
    "BUILT_IN_RULES",
    "Config",
    "ConfigChangeEvent",
    "ConfigKey",
    "ConfigurationStore",
    "DetectionRule",
    "FilterConfig",
    "NullSensitiveDataFilterService",
    "SensitiveDataFilter",
    "SensitiveDataFilterService",
    "SensitiveDataMatch",
    "create_filter_service",
    "extract_text_from_messages",
    "get_unique_categories",
    "load_config",
]
