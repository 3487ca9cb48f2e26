"""Filter service factory: implementation selection.

Selection logic:
  1. LEAKGUARD_FILTER_BACKEND=null  -> NullSensitiveDataFilterService
  2. Otherwise (unset or "regex")   -> SensitiveDataFilterService

An unknown backend name is a startup error: SystemExit(1) with a message on
stderr, matching how invalid config files are handled.
"""

from __future__ import annotations

import os
import sys
from typing import Optional

from leakguard.config import load_config
from leakguard.config_store import ConfigurationStore
from leakguard.service.filter_service import SensitiveDataFilterService
from leakguard.service.protocol import NullSensitiveDataFilterService, SensitiveDataFilter
from leakguard.utils.logger import get_logger

logger = get_logger(__name__)

_ENV_FILTER_BACKEND = "LEAKGUARD_FILTER_BACKEND"
_BACKEND_REGEX = "regex"
_BACKEND_NULL = "null"
VALID_BACKENDS: frozenset[str] = frozenset({_BACKEND_REGEX, _BACKEND_NULL})


def create_filter_service(config_store: Optional[ConfigurationStore] = None) -> SensitiveDataFilter:
    """Create the configured SensitiveDataFilter.

    Args:
        config_store: Settings source for the regex backend. When None, one is
                      built from load_config() (only for the regex backend).

    Returns:
        A ready-to-use filter. Callers own it and should call close() on shutdown.

    Raises:
        SystemExit(1): LEAKGUARD_FILTER_BACKEND names an unknown backend.
    """
    backend = os.getenv(_ENV_FILTER_BACKEND, _BACKEND_REGEX).strip().lower()
    if backend not in VALID_BACKENDS:
        print(
            f"CONFIG ERROR: {_ENV_FILTER_BACKEND} must be one of "
            f"{sorted(VALID_BACKENDS)}, got '{backend}'",
            file=sys.stderr,
        )
        raise SystemExit(1)

    if backend == _BACKEND_NULL:
        logger.info("filter_backend_selected", backend="NullSensitiveDataFilterService")
        return NullSensitiveDataFilterService()

    if config_store is None:
        config_store = ConfigurationStore.from_config(load_config())
    logger.info("filter_backend_selected", backend="SensitiveDataFilterService")
    return SensitiveDataFilterService(config_store)
