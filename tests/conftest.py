"""Root test configuration for LeakGuard.

Clears every LEAKGUARD_* environment variable for each test so that a
developer's shell settings cannot change config loading or backend selection.
Tests that exercise an override set it explicitly with monkeypatch.

Shared fixtures:
  store   : ConfigurationStore with the filter enabled and built-ins on
  service : SensitiveDataFilterService bound to ``store`` (closed on teardown)
"""

from __future__ import annotations

from typing import Iterator

import pytest

from leakguard.config import FilterConfig
from leakguard.config_store import ConfigurationStore
from leakguard.service.filter_service import SensitiveDataFilterService

_LEAKGUARD_ENV_VARS = (
    "LEAKGUARD_CONFIG",
    "LEAKGUARD_FILTER_ENABLED",
    "LEAKGUARD_LOG_LEVEL",
    "LEAKGUARD_FILTER_BACKEND",
)


@pytest.fixture(autouse=True)
def clear_leakguard_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _LEAKGUARD_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def store() -> ConfigurationStore:
    return ConfigurationStore(FilterConfig(enabled=True))


@pytest.fixture
def service(store: ConfigurationStore) -> Iterator[SensitiveDataFilterService]:
    svc = SensitiveDataFilterService(store)
    yield svc
    svc.close()
