"""Live configuration store for the sensitive data filter.

Holds the three settings the filter reads at scan time (enabled flag,
built-in inclusion flag, custom pattern list) and notifies listeners when any
of them change. The filter service subscribes and drops its pattern caches on
every relevant change.

Usage:
    store = ConfigurationStore.from_config(load_config())
    service = SensitiveDataFilterService(store)
    asyncio.create_task(store.start_watcher(config.path))

Thread-safety:
    get()/snapshot() and every write take the same threading.Lock. Listeners are
    called outside the lock, in subscription order, on the writing thread.
"""

from __future__ import annotations

import asyncio
import copy
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

import watchfiles
import yaml

from leakguard.config import FILTER_SECTION, Config, FilterConfig, parse_filter_section, read_config_file
from leakguard.utils.logger import get_logger

logger = get_logger(__name__)


class ConfigKey(str, Enum):
    """Setting names understood by ConfigurationStore."""

    ENABLED = "enabled"
    USE_BUILT_IN_PATTERNS = "use_built_in_patterns"
    CUSTOM_PATTERNS = "custom_patterns"


@dataclass(frozen=True)
class ConfigChangeEvent:
    """Describes which settings changed in one write."""

    keys: frozenset[ConfigKey]

    def affects(self, key: ConfigKey) -> bool:
        return key in self.keys


ChangeListener = Callable[[ConfigChangeEvent], None]


class ConfigurationStore:
    """Thread-safe holder for filter settings with change notification."""

    def __init__(self, settings: Optional[FilterConfig] = None) -> None:
        initial = settings or FilterConfig()
        self._values: dict[ConfigKey, Any] = {
            ConfigKey.ENABLED: initial.enabled,
            ConfigKey.USE_BUILT_IN_PATTERNS: initial.use_built_in_patterns,
            ConfigKey.CUSTOM_PATTERNS: list(initial.custom_patterns),
        }
        self._lock = threading.Lock()
        self._listeners: list[ChangeListener] = []

    @classmethod
    def from_config(cls, config: Config) -> "ConfigurationStore":
        return cls(config.filter)

    # ── Reads ─────────────────────────────────────────────────────────────────

    def get(self, key: ConfigKey) -> Any:
        """Return the current value for ``key``.

        The custom pattern list is returned as a deep copy; mutating it does
        not change the store.
        """
        with self._lock:
            return copy.deepcopy(self._values[key])

    def snapshot(self) -> FilterConfig:
        """Return all settings as a new FilterConfig."""
        with self._lock:
            return FilterConfig(
                enabled=self._values[ConfigKey.ENABLED],
                use_built_in_patterns=self._values[ConfigKey.USE_BUILT_IN_PATTERNS],
                custom_patterns=copy.deepcopy(self._values[ConfigKey.CUSTOM_PATTERNS]),
            )

    # ── Writes ────────────────────────────────────────────────────────────────

    def set(self, key: ConfigKey, value: Any) -> None:
        """Set one setting; listeners are notified only if the value changed."""
        self._write({key: value})

    def replace(self, settings: FilterConfig) -> None:
        """Replace all settings at once; one event lists every changed key."""
        self._write({
            ConfigKey.ENABLED: settings.enabled,
            ConfigKey.USE_BUILT_IN_PATTERNS: settings.use_built_in_patterns,
            ConfigKey.CUSTOM_PATTERNS: settings.custom_patterns,
        })

    def _write(self, updates: dict[ConfigKey, Any]) -> None:
        changed: set[ConfigKey] = set()
        with self._lock:
            for key, value in updates.items():
                key = ConfigKey(key)
                if key is ConfigKey.CUSTOM_PATTERNS:
                    value = copy.deepcopy(list(value or []))
                if self._values[key] != value:
                    self._values[key] = value
                    changed.add(key)
            listeners = list(self._listeners)

        if not changed:
            return

        event = ConfigChangeEvent(keys=frozenset(changed))
        for listener in listeners:
            try:
                listener(event)
            except Exception as exc:  # noqa: BLE001
                logger.error(
                    "Config change listener failed (non-fatal)",
                    error=str(exc),
                    error_type=type(exc).__name__,
                )

    # ── Subscriptions ─────────────────────────────────────────────────────────

    def on_did_change(self, listener: ChangeListener) -> Callable[[], None]:
        """Register ``listener``; returns a callable that unregisters it.

        The returned callable is idempotent.
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    # ── Reload from file ──────────────────────────────────────────────────────

    def reload(self, path: str) -> int:
        """Re-read the filter section of a YAML config file.

        Returns the number of configured custom pattern entries (>= 0).
        Returns -1 on read / parse error (prior settings unchanged).

        Never raises. Unlike load_config(), a bad file during reload must not
        take down a running process.
        """
        try:
            raw = read_config_file(path)
        except yaml.YAMLError as exc:
            logger.error(
                "Config reload failed: YAML parse error, keeping prior settings",
                path=path,
                error=str(exc),
            )
            return -1
        except OSError as exc:
            logger.error(
                "Config reload failed: could not read file, keeping prior settings",
                path=path,
                error=str(exc),
            )
            return -1

        section = raw.get(FILTER_SECTION) if isinstance(raw, dict) else None
        settings = parse_filter_section(section)
        self.replace(settings)
        logger.debug("Filter settings reloaded", path=path, custom_pattern_count=len(settings.custom_patterns))
        return len(settings.custom_patterns)

    # ── Hot-reload watcher ────────────────────────────────────────────────────

    async def start_watcher(self, path: str) -> None:
        """Watch ``path`` and reload on every change.

        Designed to run as an asyncio.Task; cancel the task to stop watching.
        A failing reload is logged and the watcher keeps running.
        """
        try:
            logger.info("Config file watcher started", path=path)
            async for _ in watchfiles.awatch(path):
                try:
                    count = self.reload(path)
                    if count >= 0:
                        logger.info("Filter settings hot-reloaded", count=count, path=path)
                except Exception as exc:  # noqa: BLE001
                    logger.error(
                        "Hot-reload handler error (non-fatal)",
                        error=str(exc),
                        path=path,
                    )
        except asyncio.CancelledError:
            logger.debug("Config file watcher cancelled", path=path)
            raise
