"""SensitiveDataFilterService: the default SensitiveDataFilter implementation.

Composes, in data-flow order:
  registry (resolve_active_rules) -> compiler (compile_matchers) -> engine (scan)

CACHE MODEL:
  Two cached values owned by the instance, both ``None`` until first needed:
    _active_rules:      tuple[DetectionRule, ...]
    _compiled_matchers: tuple[CompiledMatcher, ...]
  Both are a pure function of (use_built_in_patterns, custom_patterns). They
  are rebuilt lazily on the first scan or introspection call after
  construction or invalidation, and dropped together by invalidate_cache().
  The enabled flag gates scanning only; it never affects what is compiled.

  A scan fetches the matcher tuple once and keeps that snapshot until it
  finishes, so invalidating mid-scan only affects later scans.

Thread-safety:
  Lazy rebuild and invalidation run under one threading.Lock, so scans
  driven from several threads (each with its own event loop) never observe a
  half-built cache.
"""

from __future__ import annotations

import threading
from typing import Any, Optional

from leakguard.config_store import ConfigChangeEvent, ConfigKey, ConfigurationStore
from leakguard.scanner.compiler import CompiledMatcher, compile_matchers
from leakguard.scanner.definitions import DetectionRule
from leakguard.scanner.regex_engine import SensitiveDataMatch, scan
from leakguard.scanner.registry import resolve_active_rules
from leakguard.utils.logger import get_logger

logger = get_logger(__name__)

# Settings whose change invalidates the pattern caches.
_CACHE_KEYS = (
    ConfigKey.ENABLED,
    ConfigKey.USE_BUILT_IN_PATTERNS,
    ConfigKey.CUSTOM_PATTERNS,
)


def _trace(event: str, **fields: Any) -> None:
    """Emit a DEBUG diagnostic. Logging failures never reach the scan."""
    try:
        logger.debug(event, **fields)
    except Exception:  # noqa: BLE001
        pass  # Best-effort; never fail a scan over diagnostics


class SensitiveDataFilterService:
    """Regex-based sensitive data filter backed by a ConfigurationStore.

    Usage:
        store = ConfigurationStore(FilterConfig(enabled=True))
        service = SensitiveDataFilterService(store)
        matches = await service.check_for_sensitive_data(text)
        categories = get_unique_categories(matches)
        service.close()
    """

    def __init__(self, config_store: ConfigurationStore) -> None:
        self._config = config_store
        self._active_rules: Optional[tuple[DetectionRule, ...]] = None
        self._compiled_matchers: Optional[tuple[CompiledMatcher, ...]] = None
        self._lock = threading.Lock()
        self._unsubscribe = config_store.on_did_change(self._on_config_change)

    # ── Configuration ─────────────────────────────────────────────────────────

    def _on_config_change(self, event: ConfigChangeEvent) -> None:
        if any(event.affects(key) for key in _CACHE_KEYS):
            self.invalidate_cache()

    def is_enabled(self) -> bool:
        return bool(self._config.get(ConfigKey.ENABLED))

    # ── Cache ─────────────────────────────────────────────────────────────────

    @property
    def is_cache_built(self) -> bool:
        """True if either cached value is currently populated."""
        return self._active_rules is not None or self._compiled_matchers is not None

    def _get_active_rules_locked(self) -> tuple[DetectionRule, ...]:
        if self._active_rules is None:
            self._active_rules = tuple(resolve_active_rules(
                self._config.get(ConfigKey.USE_BUILT_IN_PATTERNS),
                self._config.get(ConfigKey.CUSTOM_PATTERNS),
            ))
        return self._active_rules

    def get_active_patterns(self) -> list[DetectionRule]:
        """Built-in (if enabled) plus valid custom rules, in scan order.

        Builds the active-rule cache on a miss. Returns a new list each call.
        """
        with self._lock:
            return list(self._get_active_rules_locked())

    def get_compiled_matchers(self) -> tuple[CompiledMatcher, ...]:
        """Compiled matchers for the active rules; rules that fail to compile are absent.

        Builds both caches on a miss.
        """
        with self._lock:
            if self._compiled_matchers is None:
                self._compiled_matchers = compile_matchers(self._get_active_rules_locked())
            return self._compiled_matchers

    def invalidate_cache(self) -> None:
        """Drop both caches. Unconditional, idempotent, safe before any scan."""
        with self._lock:
            self._active_rules = None
            self._compiled_matchers = None

    # ── Scan ──────────────────────────────────────────────────────────────────

    async def check_for_sensitive_data(self, text: str) -> list[SensitiveDataMatch]:
        """Scan ``text`` and report one match per rule name that occurs in it.

        INVARIANTS:
          - Disabled filter -> ``[]`` immediately; the caches are not touched.
          - Never raises for rule problems: malformed or uncompilable custom
            rules were already dropped while building the cache.
          - Inputs longer than CHUNK_SIZE yield to the event loop between
            windows; shorter inputs complete without suspending.
        """
        enabled = self.is_enabled()
        _trace("check_for_sensitive_data called", enabled=enabled, text_length=len(text))

        if not enabled:
            _trace("Filter is disabled, skipping check")
            return []

        matchers = self.get_compiled_matchers()
        _trace("Compiled patterns ready", matcher_count=len(matchers))

        matches = await scan(text, matchers)
        _trace("Scan complete", match_count=len(matches))
        return matches

    # ── Lifecycle ─────────────────────────────────────────────────────────────

    def close(self) -> None:
        """Unsubscribe from config changes and drop the caches."""
        self._unsubscribe()
        self.invalidate_cache()
