"""SensitiveDataFilter Protocol + NullSensitiveDataFilterService.

Layout:
    protocol.py       : SensitiveDataFilter Protocol + NullSensitiveDataFilterService
    filter_service.py : SensitiveDataFilterService (registry + cache + scan engine)
    factory.py        : create_filter_service(): implementation selection by env var
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from leakguard.scanner.definitions import DetectionRule
from leakguard.scanner.regex_engine import SensitiveDataMatch
from leakguard.utils.logger import get_logger

logger = get_logger(__name__)


# ─── SensitiveDataFilter Protocol ─────────────────────────────────────────────


@runtime_checkable
class SensitiveDataFilter(Protocol):
    """Detects categories of sensitive data in text before it leaves the process.

    Implementations: SensitiveDataFilterService (default),
    NullSensitiveDataFilterService (filtering not wanted).
    Selection via create_filter_service() factory (service/factory.py).

    check_for_sensitive_data() is async because large inputs are scanned in
    windows with a yield to the event loop between them. It must never raise.
    """

    def is_enabled(self) -> bool:
        """True if scans are currently performed."""
        ...

    def get_active_patterns(self) -> list[DetectionRule]:
        """Built-in (if enabled) plus valid custom rules, in scan order."""
        ...

    async def check_for_sensitive_data(self, text: str) -> list[SensitiveDataMatch]:
        """Return one match per rule name found in ``text``; empty if none."""
        ...

    def invalidate_cache(self) -> None:
        """Drop any cached rules/matchers. Idempotent; safe at any time."""
        ...

    def close(self) -> None:
        """Release subscriptions and caches. Called on shutdown."""
        ...


# ─── NullSensitiveDataFilterService ──────────────────────────────────────────


class NullSensitiveDataFilterService:
    """No-op SensitiveDataFilter for deployments where filtering is not desired.

    Interchangeable with SensitiveDataFilterService: every caller can keep
    awaiting check_for_sensitive_data() and simply never sees a match.
    """

    def is_enabled(self) -> bool:
        """Always False."""
        return False

    def get_active_patterns(self) -> list[DetectionRule]:
        """Always empty."""
        return []

    async def check_for_sensitive_data(self, text: str) -> list[SensitiveDataMatch]:
        """Always empty, whatever the input."""
        return []

    def invalidate_cache(self) -> None:
        """No-op."""

    def close(self) -> None:
        """No-op."""
        logger.debug("NullSensitiveDataFilterService.close")


# ─── Protocol compliance assertion ────────────────────────────────────────────
# Runs at import time so protocol drift is caught immediately.
assert isinstance(NullSensitiveDataFilterService(), SensitiveDataFilter), (
    "NullSensitiveDataFilterService does not satisfy SensitiveDataFilter protocol"
)
