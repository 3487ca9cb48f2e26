"""Pattern registry: merges the built-in rule table with configured custom rules.

``resolve_active_rules()`` is deterministic for a given configuration:
built-in rules first (when enabled) in declared order, then every valid custom
rule in the order supplied. Rule names are NOT de-duplicated here. When a
custom rule reuses a name, both rules stay active and the scan engine reports
whichever matches first under that name.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Iterable, Optional

from leakguard.scanner.definitions import BUILT_IN_RULES, DetectionRule
from leakguard.utils.logger import get_logger

logger = get_logger(__name__)

# Keys every custom pattern entry must carry, each a non-empty string or number.
_REQUIRED_FIELDS = ("name", "category", "pattern")


def _as_text(value: Any) -> str:
    # YAML `pattern: 12345` loads as int and is kept as text; booleans are rejected.
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool) and value:
        return str(value)
    return ""


def parse_custom_rules(raw_list: Optional[Iterable[Any]]) -> list[DetectionRule]:
    """Parse configured custom pattern entries into DetectionRule objects.

    Numeric values are converted to strings. Malformed entries (not a mapping,
    missing any of name/category/pattern, or with an empty, zero, boolean or
    non-scalar value) are dropped silently. They are never surfaced as an
    error; a DEBUG line is the only trace.
    """
    if not raw_list:
        return []

    rules: list[DetectionRule] = []
    for i, item in enumerate(raw_list):
        if not isinstance(item, Mapping):
            logger.debug(
                "Custom pattern entry is not a mapping, skipping",
                index=i,
                actual_type=type(item).__name__,
            )
            continue

        values = [_as_text(item.get(key)) for key in _REQUIRED_FIELDS]
        if not all(values):
            logger.debug("Custom pattern entry incomplete, skipping", index=i)
            continue

        name, category, pattern = values
        rules.append(DetectionRule(name=name, category=category, pattern=pattern))

    return rules


def resolve_active_rules(
    use_built_in: bool,
    custom_patterns: Optional[Iterable[Any]],
) -> list[DetectionRule]:
    """Return the ordered list of rules a scan should use.

    Args:
        use_built_in:    Include ``BUILT_IN_RULES`` ahead of custom rules.
        custom_patterns: Raw configured custom pattern list (may be None).

    Returns:
        New list. Built-ins (if enabled) followed by valid custom rules.
    """
    rules: list[DetectionRule] = []
    if use_built_in:
        rules.extend(BUILT_IN_RULES)
    rules.extend(parse_custom_rules(custom_patterns))
    return rules
