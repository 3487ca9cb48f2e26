"""Rule compilation: DetectionRule -> CompiledMatcher.

Compilation is the only fallible step in the scan pipeline. ``compile_rule()``
raises a typed ``PatternCompileError``; ``compile_matchers()`` absorbs it per
rule so one bad custom pattern can never disable the rest of the scan.

IMPORT RULES:
  - ``import re2`` ONLY. Custom patterns come from user configuration, and RE2
    guarantees linear-time matching, so a hostile pattern cannot stall the
    event loop with catastrophic backtracking.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

import re2  # google-re2 - NOT stdlib re

from leakguard.scanner.definitions import DetectionRule
from leakguard.utils.logger import get_logger

logger = get_logger(__name__)

# Inline flag applied to every rule: case-insensitive, unanchored search.
_CASE_INSENSITIVE = "(?i)"


class PatternCompileError(Exception):
    """Raised when a rule's pattern source is not valid google-re2 syntax."""

    def __init__(self, rule_name: str, reason: str) -> None:
        super().__init__(f"Invalid pattern for rule '{rule_name}': {reason}")
        self.rule_name = rule_name
        self.reason = reason


@dataclass(frozen=True)
class CompiledMatcher:
    """Executable form of a DetectionRule.

    Fields:
        pattern:  Compiled re2 pattern object (case-insensitive).
        name:     Copy of DetectionRule.name.
        category: Copy of DetectionRule.category.

    Stateless: ``search()`` keeps no position between calls, so a matcher can be
    shared by interleaved scans.
    """
    pattern: Any  # re2._Regexp
    name: str
    category: str

    def search(self, text: str) -> bool:
        """True if the pattern occurs anywhere in ``text``."""
        return self.pattern.search(text) is not None


def compile_rule(rule: DetectionRule) -> CompiledMatcher:
    """Compile one rule.

    Raises:
        PatternCompileError: The pattern source is not valid RE2 (this includes
            constructs RE2 does not support, such as lookaround).
    """
    try:
        compiled = re2.compile(_CASE_INSENSITIVE + rule.pattern)
    except re2.error as exc:
        raise PatternCompileError(rule.name, str(exc)) from exc
    return CompiledMatcher(pattern=compiled, name=rule.name, category=rule.category)


def compile_matchers(rules: Iterable[DetectionRule]) -> tuple[CompiledMatcher, ...]:
    """Compile every rule, dropping the ones that fail.

    Never raises for a bad rule. Order of the surviving matchers follows the
    order of ``rules``.
    """
    matchers: list[CompiledMatcher] = []
    for rule in rules:
        try:
            matchers.append(compile_rule(rule))
        except PatternCompileError as exc:
            logger.debug(
                "Skipping rule with invalid pattern",
                rule=exc.rule_name,
                error=exc.reason,
            )
    return tuple(matchers)
