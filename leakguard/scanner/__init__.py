"""LeakGuard scanner package.

Provides the detection pipeline, leaves first:

  - definitions.py : DetectionRule + the built-in rule table
  - registry.py    : merges built-in and configured custom rules
  - compiler.py    : DetectionRule -> CompiledMatcher (google-re2)
  - regex_engine.py: sync and chunked scan paths, SensitiveDataMatch
"""

from leakguard.scanner.compiler import (
    CompiledMatcher,
    PatternCompileError,
    compile_matchers,
    compile_rule,
)
from leakguard.scanner.definitions import BUILT_IN_RULES, DetectionRule
from leakguard.scanner.regex_engine import (
    SensitiveDataMatch,
    iter_windows,
    scan,
    scan_text,
    scan_text_chunked,
    to_scannable,
)
from leakguard.scanner.registry import parse_custom_rules, resolve_active_rules

__all__ = [
    "BUILT_IN_RULES",
    "CompiledMatcher",
    "DetectionRule",
    "PatternCompileError",
    "SensitiveDataMatch",
    "compile_matchers",
    "compile_rule",
    "iter_windows",
    "parse_custom_rules",
    "resolve_active_rules",
    "scan",
    "scan_text",
    "scan_text_chunked",
    "to_scannable",
]
