"""Unit tests for leakguard/scanner/registry.py.

Tests:
  - parse_custom_rules() keeps valid entries in order
  - Malformed entries are dropped silently (never raise)
  - resolve_active_rules() ordering: built-ins first, then customs
  - Name collisions are not de-duplicated at this stage
"""

from __future__ import annotations

from leakguard.scanner.definitions import BUILT_IN_RULES, DetectionRule
from leakguard.scanner.registry import parse_custom_rules, resolve_active_rules

_CUSTOM_A = {"name": "Custom A", "category": "Custom", "pattern": "A_[0-9]+"}
_CUSTOM_B = {"name": "Custom B", "category": "Custom", "pattern": "B_[0-9]+"}


class TestParseCustomRules:
    def test_none_returns_empty(self) -> None:
        assert parse_custom_rules(None) == []

    def test_empty_list_returns_empty(self) -> None:
        assert parse_custom_rules([]) == []

    def test_valid_entries_kept_in_order(self) -> None:
        rules = parse_custom_rules([_CUSTOM_B, _CUSTOM_A])
        assert rules == [
            DetectionRule("Custom B", "Custom", "B_[0-9]+"),
            DetectionRule("Custom A", "Custom", "A_[0-9]+"),
        ]

    def test_extra_keys_ignored(self) -> None:
        rules = parse_custom_rules([{**_CUSTOM_A, "note": "internal"}])
        assert rules == [DetectionRule("Custom A", "Custom", "A_[0-9]+")]

    def test_missing_name_dropped(self) -> None:
        rules = parse_custom_rules([{"category": "Custom", "pattern": "x"}, _CUSTOM_A])
        assert [r.name for r in rules] == ["Custom A"]

    def test_missing_category_dropped(self) -> None:
        assert parse_custom_rules([{"name": "n", "pattern": "x"}]) == []

    def test_missing_pattern_dropped(self) -> None:
        assert parse_custom_rules([{"name": "n", "category": "c"}]) == []

    def test_empty_string_field_dropped(self) -> None:
        assert parse_custom_rules([{"name": "", "category": "c", "pattern": "x"}]) == []

    def test_numeric_fields_converted_to_text(self) -> None:
        rules = parse_custom_rules([{"name": 42, "category": "Badge", "pattern": 12345}])
        assert rules == [DetectionRule("42", "Badge", "12345")]

    def test_float_field_converted_to_text(self) -> None:
        rules = parse_custom_rules([{"name": "ver", "category": "c", "pattern": 1.5}])
        assert rules[0].pattern == "1.5"

    def test_zero_field_dropped(self) -> None:
        assert parse_custom_rules([{"name": "n", "category": "c", "pattern": 0}]) == []

    def test_boolean_field_dropped(self) -> None:
        assert parse_custom_rules([{"name": True, "category": "c", "pattern": "x"}]) == []

    def test_non_scalar_field_dropped(self) -> None:
        assert parse_custom_rules([{"name": "n", "category": "c", "pattern": ["x"]}]) == []
        assert parse_custom_rules([{"name": "n", "category": {"a": 1}, "pattern": "x"}]) == []

    def test_non_mapping_entry_dropped(self) -> None:
        rules = parse_custom_rules(["not a dict", None, 7, _CUSTOM_A])
        assert [r.name for r in rules] == ["Custom A"]

    def test_invalid_pattern_syntax_is_not_checked_here(self) -> None:
        # Compilation is the cache's job; the registry only checks shape.
        rules = parse_custom_rules([{"name": "bad", "category": "c", "pattern": "[invalid(regex"}])
        assert len(rules) == 1


class TestResolveActiveRules:
    def test_built_ins_only(self) -> None:
        assert resolve_active_rules(True, None) == list(BUILT_IN_RULES)

    def test_built_ins_disabled_and_no_custom(self) -> None:
        assert resolve_active_rules(False, []) == []

    def test_custom_only_when_built_ins_disabled(self) -> None:
        rules = resolve_active_rules(False, [_CUSTOM_A])
        assert [r.name for r in rules] == ["Custom A"]

    def test_built_ins_precede_custom(self) -> None:
        rules = resolve_active_rules(True, [_CUSTOM_A, _CUSTOM_B])
        assert rules[: len(BUILT_IN_RULES)] == list(BUILT_IN_RULES)
        assert [r.name for r in rules[len(BUILT_IN_RULES):]] == ["Custom A", "Custom B"]

    def test_name_collision_keeps_both(self) -> None:
        clash = {"name": "github-token", "category": "Custom", "pattern": "CUSTOM_[A-Z]+"}
        rules = resolve_active_rules(True, [clash])
        assert [r.name for r in rules].count("github-token") == 2

    def test_deterministic(self) -> None:
        assert resolve_active_rules(True, [_CUSTOM_A]) == resolve_active_rules(True, [_CUSTOM_A])

    def test_returns_new_list(self) -> None:
        first = resolve_active_rules(True, None)
        first.clear()
        assert len(resolve_active_rules(True, None)) == len(BUILT_IN_RULES)
