"""Unit tests for leakguard/messages.py."""

from __future__ import annotations

from types import SimpleNamespace

from leakguard.messages import extract_text_from_messages, get_unique_categories
from leakguard.scanner.regex_engine import SensitiveDataMatch


class TestExtractTextFromMessages:
    def test_empty_conversation(self) -> None:
        assert extract_text_from_messages([]) == ""

    def test_string_content(self) -> None:
        messages = [
            {"role": "system", "content": "be brief"},
            {"role": "user", "content": "hello"},
        ]
        assert extract_text_from_messages(messages) == "be brief\nhello"

    def test_text_parts_only(self) -> None:
        messages = [{
            "role": "user",
            "content": [
                {"type": "text", "text": "first"},
                {"type": "image_url", "image_url": {"url": "data:..."}},
                {"type": "text", "text": "second"},
            ],
        }]
        assert extract_text_from_messages(messages) == "first\nsecond"

    def test_numeric_text_kind(self) -> None:
        messages = [{"content": [{"type": 1, "text": "numeric"}, {"type": 2, "text": "image"}]}]
        assert extract_text_from_messages(messages) == "numeric"

    def test_bool_kind_is_not_text(self) -> None:
        messages = [{"content": [{"type": True, "text": "nope"}]}]
        assert extract_text_from_messages(messages) == ""

    def test_empty_and_missing_text_skipped(self) -> None:
        messages = [{"content": [{"type": "text", "text": ""}, {"type": "text"}]}]
        assert extract_text_from_messages(messages) == ""

    def test_tool_call_arguments_follow_content(self) -> None:
        messages = [{
            "role": "assistant",
            "content": "calling tools",
            "tool_calls": [
                {"id": "1", "function": {"name": "a", "arguments": '{"q": 1}'}},
                {"id": "2", "function": {"name": "b", "arguments": '{"q": 2}'}},
            ],
        }]
        assert extract_text_from_messages(messages) == 'calling tools\n{"q": 1}\n{"q": 2}'

    def test_camel_case_tool_calls(self) -> None:
        messages = [{"content": None, "toolCalls": [{"function": {"arguments": "args"}}]}]
        assert extract_text_from_messages(messages) == "args"

    def test_malformed_tool_calls_skipped(self) -> None:
        messages = [{"tool_calls": [{}, {"function": None}, {"function": {"arguments": 5}}]}]
        assert extract_text_from_messages(messages) == ""

    def test_attribute_style_messages(self) -> None:
        part = SimpleNamespace(type="text", text="from object")
        call = SimpleNamespace(function=SimpleNamespace(arguments="obj args"))
        message = SimpleNamespace(content=[part], tool_calls=[call])
        assert extract_text_from_messages([message]) == "from object\nobj args"

    def test_message_order_preserved(self) -> None:
        messages = [
            {"content": "one", "tool_calls": [{"function": {"arguments": "two"}}]},
            {"content": [{"type": "text", "text": "three"}]},
        ]
        assert extract_text_from_messages(messages) == "one\ntwo\nthree"


class TestGetUniqueCategories:
    def test_empty(self) -> None:
        assert get_unique_categories([]) == []

    def test_sorted_and_deduplicated(self) -> None:
        matches = [
            SensitiveDataMatch("Password", "password-assignment"),
            SensitiveDataMatch("API Key", "github-token"),
            SensitiveDataMatch("API Key", "generic-api-key"),
        ]
        assert get_unique_categories(matches) == ["API Key", "Password"]
