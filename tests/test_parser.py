"""Tests for src.core.parser — prompt building, reply decoding, item classification."""

import pytest
from datetime import date

from src.core.parser import (
    ItemValidationError,
    ParsedChore,
    ParsedEvent,
    ParsedGrocery,
    ParsedMedication,
    build_system_prompt,
    classify_item,
    clean_llm_response,
    parse_items,
)


# ---------------------------------------------------------------------------
# System prompt
# ---------------------------------------------------------------------------


class TestBuildSystemPrompt:
    def test_embeds_today(self):
        prompt = build_system_prompt(date(2025, 3, 10))
        assert "Today is: 2025-03-10" in prompt

    def test_describes_all_four_kinds(self):
        prompt = build_system_prompt(date(2025, 3, 10))
        for kind in ('"chore"', '"event"', '"medication"', '"grocery"'):
            assert kind in prompt
        assert '"PRODUCE" | "DAIRY" | "MEAT" | "PANTRY" | "OTHER"' in prompt

    def test_braces_survive_formatting(self):
        prompt = build_system_prompt(date(2025, 3, 10))
        assert "{\n" in prompt
        assert "{{" not in prompt
        assert "Return ONLY valid JSON array, no markdown or explanation." in prompt


# ---------------------------------------------------------------------------
# clean_llm_response
# ---------------------------------------------------------------------------


class TestCleanLlmResponse:
    def test_strips_json_code_block(self):
        raw = '```json\n[{"type": "chore"}]\n```'
        assert clean_llm_response(raw) == '[{"type": "chore"}]'

    def test_strips_bare_code_block(self):
        assert clean_llm_response("```\n[]\n```") == "[]"

    def test_strips_whitespace(self):
        assert clean_llm_response("  []  ") == "[]"

    def test_no_code_block(self):
        assert clean_llm_response('[{"a": 1}]') == '[{"a": 1}]'


# ---------------------------------------------------------------------------
# parse_items
# ---------------------------------------------------------------------------


class TestParseItems:
    def test_fenced_array(self):
        raw = '```json\n[{"type":"grocery","title":"Milk","category":"DAIRY"}]\n```'
        assert parse_items(raw) == [{"type": "grocery", "title": "Milk", "category": "DAIRY"}]

    @pytest.mark.parametrize("raw", ["", "   ", None, "null", "[]", "```json\n[]\n```"])
    def test_empty_replies(self, raw):
        assert parse_items(raw) == []

    def test_malformed_json_returns_empty(self):
        assert parse_items("Sure! Here are your items: [oops") == []

    def test_single_object_is_wrapped(self):
        assert parse_items('{"type": "chore", "title": "Dishes"}') == [
            {"type": "chore", "title": "Dishes"}
        ]

    def test_scalar_returns_empty(self):
        assert parse_items("42") == []

    def test_non_object_elements_dropped(self):
        raw = '[{"type": "chore", "title": "A"}, "junk", 3, null]'
        assert parse_items(raw) == [{"type": "chore", "title": "A"}]


# ---------------------------------------------------------------------------
# classify_item
# ---------------------------------------------------------------------------


class TestClassifyItem:
    def test_chore(self):
        item = classify_item({"type": "chore", "title": "Clean garage", "points": 15,
                              "dateTime": "2025-03-10T09:00:00"})
        assert isinstance(item, ParsedChore)
        assert item.points == 15
        assert item.date_time == "2025-03-10T09:00:00"

    def test_type_is_case_insensitive(self):
        item = classify_item({"type": " Event ", "title": "Dentist"})
        assert isinstance(item, ParsedEvent)
        assert item.raw_type == " Event "

    def test_event_end(self):
        item = classify_item({"type": "event", "title": "Dentist",
                              "endDateTime": "2025-03-10T17:00:00"})
        assert item.end_date_time == "2025-03-10T17:00:00"

    def test_medication_times_lowercased(self):
        item = classify_item({"type": "medication", "title": "Vitamin D",
                              "dosage": "1 tablet", "times": ["Morning", "EVENING"]})
        assert isinstance(item, ParsedMedication)
        assert item.times == ["morning", "evening"]

    def test_medication_single_time_string(self):
        item = classify_item({"type": "medication", "title": "Aspirin", "times": "evening"})
        assert item.times == ["evening"]

    def test_grocery(self):
        item = classify_item({"type": "grocery", "title": "Milk", "category": "DAIRY"})
        assert isinstance(item, ParsedGrocery)
        assert item.category == "DAIRY"

    def test_missing_title_raises(self):
        with pytest.raises(ItemValidationError):
            classify_item({"type": "chore"})

    def test_blank_title_raises(self):
        with pytest.raises(ItemValidationError):
            classify_item({"type": "chore", "title": "   "})

    def test_missing_type_raises(self):
        with pytest.raises(ItemValidationError):
            classify_item({"title": "Something"})

    def test_non_string_title_raises(self):
        with pytest.raises(ItemValidationError):
            classify_item({"type": "chore", "title": 12})

    def test_unknown_type_raises(self):
        with pytest.raises(ItemValidationError, match="Unknown item type"):
            classify_item({"type": "reminder", "title": "Call mom"})

    @pytest.mark.parametrize("points, expected", [
        (12.7, 12),
        ("fifteen", None),
        (True, None),
        (float("nan"), None),
        (None, None),
    ])
    def test_points_coercion(self, points, expected):
        item = classify_item({"type": "chore", "title": "Dishes", "points": points})
        assert item.points == expected

    def test_non_string_date_time_ignored(self):
        item = classify_item({"type": "chore", "title": "Dishes", "dateTime": 20250310})
        assert item.date_time is None
