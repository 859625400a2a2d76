"""Tests for query parameter validation and filter evaluation."""

import pytest

from string_analyzer.errors import ValidationError
from string_analyzer.schemas import FilterSpec
from string_analyzer.services.filters import apply_filters, parse_filters


class TestParseFilters:
    def test_no_params(self):
        assert parse_filters({}).applied() == {}

    def test_all_params(self):
        spec = parse_filters({
            "is_palindrome": "true",
            "min_length": "2",
            "max_length": " 10 ",
            "word_count": "1",
            "contains_character": " A ",
        })

        assert spec.applied() == {
            "is_palindrome": True,
            "min_length": 2,
            "max_length": 10,
            "word_count": 1,
            "contains_character": "a",
        }

    def test_false_is_kept(self):
        assert parse_filters({"is_palindrome": "false"}).applied() == {"is_palindrome": False}

    @pytest.mark.parametrize("raw", ["True", "yes", "1", "", "0"])
    def test_is_palindrome_requires_literal(self, raw):
        with pytest.raises(ValidationError) as exc_info:
            parse_filters({"is_palindrome": raw})
        assert exc_info.value.field == "is_palindrome"

    @pytest.mark.parametrize("name", ["min_length", "max_length", "word_count"])
    @pytest.mark.parametrize("raw", ["abc", "", "1.5", "-3", "4x"])
    def test_numeric_fields_reject_non_numbers(self, name, raw):
        with pytest.raises(ValidationError) as exc_info:
            parse_filters({name: raw})
        assert exc_info.value.field == name

    @pytest.mark.parametrize("raw", ["", "ab", "   "])
    def test_contains_character_single_char(self, raw):
        with pytest.raises(ValidationError) as exc_info:
            parse_filters({"contains_character": raw})
        assert exc_info.value.field == "contains_character"

    def test_first_invalid_field_reported(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_filters({"min_length": "x", "word_count": "y"})
        assert exc_info.value.field == "min_length"
        assert "min_length" in exc_info.value.message

    def test_number_past_int_conversion_limit(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_filters({"min_length": "9" * 5000})
        assert exc_info.value.field == "min_length"


class TestApplyFilters:
    def test_conjunction(self, store):
        store.insert("racecar")
        store.insert("hello")

        result = apply_filters(store.enumerate(), FilterSpec(is_palindrome=True, min_length=5))

        assert [r.value for r in result.records] == ["racecar"]
        assert result.count == 1
        assert result.filters_applied == {"is_palindrome": True, "min_length": 5}

    def test_no_filters_returns_everything_in_order(self, seeded_store):
        result = apply_filters(seeded_store.enumerate(), FilterSpec())

        assert [r.value for r in result.records] == [r.value for r in seeded_store.enumerate()]
        assert result.filters_applied == {}

    def test_length_bounds_inclusive(self, seeded_store):
        result = apply_filters(seeded_store.enumerate(), FilterSpec(min_length=4, max_length=5))
        assert [r.value for r in result.records] == ["hello", "abcd"]

    def test_word_count_exact(self, seeded_store):
        result = apply_filters(seeded_store.enumerate(), FilterSpec(word_count=2))
        assert [r.value for r in result.records] == ["race car"]

    def test_contains_character_case_insensitive(self, seeded_store):
        result = apply_filters(seeded_store.enumerate(), FilterSpec(contains_character="p"))
        assert [r.value for r in result.records] == ["A man, a plan, a canal: Panama"]

    def test_no_matches(self, seeded_store):
        result = apply_filters(seeded_store.enumerate(), FilterSpec(contains_character="z"))
        assert result.records == []
        assert result.count == 0

    def test_palindrome_false(self, seeded_store):
        result = apply_filters(seeded_store.enumerate(), FilterSpec(is_palindrome=False))
        assert [r.value for r in result.records] == ["hello", "ab", "abcd"]
