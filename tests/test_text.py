"""Tests for keyword extraction, intent and fallback titles."""

import pytest

from autotitle.titles.text import (
    STOP_WORDS,
    extract_keywords,
    generate_fallback_title,
    infer_intent,
    sanitize_title,
)


class TestSanitizeTitle:
    def test_removes_special_characters(self):
        assert sanitize_title("Hello! World?", 60) == "Hello World"
        assert sanitize_title('Test: "quotes"', 60) == "Test quotes"

    def test_preserves_dots_in_filenames(self):
        assert sanitize_title("Update AGENTS.md file", 60) == "Update AGENTS.md file"
        assert sanitize_title("Fix package.json", 60) == "Fix package.json"

    def test_preserves_hyphens(self):
        assert sanitize_title("fix-bug-123", 60) == "fix-bug-123"

    def test_normalizes_whitespace(self):
        assert sanitize_title("Hello   World", 60) == "Hello World"
        assert sanitize_title("  leading spaces  ", 60) == "leading spaces"

    def test_respects_max_length(self):
        long_title = "This is a very long title that exceeds the maximum length"
        assert len(sanitize_title(long_title, 20)) <= 20

    def test_empty(self):
        assert sanitize_title("", 60) == ""


class TestExtractKeywords:
    def test_extracts_meaningful_words(self):
        keywords = extract_keywords("Please help me fix the login bug")
        assert "login" in keywords
        assert "bug" in keywords

    def test_filters_stop_words(self):
        keywords = extract_keywords("I want to create a new function")
        for word in ("i", "want", "to", "a", "create"):
            assert word not in keywords
        assert "function" in keywords

    def test_filters_common_verbs(self):
        assert extract_keywords("came went use find try work") == []

    def test_preserves_word_order(self):
        assert extract_keywords("database migration testing") == [
            "database",
            "migration",
            "testing",
        ]

    def test_removes_duplicates(self):
        keywords = extract_keywords("bug bug bug fix bug")
        assert keywords.count("bug") == 1
        assert keywords == ["bug", "fix"]

    def test_limits_to_six(self):
        keywords = extract_keywords("one two three four five six seven eight nine ten")
        assert keywords == ["one", "two", "three", "four", "five", "six"]

    def test_filters_short_words(self):
        keywords = extract_keywords("a ab abc abcd")
        assert keywords == ["abc", "abcd"]

    def test_punctuation_splits_tokens(self):
        assert extract_keywords("Fix package.json!") == ["fix", "package", "json"]

    def test_empty(self):
        assert extract_keywords("") == []

    def test_only_stop_words(self):
        assert extract_keywords("the and or but") == []

    @pytest.mark.parametrize(
        "text",
        [
            "Help me set up authentication with JWT in my Express app",
            "Why does the Docker build FAIL on CI?? It worked yesterday...",
            "refactor refactor REFACTOR the payment-service module",
        ],
    )
    def test_keyword_properties(self, text):
        keywords = extract_keywords(text)
        assert len(keywords) <= 6
        assert len(set(keywords)) == len(keywords)
        for keyword in keywords:
            assert len(keyword) > 2
            assert keyword not in STOP_WORDS
            assert keyword in text.lower()
        positions = [text.lower().index(k) for k in keywords]
        assert positions == sorted(positions)


class TestInferIntent:
    @pytest.mark.parametrize(
        "text,intent",
        [
            ("add unit test for login", "testing"),
            ("pytest failing", "testing"),
            ("debug this error", "debugging"),
            ("stack trace issue", "debugging"),
            ("fix this bug", "fix"),
            ("broken login", "fix"),
            ("cleanup old code", "refactor"),
            ("update readme", "docs"),
            ("review this PR", "review"),
            ("pull request changes", "review"),
            ("pull-request changes", "review"),
            ("k8s cluster", "devops"),
            ("ci pipeline", "devops"),
            ("controller logic", "api"),
            ("css styling", "ui"),
            ("sql migration", "database"),
            ("auth flow", "auth"),
            ("password reset", "auth"),
            ("install dependencies", "setup"),
            ("something random", ""),
        ],
    )
    def test_categories(self, text, intent):
        assert infer_intent(text) == intent

    @pytest.mark.parametrize("text", ["pullrequest template", "pull_request hook"])
    def test_pull_request_needs_separator(self, text):
        assert infer_intent(text) != "review"

    def test_earlier_category_wins(self):
        assert infer_intent("auth issue") == "debugging"
        assert infer_intent("fix the flaky jest test") == "testing"

    def test_matches_whole_words_only(self):
        assert infer_intent("testimonials page layout") == ""


class TestGenerateFallbackTitle:
    def test_short_message_title_cased(self):
        assert generate_fallback_title("fix bug", 60) == "Fix Bug"

    def test_short_message_keeps_stop_words(self):
        assert generate_fallback_title("the and or", 60) == "The And Or"

    def test_empty_and_tiny_inputs(self):
        assert generate_fallback_title("", 60) == ""
        assert generate_fallback_title("a", 60) == ""

    def test_long_message_uses_keywords(self):
        title = generate_fallback_title(
            "Help me set up authentication with JWT in my Express app", 38
        )
        assert title == "Set Authentication Jwt Express App"

    def test_stops_before_exceeding(self):
        title = generate_fallback_title("this is a very long message with many words", 20)
        assert title == "Long Message Many"

    def test_long_stop_word_message(self):
        assert generate_fallback_title("the and or but " * 10, 20) == ""

    def test_single_oversized_keyword_is_cut(self):
        title = generate_fallback_title("supercalifragilisticexpialidocious " * 3, 10)
        assert title == "Supercalif"

    @pytest.mark.parametrize(
        "text,max_length",
        [
            *[
                ("Investigate intermittent websocket disconnects in the staging cluster", n)
                for n in (1, 5, 12, 40, 60)
            ],
            ("ßeta", 4),
            ("straße", 6),
        ],
    )
    def test_never_exceeds_max_length(self, text, max_length):
        assert len(generate_fallback_title(text, max_length)) <= max_length

    def test_non_positive_budget(self):
        assert generate_fallback_title("fix bug", 0) == ""
