"""Unit tests for the tokenizer pipeline and filters."""

import pytest

from zeto_search.search.analyzers import (
    AnalyzerPipeline,
    LengthFilter,
    LowercaseFilter,
    RegexTokenizer,
    StemFilter,
    Token,
    build_analyzer,
    make_tokenize,
    stem,
    tokenize,
)


@pytest.mark.unit
class TestToken:
    def test_copy_with_leaves_original_untouched(self):
        token = Token(text="Configure", position=2, start_char=10, end_char=19)

        clone = token.copy_with(text="configure")

        assert clone.text == "configure"
        assert clone.position == 2
        assert clone.start_char == 10
        assert token.text == "Configure"


@pytest.mark.unit
class TestRegexTokenizer:
    def test_emits_tokens_with_offsets(self):
        tokens = list(RegexTokenizer()("Hello, world"))

        assert [t.text for t in tokens] == ["Hello", "world"]
        assert [t.position for t in tokens] == [0, 1]
        assert (tokens[1].start_char, tokens[1].end_char) == (7, 12)

    def test_splits_on_punctuation(self):
        assert [t.text for t in RegexTokenizer()("Node.js")] == ["Node", "js"]


@pytest.mark.unit
class TestFilters:
    def test_lowercase_filter_folds_case(self):
        tokens = LowercaseFilter()(RegexTokenizer()("JavaScript Basics"))
        assert [t.text for t in tokens] == ["javascript", "basics"]

    def test_length_filter_bounds_are_inclusive(self):
        filter_ = LengthFilter(min_length=2, max_length=4)
        tokens = filter_(RegexTokenizer()("a be cat door window"))
        assert [t.text for t in tokens] == ["be", "cat", "door"]

    def test_stem_filter_applies_suffix_rules(self):
        tokens = StemFilter()(RegexTokenizer()("running runs"))
        assert [t.text for t in tokens] == ["run", "run"]


@pytest.mark.unit
class TestStem:
    @pytest.mark.parametrize(
        ("word", "expected"),
        [
            ("running", "run"),
            ("runs", "run"),
            ("libraries", "library"),
            ("searching", "search"),
            ("classes", "class"),
            ("class", "class"),
            ("falling", "fall"),
            ("go", "go"),
        ],
    )
    def test_stem(self, word, expected):
        assert stem(word) == expected


@pytest.mark.unit
class TestPipeline:
    def test_positions_are_renumbered_after_filtering(self):
        pipeline = AnalyzerPipeline(RegexTokenizer(), [LengthFilter(min_length=3)])

        tokens = pipeline("a big red fox")

        assert [(t.text, t.position) for t in tokens] == [("big", 0), ("red", 1), ("fox", 2)]

    def test_build_analyzer_without_stemming(self):
        analyzer = build_analyzer()
        assert [t.text for t in analyzer("Running Dogs")] == ["running", "dogs"]


@pytest.mark.unit
class TestTokenize:
    def test_case_folds_and_splits(self):
        assert tokenize("Node.js Advanced") == ["node", "js", "advanced"]

    def test_empty_text(self):
        assert tokenize("") == []
        assert tokenize("   ") == []

    def test_length_bounds(self):
        assert tokenize("a big elephant", min_length=2, max_length=3) == ["big"]

    def test_stemming_is_optional(self):
        assert tokenize("running dogs", stem=True) == ["run", "dog"]
        assert tokenize("running dogs") == ["running", "dogs"]

    def test_numbers_are_tokens(self):
        assert tokenize("Released 2024") == ["released", "2024"]

    def test_make_tokenize_binds_options(self):
        fn = make_tokenize(stem=True, min_length=3)
        assert fn("an apples tree") == ["apple", "tree"]
        assert fn("") == []
