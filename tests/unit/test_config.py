"""Unit tests for engine, query and observability configuration."""

from pydantic import ValidationError
import pytest

from zeto_search.config import (
    DEFAULT_STOP_WORDS,
    EngineConfig,
    ObservabilitySettings,
    SearchOptions,
    SuggestOptions,
)
from zeto_search.errors import ConfigurationError


@pytest.mark.unit
class TestEngineConfig:
    def test_defaults(self):
        config = EngineConfig(search_fields=["title"], result_fields=["id"])

        assert config.stop_words == frozenset(DEFAULT_STOP_WORDS)
        assert config.fuzzy_factor == 0.1
        assert config.min_token_length == 1
        assert config.max_token_length == 50
        assert config.enable_stemming is False
        assert config.identifier_field == "id"
        assert config.scoring == "bm25"
        assert (config.bm25_k1, config.bm25_b) == (1.5, 0.75)

    def test_fields_are_deduplicated_in_order(self):
        config = EngineConfig(search_fields=["title", "body", "title"], result_fields=["id", "id"])

        assert config.search_fields == ["title", "body"]
        assert config.result_fields == ["id"]

    def test_stop_words_are_case_folded(self):
        config = EngineConfig(search_fields=["t"], result_fields=["id"], stop_words=["The", "OF"])
        assert config.stop_words == frozenset({"the", "of"})

    def test_stop_words_use_full_case_folding(self):
        config = EngineConfig(search_fields=["t"], result_fields=["id"], stop_words=["Straße"])
        assert config.stop_words == frozenset({"strasse"})

    def test_null_stop_words_use_defaults(self):
        config = EngineConfig(search_fields=["t"], result_fields=["id"], stop_words=None)
        assert config.stop_words == frozenset(DEFAULT_STOP_WORDS)

    def test_empty_stop_words_disable_filtering(self):
        config = EngineConfig(search_fields=["t"], result_fields=["id"], stop_words=[])
        assert config.stop_words == frozenset()

    def test_is_frozen(self):
        config = EngineConfig(search_fields=["t"], result_fields=["id"])
        with pytest.raises(ValidationError):
            config.fuzzy_factor = 0.5

    @pytest.mark.parametrize(
        "options",
        [
            {},
            {"search_fields": ["title"]},
            {"search_fields": [], "result_fields": ["id"]},
            {"search_fields": ["title"], "result_fields": [""]},
            {"search_fields": ["title"], "result_fields": ["id"], "stop_words": "the"},
            {"search_fields": ["title"], "result_fields": ["id"], "fuzzy_factor": 1.5},
            {"search_fields": ["title"], "result_fields": ["id"], "min_token_length": 5, "max_token_length": 3},
            {"search_fields": ["title"], "result_fields": ["id"], "scoring": "cosine"},
            {"search_fields": ["title"], "result_fields": ["id"], "bm25_k1": 0},
            {"search_fields": ["title"], "result_fields": ["id"], "unknown": True},
        ],
    )
    def test_build_rejects_invalid_options(self, options):
        with pytest.raises(ConfigurationError):
            EngineConfig.build(options)

    def test_configuration_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            EngineConfig.build(None)

    def test_build_applies_overrides_to_existing_config(self):
        base = EngineConfig(search_fields=["title"], result_fields=["id"])

        derived = EngineConfig.build(base, enable_stemming=True)

        assert derived.enable_stemming is True
        assert base.enable_stemming is False
        with pytest.raises(ConfigurationError):
            EngineConfig.build(base, fuzzy_factor=-1)


@pytest.mark.unit
class TestSearchOptions:
    def test_defaults(self):
        options = SearchOptions()

        assert options.limit == 10
        assert options.offset == 0
        assert options.sort.by == "score"
        assert options.sort.order == "desc"
        assert options.fields is None
        assert options.fuzzy_factor is None
        assert options.debug is False

    @pytest.mark.parametrize(("limit", "expected"), [(None, 10), (0, 1), (-4, 1), (25, 25)])
    def test_limit_is_clamped(self, limit, expected):
        assert SearchOptions(limit=limit).limit == expected

    def test_offset_is_clamped(self):
        assert SearchOptions(offset=-2).offset == 0
        assert SearchOptions(offset=None).offset == 0

    def test_rejects_bad_values(self):
        with pytest.raises(ValidationError):
            SearchOptions(limit="abc")
        with pytest.raises(ValidationError):
            SearchOptions(sort={"by": "year", "order": "sideways"})
        with pytest.raises(ValidationError):
            SearchOptions(page=2)

    def test_suggest_defaults(self):
        options = SuggestOptions(fuzzy_factor=None, limit=None)

        assert options.limit == 5
        assert options.fuzzy_factor == 0.2


@pytest.mark.unit
class TestObservabilitySettings:
    def test_defaults(self, monkeypatch):
        for name in ("LOG_LEVEL", "LOG_JSON", "SERVICE_NAME", "TRACING_ENABLED", "METRICS_ENABLED"):
            monkeypatch.delenv(f"ZETO_SEARCH_{name}", raising=False)

        settings = ObservabilitySettings()

        assert settings.log_level == "INFO"
        assert settings.log_json is True
        assert settings.service_name == "zeto-search"

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("ZETO_SEARCH_LOG_LEVEL", "debug")
        monkeypatch.setenv("ZETO_SEARCH_LOG_JSON", "false")
        monkeypatch.setenv("ZETO_SEARCH_TRACING_ENABLED", "0")

        settings = ObservabilitySettings()

        assert settings.log_level == "DEBUG"
        assert settings.log_json is False
        assert settings.tracing_enabled is False

    def test_rejects_unknown_level(self):
        with pytest.raises(ValidationError, match="Unknown log level"):
            ObservabilitySettings(log_level="loud")
