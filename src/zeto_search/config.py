"""Engine and runtime configuration using Pydantic models."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from zeto_search.errors import ConfigurationError


DEFAULT_STOP_WORDS: tuple[str, ...] = ("the", "is", "and", "a", "an")
DEFAULT_LIMIT = 10
DEFAULT_SUGGEST_LIMIT = 5
DEFAULT_SUGGEST_FUZZY_FACTOR = 0.2


def _ordered_unique(values: list[str]) -> list[str]:
    seen: set[str] = set()
    ordered: list[str] = []
    for value in values:
        if value in seen:
            continue
        seen.add(value)
        ordered.append(value)
    return ordered


class EngineConfig(BaseModel):
    """Immutable construction options for a search engine instance.

    Fields:
        search_fields: Record fields that are tokenized and indexed
        result_fields: Record fields projected into search results
        stop_words: Tokens excluded from indexing and querying
        fuzzy_factor: Fraction of a query term's length tolerated as edit distance
        min_token_length / max_token_length: Token length bounds applied by the tokenizer
        enable_stemming: Apply suffix stemming to tokens
        identifier_field: Field holding the stable record identifier
        scoring: Relevance function used by the query engine
        bm25_k1 / bm25_b: BM25 saturation and length-normalization parameters
        name: Label attached to metrics and spans
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    search_fields: list[str] = Field(min_length=1, description="Fields to index")
    result_fields: list[str] = Field(min_length=1, description="Fields to return with each result")
    stop_words: frozenset[str] = Field(default=frozenset(DEFAULT_STOP_WORDS))
    fuzzy_factor: float = Field(default=0.1, ge=0.0, le=1.0)
    min_token_length: int = Field(default=1, ge=1)
    max_token_length: int = Field(default=50, ge=1)
    enable_stemming: bool = False
    identifier_field: str = Field(default="id", min_length=1)
    scoring: Literal["bm25", "tfidf"] = "bm25"
    bm25_k1: float = Field(default=1.5, gt=0.0)
    bm25_b: float = Field(default=0.75, ge=0.0, le=1.0)
    name: str = Field(default="default", min_length=1)

    @field_validator("search_fields", "result_fields")
    @classmethod
    def _dedupe_fields(cls, value: list[str]) -> list[str]:
        if any(not field_name for field_name in value):
            raise ValueError("field names must be non-empty strings")
        return _ordered_unique(value)

    @field_validator("stop_words", mode="before")
    @classmethod
    def _fold_stop_words(cls, value: Any) -> Any:
        if value is None:
            return frozenset(DEFAULT_STOP_WORDS)
        if isinstance(value, str):
            raise ValueError("stop_words must be a collection of strings, not a single string")
        return frozenset(str(word).casefold() for word in value)

    @model_validator(mode="after")
    def _check_token_bounds(self) -> EngineConfig:
        if self.min_token_length > self.max_token_length:
            raise ValueError(
                f"min_token_length ({self.min_token_length}) must not exceed "
                f"max_token_length ({self.max_token_length})"
            )
        return self

    @classmethod
    def build(cls, config: EngineConfig | Mapping[str, Any] | None = None, **options: Any) -> EngineConfig:
        """Validate options into a config, raising ConfigurationError on failure."""
        if isinstance(config, EngineConfig):
            if not options:
                return config
            data = config.model_dump()
        else:
            data = dict(config or {})
        data.update(options)
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid search engine configuration: {exc}") from exc


class SortOptions(BaseModel):
    """Result ordering: a result field (or "score") and a direction."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    by: str = "score"
    order: Literal["asc", "desc"] = "desc"


class SearchOptions(BaseModel):
    """Per-query options for ``ZetoSearch.search``.

    ``limit`` and ``offset`` are clamped rather than rejected: ``limit`` is at
    least 1 (``None`` means the default of 10) and ``offset`` at least 0.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, arbitrary_types_allowed=True)

    fields: list[str] | None = None
    fuzzy_factor: float | None = Field(default=None, ge=0.0, le=1.0)
    filter: Callable[[Mapping[str, Any]], bool] | None = None
    sort: SortOptions = Field(default_factory=SortOptions)
    limit: int = DEFAULT_LIMIT
    offset: int = 0
    debug: bool = False

    @field_validator("limit", mode="before")
    @classmethod
    def _clamp_limit(cls, value: Any) -> Any:
        if value is None:
            return DEFAULT_LIMIT
        if isinstance(value, int) and not isinstance(value, bool):
            return max(1, value)
        return value

    @field_validator("offset", mode="before")
    @classmethod
    def _clamp_offset(cls, value: Any) -> Any:
        if value is None:
            return 0
        if isinstance(value, int) and not isinstance(value, bool):
            return max(0, value)
        return value


class SuggestOptions(BaseModel):
    """Options for ``ZetoSearch.auto_suggest``."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    limit: int = DEFAULT_SUGGEST_LIMIT
    fuzzy_factor: float = Field(default=DEFAULT_SUGGEST_FUZZY_FACTOR, ge=0.0, le=1.0)
    fields: list[str] | None = None

    @field_validator("limit", mode="before")
    @classmethod
    def _clamp_limit(cls, value: Any) -> Any:
        if value is None:
            return DEFAULT_SUGGEST_LIMIT
        if isinstance(value, int) and not isinstance(value, bool):
            return max(1, value)
        return value

    @field_validator("fuzzy_factor", mode="before")
    @classmethod
    def _default_fuzzy_factor(cls, value: Any) -> Any:
        return DEFAULT_SUGGEST_FUZZY_FACTOR if value is None else value


class ObservabilitySettings(BaseSettings):
    """Process-level observability settings loaded from ``ZETO_SEARCH_*`` variables."""

    model_config = SettingsConfigDict(
        env_prefix="ZETO_SEARCH_",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    log_level: str = Field(default="info", description="Root logging level")
    log_json: bool = Field(default=True, description="Emit structured JSON logs")
    service_name: str = Field(default="zeto-search", description="OpenTelemetry service name")
    tracing_enabled: bool = Field(default=True, description="Install an SDK tracer provider")
    metrics_enabled: bool = Field(default=True, description="Install an SDK meter provider")

    @field_validator("log_level")
    @classmethod
    def _check_level(cls, value: str) -> str:
        normalized = value.upper()
        if normalized not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level '{value}'")
        return normalized
