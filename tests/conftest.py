"""Shared test fixtures and configuration."""

from pathlib import Path
import sys

from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
import pytest


SRC_ROOT = Path(__file__).resolve().parents[1] / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from zeto_search import ZetoSearch
from zeto_search.observability import tracing as tracing_module


@pytest.fixture
def programming_docs():
    """The three-title corpus used throughout the ranking tests."""
    return [
        {"id": 1, "title": "JavaScript Basics"},
        {"id": 2, "title": "Node.js Advanced"},
        {"id": 3, "title": "TypeScript Guide"},
    ]


@pytest.fixture
def articles():
    """Multi-field records with authors, years and a missing year."""
    return [
        {
            "id": "a1",
            "title": "Python for Data Science",
            "body": "Python makes data analysis pleasant. Python notebooks help.",
            "author": "Ada",
            "year": 2021,
        },
        {
            "id": "a2",
            "title": "Learning Rust",
            "body": "Rust ownership explained with Python comparisons.",
            "author": "grace",
            "year": 2023,
        },
        {
            "id": "a3",
            "title": "Python Testing Patterns",
            "body": "Fixtures and parametrization in pytest.",
            "author": "Linus",
            "year": None,
        },
        {
            "id": "a4",
            "title": "Cooking at Home",
            "body": "Recipes for busy evenings.",
            "author": "Bob",
            "year": 2019,
        },
    ]


@pytest.fixture
def make_engine():
    """Factory for engines with title search and id/title results by default."""

    def _make(**options):
        options.setdefault("search_fields", ["title"])
        options.setdefault("result_fields", ["id", "title"])
        return ZetoSearch(**options)

    return _make


@pytest.fixture
def article_engine(articles):
    engine = ZetoSearch(
        search_fields=["title", "body"],
        result_fields=["id", "title", "author", "year"],
    )
    engine.index_documents(articles)
    return engine


@pytest.fixture
def span_exporter(monkeypatch):
    """Route engine spans to an in-memory exporter for the duration of a test."""
    exporter = InMemorySpanExporter()
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(exporter))
    monkeypatch.setitem(tracing_module._tracer_holder, "tracer", provider.get_tracer("tests"))
    yield exporter
    exporter.clear()
