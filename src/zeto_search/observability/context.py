"""Trace context propagation for log correlation."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from uuid import uuid4


trace_context: ContextVar[dict | None] = ContextVar("zeto_search_trace_context", default=None)


def generate_trace_id() -> str:
    """Generate a 32-char hex trace ID."""
    return uuid4().hex


def generate_span_id() -> str:
    """Generate a 16-char hex span ID."""
    return uuid4().hex[:16]


def get_trace_context() -> dict:
    """Get current trace context with trace_id and span_id."""
    ctx = trace_context.get()
    if ctx is None or not ctx.get("trace_id"):
        ctx = {**(ctx or {}), "trace_id": generate_trace_id(), "span_id": generate_span_id()}
        trace_context.set(ctx)
    return ctx


def set_trace_context(trace_id: str, span_id: str, **extra: object) -> None:
    trace_context.set({"trace_id": trace_id, "span_id": span_id, **extra})


@contextmanager
def bound_context(**fields: object) -> Iterator[None]:
    """Attach ``fields`` (engine name, operation) to every log line in the block."""
    token = trace_context.set({**(trace_context.get() or {}), **fields})
    try:
        yield
    finally:
        trace_context.reset(token)


def update_from_span_context(trace_id: int, span_id: int) -> None:
    """Mirror an OpenTelemetry span context so log lines carry its ids."""
    ctx = trace_context.get() or {}
    trace_context.set({**ctx, "trace_id": format(trace_id, "032x"), "span_id": format(span_id, "016x")})
