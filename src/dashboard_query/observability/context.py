"""Per-thread trace ids attached to every JSON log line.

``create_span`` writes the active span id here so log records emitted inside a
query pipeline run can be joined with the span that timed it. Timer threads
start with an empty context and get fresh ids on first use.
"""

from __future__ import annotations

from contextvars import ContextVar
from uuid import uuid4


SPAN_ID_HEX_LEN = 16

trace_context: ContextVar[dict | None] = ContextVar("trace_context", default=None)


def _new_ids() -> dict[str, str]:
    return {"trace_id": uuid4().hex, "span_id": uuid4().hex[:SPAN_ID_HEX_LEN]}


def get_trace_context() -> dict:
    """Return the active ids, minting a fresh pair if none are set."""
    ctx = trace_context.get()
    if not ctx or not ctx.get("trace_id"):
        ctx = {**(ctx or {}), **_new_ids()}
        trace_context.set(ctx)
    return ctx


def set_trace_context(trace_id: str, span_id: str, **extra: object) -> None:
    trace_context.set({"trace_id": trace_id, "span_id": span_id, **extra})


def update_span_id(span_id: str) -> None:
    """Point log correlation at a new span within the current trace."""
    ctx = get_trace_context()
    trace_context.set({**ctx, "span_id": span_id})
