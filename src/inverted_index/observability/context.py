"""Per-operation log correlation for index builds and searches."""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING
from uuid import uuid4


if TYPE_CHECKING:
    from collections.abc import Generator

# Ids and source of the engine operation in progress
_operation: ContextVar[dict[str, str] | None] = ContextVar("inverted_index_operation", default=None)


def _new_id(length: int = 32) -> str:
    return uuid4().hex[:length]


def get_trace_context() -> dict[str, str]:
    """Return a copy of the active operation context, or ``{}`` outside one."""
    return dict(_operation.get() or {})


@contextmanager
def source_context(
    source: str | None = None,
    *,
    trace_id: str | None = None,
) -> Generator[dict[str, str], None, None]:
    """Correlate log records emitted inside the block.

    A block opened outside any operation starts a new trace; a nested block
    joins the enclosing trace with a fresh span. ``source`` defaults to the
    enclosing block's source. The previous context is restored on exit.
    """
    parent = _operation.get() or {}
    ctx = {
        "trace_id": trace_id or parent.get("trace_id") or _new_id(),
        "span_id": _new_id(16),
    }
    if source := source or parent.get("source"):
        ctx["source"] = source
    token = _operation.set(ctx)
    try:
        yield dict(ctx)
    finally:
        _operation.reset(token)
