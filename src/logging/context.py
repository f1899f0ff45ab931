# src/logging/context.py - v2
"""Contextual logging support: attach document_id, run_id, step to log records.

Values are held in context variables so the per-document context set by
the batch orchestrator follows the coroutine that processes the document.
"""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

_document_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "document_id", default=None
)
_run_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "run_id", default=None
)
_step: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "step", default=None
)


@dataclass
class LogContext:
    """Snapshot of the current logging context."""

    document_id: str | None = None
    run_id: str | None = None
    step: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        document_id=_document_id.get(),
        run_id=_run_id.get(),
        step=_step.get(),
    )


def set_run_context(run_id: str) -> None:
    """Set the batch run id (called once per orchestrator run)."""
    _run_id.set(run_id)


def set_document_context(document_id: str | None) -> None:
    """Set the document being processed; None leaves document scope."""
    _document_id.set(document_id)
    _step.set(None)


def set_step(step: str | None) -> None:
    """Set the processing step (cache, classify, extract, group...)."""
    _step.set(step)


def clear_context() -> None:
    """Reset all context variables."""
    _document_id.set(None)
    _run_id.set(None)
    _step.set(None)
