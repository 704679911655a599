"""Context variables injected into every log record."""

from contextvars import ContextVar
from typing import Dict, Optional

_domain: ContextVar[Optional[str]] = ContextVar("log_domain", default=None)
_stage: ContextVar[Optional[str]] = ContextVar("log_stage", default=None)
_worker_id: ContextVar[Optional[str]] = ContextVar("log_worker_id", default=None)


def set_log_context(
    domain: Optional[str] = None,
    stage: Optional[str] = None,
    worker_id: Optional[str] = None,
) -> None:
    """
    Set logging context variables.

    Only the arguments that are passed (not None) are updated.
    Context variables follow asyncio tasks, so values set before
    tasks are spawned are visible inside them.
    """
    if domain is not None:
        _domain.set(domain)
    if stage is not None:
        _stage.set(stage)
    if worker_id is not None:
        _worker_id.set(worker_id)


def get_log_context() -> Dict[str, Optional[str]]:
    """Return current logging context as a dict."""
    return {
        "domain": _domain.get(),
        "stage": _stage.get(),
        "worker_id": _worker_id.get(),
    }


def clear_log_context() -> None:
    """Reset all logging context variables."""
    _domain.set(None)
    _stage.set(None)
    _worker_id.set(None)
