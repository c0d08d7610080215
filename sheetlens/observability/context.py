# sheetlens/observability/context.py
from __future__ import annotations

from contextvars import ContextVar
from typing import Dict, Optional

request_id_ctx: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
user_id_ctx: ContextVar[Optional[str]] = ContextVar("user_id", default=None)
file_id_ctx: ContextVar[Optional[str]] = ContextVar("file_id", default=None)

# LogRecord attribute -> context var
LOG_CONTEXT: Dict[str, ContextVar[Optional[str]]] = {
    "request_id": request_id_ctx,
    "user_id": user_id_ctx,
    "file_id": file_id_ctx,
}


def current_context() -> Dict[str, str]:
    """Snapshot of the request-scoped ids, "-" where unset"""
    return {name: var.get() or "-" for name, var in LOG_CONTEXT.items()}
