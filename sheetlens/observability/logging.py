# sheetlens/observability/logging.py
from __future__ import annotations

import logging

from sheetlens.observability.context import current_context


class ContextFilter(logging.Filter):
    """Copies the request, user and file ids onto each LogRecord."""

    def filter(self, record: logging.LogRecord) -> bool:
        for name, value in current_context().items():
            setattr(record, name, value)
        return True
