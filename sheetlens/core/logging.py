# sheetlens/core/logging.py
import logging
import sys
from pathlib import Path
from typing import Optional

from sheetlens.core.config import settings
from sheetlens.observability.logging import ContextFilter

QUIET_LOGGERS = ("sqlalchemy.engine", "uvicorn.access", "httpx", "multipart")


def setup_logging(
        log_level: Optional[str] = None,
        log_file: Optional[str] = None
) -> None:
    """
    Configure the root logger: stdout plus an optional file, every line tagged
    with the request id and the authenticated user id
    """
    level = (log_level or settings.LOG_LEVEL).upper()
    log_file = log_file or settings.LOG_FILE

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    # Filter on handlers so records from every logger carry the context fields
    context_filter = ContextFilter()
    for handler in handlers:
        handler.addFilter(context_filter)

    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s user=%(user_id)s] - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
        force=True
    )

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).info(f"Logging configured with level: {level}")
