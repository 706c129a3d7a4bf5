# ============================================================================
# src/lab_ingestion/utils/logging.py
# ============================================================================
"""
Logging setup and helpers for the lab ingestion engine.

Records may carry pipeline context through `extra=` (strategy name, page
number, canonical key); the JSON formatter emits those as top-level fields.
"""

import json
import logging
import sys
import time
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

# Extra record attributes copied into JSON output
CONTEXT_FIELDS = ("strategy", "page", "key")

# Chatty third-party loggers kept at WARNING
QUIET_LOGGERS = ("PIL", "aiohttp.access", "multipart", "python_multipart")

TEXT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    format_json: bool = False
) -> None:
    """
    Configure the root logger for the API process or a script.

    Args:
        level: Logging level name; unknown names fall back to INFO
        log_file: Also append to this file (parent directories are created)
        format_json: One JSON object per record instead of plain text
    """
    formatter = JsonFormatter() if format_json else logging.Formatter(TEXT_FORMAT, DATE_FORMAT)

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(path, encoding='utf-8'))

    for handler in handlers:
        handler.setFormatter(formatter)

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        handlers=handlers,
        force=True
    )

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


class JsonFormatter(logging.Formatter):
    """JSON log formatter. Cyrillic line texts are written unescaped."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            'timestamp': datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'function': record.funcName,
            'line': record.lineno,
        }
        for name in CONTEXT_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                entry[name] = value

        if record.exc_info:
            entry['exception'] = self.formatException(record.exc_info)

        return json.dumps(entry, ensure_ascii=False, default=str)


@contextmanager
def log_duration(logger: logging.Logger, operation: str):
    """
    Log how long a block took, including when it raises.

    Args:
        logger: Logger instance
        operation: Operation name used in the message
    """
    start = time.perf_counter()
    try:
        yield
    except BaseException:
        logger.info(f"{operation} aborted after {time.perf_counter() - start:.3f}s")
        raise
    logger.info(f"{operation} completed in {time.perf_counter() - start:.3f}s")


def shorten(text: str, limit: int = 60) -> str:
    """Truncate line text for log messages."""
    if text is None:
        return ""
    return text if len(text) <= limit else text[:limit] + "..."
