# tracker_backend/analytics_logger.py
"""
Logging for analytics and save-path events.

Two outputs:
- a standard Python logger ('tracker_analytics') writing to a daily debug log
- a JSONL event log (one JSON object per line) for later analysis

Handlers are attached on first use so importing the package never touches disk.
"""
import os
import json
import logging
from datetime import datetime
from typing import Any, Dict, Optional

from .settings import load_settings

logger = logging.getLogger('tracker_analytics')

_configured_dir: Optional[str] = None


def _log_dir() -> str:
    return load_settings().log_dir


def get_logger() -> logging.Logger:
    """Return the analytics logger, (re)attaching the file handler if the log dir changed."""
    global _configured_dir
    settings = load_settings()
    if _configured_dir == settings.log_dir and logger.handlers:
        return logger

    os.makedirs(settings.log_dir, exist_ok=True)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handler = logging.FileHandler(
        os.path.join(settings.log_dir, f'analytics_debug_{datetime.now().strftime("%Y%m%d")}.log'),
        encoding='utf-8'
    )
    formatter = logging.Formatter('%(asctime)s [%(levelname)s] %(message)s')
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, settings.log_level, logging.INFO))
    logger.propagate = False
    _configured_dir = settings.log_dir
    return logger


def event_log_file() -> str:
    return os.path.join(_log_dir(), f'analytics_{datetime.now().strftime("%Y%m%d")}.jsonl')


def log_event(event_type: str, **data: Any) -> None:
    """Append one analytics event to the JSONL log.

    Args:
        event_type: short name, e.g. 'insights_computed' or 'report_finalized'
        **data: JSON-serialisable payload (non-serialisable values are stringified)
    """
    log = get_logger()
    event: Dict[str, Any] = {
        'event_type': event_type,
        'timestamp': datetime.now().isoformat(),
        **data,
    }
    try:
        with open(event_log_file(), 'a', encoding='utf-8') as f:
            f.write(json.dumps(event, default=str) + '\n')
        log.info(f"Logged {event_type}")
    except OSError as e:
        log.error(f"Failed to write {event_type} event: {e}", exc_info=True)
