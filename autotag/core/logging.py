# autotag/core/logging.py
"""
Logging helpers for the tagging pipeline.

Modules log through `get_logger(__name__)`. `setup_logging()` is called once by
entry points (CLI, trigger host) and attaches:
  - a stderr handler (INFO, or DEBUG when AUTOTAG_DEBUG is on)
  - an optional rotating file handler when AUTOTAG_LOG_FILE is set

API keys never reach a handler unredacted: a filter replaces any configured key
value with [REDACTED].
"""

from __future__ import annotations

import logging
import os
import sys
import threading
from collections import OrderedDict
from logging.handlers import RotatingFileHandler

ROOT_LOGGER = "autotag"
_KEY_ENV_VARS = ("OPENAI_API_KEY", "AUTOTAG_API_KEY")
_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_DATEFMT = "(%Y-%m-%d %H:%M:%S)"

# Values shorter than this are never redacted
MIN_SECRET_LEN = 8
_MAX_SECRETS = 256

_extra_secrets: OrderedDict[str, None] = OrderedDict()
_secrets_lock = threading.Lock()


def debug_enabled() -> bool:
    return os.getenv("AUTOTAG_DEBUG", "").strip().lower() in {"1", "true", "yes", "on"}


def register_secret(value: str | None) -> None:
    """
    Remember a credential so it is scrubbed from log output.

    Only the most recent `_MAX_SECRETS` values are kept; values shorter than
    MIN_SECRET_LEN are ignored.
    """
    if not value or len(value) < MIN_SECRET_LEN:
        return
    with _secrets_lock:
        _extra_secrets[value] = None
        _extra_secrets.move_to_end(value)
        while len(_extra_secrets) > _MAX_SECRETS:
            _extra_secrets.popitem(last=False)


def clear_secrets() -> None:
    with _secrets_lock:
        _extra_secrets.clear()


def redact(s: str) -> str:
    with _secrets_lock:
        known = list(_extra_secrets)
    for val in [os.getenv(k) for k in _KEY_ENV_VARS] + known:
        if val and len(val) >= MIN_SECRET_LEN:
            s = s.replace(val, "[REDACTED]")
    return s


class _RedactingFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        msg = record.getMessage()
        cleaned = redact(msg)
        if cleaned != msg:
            record.msg = cleaned
            record.args = None
        return True


def get_logger(name: str) -> logging.Logger:
    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


def setup_logging(level: int | None = None, log_file: str | None = None) -> logging.Logger:
    """Configure the package logger. Safe to call more than once."""
    logger = logging.getLogger(ROOT_LOGGER)
    if level is None:
        level = logging.DEBUG if debug_enabled() else logging.INFO
    logger.setLevel(level)

    for h in logger.handlers[:]:
        logger.removeHandler(h)

    formatter = logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT)
    redactor = _RedactingFilter()

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)
    console.setFormatter(formatter)
    console.addFilter(redactor)
    logger.addHandler(console)

    log_file = log_file or os.getenv("AUTOTAG_LOG_FILE")
    if log_file:
        try:
            os.makedirs(os.path.dirname(log_file) or ".", exist_ok=True)
            handler = RotatingFileHandler(log_file, maxBytes=1_000_000, backupCount=3, encoding="utf-8")
            handler.setLevel(logging.DEBUG)
            handler.setFormatter(formatter)
            handler.addFilter(redactor)
            logger.addHandler(handler)
        except OSError as e:
            logger.warning("could not open log file %s: %s", log_file, e)

    return logger


def preview(text: str, limit: int = 2000) -> str:
    """Trim long payloads (e.g. base64 images) before they are logged."""
    return text if len(text) <= limit else text[:limit] + "…"
