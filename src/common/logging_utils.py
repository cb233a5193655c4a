"""Centralized logging helpers.

Provides one place to configure the root logger, build structured ``extra``
payloads for debug traces, redact credentials from URLs before they reach a
log line, and time HTTP calls.
"""
from __future__ import annotations

import logging
import os
import time
from typing import Any, Dict, Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from constants import Constants

_SENSITIVE_QUERY_KEYS = {"token", "access_token", "password", "api_key", "apikey", "secret"}
_RESERVED = set(vars(logging.makeLogRecord({})).keys()) | {"message", "asctime"}


def configure_logging(level: Optional[str] = None) -> None:
    """Install a stderr handler on the root logger.

    The level comes from ``level`` or the PKG_BUILD_REMOTE_LOG_LEVEL
    environment variable, defaulting to INFO. Calling this twice does not
    stack handlers.
    """
    level_name = (level or os.environ.get(Constants.ENV_LOG_LEVEL) or "INFO").upper()
    level_value = getattr(logging, level_name, logging.INFO)
    root = logging.getLogger()
    if not any(getattr(h, "_pkg_build_remote", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(Constants.LOG_FORMAT))
        handler._pkg_build_remote = True  # type: ignore[attr-defined]
        root.addHandler(handler)
    root.setLevel(level_value)


def add_file_handler(path: str) -> logging.Handler:
    """Mirror log output into ``path``."""
    file_handler = logging.FileHandler(path)
    file_handler.setFormatter(logging.Formatter(Constants.LOG_FILE_FORMAT))
    logging.getLogger().addHandler(file_handler)
    return file_handler


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when ``logger`` would emit DEBUG records."""
    return logger.isEnabledFor(logging.DEBUG)


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Build an ``extra`` mapping for structured log records.

    None values are dropped. Keys that collide with LogRecord attributes are
    prefixed with ``ctx_``.
    """
    out: Dict[str, Any] = {}
    for key, value in fields.items():
        if value is None:
            continue
        out[f"ctx_{key}" if key in _RESERVED else key] = value
    return out


def safe_url(url: str) -> str:
    """Return ``url`` with user info and secret query parameters redacted."""
    try:
        parts = urlsplit(str(url))
    except ValueError:
        return "<unparseable url>"
    netloc = parts.netloc
    if "@" in netloc:
        netloc = "***@" + netloc.rsplit("@", 1)[1]
    query = parts.query
    if query:
        pairs = [
            (k, "***" if k.lower() in _SENSITIVE_QUERY_KEYS else v)
            for k, v in parse_qsl(query, keep_blank_values=True)
        ]
        query = urlencode(pairs)
    return urlunsplit((parts.scheme, netloc, parts.path, query, parts.fragment))


class Timer:
    """Context manager measuring elapsed wall time."""

    def __init__(self) -> None:
        self._start = 0.0
        self._end: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self._end = time.perf_counter()

    def duration_ms(self) -> int:
        """Milliseconds since entering (or until exiting) the block."""
        end = self._end if self._end is not None else time.perf_counter()
        return int((end - self._start) * 1000)
