"""Shared HTTP helpers used by the build server client.

Encapsulates request/timeout error handling so callers get a single
``TransportError`` instead of the requests exception zoo.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

import requests

from constants import Constants
from errors import TransportError
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer

logger = logging.getLogger(__name__)


def safe_post(
    url: str,
    *,
    context: str,
    data: Optional[str] = None,
    timeout: Optional[float] = None,
    **kwargs: Any,
) -> requests.Response:
    """Perform a POST request with consistent error handling and DEBUG traces.

    Args:
        url: Target URL.
        context: Human-readable source tag for logs (e.g., "build-server").
        data: Optional payload for the POST body.
        timeout: Seconds before giving up; defaults to Constants.REQUEST_TIMEOUT.
        **kwargs: Passed through to requests.post.

    Returns:
        requests.Response: The HTTP response object.

    Raises:
        TransportError: On timeouts and connection failures.
    """
    timeout = Constants.REQUEST_TIMEOUT if timeout is None else timeout
    safe_target = safe_url(url)
    with Timer() as t:
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP request",
                extra=extra_context(
                    event="http_request",
                    component="http_client",
                    action="POST",
                    target=safe_target,
                    context=context
                )
            )
        try:
            res = requests.post(url, data=data, timeout=timeout, **kwargs)
        except requests.Timeout as exc:
            logger.error("%s request timed out after %s seconds", context, timeout)
            raise TransportError(
                f"{context} request to {safe_target} timed out after {timeout} seconds"
            ) from exc
        except requests.RequestException as exc:  # includes ConnectionError
            logger.error("%s connection error: %s", context, exc)
            raise TransportError(f"{context} connection error: {exc}") from exc
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP response",
                extra=extra_context(
                    event="http_response",
                    component="http_client",
                    action="POST",
                    outcome="success" if res.ok else "http_error",
                    status_code=res.status_code,
                    duration_ms=t.duration_ms(),
                    target=safe_target,
                    context=context
                )
            )
        return res
