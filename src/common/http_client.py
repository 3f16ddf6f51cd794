"""Shared HTTP helpers used by repository clients.

Encapsulates request/timeout error handling and DEBUG traces so callers do
not duplicate try/except blocks. Failures are raised as ``HttpRequestError``
and never terminate the process: one unreachable repository must not stop
the others from being queried.
"""
from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional, Tuple

import requests

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer

logger = logging.getLogger(__name__)


class HttpRequestError(Exception):
    """Raised when a request could not produce any HTTP response."""

    def __init__(self, url: str, message: str, timeout: bool = False):
        self.url = url
        self.timeout = timeout
        super().__init__(f"{message} ({safe_url(url)})")


def robust_get(
    url: str,
    *,
    session: Optional[requests.Session] = None,
    headers: Optional[Dict[str, str]] = None,
    timeout: Optional[float] = None,
    max_attempts: Optional[int] = None,
    **kwargs: Any
) -> Tuple[int, Dict[str, str], str]:
    """Perform a GET request with timeout and optional retries, with DEBUG traces.

    Server errors (5xx) and transport failures are retried up to
    ``max_attempts`` with a linear back-off; other statuses return at once.

    Returns:
        Tuple of (status_code, headers_dict, text)

    Raises:
        HttpRequestError: every attempt failed without a response.
    """
    getter = session.get if session is not None else requests.get
    timeout = Constants.REQUEST_TIMEOUT if timeout is None else timeout
    attempts = max(1, Constants.HTTP_RETRY_MAX if max_attempts is None else max_attempts)
    safe_target = safe_url(url)
    last_error: Optional[HttpRequestError] = None
    last_response: Optional[Tuple[int, Dict[str, str], str]] = None

    for attempt in range(attempts):
        if attempt:
            time.sleep(Constants.HTTP_RETRY_BASE_DELAY_SEC * attempt)
        with Timer() as t:
            try:
                if is_debug_enabled(logger):
                    logger.debug(
                        "HTTP request",
                        extra=extra_context(
                            event="http_request",
                            component="http_client",
                            action="GET",
                            target=safe_target,
                            attempt=attempt + 1
                        )
                    )
                response = getter(url, timeout=timeout, headers=headers, **kwargs)
            except requests.Timeout:
                last_error = HttpRequestError(url, f"Request timed out after {timeout} seconds", timeout=True)
                if is_debug_enabled(logger):
                    logger.debug(
                        "HTTP timeout",
                        extra=extra_context(
                            event="http_exception",
                            component="http_client",
                            action="GET",
                            outcome="timeout",
                            attempt=attempt + 1,
                            target=safe_target
                        )
                    )
                continue
            except requests.RequestException as exc:  # includes ConnectionError
                last_error = HttpRequestError(url, f"Connection error: {exc}")
                if is_debug_enabled(logger):
                    logger.debug(
                        "HTTP request exception",
                        extra=extra_context(
                            event="http_exception",
                            component="http_client",
                            action="GET",
                            outcome="request_exception",
                            attempt=attempt + 1,
                            target=safe_target
                        )
                    )
                continue

        if is_debug_enabled(logger):
            logger.debug(
                "HTTP response",
                extra=extra_context(
                    event="http_response",
                    component="http_client",
                    action="GET",
                    status_code=response.status_code,
                    duration_ms=t.duration_ms(),
                    target=safe_target
                )
            )
        last_response = (response.status_code, dict(response.headers), response.text)
        if response.status_code < 500:
            return last_response

    if last_response is None:
        raise last_error or HttpRequestError(url, "No attempt was made")
    return last_response
