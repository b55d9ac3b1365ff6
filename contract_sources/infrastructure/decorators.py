"""
Infrastructure-specific decorators, providing cross-cutting concerns like
error translation for network operations.
"""

import functools
import logging

import httpx

from ..application.exceptions import TransportError

logger = logging.getLogger(__name__)


def _describe(exception: httpx.HTTPError) -> str:
    """Describe an httpx error without echoing the request URL (it holds the API key)."""
    if isinstance(exception, httpx.HTTPStatusError):
        response = exception.response
        return f"HTTP {response.status_code} {response.reason_phrase}"
    return f"{type(exception).__name__}: {exception}"


def translate_transport_errors(func):
    """
    Converts httpx failures raised by an async network operation into
    TransportError. Nothing is retried.
    """

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except httpx.HTTPError as e:
            description = _describe(e)
            logger.warning(f"{func.__name__} failed with {description}")
            raise TransportError(
                f"Could not reach the explorer: {description}"
            ) from e

    return wrapper
