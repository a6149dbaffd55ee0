"""CloudStack API client construction and error handling."""

from __future__ import annotations

from typing import NoReturn

import requests
from cs import CloudStack, CloudStackException

from stackrunner.base.config import ProviderConfig
from stackrunner.base.exceptions import PlatformError

# Errors raised by the transport that are wrapped into PlatformError.
TRANSPORT_ERRORS: tuple[type[BaseException], ...] = (
    CloudStackException,
    requests.RequestException,
)

_NOT_FOUND_MARKERS = ("no match found for", "entity does not exist")
_TIMEOUT_MARKERS = ("timeout waiting for async job",)


def new_client(config: ProviderConfig) -> CloudStack:
    """Build a CloudStack client from provider configuration.

    Async jobs are polled by the client itself, bounded by
    ``config.async_timeout``. Requests are sent as POST: user data travels
    as a request parameter and CloudStack caps it at 4 KiB over GET.
    """
    return CloudStack(
        endpoint=config.api_url,
        key=config.api_key,
        secret=config.secret,
        method="post",
        dangerous_no_tls_verify=not config.verify_ssl,
        job_timeout=config.async_timeout_seconds,
    )


def handle_error(e: BaseException, msg: str) -> NoReturn:
    """Re-raise a transport failure as :class:`PlatformError`."""
    raise PlatformError(f"{msg}: {e}") from e


def _error_texts(err: BaseException) -> list[str]:
    texts = [str(err)]
    # CloudStackApiException keeps the decoded API error body on ``error``.
    body = getattr(err, "error", None)
    if isinstance(body, dict):
        texts.extend(str(v) for v in body.values())
    return [t.lower() for t in texts]


def is_not_found_error(err: BaseException | None) -> bool:
    """Return True if *err* (or anything it wraps) reports a missing entity.

    CloudStack has no structured error code for this; the API reports it as
    ``No match found for ...`` or ``entity does not exist`` in the error
    text. Timeouts never count as not-found.
    """
    seen: set[int] = set()
    while err is not None and id(err) not in seen:
        seen.add(id(err))
        if isinstance(err, TimeoutError):
            return False
        texts = _error_texts(err)
        if any(marker in t for t in texts for marker in _TIMEOUT_MARKERS):
            return False
        if any(marker in t for t in texts for marker in _NOT_FOUND_MARKERS):
            return True
        err = err.__cause__
    return False


__all__ = [
    "TRANSPORT_ERRORS",
    "handle_error",
    "is_not_found_error",
    "new_client",
]
