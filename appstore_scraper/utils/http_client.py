"""Per-call requests.Session with opt-in retry, exponential backoff and browser headers."""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass, field
from typing import Mapping, Optional

import requests

from appstore_scraper.errors import HttpError, PreconditionError, TransportError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15.0      # seconds, per attempt
DEFAULT_RETRIES = 0
BACKOFF_BASE = 1.0          # 1s, 2s, 4s, ...

RETRYABLE_STATUSES = frozenset({429, 503})

# DNS, TLS, proxy, connect/read timeouts and truncated bodies.
_RETRYABLE_EXCEPTIONS = (
    requests.ConnectionError,
    requests.Timeout,
    requests.exceptions.ChunkedEncodingError,
)

DEFAULT_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/121.0.0.0 Safari/537.36"
    ),
    "Accept": (
        "text/html,application/xhtml+xml,application/xml;q=0.9,"
        "image/avif,image/webp,image/apng,*/*;q=0.8"
    ),
    "Accept-Language": "en-US,en;q=0.9",
}


@dataclass(frozen=True)
class RequestOptions:
    """Caller-tunable transport settings.

    ``timeout`` is in seconds and applies to each attempt. As with requests, it
    bounds the connect step and each socket read separately, not the whole
    attempt: a server that trickles the body can keep one attempt open longer.
    ``retries`` is the number of extra attempts for 429, 503 and network
    failures; it is off by default.
    """

    headers: Mapping[str, str] = field(default_factory=dict)
    timeout: float = DEFAULT_TIMEOUT
    retries: int = DEFAULT_RETRIES


def make_session(headers: Optional[Mapping[str, str]] = None) -> requests.Session:
    """Create a requests.Session carrying the default browser headers plus overrides."""
    session = requests.Session()
    session.headers.update(DEFAULT_HEADERS)
    if headers:
        session.headers.update(headers)
    return session


def validate_timeout(timeout) -> float:
    if (
        isinstance(timeout, bool)
        or not isinstance(timeout, (int, float))
        or not math.isfinite(timeout)
        or timeout <= 0
    ):
        raise PreconditionError(
            f"timeout must be a positive finite number of seconds, got {timeout!r}"
        )
    return float(timeout)


def sanitize_retries(retries) -> int:
    """Clamp a retry budget to a non-negative int; bad values mean a single attempt."""
    if isinstance(retries, bool) or not isinstance(retries, (int, float)):
        return 0
    if not math.isfinite(retries) or retries < 0:
        return 0
    return int(retries)


def backoff_delay(attempt: int) -> float:
    """Delay before the attempt following failed attempt number ``attempt`` (1-based)."""
    return BACKOFF_BASE * (2 ** (attempt - 1))


def do_request(
    url: str,
    options: Optional[RequestOptions] = None,
    *,
    headers: Optional[Mapping[str, str]] = None,
) -> str:
    """GET ``url`` and return the body text.

    ``headers`` are endpoint-specific headers added by the caller operation;
    ``options.headers`` override both them and the defaults.

    Raises:
        PreconditionError: invalid timeout (no request is sent).
        HttpError: terminal non-2xx status, or 429/503 after the retry budget.
        TransportError: network failure after the retry budget.
    """
    options = options or RequestOptions()
    timeout = validate_timeout(options.timeout)
    retries = sanitize_retries(options.retries)
    attempts = retries + 1

    merged = dict(headers or {})
    merged.update(options.headers or {})

    with make_session(merged) as session:
        for attempt in range(1, attempts + 1):
            logger.debug("GET %s (attempt %d/%d)", url, attempt, attempts)
            try:
                response = session.get(url, timeout=timeout)
            except _RETRYABLE_EXCEPTIONS as exc:
                if attempt < attempts:
                    delay = backoff_delay(attempt)
                    logger.warning(
                        "Request error for %s (attempt %d/%d): %s. Retrying in %.0fs",
                        url,
                        attempt,
                        attempts,
                        exc,
                        delay,
                    )
                    time.sleep(delay)
                    continue
                raise TransportError(f"Request to {url} failed: {exc}", url=url) from exc
            except requests.RequestException as exc:
                raise TransportError(f"Request to {url} failed: {exc}", url=url) from exc

            if response.ok:
                return response.text

            status = response.status_code
            # Non-streamed: the body is already read; closing releases the connection.
            response.close()

            if status in RETRYABLE_STATUSES and attempt < attempts:
                delay = backoff_delay(attempt)
                logger.warning(
                    "HTTP %d for %s (attempt %d/%d). Retrying in %.0fs",
                    status,
                    url,
                    attempt,
                    attempts,
                    delay,
                )
                time.sleep(delay)
                continue

            raise HttpError(f"Request to {url} failed with status {status}", status, url)

    # Unreachable: the loop always returns or raises.
    raise AssertionError("do_request exited without a result")
