from __future__ import annotations

import random
import time
from typing import Mapping, Optional, Sequence

import requests

TRANSIENT_STATUS_CODES = (429, 500, 502, 503, 504)

_TRANSIENT_EXCEPTIONS = (
    requests.exceptions.Timeout,
    requests.exceptions.ConnectionError,
    requests.exceptions.ChunkedEncodingError,
)


def _backoff_seconds(attempt: int, *, backoff_base: float, backoff_max: float) -> float:
    # Exponential backoff with jitter
    delay = backoff_base * (2 ** max(0, attempt - 1))
    return min(backoff_max, delay + random.uniform(0, backoff_base))


def _retry_after_seconds(response: requests.Response) -> Optional[float]:
    header = response.headers.get("Retry-After")
    if header is None:
        return None
    try:
        return float(header)
    except ValueError:
        return None


def http_get_with_retries(
    url: str,
    *,
    headers: Optional[Mapping[str, str]] = None,
    timeout: int = 60,
    max_attempts: int = 4,
    backoff_base: float = 0.5,
    backoff_max: float = 8.0,
    status_forcelist: Sequence[int] = TRANSIENT_STATUS_CODES,
    sleep=time.sleep,
) -> requests.Response:
    """
    GET `url`, retrying transient failures.

    Connection errors, timeouts and responses whose status is in
    `status_forcelist` are retried up to `max_attempts` times. A numeric
    `Retry-After` header takes precedence over the computed backoff.
    The final response is returned as-is; callers still call
    `raise_for_status()`.
    """
    last_exc: Optional[Exception] = None
    for attempt in range(1, max_attempts + 1):
        try:
            resp = requests.get(url, headers=headers, timeout=timeout)
        except _TRANSIENT_EXCEPTIONS as exc:
            last_exc = exc
            if attempt == max_attempts:
                break
            print(f"[ingestion] GET {url} failed ({exc}); retry {attempt}/{max_attempts - 1}")
            sleep(_backoff_seconds(attempt, backoff_base=backoff_base, backoff_max=backoff_max))
            continue

        if resp.status_code in status_forcelist and attempt < max_attempts:
            delay = _retry_after_seconds(resp)
            if delay is None:
                delay = _backoff_seconds(
                    attempt, backoff_base=backoff_base, backoff_max=backoff_max
                )
            print(f"[ingestion] GET {url} returned {resp.status_code}; retrying in {delay:.1f}s")
            sleep(delay)
            continue
        return resp

    assert last_exc is not None
    raise last_exc


__all__ = ["TRANSIENT_STATUS_CODES", "http_get_with_retries"]
