from __future__ import annotations

import httpx
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential, wait_random


def default_timeout(seconds: float = 30.0) -> httpx.Timeout:
    return httpx.Timeout(seconds, connect=min(seconds, 10.0))


TransientHttpError = (httpx.TimeoutException, httpx.NetworkError, httpx.RemoteProtocolError)


def transient_retry(attempts: int = 3, initial: float = 0.5, max_wait: float = 10.0):
    return retry(
        reraise=True,
        stop=stop_after_attempt(max(1, attempts)),
        wait=wait_exponential(multiplier=initial, max=max_wait) + wait_random(0, initial),
        retry=retry_if_exception_type(TransientHttpError),
    )
