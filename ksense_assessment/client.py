import logging
import math
import random
import time

import requests

from ksense_assessment import config
from ksense_assessment.errors import ApiStatusError, RetriesExhaustedError

logger = logging.getLogger(__name__)


def auth_headers(api_key):
    return {"x-api-key": api_key}


def retry_after_seconds(response):
    """Seconds the server asked us to wait, or None when there is no usable hint."""
    if response is None:
        return None
    value = response.headers.get("Retry-After")
    if value is None:
        return None
    try:
        seconds = float(value)
    except (TypeError, ValueError):
        # HTTP-date form, fall back to backoff
        return None
    if not math.isfinite(seconds) or seconds < 0:
        return None
    return seconds


def backoff_delay_ms(attempt, hint_seconds=None):
    """Delay before the retry that follows ``attempt`` (1-based), without jitter."""
    if hint_seconds is not None:
        return hint_seconds * 1000
    return min(config.BASE_DELAY_MS * 2 ** (attempt - 1), config.MAX_DELAY_MS)


def jitter_ms():
    return random.random() * config.JITTER_MS


def fetch_with_retry(
    session,
    method,
    url,
    max_retries=config.MAX_RETRIES,
    sleep=time.sleep,
    jitter=jitter_ms,
    **request_kwargs,
):
    """Issue one logical request, retrying transient failures.

    Retryable statuses and transport errors are retried up to ``max_retries``
    times (``max_retries + 1`` attempts in total). Any other non-2xx status
    raises ApiStatusError straight away. ``sleep`` takes seconds, ``jitter``
    returns milliseconds; both are swappable so tests never wait.
    """
    request_kwargs.setdefault("timeout", config.REQUEST_TIMEOUT)
    attempt = 1
    last_status = None
    while True:
        failure = None
        response = None
        try:
            response = session.request(method, url, **request_kwargs)
        except (requests.ConnectionError, requests.Timeout) as exc:
            # keeps the status from any earlier attempt
            failure = exc
        else:
            if 200 <= response.status_code < 300:
                return response
            if response.status_code not in config.RETRYABLE_STATUSES:
                logger.error("%s %s failed with %d: %s", method, url, response.status_code, response.text)
                raise ApiStatusError(response, url)
            last_status = response.status_code

        if attempt > max_retries:
            raise RetriesExhaustedError(url, attempt, last_status) from failure

        delay = backoff_delay_ms(attempt, retry_after_seconds(response)) + jitter()
        logger.warning(
            "%s %s got %s on attempt %d, retrying in %.0f ms",
            method,
            url,
            last_status if failure is None else repr(failure),
            attempt,
            delay,
        )
        sleep(delay / 1000)
        attempt += 1


def get_json(session, path, api_key, params=None, base_url=config.BASE_URL, **kwargs):
    url = f"{base_url}{path}"
    r = fetch_with_retry(session, "GET", url, headers=auth_headers(api_key), params=params, **kwargs)
    return r.json()


def post_json(session, path, api_key, body, base_url=config.BASE_URL, **kwargs):
    url = f"{base_url}{path}"
    headers = {**auth_headers(api_key), "Content-Type": "application/json"}
    r = fetch_with_retry(session, "POST", url, headers=headers, json=body, **kwargs)
    return r.json()
