import requests


class ApiStatusError(requests.HTTPError):
    """Non-2xx status that is not worth retrying."""

    def __init__(self, response, url=None):
        self.status_code = response.status_code
        self.url = url or response.url
        super().__init__(f"{self.url} returned {self.status_code}", response=response)


class RetriesExhaustedError(requests.RequestException):
    """A transient failure outlived the retry budget.

    ``last_status`` is the most recent status seen, None when no attempt got a response.
    """

    def __init__(self, url, attempts, last_status=None):
        self.url = url
        self.attempts = attempts
        self.last_status = last_status
        reason = last_status if last_status is not None else "transport error"
        super().__init__(f"{url}: retries exhausted after {attempts} attempts (last: {reason})")


class MalformedResponseError(ValueError):
    pass
