from typing import Callable, Optional
import logging
import time

import requests

log = logging.getLogger(__name__)


class UpstreamError(Exception):
    pass


class UpstreamClient:
    """GET the latest round from the result API.

    HTTP 429 is retried up to ``retries`` times, waiting ``delay_ms`` before the
    first retry and doubling the wait each time. Every other failure is raised
    at once as UpstreamError.
    """

    def __init__(self, url: str, timeout: float = 10, retries: int = 5, delay_ms: int = 2000,
                 session: Optional[requests.Session] = None,
                 sleep: Callable[[float], None] = time.sleep):
        self.url = url
        self.timeout = timeout
        self.retries = retries
        self.delay_ms = delay_ms
        self.session = session or requests.Session()
        self._sleep = sleep

    def fetch_latest(self) -> dict:
        retries, delay = self.retries, self.delay_ms
        while True:
            try:
                r = self.session.get(self.url, timeout=self.timeout)
                r.raise_for_status()
                return r.json()
            except requests.HTTPError as e:
                status = e.response.status_code if e.response is not None else None
                if status == 429 and retries > 0:
                    log.warning("upstream rate-limited (429), retrying in %dms", delay)
                    self._sleep(delay / 1000)
                    retries -= 1
                    delay *= 2
                    continue
                raise UpstreamError(str(e)) from e
            except (requests.RequestException, ValueError) as e:
                raise UpstreamError(str(e)) from e
