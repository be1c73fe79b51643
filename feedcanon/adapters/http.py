"""HTTP client backed by httpx."""

import logging
from typing import Dict, Optional

import httpx

from feedcanon.adapters.base import FetchError, FetchResponse, HttpClient
from feedcanon.config import settings

logger = logging.getLogger(__name__)

ACCEPT = "application/rss+xml, application/atom+xml, application/feed+json, application/xml;q=0.9, */*;q=0.8"


class HttpxClient(HttpClient):
    """
    Fetch feeds with httpx, following redirects.

    Without an explicit client a short-lived httpx.Client is opened per
    request. Pass ``client`` to share a connection pool (or a mock transport).
    """

    def __init__(
        self,
        client: Optional[httpx.Client] = None,
        timeout: Optional[float] = None,
        user_agent: Optional[str] = None,
        max_redirects: Optional[int] = None,
    ):
        self.client = client
        self.timeout = timeout or settings.fetch_timeout
        self.user_agent = user_agent or settings.user_agent
        self.max_redirects = max_redirects or settings.max_redirects

    def _headers(self, headers: Optional[Dict[str, str]]) -> Dict[str, str]:
        merged = {"User-Agent": self.user_agent, "Accept": ACCEPT}
        if headers:
            merged.update(headers)
        return merged

    def fetch(self, url: str, method: str = "GET", headers: Optional[Dict[str, str]] = None) -> FetchResponse:
        """
        Fetch url.

        Returns FetchResponse for any status code; raises FetchError on
        transport failure.
        """
        try:
            if self.client is not None:
                response = self.client.request(
                    method, url, headers=self._headers(headers), follow_redirects=True
                )
            else:
                with httpx.Client(
                    timeout=self.timeout,
                    follow_redirects=True,
                    max_redirects=self.max_redirects,
                ) as client:
                    response = client.request(method, url, headers=self._headers(headers))
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(f"Fetch failed for {url}: {e}")
            raise FetchError(url, str(e)) from e

        return FetchResponse(
            url=str(response.url),
            status=response.status_code,
            body=response.text,
            headers=dict(response.headers),
        )
