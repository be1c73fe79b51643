"""Interfaces for the HTTP client and feed adapter collaborators."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, Optional, TypeVar

F = TypeVar("F")


@dataclass
class FetchResponse:
    """Response returned by an HTTP client."""

    url: str  # final URL after redirects
    status: int
    body: str = ""
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class FetchError(Exception):
    """Transport-level failure (DNS, TLS, timeout, redirect loop...)."""

    def __init__(self, url: str, message: str):
        super().__init__(f"Failed to fetch {url}: {message}")
        self.url = url


class HttpClient(ABC):
    """Base class for HTTP clients."""

    @abstractmethod
    def fetch(self, url: str, method: str = "GET", headers: Optional[Dict[str, str]] = None) -> FetchResponse:
        """
        Fetch url, following redirects.

        Returns a FetchResponse for any HTTP status.
        Raises on transport failure.
        """
        pass


class FeedAdapter(ABC, Generic[F]):
    """Base class for feed parsers."""

    @abstractmethod
    def parse(self, body: str) -> Optional[F]:
        """Parse a response body. Returns None if it is not a feed."""
        pass

    @abstractmethod
    def get_self_url(self, feed: F) -> Optional[str]:
        """Return the URL the feed declares for itself, if any."""
        pass

    @abstractmethod
    def get_signature(self, feed: F, url: Optional[str] = None) -> Any:
        """
        Return a comparable summary of the feed's content.

        url is the address the feed was fetched from; adapters may use it to
        neutralize same-site links.
        """
        pass
