"""HTTP client and feed adapters."""

from feedcanon.adapters.base import FeedAdapter, FetchError, FetchResponse, HttpClient
from feedcanon.adapters.feed import DefaultFeedAdapter, FeedItem, ParsedFeed
from feedcanon.adapters.http import HttpxClient

__all__ = [
    "FeedAdapter",
    "FetchError",
    "FetchResponse",
    "HttpClient",
    "DefaultFeedAdapter",
    "FeedItem",
    "ParsedFeed",
    "HttpxClient",
]
