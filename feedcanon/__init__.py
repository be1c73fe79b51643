"""Find the canonical URL of an RSS, Atom or JSON feed."""

__version__ = "1.0.0"

from feedcanon.adapters.base import FeedAdapter, FetchError, FetchResponse, HttpClient
from feedcanon.adapters.feed import DefaultFeedAdapter, ParsedFeed
from feedcanon.adapters.http import HttpxClient
from feedcanon.core.canonical import CanonicalizeOptions, find_canonical
from feedcanon.core.defaults import (
    DEFAULT_NORMALIZE_PROFILE,
    DEFAULT_PLATFORMS,
    DEFAULT_PROBES,
    DEFAULT_STRIPPED_PARAMS,
    DEFAULT_TIERS,
)
from feedcanon.core.equivalence import EquivalenceOptions, EquivalenceResult, are_equivalent
from feedcanon.core.resolver import is_public_url, resolve_url
from feedcanon.core.url_utils import NormalizationProfile, normalize_url
from feedcanon.rules.base import PlatformRule, ProbeRule

__all__ = [
    "__version__",
    "find_canonical",
    "CanonicalizeOptions",
    "are_equivalent",
    "EquivalenceOptions",
    "EquivalenceResult",
    "normalize_url",
    "NormalizationProfile",
    "resolve_url",
    "is_public_url",
    "FeedAdapter",
    "DefaultFeedAdapter",
    "ParsedFeed",
    "HttpClient",
    "HttpxClient",
    "FetchResponse",
    "FetchError",
    "PlatformRule",
    "ProbeRule",
    "DEFAULT_NORMALIZE_PROFILE",
    "DEFAULT_PLATFORMS",
    "DEFAULT_PROBES",
    "DEFAULT_STRIPPED_PARAMS",
    "DEFAULT_TIERS",
]
