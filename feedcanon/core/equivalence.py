"""Pairwise feed URL equivalence."""

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

from feedcanon.adapters.base import FeedAdapter, FetchResponse, HttpClient
from feedcanon.adapters.feed import DefaultFeedAdapter
from feedcanon.adapters.http import HttpxClient
from feedcanon.core.comparison import HashFn, compute_content_hash
from feedcanon.core.defaults import DEFAULT_NORMALIZE_PROFILE
from feedcanon.core.resolver import is_public_url
from feedcanon.core.url_utils import NormalizationProfile, is_similar_url

logger = logging.getLogger(__name__)


@dataclass
class EquivalenceOptions:
    """Collaborators for are_equivalent."""

    profile: NormalizationProfile = DEFAULT_NORMALIZE_PROFILE
    client: HttpClient = field(default_factory=HttpxClient)
    adapter: FeedAdapter = field(default_factory=DefaultFeedAdapter)
    hash_fn: Optional[HashFn] = None
    verify_url: Callable[[str], bool] = is_public_url


@dataclass(frozen=True)
class EquivalenceResult:
    """Whether two URLs serve the same feed, and how that was established."""

    equivalent: bool
    method: Optional[str] = None  # normalize, redirects, content_hash, signature

    def __bool__(self) -> bool:
        return self.equivalent


NOT_EQUIVALENT = EquivalenceResult(False, None)


def _fetch(client: HttpClient, url: str) -> Optional[FetchResponse]:
    try:
        response = client.fetch(url)
    except Exception as e:
        logger.debug(f"Fetch failed for {url}: {e}")
        return None
    if not response.ok:
        logger.debug(f"Fetch of {url} returned status {response.status}")
        return None
    return response


def _signatures_match(adapter: FeedAdapter, response_a: FetchResponse, response_b: FetchResponse) -> bool:
    try:
        feed_a = adapter.parse(response_a.body)
        feed_b = adapter.parse(response_b.body)
        if feed_a is None or feed_b is None:
            return False
        return adapter.get_signature(feed_a, response_a.url) == adapter.get_signature(feed_b, response_a.url)
    except Exception as e:
        logger.debug(f"Signature comparison failed: {e}")
        return False


def are_equivalent(url_a: str, url_b: str, options: Optional[EquivalenceOptions] = None) -> EquivalenceResult:
    """
    Decide whether two feed URLs point at the same feed.

    Methods are tried in order of cost:
    1. normalize: URLs match under the normalization profile (no network)
    2. redirects: both URLs end up at the same place, or one at the other
    3. content_hash: both bodies have the same hash
    4. signature: both bodies parse to the same feed signature

    Unverifiable URLs and failed fetches are never equivalent.
    """
    options = options or EquivalenceOptions()
    profile = options.profile

    if is_similar_url(url_a, url_b, profile):
        return EquivalenceResult(True, "normalize")

    if not (options.verify_url(url_a) and options.verify_url(url_b)):
        logger.debug(f"Verification rejected {url_a} or {url_b}")
        return NOT_EQUIVALENT

    response_a = _fetch(options.client, url_a)
    if response_a is None:
        return NOT_EQUIVALENT
    response_b = _fetch(options.client, url_b)
    if response_b is None:
        return NOT_EQUIVALENT

    if (
        is_similar_url(response_a.url, response_b.url, profile)
        or is_similar_url(response_a.url, url_b, profile)
        or is_similar_url(response_b.url, url_a, profile)
    ):
        return EquivalenceResult(True, "redirects")

    if not response_a.body or not response_b.body:
        return NOT_EQUIVALENT

    hash_fn = options.hash_fn or compute_content_hash
    try:
        if hash_fn(response_a.body) == hash_fn(response_b.body):
            return EquivalenceResult(True, "content_hash")
    except Exception as e:
        logger.warning(f"Content hash failed: {e}")

    if _signatures_match(options.adapter, response_a, response_b):
        return EquivalenceResult(True, "signature")

    return NOT_EQUIVALENT
