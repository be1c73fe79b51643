"""Response content comparison."""

import hashlib
import logging
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional

from feedcanon.adapters.base import F, FeedAdapter

logger = logging.getLogger(__name__)

HashFn = Callable[[str], str]

_UNSET = object()


def compute_content_hash(content: str) -> str:
    """Compute MD5 hex digest of content (not used for security)."""
    return hashlib.md5(content.encode("utf-8"), usedforsecurity=False).hexdigest()


@dataclass
class Comparison:
    """Outcome of comparing a candidate body with the reference response."""

    matched: bool
    method: Optional[str] = None  # exact, hash, signature
    feed: Any = None


class ContentComparator(Generic[F]):
    """
    Decide whether candidate bodies carry the same feed as a reference body.

    Checks, cheapest first:
    1. Exact body equality
    2. Content hash equality
    3. Adapter signature equality

    Both signatures are computed against the reference URL so that link
    neutralization treats reference and candidate alike. The reference hash
    and signature are computed once and reused.
    """

    def __init__(
        self,
        adapter: FeedAdapter[F],
        reference_body: str,
        reference_feed: F,
        url: Optional[str] = None,
        hash_fn: Optional[HashFn] = None,
    ):
        self.adapter = adapter
        self.reference_body = reference_body
        self.reference_feed = reference_feed
        self.url = url
        self.hash_fn = hash_fn or compute_content_hash
        self._reference_hash = _UNSET
        self._reference_signature = _UNSET

    @property
    def reference_hash(self) -> str:
        if self._reference_hash is _UNSET:
            self._reference_hash = self.hash_fn(self.reference_body)
        return self._reference_hash

    @property
    def reference_signature(self) -> Any:
        if self._reference_signature is _UNSET:
            self._reference_signature = self.adapter.get_signature(self.reference_feed, self.url)
        return self._reference_signature

    def compare(self, body: Optional[str]) -> Comparison:
        """Compare a candidate body with the reference."""
        if not body:
            return Comparison(False)

        if body == self.reference_body:
            return Comparison(True, "exact", self.reference_feed)

        try:
            if self.hash_fn(body) == self.reference_hash:
                return Comparison(True, "hash", self.reference_feed)
        except Exception as e:
            logger.warning(f"Content hash failed: {e}")

        try:
            feed = self.adapter.parse(body)
            if feed is None:
                return Comparison(False)
            if self.adapter.get_signature(feed, self.url) == self.reference_signature:
                return Comparison(True, "signature", feed)
        except Exception as e:
            logger.debug(f"Signature comparison failed: {e}")

        return Comparison(False)

    def matches(self, body: Optional[str]) -> bool:
        return self.compare(body).matched


def bodies_match(
    reference_body: str,
    reference_feed: Any,
    candidate_body: Optional[str],
    adapter: FeedAdapter,
    hash_fn: Optional[HashFn] = None,
    url: Optional[str] = None,
) -> bool:
    """One-off comparison of a candidate body against a reference response."""
    comparator = ContentComparator(adapter, reference_body, reference_feed, url, hash_fn)
    return comparator.matches(candidate_body)
