"""Canonical feed URL discovery."""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, List, Optional, Sequence, Tuple

from feedcanon.adapters.base import F, FeedAdapter, FetchResponse, HttpClient
from feedcanon.adapters.feed import DefaultFeedAdapter
from feedcanon.adapters.http import HttpxClient
from feedcanon.core.comparison import ContentComparator, HashFn
from feedcanon.core.defaults import DEFAULT_PLATFORMS, DEFAULT_PROBES, DEFAULT_STRIPPED_PARAMS, DEFAULT_TIERS
from feedcanon.core.resolver import alternate_protocol, resolve_url
from feedcanon.core.url_utils import NormalizationProfile, normalize_url, remove_query_params, replace_scheme
from feedcanon.rules.base import PlatformRule, ProbeRule, apply_platform_rules, collect_probe_candidates

logger = logging.getLogger(__name__)


@dataclass
class CanonicalizeOptions(Generic[F]):
    """
    Collaborators and tuning for find_canonical.

    Options are read-only during a call and may be shared between calls.
    stripped_params is removed from response URLs and from every probe or
    tier candidate; the tier profiles may strip more on their own.
    exists reports a known URL by returning a truthy record.
    """

    adapter: FeedAdapter[F] = field(default_factory=DefaultFeedAdapter)
    client: HttpClient = field(default_factory=HttpxClient)
    hash_fn: Optional[HashFn] = None
    exists: Optional[Callable[[str], Any]] = None
    tiers: Sequence[NormalizationProfile] = field(default_factory=lambda: list(DEFAULT_TIERS))
    platforms: Sequence[PlatformRule] = field(default_factory=lambda: list(DEFAULT_PLATFORMS))
    probes: Sequence[ProbeRule] = field(default_factory=lambda: list(DEFAULT_PROBES))
    stripped_params: Sequence[str] = DEFAULT_STRIPPED_PARAMS
    verify_url: Optional[Callable[[str], bool]] = None

    # Observation hooks; exceptions raised here abort the call
    on_fetch: Optional[Callable[[str, FetchResponse], None]] = None
    on_match: Optional[Callable[[str, FetchResponse, Any], None]] = None
    on_exists: Optional[Callable[[str, Any], None]] = None

    timeout: Optional[float] = None  # seconds for the whole call
    default_scheme: str = "https"


class _Canonicalization(Generic[F]):
    """Working state of a single find_canonical call."""

    def __init__(self, options: CanonicalizeOptions[F]):
        self.options = options
        self.deadline = time.monotonic() + options.timeout if options.timeout is not None else None
        self.comparator: Optional[ContentComparator[F]] = None

    def expired(self) -> bool:
        return self.deadline is not None and time.monotonic() >= self.deadline

    def prepare(self, url: str, base: Optional[str] = None) -> Optional[str]:
        """Resolve url, apply the first matching platform rule and verify it."""
        resolved = resolve_url(url, base, default_scheme=self.options.default_scheme)
        if resolved is None:
            return None

        rewritten = apply_platform_rules(resolved, self.options.platforms)
        if rewritten != resolved:
            rewritten = resolve_url(rewritten, default_scheme=self.options.default_scheme)
            if rewritten is None:
                return None

        if self.options.verify_url is not None and not self.options.verify_url(rewritten):
            logger.debug(f"URL rejected by verification: {rewritten}")
            return None
        return rewritten

    def prepare_response_url(self, url: str, base: Optional[str] = None) -> Optional[str]:
        """Like prepare, then drop tracking parameters."""
        prepared = self.prepare(url, base)
        if prepared is None:
            return None
        return remove_query_params(prepared, self.options.stripped_params)

    def fetch(self, url: str) -> Optional[FetchResponse]:
        """Fetch url. Returns the response only if it completed with a 2xx status."""
        try:
            response = self.options.client.fetch(url)
        except Exception as e:
            logger.debug(f"Fetch failed for {url}: {e}")
            return None

        if self.options.on_fetch is not None:
            self.options.on_fetch(url, response)

        if not response.ok:
            logger.debug(f"Fetch of {url} returned status {response.status}")
            return None
        return response

    def matched(self, url: str, response: FetchResponse, feed: Any):
        if self.options.on_match is not None:
            self.options.on_match(url, response, feed)

    def self_url(self, feed: F, base: str) -> Optional[str]:
        try:
            raw = self.options.adapter.get_self_url(feed)
        except Exception as e:
            logger.debug(f"Could not read self URL: {e}")
            return None
        if not raw:
            return None
        return self.prepare_response_url(raw, base)

    def validate_self_url(self, self_url: Optional[str], initial_response_url: str) -> str:
        """Return the self URL's final URL if it serves the same feed."""
        if not self_url or self_url == initial_response_url:
            return initial_response_url

        attempts = [self_url]
        alternate = alternate_protocol(self_url)
        if alternate:
            attempts.append(alternate)

        tried = set()
        for attempt in attempts:
            if self.expired():
                logger.debug("Deadline reached while validating self URL")
                break
            prepared = self.prepare(attempt)
            if prepared is None or prepared in tried:
                continue
            tried.add(prepared)

            response = self.fetch(prepared)
            if response is None:
                continue
            comparison = self.comparator.compare(response.body)
            if not comparison.matched:
                logger.debug(f"Self URL {prepared} serves different content")
                continue

            self.matched(prepared, response, comparison.feed)
            return self.prepare_response_url(response.url) or initial_response_url

        return initial_response_url

    def candidates(self, variant_source_url: str) -> List[str]:
        """Probe candidates, then one per tier, then the variant source itself.

        stripped_params is applied to every candidate on top of whatever the
        tier profiles strip.
        """
        raw = collect_probe_candidates(variant_source_url, self.options.probes)
        raw += [normalize_url(variant_source_url, tier) for tier in self.options.tiers]

        ordered = []
        for url in raw:
            prepared = self.prepare_response_url(url)
            if prepared is not None and prepared not in ordered:
                ordered.append(prepared)
        if variant_source_url not in ordered:
            ordered.append(variant_source_url)
        return ordered

    def select(self, candidates: List[str], variant_source_url: str, initial_response_url: str) -> Tuple[str, bool]:
        """
        Test candidates in order.

        Returns the winner and whether it came from the existence lookup.
        """
        for candidate in candidates:
            if self.expired():
                logger.debug("Deadline reached while testing candidates")
                break

            if self.options.exists is not None:
                data = self.options.exists(candidate)
                if data:
                    logger.debug(f"Existing record found for {candidate}")
                    if self.options.on_exists is not None:
                        self.options.on_exists(candidate, data)
                    return candidate, True

            if candidate == variant_source_url:
                continue
            if candidate == initial_response_url:
                return candidate, False

            response = self.fetch(candidate)
            if response is None:
                continue

            final_url = self.prepare_response_url(response.url)
            if final_url in (variant_source_url, initial_response_url):
                logger.debug(f"Candidate {candidate} redirects back to {final_url}")
                continue

            comparison = self.comparator.compare(response.body)
            if comparison.matched:
                self.matched(candidate, response, comparison.feed)
                return candidate, False

        return variant_source_url, False

    def upgrade(self, url: str) -> str:
        """Prefer https when it serves the same feed."""
        if not url.startswith("http://") or self.expired():
            return url
        https_url = self.prepare(replace_scheme(url, "https"))
        if https_url is None or https_url == url:
            return url

        response = self.fetch(https_url)
        if response is None:
            return url
        comparison = self.comparator.compare(response.body)
        if not comparison.matched:
            return url

        self.matched(https_url, response, comparison.feed)
        return https_url

    def run(self, input_url: str) -> Optional[str]:
        request_url = self.prepare(input_url)
        if request_url is None:
            logger.debug(f"Rejected input URL: {input_url!r}")
            return None

        initial = self.fetch(request_url)
        if initial is None:
            return None

        initial_response_url = self.prepare_response_url(initial.url)
        if initial_response_url is None:
            logger.debug(f"Rejected response URL: {initial.url!r}")
            return None

        if not initial.body:
            return None
        try:
            feed = self.options.adapter.parse(initial.body)
        except Exception as e:
            logger.debug(f"Error parsing {request_url}: {e}")
            return None
        if feed is None:
            logger.debug(f"No feed found at {request_url}")
            return None

        self.matched(request_url, initial, feed)
        self.comparator = ContentComparator(
            self.options.adapter,
            initial.body,
            feed,
            initial_response_url,
            self.options.hash_fn,
        )

        self_url = self.self_url(feed, initial_response_url)
        variant_source_url = self.validate_self_url(self_url, initial_response_url)

        candidates = self.candidates(variant_source_url)
        winner, existing = self.select(candidates, variant_source_url, initial_response_url)
        if existing:
            return winner
        return self.upgrade(winner)


def find_canonical(input_url: str, options: Optional[CanonicalizeOptions] = None) -> Optional[str]:
    """
    Find the canonical URL of the feed at input_url.

    Fetches the feed, checks its declared self URL and then tries cleaner
    variants of the URL, adopting the first one that serves the same content.

    Returns None when the input cannot be fetched or does not parse as a feed.
    """
    options = options or CanonicalizeOptions()
    canonical = _Canonicalization(options).run(input_url)
    if canonical is None:
        logger.info(f"Could not canonicalize {input_url}")
    else:
        logger.info(f"Canonical URL for {input_url}: {canonical}")
    return canonical
