"""FeedBurner host aliases."""

from typing import Iterable, Optional

from feedcanon.core.url_utils import NormalizationProfile, normalize_url, split_url
from feedcanon.rules.base import PlatformRule

# Applied after the host swap; FeedBurner paths are case-sensitive feed names.
_CLEANUP = NormalizationProfile(
    strip_trailing_slash=True,
    collapse_slashes=True,
    strip_fragment=True,
    normalize_encoding=True,
    normalize_unicode=True,
)


class HostAliasRule(PlatformRule):
    """Collapse a set of mirror hostnames onto one canonical host."""

    def __init__(
        self,
        name: str,
        aliases: Iterable[str],
        canonical_host: str,
        strip_query: bool = True,
        scheme: Optional[str] = None,
    ):
        self.name = name
        self.canonical_host = canonical_host.lower()
        self.aliases = frozenset(host.lower() for host in aliases) | {self.canonical_host}
        self.strip_query = strip_query
        self.scheme = scheme

    def matches(self, url: str) -> bool:
        parts = split_url(url)
        return parts is not None and parts.host.lower() in self.aliases

    def rewrite(self, url: str) -> str:
        parts = split_url(url)
        if parts is None:
            return url
        parts.host = self.canonical_host
        if self.scheme:
            parts.scheme = self.scheme
        if self.strip_query:
            parts.query = None
        return normalize_url(parts.geturl(), _CLEANUP)


FEEDBURNER = HostAliasRule(
    name="feedburner",
    aliases=["feeds.feedburner.com", "feeds2.feedburner.com", "feedproxy.google.com"],
    canonical_host="feeds.feedburner.com",
)
