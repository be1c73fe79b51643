"""Blogger and Blogspot feed URLs."""

import re

from feedcanon.core.url_utils import get_query_param, remove_query_params, set_query_param, split_url
from feedcanon.rules.base import PlatformRule

BLOGGER_HOSTS = ("blogger.com", "www.blogger.com")

# *.blogspot.com plus country variants like *.blogspot.co.uk, *.blogspot.de
BLOGSPOT_PATTERN = re.compile(r"\.blogspot\.[a-z]{2,3}(\.[a-z]{2})?$", re.IGNORECASE)

# Pagination, date filters and redirect control change the view, not the feed.
FILTER_PARAMS = (
    "redirect",
    "max-results",
    "start-index",
    "published-min",
    "published-max",
    "updated-min",
    "updated-max",
    "orderby",
)


def _strip_view_params(url: str) -> str:
    url = remove_query_params(url, FILTER_PARAMS)
    # Atom is the default format
    if get_query_param(url, "alt") == "atom":
        url = remove_query_params(url, ["alt"])
    return url


class BloggerRule(PlatformRule):
    """Feeds served from blogger.com."""

    name = "blogger"

    def matches(self, url: str) -> bool:
        parts = split_url(url)
        return parts is not None and parts.host.lower() in BLOGGER_HOSTS

    def rewrite(self, url: str) -> str:
        parts = split_url(url)
        if parts is None:
            return url
        # Blogger builds internal links from the request scheme; non-www redirects to www.
        parts.scheme = "https"
        parts.host = "www.blogger.com"
        return _strip_view_params(parts.geturl())


class BlogspotRule(PlatformRule):
    """Feeds served from *.blogspot.<tld> blog hosts."""

    name = "blogspot"

    def matches(self, url: str) -> bool:
        parts = split_url(url)
        return parts is not None and bool(BLOGSPOT_PATTERN.search(parts.host))

    def rewrite(self, url: str) -> str:
        parts = split_url(url)
        if parts is None:
            return url
        parts.scheme = "https"
        parts.host = BLOGSPOT_PATTERN.sub(".blogspot.com", parts.host.lower())

        # Legacy feed paths still work but are undocumented
        legacy_rss = parts.path == "/rss.xml"
        if parts.path in ("/atom.xml", "/rss.xml"):
            parts.path = "/feeds/posts/default"

        rewritten = parts.geturl()
        if legacy_rss:
            rewritten = set_query_param(rewritten, "alt", "rss")
        return _strip_view_params(rewritten)


BLOGGER = BloggerRule()
BLOGSPOT = BlogspotRule()
