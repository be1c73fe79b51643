"""WordPress query-string feed addressing."""

from typing import List

from feedcanon.core.url_utils import get_query_param, remove_query_params, split_url
from feedcanon.rules.base import ProbeRule

FEED_TYPES = ("atom", "rss2", "rss", "rdf")


class WordPressProbe(ProbeRule):
    """
    Turn ``?feed=<type>`` into pretty permalink candidates.

    ``?feed=atom`` maps to ``/feed/atom``, every other type to ``/feed``.
    The slash-terminated form is tried second.
    """

    name = "wordpress"

    def matches(self, url: str) -> bool:
        feed = get_query_param(url, "feed")
        return bool(feed) and feed.lower() in FEED_TYPES

    def candidates(self, url: str) -> List[str]:
        feed = (get_query_param(url, "feed") or "").lower()
        if not feed:
            return []

        parts = split_url(remove_query_params(url, ["feed"]))
        if parts is None:
            return []
        base_path = parts.path.rstrip("/")
        feed_path = "/feed/atom" if feed == "atom" else "/feed"

        candidates = []
        for suffix in ("", "/"):
            parts.path = f"{base_path}{feed_path}{suffix}"
            candidates.append(parts.geturl())
        return candidates


WORDPRESS = WordPressProbe()
