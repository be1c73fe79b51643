"""Default feed adapter for RSS, RDF, Atom and JSON Feed."""

import json
import logging
import re
from dataclasses import asdict, dataclass, field
from typing import List, Optional

from bs4 import BeautifulSoup, Tag

from feedcanon.adapters.base import FeedAdapter
from feedcanon.core.url_utils import split_url

logger = logging.getLogger(__name__)

_TRAILING_SLASH_RE = re.compile(r'(?<=[^"=])/(?=["?])')


@dataclass
class FeedItem:
    """Feed entry fields that identify content."""

    id: Optional[str] = None
    link: Optional[str] = None
    title: Optional[str] = None
    published: Optional[str] = None


@dataclass
class ParsedFeed:
    """Feed parsed by DefaultFeedAdapter."""

    format: str  # rss, rdf, atom, json
    title: Optional[str] = None
    description: Optional[str] = None
    link: Optional[str] = None
    self_url: Optional[str] = None
    updated: Optional[str] = None
    items: List[FeedItem] = field(default_factory=list)


def _local(tag: Tag) -> str:
    return tag.name.split(":")[-1]


def _child(parent: Tag, name: str) -> Optional[Tag]:
    return parent.find(lambda t: _local(t) == name, recursive=False)


def _text(tag: Optional[Tag]) -> Optional[str]:
    if tag is None:
        return None
    text = " ".join(tag.get_text().split())
    return text or None


def _links(parent: Tag) -> List[Tag]:
    return parent.find_all(lambda t: _local(t) == "link", recursive=False)


def _self_link(parent: Tag) -> Optional[str]:
    for link in _links(parent):
        if link.get("rel") == "self" and link.get("href"):
            return link["href"].strip()
    return None


def _atom_link(parent: Tag) -> Optional[str]:
    for link in _links(parent):
        if link.get("rel") in (None, "alternate") and link.get("href"):
            return link["href"].strip()
    return None


def _rss_link(parent: Tag) -> Optional[str]:
    for link in _links(parent):
        if not link.get("href"):
            return _text(link)
    return None


def neutralize_feed_urls(signature: str, url: Optional[str]) -> str:
    """
    Rewrite same-site absolute URLs in a JSON signature to root-relative paths.

    Only URLs that open a JSON string or a query value are touched, and only
    when scheme is http(s), host equals the feed host (optionally with www.)
    and the port matches. Trailing slashes before a closing quote or a query
    are dropped, except for the root path.
    """
    if not signature or not url:
        return signature
    parts = split_url(url)
    if parts is None or not parts.host:
        return signature

    host = parts.host.lower()
    if host.startswith("www."):
        host = host[4:]
    authority = re.escape(host) + (":" + re.escape(parts.port) if parts.port else "")
    pattern = re.compile(r'(?<=["=])https?://(?:www\.)?' + authority + r'(?=[/?#"])')

    def _replace(match: re.Match) -> str:
        return "/" if match.string[match.end()] == '"' else ""

    signature = pattern.sub(_replace, signature)
    return _TRAILING_SLASH_RE.sub("", signature)


class DefaultFeedAdapter(FeedAdapter[ParsedFeed]):
    """Parse feeds with BeautifulSoup (lxml) and json."""

    def parse(self, body: str) -> Optional[ParsedFeed]:
        if not body or not body.strip():
            return None
        try:
            if body.lstrip().startswith("{"):
                return self._parse_json(body)
            return self._parse_xml(body)
        except Exception as e:
            logger.debug(f"Error parsing feed body: {e}")
            return None

    def _parse_json(self, body: str) -> Optional[ParsedFeed]:
        data = json.loads(body)
        if not isinstance(data, dict) or "jsonfeed.org" not in str(data.get("version", "")):
            return None

        items = []
        for entry in data.get("items") or []:
            if not isinstance(entry, dict):
                continue
            items.append(
                FeedItem(
                    id=str(entry["id"]) if entry.get("id") is not None else None,
                    link=entry.get("url"),
                    title=entry.get("title"),
                    published=entry.get("date_published"),
                )
            )
        return ParsedFeed(
            format="json",
            title=data.get("title"),
            description=data.get("description"),
            link=data.get("home_page_url"),
            self_url=data.get("feed_url"),
            items=items,
        )

    def _parse_xml(self, body: str) -> Optional[ParsedFeed]:
        soup = BeautifulSoup(body, "xml")
        root = soup.find(lambda t: _local(t) in ("rss", "RDF", "feed"))
        if root is None:
            return None

        if _local(root) == "feed":
            return self._parse_atom(root)

        # RSS 2.0 nests items in channel, RSS 1.0 (RDF) makes them siblings
        channel = _child(root, "channel") or root
        items = [
            FeedItem(
                id=_text(_child(item, "guid")) or item.get("rdf:about") or item.get("about"),
                link=_text(_child(item, "link")),
                title=_text(_child(item, "title")),
                published=_text(_child(item, "pubDate")) or _text(_child(item, "date")),
            )
            for item in root.find_all(lambda t: _local(t) == "item")
        ]
        return ParsedFeed(
            format="rdf" if _local(root) == "RDF" else "rss",
            title=_text(_child(channel, "title")),
            description=_text(_child(channel, "description")),
            link=_rss_link(channel),
            self_url=_self_link(channel),
            updated=_text(_child(channel, "lastBuildDate")),
            items=items,
        )

    def _parse_atom(self, root: Tag) -> ParsedFeed:
        items = [
            FeedItem(
                id=_text(_child(entry, "id")),
                link=_atom_link(entry),
                title=_text(_child(entry, "title")),
                published=_text(_child(entry, "published")) or _text(_child(entry, "updated")),
            )
            for entry in root.find_all(lambda t: _local(t) == "entry")
        ]
        return ParsedFeed(
            format="atom",
            title=_text(_child(root, "title")),
            description=_text(_child(root, "subtitle")),
            link=_atom_link(root),
            self_url=_self_link(root),
            updated=_text(_child(root, "updated")),
            items=items,
        )

    def get_self_url(self, feed: ParsedFeed) -> Optional[str]:
        return feed.self_url or None

    def get_signature(self, feed: ParsedFeed, url: Optional[str] = None) -> str:
        """
        JSON summary of title, description, site link and items.

        Self URL and build timestamps are left out since they vary between
        mirrors of the same feed.
        """
        data = {
            "title": feed.title,
            "description": feed.description,
            "link": feed.link,
            "items": [asdict(item) for item in feed.items],
        }
        signature = json.dumps(data, sort_keys=True, ensure_ascii=False, separators=(",", ":"))
        return neutralize_feed_urls(signature, url)
