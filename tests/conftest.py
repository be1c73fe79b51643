"""Shared test fixtures."""

from typing import Any, Dict, List, Optional, Union

import pytest

from feedcanon.adapters.base import FeedAdapter, FetchResponse, HttpClient


class FakeClient(HttpClient):
    """HTTP client serving canned responses keyed by request URL."""

    def __init__(self, responses: Optional[Dict[str, Union[FetchResponse, Exception]]] = None):
        self.responses = responses or {}
        self.calls: List[str] = []

    def add(self, url: str, body: str = "", status: int = 200, final_url: Optional[str] = None):
        self.responses[url] = FetchResponse(url=final_url or url, status=status, body=body)

    def fetch(self, url, method="GET", headers=None):
        self.calls.append(url)
        response = self.responses.get(url)
        if response is None:
            raise ConnectionError(f"No mock for {url}")
        if isinstance(response, Exception):
            raise response
        return response


class StringAdapter(FeedAdapter[str]):
    """Adapter treating any non-empty body as a feed whose signature is the body."""

    def __init__(self, self_url: Optional[str] = None, signature=None):
        self.self_url = self_url
        self.signature = signature

    def parse(self, body: str) -> Optional[str]:
        return body or None

    def get_self_url(self, feed: str) -> Optional[str]:
        return self.self_url

    def get_signature(self, feed: str, url: Optional[str] = None) -> Any:
        if self.signature is not None:
            return self.signature(feed)
        return feed


@pytest.fixture
def client():
    return FakeClient()


@pytest.fixture
def adapter():
    return StringAdapter()


RSS_FEED = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:atom="http://www.w3.org/2005/Atom">
  <channel>
    <title>Example Blog</title>
    <link>https://example.com/</link>
    <description>Posts from example.com</description>
    <atom:link href="https://example.com/feed" rel="self" type="application/rss+xml"/>
    <lastBuildDate>Mon, 06 Sep 2021 12:00:00 GMT</lastBuildDate>
    <item>
      <title>First post</title>
      <link>https://example.com/first-post/</link>
      <guid>https://example.com/?p=1</guid>
      <pubDate>Mon, 06 Sep 2021 10:00:00 GMT</pubDate>
    </item>
    <item>
      <title>Second post</title>
      <link>https://example.com/second-post/</link>
      <guid>https://example.com/?p=2</guid>
      <pubDate>Tue, 07 Sep 2021 10:00:00 GMT</pubDate>
    </item>
  </channel>
</rss>
"""

ATOM_FEED = """<?xml version="1.0" encoding="utf-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>Example Atom</title>
  <subtitle>Notes</subtitle>
  <link href="https://example.com/"/>
  <link href="https://example.com/atom.xml" rel="self"/>
  <updated>2021-09-07T10:00:00Z</updated>
  <id>urn:uuid:60a76c80-d399-11d9-b93C-0003939e0af6</id>
  <entry>
    <title>Atom entry</title>
    <link href="https://example.com/entry"/>
    <id>urn:uuid:1225c695-cfb8-4ebb-aaaa-80da344efa6a</id>
    <updated>2021-09-07T10:00:00Z</updated>
  </entry>
</feed>
"""

RDF_FEED = """<?xml version="1.0"?>
<rdf:RDF xmlns:rdf="http://www.w3.org/1999/02/22-rdf-syntax-ns#" xmlns="http://purl.org/rss/1.0/"
  xmlns:dc="http://purl.org/dc/elements/1.1/">
  <channel rdf:about="https://example.com/rdf">
    <title>Example RDF</title>
    <link>https://example.com/</link>
    <description>RDF feed</description>
  </channel>
  <item rdf:about="https://example.com/one">
    <title>One</title>
    <link>https://example.com/one</link>
    <dc:date>2021-09-07</dc:date>
  </item>
</rdf:RDF>
"""

JSON_FEED = """{
  "version": "https://jsonfeed.org/version/1.1",
  "title": "Example JSON",
  "home_page_url": "https://example.com/",
  "feed_url": "https://example.com/feed.json",
  "items": [
    {"id": "1", "url": "https://example.com/one", "title": "One", "date_published": "2021-09-07T10:00:00Z"}
  ]
}"""
