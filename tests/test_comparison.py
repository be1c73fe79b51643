"""Tests for content comparison."""

from conftest import RSS_FEED, StringAdapter

from feedcanon.adapters.feed import DefaultFeedAdapter
from feedcanon.core.comparison import ContentComparator, bodies_match, compute_content_hash


def test_compute_content_hash():
    """Test content hash computation."""
    hash1 = compute_content_hash("This is a test feed.")
    hash2 = compute_content_hash("This is a test feed.")
    hash3 = compute_content_hash("This is a different feed.")

    assert hash1 == hash2
    assert hash1 != hash3
    assert len(hash1) == 32


def test_exact_match():
    """Test identical bodies match without parsing."""
    adapter = StringAdapter(signature=lambda feed: 1 / 0)
    comparator = ContentComparator(adapter, "body", "body")

    comparison = comparator.compare("body")

    assert comparison.matched
    assert comparison.method == "exact"
    assert comparison.feed == "body"


def test_hash_match():
    """Test a custom hash function decides before signatures."""
    comparator = ContentComparator(StringAdapter(), "one", "one", hash_fn=lambda body: "same")

    comparison = comparator.compare("two")

    assert comparison.matched
    assert comparison.method == "hash"


def test_signature_match():
    """Test differing bodies with equal signatures match."""
    adapter = StringAdapter(signature=lambda feed: feed.split("|")[0])
    comparator = ContentComparator(adapter, "items|built 10:00", "items|built 10:00")

    comparison = comparator.compare("items|built 10:05")

    assert comparison.matched
    assert comparison.method == "signature"
    assert comparison.feed == "items|built 10:05"


def test_no_match():
    """Test different content, empty and unparseable bodies do not match."""
    comparator = ContentComparator(StringAdapter(), "one", "one")

    assert not comparator.matches("two")
    assert not comparator.matches("")
    assert not comparator.matches(None)


def test_signature_error_is_no_match():
    """Test adapter failures are treated as a mismatch."""

    def signature(feed):
        if feed == "broken":
            raise ValueError("bad feed")
        return feed

    comparator = ContentComparator(StringAdapter(signature=signature), "one", "one")

    assert not comparator.matches("broken")


def test_reference_hash_computed_once():
    """Test reference hash is memoized across comparisons."""
    calls = []

    def hash_fn(body):
        calls.append(body)
        return body

    comparator = ContentComparator(StringAdapter(), "ref", "ref", hash_fn=hash_fn)
    comparator.compare("a")
    comparator.compare("b")

    assert calls.count("ref") == 1


def test_feed_signature_ignores_build_date_and_scheme():
    """Test real feeds differing in build date and link scheme match by signature."""
    adapter = DefaultFeedAdapter()
    reference = adapter.parse(RSS_FEED)
    candidate = RSS_FEED.replace("Mon, 06 Sep 2021 12:00:00 GMT", "Wed, 08 Sep 2021 08:00:00 GMT").replace(
        "https://example.com/", "http://www.example.com/"
    )

    assert bodies_match(RSS_FEED, reference, candidate, adapter, url="https://example.com/feed")
    assert not bodies_match(RSS_FEED, reference, candidate.replace("First post", "Edited"), adapter, url="https://example.com/feed")
