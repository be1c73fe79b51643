"""URL resolution and scheme sanitization."""

import ipaddress
import re
from typing import Optional
from urllib.parse import quote, urljoin

from feedcanon.core.url_utils import DEFAULT_PORTS, UrlParts, replace_scheme, split_url

# Legacy feed-discovery schemes that map onto http(s).
FEED_SCHEMES = ("feed", "rss", "pcast", "itpc")

ALLOWED_SCHEMES = ("http", "https")

_SCHEME_RE = re.compile(r"^([A-Za-z][A-Za-z0-9+.\-]*):")
_AUTHORITY_END_RE = re.compile(r"[/?#]")
_LABEL_RE = re.compile(r"^[^\W_](?:[\w-]*[^\W_])?$")

_UNSAFE_CHARS = frozenset(' "<>`{}|\\^')


def resolve_feed_scheme(url: str, fallback: str = "https") -> str:
    """
    Convert legacy feed schemes to http(s).

    Examples:
    - feed://example.com/rss.xml -> https://example.com/rss.xml
    - feed:http://example.com/rss.xml -> http://example.com/rss.xml
    - ITPC://example.com/podcast.xml -> https://example.com/podcast.xml
    """
    lowered = url.lower()
    for scheme in FEED_SCHEMES:
        prefix = scheme + ":"
        if not lowered.startswith(prefix):
            continue
        rest = url[len(prefix):]
        # Wrapped absolute URL keeps its own scheme
        if rest.lower().startswith(("http://", "https://")):
            return rest
        if rest.startswith("//"):
            return f"{fallback}:{rest}"
    return url


def is_plausible_host(host: str) -> bool:
    """Check that a hostname looks like something fetchable on the public web."""
    if not host:
        return False
    if host.lower() == "localhost":
        return True
    if host.startswith("[") and host.endswith("]"):
        try:
            ipaddress.IPv6Address(host[1:-1])
            return True
        except ValueError:
            return False
    try:
        ipaddress.IPv4Address(host)
        return True
    except ValueError:
        pass

    labels = host.split(".")
    if len(labels) < 2 or labels[-1].isdigit():
        return False
    return all(len(label) <= 63 and _LABEL_RE.match(label) for label in labels)


def is_plausible_authority(authority: str) -> bool:
    """Check a [userinfo@]host[:port] string."""
    if not authority or any(c.isspace() for c in authority):
        return False
    _, _, hostport = authority.rpartition("@")
    if hostport.startswith("["):
        end = hostport.find("]")
        if end == -1:
            return False
        host, rest = hostport[: end + 1], hostport[end + 1:]
        if rest and not rest.startswith(":"):
            return False
        has_port, port = bool(rest), rest[1:]
    else:
        host, sep, port = hostport.partition(":")
        has_port = bool(sep)
    if has_port and not (port.isdigit() and int(port) <= 65535):
        return False
    return is_plausible_host(host)


def add_missing_scheme(url: str, scheme: str = "https") -> str:
    """
    Add a scheme to protocol-relative URLs and bare domains.

    Examples:
    - //example.com/feed -> https://example.com/feed
    - example.com/feed -> https://example.com/feed
    - /path/to/feed -> /path/to/feed (unchanged, relative path)
    """
    match = _SCHEME_RE.match(url)
    if match:
        name = match.group(1)
        # "example.com:8080/feed" and "localhost:3000" are authorities, not schemes
        if "." not in name and name.lower() != "localhost":
            return url

    if url.startswith("//"):
        if url.startswith("///"):
            return url
        authority = _AUTHORITY_END_RE.split(url[2:], 1)[0]
        return f"{scheme}:{url}" if is_plausible_authority(authority) else url

    if url.startswith(("/", ".")):
        return url

    authority = _AUTHORITY_END_RE.split(url, 1)[0]
    if not is_plausible_authority(authority):
        return url
    return f"{scheme}://{url}"


def resolve_absolute(reference: str, base: str) -> Optional[str]:
    """Resolve a possibly-relative reference against a base URL (RFC 3986)."""
    try:
        return urljoin(base, reference)
    except ValueError:
        return None


def remove_dot_segments(path: str) -> str:
    """Collapse "." and ".." path segments."""
    if "." not in path:
        return path
    segments = path.split("/")
    output = []
    last = len(segments) - 1
    for index, segment in enumerate(segments):
        if segment == "..":
            if len(output) > 1:
                output.pop()
            if index == last:
                output.append("")
        elif segment == ".":
            if index == last:
                output.append("")
        else:
            output.append(segment)
    return "/".join(output)


def _escape_unsafe(text: str) -> str:
    """Percent-encode characters that may not appear raw in a URL, keeping escapes."""
    if text.isascii() and not any(c in _UNSAFE_CHARS or ord(c) < 0x21 or ord(c) == 0x7F for c in text):
        return text
    return "".join(
        quote(c, safe="") if c in _UNSAFE_CHARS or ord(c) < 0x21 or ord(c) >= 0x7F else c for c in text
    )


def _finalize(url: str) -> Optional[str]:
    parts = split_url(url)
    if parts is None or parts.scheme not in ALLOWED_SCHEMES:
        return None

    host = parts.host.lower()
    if not host or any(c.isspace() or c in _UNSAFE_CHARS or c in "#%/?@" for c in host):
        return None
    if ":" in host:
        try:
            ipaddress.IPv6Address(host)
        except ValueError:
            return None

    port = parts.port
    if port:
        if not port.isdigit() or int(port) > 65535:
            return None
        port = str(int(port))
        if port == DEFAULT_PORTS[parts.scheme]:
            port = ""

    resolved = UrlParts(
        scheme=parts.scheme,
        userinfo=parts.userinfo,
        host=host,
        port=port,
        path=_escape_unsafe(remove_dot_segments(parts.path)) or "/",
        query=_escape_unsafe(parts.query) if parts.query is not None else None,
        fragment=_escape_unsafe(parts.fragment) if parts.fragment is not None else None,
    )
    return resolved.geturl()


def resolve_url(url: str, base: Optional[str] = None, default_scheme: str = "https") -> Optional[str]:
    """
    Resolve a raw URL into an absolute http(s) URL.

    Converts feed schemes, resolves relative references against base, adds a
    missing scheme and rejects everything that is not http or https.
    Returns None when the URL cannot be made safe to fetch.
    """
    if not isinstance(url, str):
        return None
    processed = url.strip()
    if not processed:
        return None

    processed = resolve_feed_scheme(processed, fallback=default_scheme)

    if base:
        processed = resolve_absolute(processed, base)
        if processed is None:
            return None

    processed = add_missing_scheme(processed, scheme=default_scheme)
    return _finalize(processed)


def alternate_protocol(url: str) -> Optional[str]:
    """Return the http<->https counterpart of a URL."""
    if url.startswith("https://"):
        return replace_scheme(url, "http")
    if url.startswith("http://"):
        return replace_scheme(url, "https")
    return None


def is_public_url(url: str) -> bool:
    """Default verification: reject local and private network targets."""
    resolved = resolve_url(url)
    if resolved is None:
        return False
    parts = split_url(resolved)
    if parts is None:
        return False
    host = parts.host
    if host == "localhost" or host.endswith(".localhost"):
        return False
    try:
        address = ipaddress.ip_address(host)
    except ValueError:
        return True
    return not (
        address.is_private
        or address.is_loopback
        or address.is_link_local
        or address.is_multicast
        or address.is_reserved
        or address.is_unspecified
    )
