"""URL normalization utilities."""

import re
import unicodedata
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple
from urllib.parse import quote, unquote_plus, urlsplit

import idna

DEFAULT_PORTS = {"http": "80", "https": "443"}

UNRESERVED = frozenset("ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-._~")

# Printable ASCII that may stay as-is once escapes are normalized.
_SAFE_ASCII = "!#$%&'()*+,-./:;=?@[]_~"

_PERCENT_RE = re.compile(r"%([0-9A-Fa-f]{2})")
_SLASHES_RE = re.compile(r"/{2,}")

TEXT_FRAGMENT_DIRECTIVE = ":~:"


@dataclass(frozen=True)
class NormalizationProfile:
    """Set of textual transforms applied by normalize_url.

    Every toggle defaults to off, so ``NormalizationProfile()`` leaves a URL
    untouched apart from reassembly.
    """

    strip_scheme: bool = False
    strip_credentials: bool = False
    strip_www: bool = False
    strip_default_port: bool = False
    strip_trailing_slash: bool = False
    strip_root_slash: bool = False
    collapse_slashes: bool = False
    strip_fragment: bool = False
    strip_text_fragment: bool = False
    sort_query_params: bool = False
    strip_query: bool = False
    strip_query_params: Tuple[str, ...] = ()
    strip_empty_query: bool = False
    normalize_encoding: bool = False
    normalize_unicode: bool = False
    convert_to_punycode: bool = False
    lowercase_hostname: bool = False


@dataclass
class UrlParts:
    """Mutable view of a URL split into the pieces the transforms touch."""

    scheme: str
    userinfo: str
    host: str
    port: str
    path: str
    query: Optional[str]
    fragment: Optional[str]

    @property
    def netloc(self) -> str:
        netloc = self.host
        if ":" in netloc and not netloc.startswith("["):
            netloc = f"[{netloc}]"
        if self.port:
            netloc = f"{netloc}:{self.port}"
        if self.userinfo:
            netloc = f"{self.userinfo}@{netloc}"
        return netloc

    def geturl(self, include_scheme: bool = True) -> str:
        url = f"{self.scheme}://{self.netloc}" if include_scheme else self.netloc
        url += self.path
        if self.query is not None:
            url += "?" + self.query
        if self.fragment is not None:
            url += "#" + self.fragment
        return url


def split_url(url: str) -> Optional[UrlParts]:
    """Split an absolute URL, keeping track of empty query and fragment markers.

    Returns None when the URL has no scheme or authority.
    """
    try:
        parsed = urlsplit(url)
    except ValueError:
        return None
    if not parsed.scheme or not parsed.netloc:
        return None

    userinfo, _, hostport = parsed.netloc.rpartition("@")
    if hostport.startswith("["):
        end = hostport.find("]")
        if end == -1:
            return None
        host = hostport[1:end]
        port = hostport[end + 1:].lstrip(":")
    else:
        host, _, port = hostport.partition(":")

    before_fragment, has_fragment, _ = url.partition("#")
    has_query = "?" in before_fragment

    return UrlParts(
        scheme=parsed.scheme.lower(),
        userinfo=userinfo,
        host=host,
        port=port,
        path=parsed.path,
        query=parsed.query if has_query else None,
        fragment=parsed.fragment if has_fragment else None,
    )


def split_query(query: str) -> List[str]:
    """Split a raw query string into its parameter tokens."""
    return [token for token in query.split("&") if token]


def query_param_name(token: str) -> str:
    """Decoded name of a raw query token."""
    return unquote_plus(token.partition("=")[0])


def _normalize_escapes(text: str) -> str:
    """Decode escaped unreserved characters and uppercase the rest."""

    def _replace(match: re.Match) -> str:
        char = chr(int(match.group(1), 16))
        if char in UNRESERVED:
            return char
        return "%" + match.group(1).upper()

    text = _PERCENT_RE.sub(_replace, text)
    # Bare non-ASCII characters and unsafe ASCII get UTF-8 escapes.
    return quote(text, safe=_SAFE_ASCII)


def _to_punycode(host: str) -> str:
    if host.isascii():
        return host
    try:
        return idna.encode(host, uts46=True).decode("ascii")
    except idna.IDNAError:
        return host


def normalize_url(url: str, profile: Optional[NormalizationProfile] = None) -> str:
    """
    Normalize URL according to a NormalizationProfile.

    Steps run in a fixed order:
    - Scheme, credentials and host
    - Path slashes
    - Fragment
    - Query parameters
    - Percent-encoding and Unicode

    Returns the input unchanged when it cannot be parsed.
    """
    if profile is None:
        from feedcanon.core.defaults import DEFAULT_NORMALIZE_PROFILE

        profile = DEFAULT_NORMALIZE_PROFILE

    try:
        parts = split_url(url)
        if parts is None:
            return url

        # Authority
        if profile.strip_credentials:
            parts.userinfo = ""
        if profile.lowercase_hostname:
            parts.host = parts.host.lower()
        if profile.strip_www and parts.host.lower().startswith("www."):
            parts.host = parts.host[4:]
        if profile.strip_default_port and parts.port == DEFAULT_PORTS.get(parts.scheme):
            parts.port = ""

        # Path
        if profile.collapse_slashes:
            parts.path = _SLASHES_RE.sub("/", parts.path)
        if profile.strip_trailing_slash and len(parts.path) > 1 and parts.path.endswith("/"):
            parts.path = parts.path[:-1]
        if profile.strip_root_slash and parts.path == "/":
            parts.path = ""

        # Fragment
        if profile.strip_fragment:
            parts.fragment = None
        elif profile.strip_text_fragment and parts.fragment is not None:
            fragment = parts.fragment.split(TEXT_FRAGMENT_DIRECTIVE, 1)[0]
            parts.fragment = fragment or None

        # Query
        if profile.strip_query:
            parts.query = None
        elif parts.query is not None:
            if profile.strip_query_params or profile.sort_query_params:
                tokens = split_query(parts.query)
                if profile.strip_query_params:
                    stripped = {name.lower() for name in profile.strip_query_params}
                    kept = [t for t in tokens if query_param_name(t).lower() not in stripped]
                    if tokens and not kept:
                        parts.query = None
                    tokens = kept
                if profile.sort_query_params:
                    tokens = sorted(tokens, key=query_param_name)
                if parts.query is not None:
                    parts.query = "&".join(tokens)
            if profile.strip_empty_query and not parts.query:
                parts.query = None

        # Encoding and Unicode
        if profile.normalize_unicode:
            parts.host = unicodedata.normalize("NFC", parts.host)
            parts.path = unicodedata.normalize("NFC", parts.path)
            if parts.query is not None:
                parts.query = unicodedata.normalize("NFC", parts.query)
            if parts.fragment is not None:
                parts.fragment = unicodedata.normalize("NFC", parts.fragment)
        if profile.convert_to_punycode:
            parts.host = _to_punycode(parts.host)
        if profile.normalize_encoding:
            parts.path = _normalize_escapes(parts.path)
            if parts.query is not None:
                parts.query = _normalize_escapes(parts.query)
            if parts.fragment is not None:
                parts.fragment = _normalize_escapes(parts.fragment)

        if profile.strip_scheme and parts.scheme in DEFAULT_PORTS:
            return parts.geturl(include_scheme=False)
        return parts.geturl()
    except Exception:
        return url


def is_similar_url(url1: str, url2: str, profile: Optional[NormalizationProfile] = None) -> bool:
    """Check whether two URLs normalize to the same string."""
    return normalize_url(url1, profile) == normalize_url(url2, profile)


def remove_query_params(url: str, names: Iterable[str]) -> str:
    """Remove the named query parameters (case-insensitive)."""
    parts = split_url(url)
    if parts is None or parts.query is None:
        return url
    targets = {name.lower() for name in names}
    tokens = split_query(parts.query)
    kept = [t for t in tokens if query_param_name(t).lower() not in targets]
    if len(kept) == len(tokens):
        return url
    parts.query = "&".join(kept) if kept else None
    return parts.geturl()


def get_query_param(url: str, name: str) -> Optional[str]:
    """Return the first decoded value of a query parameter, if present."""
    parts = split_url(url)
    if parts is None or parts.query is None:
        return None
    for token in split_query(parts.query):
        key, _, value = token.partition("=")
        if unquote_plus(key) == name:
            return unquote_plus(value)
    return None


def set_query_param(url: str, name: str, value: str) -> str:
    """Set a query parameter, replacing existing occurrences."""
    parts = split_url(url)
    if parts is None:
        return url
    tokens = split_query(parts.query or "")
    tokens = [t for t in tokens if query_param_name(t) != name]
    tokens.append(f"{quote(name, safe='')}={quote(value, safe='')}")
    parts.query = "&".join(tokens)
    return parts.geturl()


def replace_scheme(url: str, scheme: str) -> str:
    """Swap the scheme of an absolute URL."""
    parts = split_url(url)
    if parts is None:
        return url
    parts.scheme = scheme
    return parts.geturl()
