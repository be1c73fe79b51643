"""Platform rewrite rules and feed URL probes."""

from feedcanon.rules.base import PlatformRule, ProbeRule, apply_platform_rules, collect_probe_candidates
from feedcanon.rules.blogger import BLOGGER, BLOGSPOT, BloggerRule, BlogspotRule
from feedcanon.rules.feedburner import FEEDBURNER, HostAliasRule
from feedcanon.rules.wordpress import WORDPRESS, WordPressProbe

__all__ = [
    "PlatformRule",
    "ProbeRule",
    "apply_platform_rules",
    "collect_probe_candidates",
    "BloggerRule",
    "BlogspotRule",
    "HostAliasRule",
    "WordPressProbe",
    "BLOGGER",
    "BLOGSPOT",
    "FEEDBURNER",
    "WORDPRESS",
]
