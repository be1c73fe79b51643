"""Base rule interfaces."""

import logging
from abc import ABC, abstractmethod
from typing import List, Sequence

logger = logging.getLogger(__name__)


class PlatformRule(ABC):
    """Rewrites known aliases of a hosted platform onto one canonical form."""

    name: str = "platform"

    @abstractmethod
    def matches(self, url: str) -> bool:
        """Check if the rule applies to url."""
        pass

    @abstractmethod
    def rewrite(self, url: str) -> str:
        """
        Rewrite url to the platform's canonical form.

        Must be idempotent and free of side effects.
        """
        pass


class ProbeRule(ABC):
    """Derives path-based candidate URLs from query-addressed feed URLs."""

    name: str = "probe"

    @abstractmethod
    def matches(self, url: str) -> bool:
        """Check if the rule applies to url."""
        pass

    @abstractmethod
    def candidates(self, url: str) -> List[str]:
        """Return candidate URLs in preference order."""
        pass


def _rule_name(rule) -> str:
    return getattr(rule, "name", None) or type(rule).__name__


def apply_platform_rules(url: str, rules: Sequence[PlatformRule]) -> str:
    """
    Apply the first matching platform rule.

    A rule that raises is logged and treated as non-matching.
    """
    for rule in rules:
        try:
            if not rule.matches(url):
                continue
            rewritten = rule.rewrite(url)
        except Exception as e:
            logger.warning(f"Platform rule {_rule_name(rule)} failed for {url}: {e}")
            continue
        if rewritten != url:
            logger.debug(f"Platform rule {_rule_name(rule)} rewrote {url} -> {rewritten}")
        return rewritten
    return url


def collect_probe_candidates(url: str, rules: Sequence[ProbeRule]) -> List[str]:
    """
    Return the candidates of the first matching probe rule.

    A rule that raises is logged and treated as non-matching.
    """
    for rule in rules:
        try:
            if not rule.matches(url):
                continue
            candidates = list(rule.candidates(url))
        except Exception as e:
            logger.warning(f"Probe rule {_rule_name(rule)} failed for {url}: {e}")
            continue
        logger.debug(f"Probe rule {_rule_name(rule)} produced {len(candidates)} candidates for {url}")
        return candidates
    return []
