"""Default parameter lists, normalization tiers and rule registries."""

from typing import List, Tuple

from feedcanon.core.url_utils import NormalizationProfile
from feedcanon.rules.base import PlatformRule, ProbeRule
from feedcanon.rules.blogger import BLOGGER, BLOGSPOT
from feedcanon.rules.feedburner import FEEDBURNER
from feedcanon.rules.wordpress import WORDPRESS

# Query parameters that only carry tracking or cache-busting state.
DEFAULT_STRIPPED_PARAMS: Tuple[str, ...] = (
    # Google Analytics / Urchin
    "utm_source",
    "utm_medium",
    "utm_campaign",
    "utm_term",
    "utm_content",
    "utm_id",
    "utm_name",
    "utm_reader",
    "utm_brand",
    "utm_social",
    "utm_social-type",
    "_ga",
    "_gl",
    # Ad click identifiers
    "gclid",
    "gclsrc",
    "dclid",
    "fbclid",
    "msclkid",
    "yclid",
    "twclid",
    "igshid",
    "li_fat_id",
    # Mailchimp, HubSpot, Marketo and friends
    "mc_cid",
    "mc_eid",
    "_hsenc",
    "_hsmi",
    "__hssc",
    "__hstc",
    "__hsfp",
    "hsctatracking",
    "mkt_tok",
    "vero_id",
    "vero_conv",
    "oly_anon_id",
    "oly_enc_id",
    "rb_clickid",
    "s_cid",
    "wickedid",
    # WordPress cron trigger appended by some hosts
    "doing_wp_cron",
)

_CLEAN = dict(
    strip_default_port=True,
    collapse_slashes=True,
    strip_fragment=True,
    strip_query_params=DEFAULT_STRIPPED_PARAMS,
    strip_empty_query=True,
    normalize_encoding=True,
    normalize_unicode=True,
    convert_to_punycode=True,
    lowercase_hostname=True,
)

# Cleanest first. Each later tier keeps more of the original URL.
DEFAULT_TIERS: List[NormalizationProfile] = [
    NormalizationProfile(strip_www=True, strip_trailing_slash=True, sort_query_params=True, **_CLEAN),
    NormalizationProfile(strip_trailing_slash=True, sort_query_params=True, **_CLEAN),
    NormalizationProfile(**_CLEAN),
]

# Comparison-only profile used by the equivalence checker.
DEFAULT_NORMALIZE_PROFILE = NormalizationProfile(
    strip_scheme=True,
    strip_www=True,
    strip_trailing_slash=True,
    lowercase_hostname=True,
)


DEFAULT_PLATFORMS: List[PlatformRule] = [FEEDBURNER, BLOGGER, BLOGSPOT]
DEFAULT_PROBES: List[ProbeRule] = [WORDPRESS]
