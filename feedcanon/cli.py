"""CLI utilities."""

import logging
import sys
from typing import Optional

import click

from feedcanon.adapters.http import HttpxClient
from feedcanon.config import settings
from feedcanon.core.canonical import CanonicalizeOptions, find_canonical
from feedcanon.core.defaults import DEFAULT_TIERS
from feedcanon.core.equivalence import EquivalenceOptions, are_equivalent
from feedcanon.core.resolver import resolve_url
from feedcanon.core.url_utils import normalize_url


@click.group()
@click.option("--log-level", default=None, help="Logging level (defaults to LOG_LEVEL)")
def cli(log_level: Optional[str]):
    """Feed canonical URL finder CLI."""
    logging.basicConfig(
        level=(log_level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


@cli.command()
@click.argument("url")
@click.option("--no-platforms", is_flag=True, help="Disable platform rewrite rules")
@click.option("--no-probes", is_flag=True, help="Disable feed URL probes")
@click.option("--timeout", type=float, default=None, help="Deadline for the whole lookup, in seconds")
def canonicalize(url: str, no_platforms: bool, no_probes: bool, timeout: Optional[float]):
    """Find the canonical URL of a feed."""
    options = CanonicalizeOptions(
        client=HttpxClient(),
        stripped_params=settings.stripped_params,
        timeout=timeout or settings.canonicalize_timeout or None,
        default_scheme=settings.default_scheme,
    )
    if no_platforms:
        options.platforms = []
    if no_probes:
        options.probes = []

    canonical = find_canonical(url, options)
    if canonical is None:
        click.echo(f"Could not resolve a feed at {url}", err=True)
        sys.exit(1)
    click.echo(canonical)


@cli.command()
@click.argument("url_a")
@click.argument("url_b")
def equivalent(url_a: str, url_b: str):
    """Check whether two URLs serve the same feed."""
    result = are_equivalent(url_a, url_b, EquivalenceOptions(client=HttpxClient()))
    if not result.equivalent:
        click.echo("not equivalent")
        sys.exit(1)
    click.echo(f"equivalent ({result.method})")


@cli.command()
@click.argument("url")
@click.option("--tier", default=1, type=click.IntRange(1, len(DEFAULT_TIERS)), help="Normalization tier (1 is cleanest)")
def normalize(url: str, tier: int):
    """Resolve and normalize a URL without fetching it."""
    resolved = resolve_url(url, default_scheme=settings.default_scheme)
    if resolved is None:
        click.echo(f"Not a fetchable http(s) URL: {url}", err=True)
        sys.exit(1)
    click.echo(normalize_url(resolved, DEFAULT_TIERS[tier - 1]))


if __name__ == "__main__":
    cli()
