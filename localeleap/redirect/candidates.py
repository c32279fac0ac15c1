"""
Candidate Generator - guesses locale siblings of a URL from its shape.

Two rules, each applied to the original URL independently:

1. Subdomain: en.example.com/page -> fr.example.com/page
2. Path: example.com/en/page -> example.com/fr/page
         example.com/page    -> example.com/fr/page

Usage:
    from localeleap.redirect.candidates import generate_candidates

    candidates = generate_candidates("https://en.example.com/en/page?x=1", "fr")
    # [Candidate(url="https://fr.example.com/en/page?x=1", ...),
    #  Candidate(url="https://en.example.com/fr/page?x=1", ...)]
"""

from typing import List, Optional
from urllib.parse import SplitResult

from localeleap.core.models import Candidate, Producer
from localeleap.core.url_utils import (
    format_netloc,
    is_locale_code,
    origin_of,
    parse_absolute_url,
)


def generate_candidates(url: str, locale: str) -> List[Candidate]:
    """
    Build the ordered, deduplicated PATTERN_SIBLING candidates for a URL.

    Args:
        url: Absolute URL the navigation started with
        locale: Target locale code, inserted verbatim

    Returns:
        Candidates in generation order (subdomain rule first)

    Raises:
        InvalidUrl: if the URL is not absolute
    """
    parts = parse_absolute_url(url)
    query = f"?{parts.query}" if parts.query else ""

    urls: List[str] = []

    subdomain_url = _substitute_subdomain(parts, locale, query)
    if subdomain_url:
        urls.append(subdomain_url)

    urls.append(_substitute_path(parts, locale, query))

    # dict preserves insertion order
    return [
        Candidate(url=candidate_url, locale=locale, producer=Producer.PATTERN_SIBLING)
        for candidate_url in dict.fromkeys(urls)
    ]


def _substitute_subdomain(parts: SplitResult, locale: str, query: str) -> Optional[str]:
    """Replace a locale-shaped first host label, keeping everything else."""
    labels = parts.hostname.split(".")
    if len(labels) < 2 or not is_locale_code(labels[0]):
        return None

    hostname = ".".join([locale] + labels[1:])
    netloc = format_netloc(hostname, parts.port)
    path = parts.path or "/"
    return f"{parts.scheme}://{netloc}{path}{query}"


def _substitute_path(parts: SplitResult, locale: str, query: str) -> str:
    """Replace a locale-shaped first path segment, or prepend one."""
    segments = [segment for segment in parts.path.split("/") if segment]

    if segments and is_locale_code(segments[0]):
        path = f"/{locale}/" + "/".join(segments[1:])
    else:
        path = f"/{locale}{parts.path or '/'}"

    return f"{origin_of(parts)}{path}{query}"
