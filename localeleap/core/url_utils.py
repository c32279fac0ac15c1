"""
URL helpers shared by the candidate generator, the orchestrator and the
settings store.

Covers:
- Strict absolute-URL parsing (raises InvalidUrl)
- Locale-code shape detection (en, fra, pt-BR, zh-Hant)
- Ignored-domain matching (exact host or any subdomain of it)
- Origin reconstruction (scheme://host[:port])
"""

import re
from typing import Iterable, Optional
from urllib.parse import SplitResult, urlsplit

from localeleap.core.exceptions import InvalidUrl


# 2-3 lowercase letters, optional 2-4 letter region/script suffix
LOCALE_CODE_RE = re.compile(r"^[a-z]{2,3}(-[a-zA-Z]{2,4})?$")


def is_locale_code(value: str) -> bool:
    """Check if a host label or path segment looks like a locale code."""
    return bool(LOCALE_CODE_RE.match(value))


def parse_absolute_url(url: str) -> SplitResult:
    """
    Parse a URL that must carry both a scheme and a host.

    Raises:
        InvalidUrl: if the URL is empty, relative, or cannot be parsed
    """
    if not url or not url.strip():
        raise InvalidUrl(url or "", "empty URL")

    try:
        parts = urlsplit(url.strip())
        hostname = parts.hostname
        # Accessing .port validates it (raises ValueError when out of range)
        parts.port
    except ValueError as e:
        raise InvalidUrl(url, str(e)) from e

    if not parts.scheme:
        raise InvalidUrl(url, "missing URL scheme")
    if not hostname:
        raise InvalidUrl(url, "missing host")
    return parts


def host_of(url: str) -> str:
    """Lowercased hostname of an absolute URL."""
    return parse_absolute_url(url).hostname


def format_netloc(hostname: str, port: Optional[int]) -> str:
    """Rebuild a netloc without userinfo."""
    host = f"[{hostname}]" if ":" in hostname else hostname
    return f"{host}:{port}" if port is not None else host


def origin_of(parts: SplitResult) -> str:
    """scheme://host[:port] of parsed URL parts."""
    return f"{parts.scheme}://{format_netloc(parts.hostname, parts.port)}"


def matches_ignored_domain(domain: str, ignored_domains: Iterable[str]) -> Optional[str]:
    """
    Return the ignore-list entry covering a domain, if any.

    A domain is covered by an entry when it equals the entry or is a
    subdomain of it: "shop.example.com" is covered by "example.com",
    "badexample.com" is not.
    """
    for entry in ignored_domains:
        ignored = (entry or "").strip().lower()
        if not ignored:
            continue
        if domain == ignored or domain.endswith(f".{ignored}"):
            return entry
    return None
