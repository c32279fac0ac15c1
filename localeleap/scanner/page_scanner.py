"""
Page Scanner - finds alternate-language links in a loaded document.

Looks for
    <link rel="alternate" hreflang="fr" href="https://example.com/fr/">
entries matching the preferred locale (case-insensitive) and posts them to
the orchestrator as EXTERNAL_HINT candidates, once per page load.
"""

import logging
from typing import Dict, Hashable, List, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from localeleap.core.models import Candidate, HintMessage, Producer
from localeleap.redirect.channel import HintChannel

logger = logging.getLogger(__name__)


def _rel_values(link) -> List[str]:
    rel = link.get("rel") or []
    if isinstance(rel, str):
        rel = rel.split()
    return [value.lower() for value in rel]


def extract_hints(html: str, page_url: str, locale: str) -> List[Candidate]:
    """
    Collect hreflang alternates for one locale.

    Args:
        html: Rendered document markup
        page_url: URL the document was loaded from, used to resolve hrefs
        locale: Preferred locale code

    Returns:
        EXTERNAL_HINT candidates in document order
    """
    wanted = locale.strip().lower()
    if not wanted:
        return []

    soup = BeautifulSoup(html, "html.parser")
    candidates: List[Candidate] = []

    for link in soup.find_all("link", hreflang=True):
        if "alternate" not in _rel_values(link):
            continue
        lang = (link.get("hreflang") or "").strip()
        if lang.lower() != wanted:
            continue
        href = (link.get("href") or "").strip()
        if not href:
            continue
        candidates.append(
            Candidate(url=urljoin(page_url, href), locale=lang, producer=Producer.EXTERNAL_HINT)
        )

    return candidates


class PageScanner:
    """Runs hreflang extraction once per page load and reports the result."""

    def __init__(self, settings, channel: HintChannel):
        self.settings = settings
        self.channel = channel
        # Latest scanned load per tab
        self._scanned: Dict[int, Hashable] = {}

    def scan(self, session_id: int, load_id: Hashable, html: str, page_url: str) -> List[Candidate]:
        """
        Scan one loaded document.

        Repeated calls for the tab's latest load_id do nothing.

        Returns:
            Candidates found (and posted) by this call
        """
        if self._scanned.get(session_id) == load_id:
            logger.debug(f"[PageScanner] tab {session_id} load {load_id!r} already scanned")
            return []
        self._scanned[session_id] = load_id

        locale: Optional[str] = self.settings.get_preferred_locale()
        if not locale:
            return []

        candidates = extract_hints(html, page_url, locale)
        if candidates:
            logger.info(f"[PageScanner] Found {len(candidates)} hreflang candidates on {page_url[:100]}")
            self.channel.post(session_id, load_id, HintMessage(candidates=candidates))
        return candidates

    def forget_session(self, session_id: int) -> None:
        self._scanned.pop(session_id, None)
