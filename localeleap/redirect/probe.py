"""
Reachability Probe - lightweight existence check for candidate URLs.

Issues a HEAD request bounded by a hard timeout and classifies the result:
- reachable: any status below 400, or 405 (servers that reject HEAD but
  would serve the real navigation)
- unreachable: every other status, network failure, timeout, invalid URL

Never raises. Failures are logged as warnings.
"""

import asyncio
import logging
from typing import Optional

import httpx

from localeleap.core.config import ProbeSettings, get_settings
from localeleap.core.exceptions import ProbeUnreachable

logger = logging.getLogger(__name__)

METHOD_NOT_ALLOWED = 405


def classify_status(url: str, status_code: int) -> None:
    """
    Raise ProbeUnreachable unless the status means the URL exists.

    Redirects count as reachable: the navigation would follow them.
    """
    if status_code < 400 or status_code == METHOD_NOT_ALLOWED:
        return
    raise ProbeUnreachable(url, f"HTTP {status_code}")


class ReachabilityProbe:
    """Async HEAD-based existence check with a bounded timeout."""

    def __init__(
        self,
        settings: Optional[ProbeSettings] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.settings = settings or get_settings().probe
        self.timeout = self.settings.timeout_seconds
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the shared HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                follow_redirects=self.settings.follow_redirects,
                headers={"User-Agent": self.settings.user_agent},
            )
        return self._client

    async def close(self):
        """Close the HTTP client if this probe created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def _head(self, url: str) -> int:
        client = self._get_client()
        try:
            response = await client.head(url)
        except httpx.TimeoutException as e:
            raise ProbeUnreachable(url, "timeout") from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise ProbeUnreachable(url, f"{type(e).__name__}: {e}") from e
        return response.status_code

    async def is_reachable(self, url: str) -> bool:
        """
        Check whether a URL answers a HEAD request.

        Args:
            url: Absolute candidate URL

        Returns:
            True if the URL looks servable, False otherwise (never raises)
        """
        try:
            status_code = await asyncio.wait_for(self._head(url), timeout=self.timeout)
            classify_status(url, status_code)
        except ProbeUnreachable as e:
            logger.warning(f"[Probe] Reachability check failed for {url[:100]}: {e.reason}")
            return False
        except asyncio.TimeoutError:
            logger.warning(f"[Probe] Reachability check timed out for {url[:100]} after {self.timeout}s")
            return False
        except Exception as e:
            # Contract: the drain loop only ever sees a boolean
            logger.warning(f"[Probe] Reachability check failed for {url[:100]}: {type(e).__name__}: {e}")
            return False

        logger.debug(f"[Probe] Reachable ({status_code}): {url[:100]}")
        return True
