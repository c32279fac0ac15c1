"""
Redirect Orchestrator - per-navigation redirect decision engine.

Event flow:
1. Navigation begin: consult settings, seed a registry entry with pattern
   candidates, start draining it through the reachability probe
2. Navigation committed: launch the page scanner while the entry is open
3. Hint message: prepend scanner candidates, resume draining
4. Session end: drop the entry and the tab's scanner bookkeeping

The first reachable candidate triggers exactly one redirect and closes the
entry. An exhausted queue closes the entry without a redirect. Every failure
degrades to "no redirect", letting the original navigation proceed.

Usage:
    orchestrator = RedirectOrchestrator(
        settings=SettingsStore(path),
        navigator=host_navigator,
        scanner_launcher=host_launcher,
    )
    await orchestrator.handle_navigation_begin({"tab_id": 7, "url": "https://en.example.com/"})
"""

import asyncio
import itertools
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, Set, Tuple, Union

from pydantic import ValidationError

from localeleap.core.exceptions import InvalidUrl, ReentrantDrainIgnored
from localeleap.core.logging_config import log_navigation_end, log_navigation_start
from localeleap.core.models import HintMessage, NavigationDetails
from localeleap.core.url_utils import host_of, matches_ignored_domain
from localeleap.redirect.candidates import generate_candidates
from localeleap.redirect.channel import HintChannel
from localeleap.redirect.probe import ReachabilityProbe
from localeleap.redirect.registry import NavigationPhase, NavigationRegistry, NavigationState

logger = logging.getLogger(__name__)


# =============================================================================
# Collaborator protocols
# =============================================================================


class SettingsSource(Protocol):
    def get_preferred_locale(self) -> Optional[str]: ...

    def get_ignored_domains(self) -> list[str]: ...


class Prober(Protocol):
    async def is_reachable(self, url: str) -> bool: ...


class BrowserNavigator(Protocol):
    """Host hook that points a tab at a new URL. Not awaited or verified."""

    def navigate(self, session_id: int, url: str) -> None: ...


class ScannerLauncher(Protocol):
    """Host hook that runs the page scanner inside a tab."""

    def launch(self, session_id: int) -> None: ...


class SessionTracker(Protocol):
    """Anything holding per-tab bookkeeping that must go when the tab closes."""

    def forget_session(self, session_id: int) -> None: ...


@dataclass
class OrchestratorStats:
    """Counters for log summaries."""

    navigations: int = 0
    probes: int = 0
    redirects: int = 0
    exhausted: int = 0
    hints_merged: int = 0


# =============================================================================
# Orchestrator
# =============================================================================


class RedirectOrchestrator:
    """Owns the navigation registry and runs its drain loops."""

    def __init__(
        self,
        settings: SettingsSource,
        navigator: BrowserNavigator,
        scanner_launcher: Optional[ScannerLauncher] = None,
        page_scanner: Optional[SessionTracker] = None,
        probe: Optional[Prober] = None,
        registry: Optional[NavigationRegistry] = None,
    ):
        self.settings = settings
        self.navigator = navigator
        self.scanner_launcher = scanner_launcher
        self.page_scanner = page_scanner
        self.probe = probe or ReachabilityProbe()
        self.registry = registry or NavigationRegistry()
        self.stats = OrchestratorStats()
        self._drains: Set[asyncio.Task] = set()
        self._channel: Optional[HintChannel] = None
        self._begin_tickets = itertools.count(1)
        self._pending_begins: Dict[int, int] = {}

    # -------------------------------------------------------------------------
    # Host events
    # -------------------------------------------------------------------------

    async def handle_navigation_begin(
        self, details: Union[NavigationDetails, Dict[str, Any]]
    ) -> Optional[NavigationState]:
        """
        Seed a registry entry for a new top-level navigation.

        Returns:
            The new entry, or None when the navigation is not tracked
        """
        details = _coerce_details(details)
        if not details.is_top_level_http:
            return None

        session_id = details.tab_id
        url = details.url

        ticket = next(self._begin_tickets)
        self._pending_begins[session_id] = ticket
        try:
            locale, ignored_domains = await asyncio.to_thread(self._read_settings)
        except Exception:
            logger.exception(f"[Orchestrator] Failed to read settings for tab {session_id}")
            locale = None

        # A newer begin or a session end for this tab arrived during the read
        if self._pending_begins.get(session_id) != ticket:
            logger.debug(f"[Orchestrator] tab {session_id}: navigation to {url[:100]} superseded before seeding")
            return None
        del self._pending_begins[session_id]

        if not locale:
            self.registry.discard(session_id)
            return None

        try:
            domain = host_of(url)
            ignored = matches_ignored_domain(domain, ignored_domains)
            if ignored:
                logger.info(f"[Orchestrator] Domain {domain} is on the ignore list ({ignored}). Skipping.")
                self.registry.discard(session_id)
                return None

            candidates = generate_candidates(url, locale)
        except InvalidUrl as e:
            logger.error(f"[Orchestrator] Error processing navigation to {url[:100]}: {e}")
            self.registry.discard(session_id)
            return None

        state = self.registry.open(session_id, url, candidates)
        self.stats.navigations += 1
        log_navigation_start(logger, session_id, url, len(candidates))
        logger.debug(f"[Orchestrator] tab {session_id} initial candidates: {[c.url for c in candidates]}")

        self.request_drain(session_id)
        return state

    def _read_settings(self) -> Tuple[Optional[str], List[str]]:
        # Runs in a worker thread; file-backed sources block on disk I/O
        locale = self.settings.get_preferred_locale()
        if not locale:
            return None, []
        return locale, self.settings.get_ignored_domains()

    async def handle_navigation_committed(self, details: Union[NavigationDetails, Dict[str, Any]]) -> bool:
        """
        Launch the page scanner while the navigation is still undecided.

        Returns:
            True if the scanner was launched
        """
        details = _coerce_details(details)
        if not details.is_top_level_http or self.scanner_launcher is None:
            return False

        state = self.registry.get(details.tab_id)
        if state is None or state.closed:
            return False

        try:
            self.scanner_launcher.launch(details.tab_id)
        except Exception:
            logger.exception(f"[Orchestrator] Scanner launch failed for tab {details.tab_id}")
            return False
        return True

    async def handle_hint_message(
        self, session_id: int, message: Union[HintMessage, Dict[str, Any]]
    ) -> int:
        """
        Merge scanner candidates ahead of the queued pattern candidates.

        Returns:
            Number of candidates merged (0 when ignored)
        """
        if not isinstance(message, HintMessage):
            try:
                message = HintMessage.model_validate(message)
            except ValidationError as e:
                logger.warning(f"[Orchestrator] Ignoring malformed hint message for tab {session_id}: {e.error_count()} errors")
                return 0

        state = self.registry.get(session_id)
        if state is None or state.closed:
            logger.debug(f"[Orchestrator] tab {session_id}: no open navigation, hints ignored")
            return 0

        merged = state.prepend(message.candidates)
        if merged == 0:
            return 0

        self.stats.hints_merged += merged
        logger.info(f"[Orchestrator] Received {merged} hint candidates for tab {session_id}")
        self.request_drain(session_id)
        return merged

    def handle_session_end(self, session_id: int) -> None:
        """Forget a closed tab, whatever state its entry is in."""
        self._pending_begins.pop(session_id, None)
        if self.registry.discard(session_id) is not None:
            logger.debug(f"[Orchestrator] tab {session_id} closed, entry removed")
        for tracker in (self.page_scanner, self._channel):
            if tracker is not None:
                tracker.forget_session(session_id)

    async def serve_hints(self, channel: HintChannel) -> None:
        """Consume a hint channel until it is closed."""
        self._channel = channel
        async for session_id, message in channel:
            await self.handle_hint_message(session_id, message)

    # -------------------------------------------------------------------------
    # Drain loop
    # -------------------------------------------------------------------------

    def request_drain(self, session_id: int) -> Optional[asyncio.Task]:
        """
        Start a drain loop for the session's entry unless one is running.

        Must be called from inside the event loop. The entry switches to
        OPEN_DRAINING before the task is scheduled, so a second request in
        the same tick is a no-op.

        Returns:
            The drain task, or None when nothing was started
        """
        state = self.registry.get(session_id)
        if state is None or state.closed:
            return None

        try:
            state.transition(NavigationPhase.OPEN_DRAINING)
        except ReentrantDrainIgnored:
            logger.debug(f"[Orchestrator] tab {session_id}: drain already running")
            return None

        task = asyncio.create_task(self._drain(state))
        self._drains.add(task)
        task.add_done_callback(self._drains.discard)
        return task

    def _is_live(self, state: NavigationState) -> bool:
        return not state.closed and self.registry.is_current(state)

    async def _drain(self, state: NavigationState) -> None:
        session_id = state.session_id

        while True:
            if not self._is_live(state):
                logger.debug(f"[Orchestrator] tab {session_id}: generation {state.generation} superseded, drain stopped")
                return

            candidate = state.next_candidate()
            if candidate is None:
                state.transition(NavigationPhase.CLOSED)
                self.stats.exhausted += 1
                log_navigation_end(logger, session_id, "NO REDIRECT")
                return

            self.stats.probes += 1
            try:
                reachable = await self.probe.is_reachable(candidate.url)
            except Exception:
                logger.exception(f"[Orchestrator] Probe failed for {candidate.url[:100]}, treating as unreachable")
                reachable = False
            if not reachable:
                continue

            if not self._is_live(state):
                logger.info(
                    f"[Orchestrator] tab {session_id}: dropping late redirect to {candidate.url[:100]} "
                    f"(generation {state.generation} superseded)"
                )
                return

            logger.info(f"[Orchestrator] Found reachable candidate: {candidate.url[:100]}. Redirecting...")
            state.transition(NavigationPhase.CLOSED)
            self.stats.redirects += 1
            log_navigation_end(logger, session_id, f"REDIRECT ({candidate.producer.value})", candidate.url)
            try:
                self.navigator.navigate(session_id, candidate.url)
            except Exception:
                logger.exception(f"[Orchestrator] Navigator failed to redirect tab {session_id}")
            return

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def wait_idle(self) -> None:
        """Wait until no drain loop is running."""
        while self._drains:
            await asyncio.gather(*list(self._drains), return_exceptions=True)

    async def aclose(self) -> None:
        """Finish outstanding drains and release the probe's HTTP client."""
        await self.wait_idle()
        close = getattr(self.probe, "close", None)
        if close is not None:
            await close()
        logger.info(
            f"[Orchestrator] Shutdown | navigations={self.stats.navigations} probes={self.stats.probes} "
            f"redirects={self.stats.redirects} exhausted={self.stats.exhausted}"
        )


def _coerce_details(details: Union[NavigationDetails, Dict[str, Any]]) -> NavigationDetails:
    if isinstance(details, NavigationDetails):
        return details
    return NavigationDetails.model_validate(details)
