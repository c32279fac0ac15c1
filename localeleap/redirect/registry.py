"""
Navigation Registry - per-tab redirect state.

Each in-flight navigation owns one NavigationState:
- queue: candidates still to probe, front first
- tried: URLs already probed (only grows)
- phase: OPEN_IDLE -> OPEN_DRAINING -> CLOSED, or OPEN_IDLE -> CLOSED

The registry hands out a generation token per entry. A drain loop compares
its entry with the registry's current one before probing and before
redirecting, so a superseded navigation can never act.
"""

import itertools
import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Deque, Dict, Iterable, Iterator, Optional, Set

from localeleap.core.exceptions import InvalidTransition, ReentrantDrainIgnored
from localeleap.core.models import Candidate

logger = logging.getLogger(__name__)


class NavigationPhase(str, Enum):
    """Lifecycle of one navigation entry."""

    OPEN_IDLE = "open_idle"
    OPEN_DRAINING = "open_draining"
    CLOSED = "closed"


_LEGAL_TRANSITIONS = {
    NavigationPhase.OPEN_IDLE: {NavigationPhase.OPEN_DRAINING, NavigationPhase.CLOSED},
    NavigationPhase.OPEN_DRAINING: {NavigationPhase.CLOSED},
    NavigationPhase.CLOSED: set(),
}


@dataclass
class NavigationState:
    """Mutable redirect state of one navigation."""

    session_id: int
    original_url: str
    generation: int
    queue: Deque[Candidate] = field(default_factory=deque)
    tried: Set[str] = field(default_factory=set)
    phase: NavigationPhase = NavigationPhase.OPEN_IDLE

    @property
    def closed(self) -> bool:
        return self.phase is NavigationPhase.CLOSED

    @property
    def draining(self) -> bool:
        return self.phase is NavigationPhase.OPEN_DRAINING

    def transition(self, target: NavigationPhase) -> None:
        """
        Move to another phase.

        Raises:
            ReentrantDrainIgnored: draining requested while already draining
            InvalidTransition: any other illegal move
        """
        if target in _LEGAL_TRANSITIONS[self.phase]:
            self.phase = target
            return
        if self.phase is NavigationPhase.OPEN_DRAINING and target is NavigationPhase.OPEN_DRAINING:
            raise ReentrantDrainIgnored(self.session_id)
        raise InvalidTransition(self.session_id, self.phase.value, target.value)

    def retire(self) -> None:
        """Close the entry from any phase; used when it leaves the registry."""
        self.phase = NavigationPhase.CLOSED

    def prepend(self, candidates: Iterable[Candidate]) -> int:
        """
        Put candidates at the front of the queue, keeping their order.

        Returns:
            Number of candidates added (0 when closed)
        """
        if self.closed:
            return 0
        incoming = list(candidates)
        self.queue.extendleft(reversed(incoming))
        return len(incoming)

    def next_candidate(self) -> Optional[Candidate]:
        """
        Pop candidates until one is worth probing and mark it tried.

        Candidates already tried, or pointing back at the original URL, are
        discarded without a probe. Returns None once the queue is empty.
        """
        if self.closed:
            return None
        while self.queue:
            candidate = self.queue.popleft()
            if candidate.url in self.tried or candidate.url == self.original_url:
                logger.debug(f"[Registry] tab {self.session_id}: skipping {candidate.url[:100]}")
                continue
            self.tried.add(candidate.url)
            return candidate
        return None


class NavigationRegistry:
    """Session id -> current NavigationState, scoped to one orchestrator."""

    def __init__(self):
        self._entries: Dict[int, NavigationState] = {}
        self._generations = itertools.count(1)

    def open(self, session_id: int, original_url: str, candidates: Iterable[Candidate]) -> NavigationState:
        """Create a fresh OPEN_IDLE entry, retiring any previous one for the session."""
        self.discard(session_id)
        state = NavigationState(
            session_id=session_id,
            original_url=original_url,
            generation=next(self._generations),
            queue=deque(candidates),
        )
        self._entries[session_id] = state
        return state

    def get(self, session_id: int) -> Optional[NavigationState]:
        return self._entries.get(session_id)

    def discard(self, session_id: int) -> Optional[NavigationState]:
        """Remove and retire the entry for a session, if any."""
        state = self._entries.pop(session_id, None)
        if state is not None:
            state.retire()
        return state

    def is_current(self, state: NavigationState) -> bool:
        """True while the state is still the live entry for its session."""
        current = self._entries.get(state.session_id)
        return current is not None and current.generation == state.generation

    def __contains__(self, session_id: int) -> bool:
        return session_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[NavigationState]:
        return iter(list(self._entries.values()))
