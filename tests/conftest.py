# conftest.py
# Puts the repository root on sys.path so tests import `localeleap`
# without an editable install, and provides in-process fakes for the
# collaborators the orchestrator talks to.

import asyncio
import sys
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

import pytest

ROOT = Path(__file__).resolve().parents[1]
ROOT_STR = str(ROOT)

if ROOT_STR not in sys.path:
    sys.path.insert(0, ROOT_STR)


class FakeSettings:
    """In-memory settings source."""

    def __init__(self, locale: Optional[str] = "fr", ignored: Iterable[str] = ()):
        self.locale = locale
        self.ignored = list(ignored)

    def get_preferred_locale(self) -> Optional[str]:
        return self.locale

    def get_ignored_domains(self) -> List[str]:
        return list(self.ignored)


class FakeProbe:
    """
    Probe double.

    URLs in `reachable` answer True. URLs in `gated` block until release()
    is called, which lets a test act while a probe is in flight.
    """

    def __init__(self, reachable: Iterable[str] = (), gated: Iterable[str] = ()):
        self.reachable = set(reachable)
        self.calls: List[str] = []
        self.gates: Dict[str, asyncio.Event] = {url: asyncio.Event() for url in gated}

    async def is_reachable(self, url: str) -> bool:
        self.calls.append(url)
        gate = self.gates.get(url)
        if gate is not None:
            await gate.wait()
        else:
            await asyncio.sleep(0)
        return url in self.reachable

    def release(self, url: str) -> None:
        self.gates[url].set()


class RecordingNavigator:
    def __init__(self):
        self.calls: List[Tuple[int, str]] = []

    def navigate(self, session_id: int, url: str) -> None:
        self.calls.append((session_id, url))


class RecordingLauncher:
    def __init__(self):
        self.calls: List[int] = []

    def launch(self, session_id: int) -> None:
        self.calls.append(session_id)


async def settle(rounds: int = 10) -> None:
    """Let scheduled drain tasks run up to their next real suspension."""
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture
def navigator():
    return RecordingNavigator()


@pytest.fixture
def launcher():
    return RecordingLauncher()
