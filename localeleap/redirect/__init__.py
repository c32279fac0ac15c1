"""Redirect decision engine for LocaleLeap."""

from localeleap.redirect.candidates import generate_candidates
from localeleap.redirect.channel import HintChannel
from localeleap.redirect.orchestrator import (
    BrowserNavigator,
    OrchestratorStats,
    RedirectOrchestrator,
    ScannerLauncher,
)
from localeleap.redirect.probe import ReachabilityProbe
from localeleap.redirect.registry import NavigationPhase, NavigationRegistry, NavigationState

__all__ = [
    # Candidates
    "generate_candidates",
    # Probe
    "ReachabilityProbe",
    # Registry
    "NavigationPhase",
    "NavigationRegistry",
    "NavigationState",
    # Orchestrator
    "BrowserNavigator",
    "OrchestratorStats",
    "RedirectOrchestrator",
    "ScannerLauncher",
    # Channel
    "HintChannel",
]
