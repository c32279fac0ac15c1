"""Pydantic models for LocaleLeap."""

from enum import Enum
from typing import Literal
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field


HINT_MESSAGE_TYPE = "EXTERNAL_HINT_DISCOVERED"
HTTP_SCHEMES = frozenset({"http", "https"})


# =============================================================================
# Enums
# =============================================================================

class Producer(str, Enum):
    """Provenance of a candidate URL."""

    PATTERN_SIBLING = "PATTERN_SIBLING"
    EXTERNAL_HINT = "EXTERNAL_HINT"


# =============================================================================
# Candidates
# =============================================================================

class Candidate(BaseModel):
    """A URL believed to be a locale variant of the navigation target."""

    model_config = ConfigDict(frozen=True)

    url: str
    locale: str
    producer: Producer


class HintMessage(BaseModel):
    """Page Scanner -> orchestrator message.

    Wire shape: {"type": "EXTERNAL_HINT_DISCOVERED", "candidates": [...]}
    """

    type: Literal["EXTERNAL_HINT_DISCOVERED"] = HINT_MESSAGE_TYPE
    candidates: list[Candidate] = Field(default_factory=list)


# =============================================================================
# Host events
# =============================================================================

class NavigationDetails(BaseModel):
    """Navigation lifecycle event payload delivered by the host."""

    tab_id: int
    url: str
    frame_id: int = 0

    @property
    def is_top_level_http(self) -> bool:
        """Only top-level frames on http(s) URLs are tracked."""
        if self.frame_id != 0:
            return False
        try:
            scheme = urlsplit(self.url.strip()).scheme
        except ValueError:
            return False
        return scheme.lower() in HTTP_SCHEMES
