"""
Memory tier definitions.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class MemoryTier(Enum):
    SHORT_TERM = "short_term"
    FILE = "file"
    SEMANTIC = "semantic"


@dataclass(frozen=True)
class WriteAck:
    """Acknowledgement of a successful tier write."""

    tier: MemoryTier
    content: str
    record_id: str | None = None


@dataclass
class MemoryRecord:
    """Single semantic memory record."""

    id: str
    content: str
    embedding: list[float]
    created_at: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True)
class ScoredRecord:
    """Similarity query hit."""

    content: str
    score: float
