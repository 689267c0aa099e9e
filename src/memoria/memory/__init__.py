"""
Memory module - tiered memory.

Tiers:
- short_term: in-process notes, discarded with the conversation loop
- file: append-only text file shared across sessions
- semantic: embedded records in SQLite, recalled by similarity

MemoryAdapter gives all tiers one write/read interface.
"""

from memoria.memory.adapter import MemoryAdapter
from memoria.memory.base import MemoryRecord, MemoryTier, WriteAck

__all__ = ["MemoryAdapter", "MemoryRecord", "MemoryTier", "WriteAck"]
