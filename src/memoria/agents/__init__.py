"""
Agents module - conversation loops.

Agents:
- base: Conversation states and turn results
- memory_agent: Tool-augmented loop over tiered memory
"""

from memoria.agents.base import ConversationState, TurnResult
from memoria.agents.memory_agent import MemoryAgent

__all__ = ["ConversationState", "MemoryAgent", "TurnResult"]
