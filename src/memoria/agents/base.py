"""
Base agent definitions.

Conversation state machine states and the per-turn result.
"""

from dataclasses import dataclass, field
from enum import Enum

from memoria.core.types import ToolResultMessage


class ConversationState(Enum):
    AWAITING_INPUT = "awaiting_input"
    RENDERING_CONTEXT = "rendering_context"
    REQUESTING_DECISION = "requesting_decision"
    DISPATCHING_TOOLS = "dispatching_tools"
    REQUESTING_FINAL_RESPONSE = "requesting_final_response"
    DONE = "done"
    EXITED = "exited"


@dataclass
class TurnResult:
    """Outcome of one completed turn."""

    text: str
    model: str = ""
    tool_results: list[ToolResultMessage] = field(default_factory=list)
    cost_usd: float = 0.0

    @property
    def used_tools(self) -> bool:
        return bool(self.tool_results)
