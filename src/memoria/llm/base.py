"""
LLM provider interface.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from memoria.core.types import MessageDict, ToolInvocation, ToolSpec


@dataclass
class LLMResponse:
    """Response from LLM provider (a model decision)."""

    content: str
    model: str
    provider: str = ""
    input_tokens: int = 0
    output_tokens: int = 0
    cost_usd: float = 0.0
    tool_calls: list[ToolInvocation] = field(default_factory=list)

    @property
    def has_tool_calls(self) -> bool:
        return bool(self.tool_calls)


@dataclass
class LLMConfig:
    """Configuration for LLM call."""

    model: str
    max_tokens: int = 1024
    temperature: float = 0.7


class LLMProvider(ABC):
    """Abstract LLM provider."""

    @abstractmethod
    async def complete(
        self,
        messages: list[MessageDict],
        config: LLMConfig,
        tools: list[ToolSpec] | None = None,
    ) -> LLMResponse:
        """
        Generate completion from messages.

        Args:
            messages: OpenAI-format messages, system prompt first
            config: LLM configuration
            tools: Tool definitions in OpenAI function format (optional)

        Returns:
            LLMResponse with content and any requested tool calls

        Raises:
            ExternalServiceError: If the provider call fails
        """
        ...
