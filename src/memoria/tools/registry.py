"""Tool registry for managing available tools."""

from memoria.core.errors import DuplicateToolError
from memoria.core.logging import get_logger
from memoria.core.types import ToolSpec
from memoria.tools.base import Tool

logger = get_logger("tools.registry")


class ToolRegistry:
    """Catalog of tools, keyed by name.

    Iteration order is registration order; that is the order tools are
    advertised to the model.
    """

    def __init__(self) -> None:
        self._tools: dict[str, Tool] = {}

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    def register(self, tool: Tool) -> None:
        """Register a tool.

        Raises:
            DuplicateToolError: If the name is already registered
        """
        if tool.name in self._tools:
            raise DuplicateToolError(f"Tool {tool.name} already registered")
        self._tools[tool.name] = tool
        logger.debug(f"Registered tool: {tool.name}")

    def lookup(self, name: str) -> Tool | None:
        """Get tool by name, None if not registered."""
        return self._tools.get(name)

    def all(self) -> list[Tool]:
        """Get all registered tools in registration order."""
        return list(self._tools.values())

    def get_context_string(self) -> str:
        """
        Generate a tool summary for the system prompt.

        Returns:
            Multi-line string with all tool signatures
        """
        if not self._tools:
            return "No tools available."

        lines = ["You have access to the following tools:", ""]
        for tool in self._tools.values():
            lines.append(tool.to_context_string())
        return "\n".join(lines)

    def to_openai_tools(self) -> list[ToolSpec]:
        """
        Get all tools in OpenAI function calling format.

        Returns:
            List of tools in OpenAI format
        """
        return [tool.to_openai_function() for tool in self._tools.values()]
