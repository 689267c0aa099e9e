"""Built-in tools."""

from memoria.memory.adapter import MemoryAdapter
from memoria.tools.builtin.memory import register_memory_tools
from memoria.tools.builtin.system import register_system_tools
from memoria.tools.registry import ToolRegistry


def register_all_builtin_tools(registry: ToolRegistry, memory: MemoryAdapter) -> ToolRegistry:
    """Register all built-in tools with a registry."""
    register_memory_tools(registry, memory)
    register_system_tools(registry)
    return registry


__all__ = ["register_all_builtin_tools"]
