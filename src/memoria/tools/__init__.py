"""Tool calling framework for LLM-driven function execution."""

from memoria.tools.base import Tool, ToolParameter, tool
from memoria.tools.dispatcher import ToolDispatcher
from memoria.tools.registry import ToolRegistry

__all__ = ["Tool", "ToolParameter", "tool", "ToolRegistry", "ToolDispatcher"]
