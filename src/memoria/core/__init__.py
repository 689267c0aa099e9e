"""
Core module - configuration, logging, errors, shared types.

Components:
- config: Settings management via pydantic-settings
- types: Shared data structures (messages, transcript, tool invocations)
- errors: Exception taxonomy
- logging: Structured logging setup
"""

from memoria.core.config import Settings
from memoria.core.types import AssistantMessage, ToolResultMessage, Transcript, UserMessage

__all__ = ["Settings", "Transcript", "UserMessage", "AssistantMessage", "ToolResultMessage"]
