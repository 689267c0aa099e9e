"""
Memoria - tool-augmented conversational agents with tiered memory.

Package structure:
- core: Config, logging, errors, shared types (messages, transcript)
- llm: LLM provider abstraction (litellm)
- memory: Memory tiers (short-term notes, long-term file, semantic vectors)
- tools: Tool registry, argument parsing, dispatcher, built-in tools
- agents: Conversation loop implementations
"""

__version__ = "0.1.0"
