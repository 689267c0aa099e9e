"""Integration tests for the memory agent against real models."""

import pytest

from memoria.core.agent_service import create_memory_agent
from memoria.core.config import Settings
from memoria.llm.litellm_adapter import ModelRegistry
from memoria.memory.base import MemoryTier

# Mark all tests in this module as integration tests
pytestmark = pytest.mark.integration


def _settings(tmp_path, **overrides) -> Settings:
    settings = Settings(data_dir=tmp_path, _env_file=None, **overrides)
    model = ModelRegistry().get(settings.chat_model)
    if model is None or not model.is_available:
        pytest.skip("No LLM providers configured")
    return settings


@pytest.mark.asyncio
async def test_note_is_recalled_next_turn(tmp_path):
    """A short-term note written via tool call is used in the next answer."""
    agent = await create_memory_agent(_settings(tmp_path, enable_semantic_memory=False))
    try:
        first = await agent.process("Please note that my flight is AA100.")
        assert first.used_tools
        assert any("AA100" in note for note in await agent.memory.read(MemoryTier.SHORT_TERM))

        second = await agent.process("What is my flight number?")
        assert "AA100" in second.text.upper()
    finally:
        await agent.close()


@pytest.mark.asyncio
async def test_long_term_memory_survives_restart(tmp_path):
    settings = _settings(tmp_path, enable_semantic_memory=False)

    agent = await create_memory_agent(settings)
    try:
        await agent.process("Save to long-term memory that my cat's name is Tom.")
    finally:
        await agent.close()
    assert "Tom" in settings.long_term_path.read_text(encoding="utf-8")

    restarted = await create_memory_agent(settings)
    try:
        result = await restarted.process("What is my cat's name?")
        assert "tom" in result.text.lower()
    finally:
        await restarted.close()
