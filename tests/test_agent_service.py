"""Tests for agent service initialization."""

import pytest

from memoria.core.agent_service import create_memory_adapter, create_memory_agent
from memoria.core.errors import ConfigurationError
from memoria.memory.base import MemoryTier


@pytest.mark.asyncio
async def test_create_memory_agent(settings, mock_llm, embedder):
    """All tiers wired and their tools registered once."""
    agent = await create_memory_agent(settings, llm=mock_llm, embedder=embedder)
    try:
        names = [t.name for t in agent.registry.all()]
        assert names == [
            "noteToMemory",
            "saveToLongTermMemory",
            "saveToVectorMemory",
            "searchVectorMemory",
            "get_current_time",
        ]
        assert agent.memory.tiers == [MemoryTier.SHORT_TERM, MemoryTier.FILE, MemoryTier.SEMANTIC]
        assert agent.llm_config.model == settings.chat_model
        assert settings.vector_db_path.exists()
    finally:
        await agent.close()


@pytest.mark.asyncio
async def test_semantic_memory_disabled(tmp_path, mock_llm, embedder):
    from memoria.core.config import Settings

    settings = Settings(data_dir=tmp_path, enable_semantic_memory=False, _env_file=None)
    agent = await create_memory_agent(settings, llm=mock_llm, embedder=embedder)
    try:
        assert agent.memory.has_semantic is False
        assert "searchVectorMemory" not in agent.registry
        assert not settings.vector_db_path.exists()
    finally:
        await agent.close()


@pytest.mark.asyncio
async def test_each_agent_gets_fresh_notes(settings, mock_llm, embedder):
    first = await create_memory_agent(settings, llm=mock_llm, embedder=embedder)
    await first.memory.write(MemoryTier.SHORT_TERM, "only for the first loop")
    await first.close()

    second = await create_memory_agent(settings, llm=mock_llm, embedder=embedder)
    try:
        assert await second.memory.read(MemoryTier.SHORT_TERM) == []
    finally:
        await second.close()


@pytest.mark.asyncio
async def test_dimension_mismatch_fails_startup(settings, embedder):
    adapter = await create_memory_adapter(settings, embedder)
    await adapter.close()

    class WideEmbedder:
        dimension = 1536

        async def embed(self, text):
            return [0.0] * 1536

    with pytest.raises(ConfigurationError):
        await create_memory_adapter(settings, WideEmbedder())


@pytest.mark.asyncio
async def test_chat_model_as_embedder_fails_startup(tmp_path, mock_llm):
    from memoria.core.config import Settings

    settings = Settings(data_dir=tmp_path, embedding_model="gpt-4o-mini", _env_file=None)
    with pytest.raises(ConfigurationError):
        await create_memory_agent(settings, llm=mock_llm)


@pytest.mark.asyncio
async def test_missing_chat_credentials_fail_startup(tmp_path, monkeypatch):
    from memoria.core.config import Settings

    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    settings = Settings(data_dir=tmp_path, enable_semantic_memory=False, _env_file=None)
    with pytest.raises(ConfigurationError, match="OPENAI_API_KEY"):
        await create_memory_agent(settings)


@pytest.mark.asyncio
async def test_default_llm_built_when_credentials_present(tmp_path, monkeypatch):
    from memoria.core.config import Settings
    from memoria.llm.litellm_adapter import LiteLLMAdapter

    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    settings = Settings(data_dir=tmp_path, enable_semantic_memory=False, _env_file=None)
    agent = await create_memory_agent(settings)
    try:
        assert isinstance(agent.llm, LiteLLMAdapter)
    finally:
        await agent.close()
