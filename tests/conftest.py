"""Shared fixtures: fake embedder, mock LLM, temporary settings."""

import re
from pathlib import Path
from unittest.mock import AsyncMock, Mock

import pytest

from memoria.core.config import Settings
from memoria.core.errors import ExternalServiceError
from memoria.memory.adapter import MemoryAdapter
from memoria.memory.file import FileMemory
from memoria.memory.vector import SQLiteVectorStore

KEYWORDS = ["flight", "aa100", "allergic", "peanuts", "cat", "name", "birthday", "coffee"]


class KeywordEmbedder:
    """Deterministic embedder: one dimension per known keyword.

    Text sharing no keyword with the store embeds to the zero vector and
    scores 0 against everything.
    """

    dimension = len(KEYWORDS)

    def __init__(self) -> None:
        self.calls: list[str] = []

    async def embed(self, text: str) -> list[float]:
        self.calls.append(text)
        words = re.findall(r"[a-z0-9]+", text.lower())
        return [float(words.count(k)) for k in KEYWORDS]


class FailingEmbedder:
    dimension = len(KEYWORDS)

    async def embed(self, text: str) -> list[float]:
        raise ExternalServiceError("embedding", "service unavailable")


@pytest.fixture
def embedder() -> KeywordEmbedder:
    return KeywordEmbedder()


@pytest.fixture
def failing_embedder() -> FailingEmbedder:
    return FailingEmbedder()


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(data_dir=tmp_path, _env_file=None)


@pytest.fixture
async def vector_store(tmp_path: Path):
    """Connected vector store in a temp directory."""
    store = SQLiteVectorStore(tmp_path / "vectors.db", dimension=KeywordEmbedder.dimension)
    await store.connect()
    yield store
    await store.close()


@pytest.fixture
async def memory(tmp_path: Path, vector_store: SQLiteVectorStore, embedder: KeywordEmbedder):
    """Memory adapter with all three tiers."""
    adapter = MemoryAdapter(
        file=FileMemory(tmp_path / "long_term.txt"),
        vectors=vector_store,
        embedder=embedder,
        top_k=3,
        min_score=0.1,
    )
    yield adapter
    await adapter.close()


@pytest.fixture
def mock_llm():
    """Create mock LLM provider."""
    llm = Mock()
    llm.complete = AsyncMock()
    return llm
