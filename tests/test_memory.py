"""Tests for memory tiers and the memory adapter."""

import numpy as np
import pytest

from memoria.core.errors import ConfigurationError, ExternalServiceError, ValidationError
from memoria.memory.adapter import MemoryAdapter
from memoria.memory.base import MemoryTier
from memoria.memory.file import FileMemory
from memoria.memory.notes import NoteMemory
from memoria.memory.vector import SQLiteVectorStore, cosine_scores


class TestNoteMemory:
    def test_insertion_order(self):
        notes = NoteMemory()
        notes.add("flight is AA100")
        notes.add("seat 12A")
        assert notes.all() == ["flight is AA100", "seat 12A"]
        assert len(notes) == 2

    def test_render(self):
        notes = NoteMemory()
        assert notes.render() == ""
        for n in ["one", "two", "three"]:
            notes.add(n)
        assert notes.render() == "- one\n- two\n- three"
        assert notes.render(limit=2) == "- two\n- three"


class TestFileMemory:
    def test_missing_file_reads_empty(self, tmp_path):
        assert FileMemory(tmp_path / "absent.txt").read() == ""

    def test_append_creates_file_and_parents(self, tmp_path):
        memory = FileMemory(tmp_path / "nested" / "long_term.txt")
        line = memory.append("user likes coffee")
        assert line == "- user likes coffee"
        assert memory.read() == "- user likes coffee\n"

    def test_appends_accumulate(self, tmp_path):
        memory = FileMemory(tmp_path / "long_term.txt")
        memory.append("first")
        memory.append("second")
        assert memory.read() == "- first\n- second\n"

    def test_multiline_note_folded(self, tmp_path):
        memory = FileMemory(tmp_path / "long_term.txt")
        memory.append("line one\nline   two")
        assert memory.read() == "- line one line two\n"

    def test_existing_content_untouched(self, tmp_path):
        path = tmp_path / "long_term.txt"
        path.write_text("hand written\n", encoding="utf-8")
        FileMemory(path).append("new")
        assert path.read_text(encoding="utf-8") == "hand written\n- new\n"

    def test_render_limit(self, tmp_path):
        memory = FileMemory(tmp_path / "long_term.txt")
        for n in ["a", "b", "c"]:
            memory.append(n)
        assert memory.render() == "- a\n- b\n- c"
        assert memory.render(limit=1) == "- c"

    def test_unwritable_path_raises_external(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        memory = FileMemory(blocker / "long_term.txt")
        with pytest.raises(ExternalServiceError) as exc_info:
            memory.append("x")
        assert exc_info.value.service == "file memory"


class TestCosineScores:
    def test_scores(self):
        matrix = np.array([[1.0, 0.0], [0.0, 1.0], [1.0, 1.0]])
        scores = cosine_scores(matrix, np.array([1.0, 0.0]))
        assert scores[0] == pytest.approx(1.0)
        assert scores[1] == pytest.approx(0.0)
        assert scores[2] == pytest.approx(1 / np.sqrt(2))

    def test_zero_vector_scores_zero(self):
        matrix = np.array([[0.0, 0.0], [1.0, 0.0]])
        scores = cosine_scores(matrix, np.array([0.0, 0.0]))
        assert list(scores) == [0.0, 0.0]


class TestSQLiteVectorStore:
    @pytest.mark.asyncio
    async def test_insert_and_count(self, vector_store, embedder):
        record = await vector_store.insert("cat named Tom", await embedder.embed("cat named Tom"))
        assert record.id
        assert await vector_store.count() == 1

    @pytest.mark.asyncio
    async def test_query_orders_by_similarity(self, vector_store, embedder):
        for text in ["flight AA100 on friday", "allergic to peanuts", "cat name is Tom"]:
            await vector_store.insert(text, await embedder.embed(text))

        hits = await vector_store.query_similar(await embedder.embed("peanuts"), k=3)
        assert hits[0].content == "allergic to peanuts"
        assert hits[0].score == pytest.approx(1 / np.sqrt(2))
        assert [h.score for h in hits] == sorted((h.score for h in hits), reverse=True)

    @pytest.mark.asyncio
    async def test_k_limits_results(self, vector_store, embedder):
        for text in ["cat one", "cat two", "cat three", "cat four"]:
            await vector_store.insert(text, await embedder.embed(text))

        hits = await vector_store.query_similar(await embedder.embed("cat"), k=2)
        # Equal scores keep insertion order
        assert [h.content for h in hits] == ["cat one", "cat two"]
        assert await vector_store.query_similar(await embedder.embed("cat"), k=0) == []

    @pytest.mark.asyncio
    async def test_fewer_records_than_k(self, vector_store, embedder):
        await vector_store.insert("coffee", await embedder.embed("coffee"))
        hits = await vector_store.query_similar(await embedder.embed("coffee"), k=5)
        assert len(hits) == 1

    @pytest.mark.asyncio
    async def test_empty_store(self, vector_store, embedder):
        assert await vector_store.query_similar(await embedder.embed("coffee"), k=3) == []

    @pytest.mark.asyncio
    async def test_min_score_filters(self, vector_store, embedder):
        await vector_store.insert("coffee", await embedder.embed("coffee"))
        await vector_store.insert("birthday", await embedder.embed("birthday"))
        hits = await vector_store.query_similar(await embedder.embed("coffee"), k=3, min_score=0.5)
        assert [h.content for h in hits] == ["coffee"]

    @pytest.mark.asyncio
    async def test_wrong_dimension_insert(self, vector_store):
        with pytest.raises(ExternalServiceError):
            await vector_store.insert("short", [1.0, 0.0])
        assert await vector_store.count() == 0

    @pytest.mark.asyncio
    async def test_wrong_dimension_query(self, vector_store, embedder):
        await vector_store.insert("coffee", await embedder.embed("coffee"))
        with pytest.raises(ExternalServiceError, match="query has 3 dimensions"):
            await vector_store.query_similar([1.0, 0.0, 0.0], k=3)

    @pytest.mark.asyncio
    async def test_records_persist_across_connections(self, tmp_path, embedder):
        path = tmp_path / "persist.db"
        store = SQLiteVectorStore(path, dimension=embedder.dimension)
        await store.connect()
        await store.insert("coffee", await embedder.embed("coffee"))
        await store.close()

        reopened = SQLiteVectorStore(path)
        await reopened.connect()
        try:
            assert reopened.dimension == embedder.dimension
            assert await reopened.count() == 1
        finally:
            await reopened.close()

    @pytest.mark.asyncio
    async def test_dimension_mismatch_on_connect(self, tmp_path):
        path = tmp_path / "dims.db"
        store = SQLiteVectorStore(path, dimension=8)
        await store.connect()
        await store.close()

        with pytest.raises(ConfigurationError, match="8-dim"):
            await SQLiteVectorStore(path, dimension=1536).connect()

    def test_not_connected(self, tmp_path):
        with pytest.raises(RuntimeError):
            SQLiteVectorStore(tmp_path / "x.db").conn


class TestMemoryAdapter:
    @pytest.mark.asyncio
    async def test_tiers(self, memory):
        assert memory.tiers == [MemoryTier.SHORT_TERM, MemoryTier.FILE, MemoryTier.SEMANTIC]
        assert MemoryAdapter().tiers == [MemoryTier.SHORT_TERM]

    @pytest.mark.asyncio
    async def test_short_term_round(self, memory):
        ack = await memory.write(MemoryTier.SHORT_TERM, "flight is AA100")
        assert ack.tier == MemoryTier.SHORT_TERM
        assert await memory.read(MemoryTier.SHORT_TERM) == ["flight is AA100"]

    @pytest.mark.asyncio
    async def test_file_tier(self, memory):
        assert await memory.read(MemoryTier.FILE) == []
        ack = await memory.write(MemoryTier.FILE, "birthday is May 3")
        assert ack.content == "- birthday is May 3"
        assert await memory.read(MemoryTier.FILE) == ["- birthday is May 3\n"]

    @pytest.mark.asyncio
    async def test_semantic_tier(self, memory, embedder):
        ack = await memory.write(MemoryTier.SEMANTIC, "allergic to peanuts")
        assert ack.record_id is not None
        await memory.write(MemoryTier.SEMANTIC, "cat name is Tom")

        hits = await memory.read(MemoryTier.SEMANTIC, "what am I allergic to")
        assert hits == ["allergic to peanuts"]
        assert embedder.calls[-1] == "what am I allergic to"

    @pytest.mark.asyncio
    async def test_semantic_no_match(self, memory):
        await memory.write(MemoryTier.SEMANTIC, "cat name is Tom")
        assert await memory.read(MemoryTier.SEMANTIC, "weather") == []

    @pytest.mark.asyncio
    async def test_semantic_read_requires_query(self, memory):
        with pytest.raises(ValidationError):
            await memory.read(MemoryTier.SEMANTIC)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", ["", "   "])
    async def test_empty_content_rejected(self, memory, content):
        with pytest.raises(ValidationError):
            await memory.write(MemoryTier.SHORT_TERM, content)
        assert await memory.read(MemoryTier.SHORT_TERM) == []

    @pytest.mark.asyncio
    async def test_unconfigured_tiers(self):
        adapter = MemoryAdapter()
        with pytest.raises(ConfigurationError):
            await adapter.write(MemoryTier.SEMANTIC, "x")
        with pytest.raises(ConfigurationError):
            await adapter.write(MemoryTier.FILE, "x")
        assert adapter.render_file() == ""

    @pytest.mark.asyncio
    async def test_embedding_failure_stores_nothing(self, vector_store, failing_embedder):
        adapter = MemoryAdapter(vectors=vector_store, embedder=failing_embedder)
        with pytest.raises(ExternalServiceError):
            await adapter.write(MemoryTier.SEMANTIC, "coffee")
        assert await vector_store.count() == 0

    @pytest.mark.asyncio
    async def test_insert_failure_propagates(self, vector_store, embedder, monkeypatch):
        async def broken_insert(content, embedding):
            raise ExternalServiceError("vector store", "database is locked")

        monkeypatch.setattr(vector_store, "insert", broken_insert)
        adapter = MemoryAdapter(vectors=vector_store, embedder=embedder)
        with pytest.raises(ExternalServiceError, match="database is locked"):
            await adapter.write(MemoryTier.SEMANTIC, "coffee")

    @pytest.mark.asyncio
    async def test_render_limit(self, tmp_path):
        adapter = MemoryAdapter(file=FileMemory(tmp_path / "lt.txt"), render_limit=1)
        await adapter.write(MemoryTier.SHORT_TERM, "old note")
        await adapter.write(MemoryTier.SHORT_TERM, "new note")
        await adapter.write(MemoryTier.FILE, "old fact")
        await adapter.write(MemoryTier.FILE, "new fact")
        assert adapter.render_notes() == "- new note"
        assert adapter.render_file() == "- new fact"
        # Stored data is never trimmed
        assert len(await adapter.read(MemoryTier.SHORT_TERM)) == 2
