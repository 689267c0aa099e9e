"""Uniform read/write interface over the memory tiers."""

from memoria.core.errors import ConfigurationError, ValidationError
from memoria.core.logging import get_logger
from memoria.memory.base import MemoryTier, WriteAck
from memoria.memory.embedding import Embedder
from memoria.memory.file import FileMemory
from memoria.memory.notes import NoteMemory
from memoria.memory.vector import SQLiteVectorStore

logger = get_logger("memory.adapter")


class MemoryAdapter:
    """Routes reads and writes to the short-term, file and semantic tiers.

    No tier supports update or delete. Short-term notes belong to this
    adapter instance; file and semantic tiers are shared stores.
    """

    def __init__(
        self,
        notes: NoteMemory | None = None,
        file: FileMemory | None = None,
        vectors: SQLiteVectorStore | None = None,
        embedder: Embedder | None = None,
        top_k: int = 3,
        min_score: float = 0.0,
        render_limit: int | None = None,
    ):
        self.notes = notes if notes is not None else NoteMemory()
        self.file = file
        self.vectors = vectors
        self.embedder = embedder
        self.top_k = top_k
        self.min_score = min_score
        self.render_limit = render_limit

    @property
    def tiers(self) -> list[MemoryTier]:
        """Tiers backed by a configured store."""
        tiers = [MemoryTier.SHORT_TERM]
        if self.file is not None:
            tiers.append(MemoryTier.FILE)
        if self.has_semantic:
            tiers.append(MemoryTier.SEMANTIC)
        return tiers

    @property
    def has_semantic(self) -> bool:
        return self.vectors is not None and self.embedder is not None

    def _require_file(self) -> FileMemory:
        if self.file is None:
            raise ConfigurationError("File memory tier is not configured")
        return self.file

    def _require_semantic(self) -> tuple[SQLiteVectorStore, Embedder]:
        if self.vectors is None or self.embedder is None:
            raise ConfigurationError("Semantic memory tier is not configured")
        return self.vectors, self.embedder

    async def write(self, tier: MemoryTier, content: str) -> WriteAck:
        """
        Write content to a tier.

        Raises:
            ValidationError: If content is empty
            ExternalServiceError: If the file, embedding or store call fails
        """
        if not content or not content.strip():
            raise ValidationError("Cannot store empty memory content")

        if tier == MemoryTier.SHORT_TERM:
            self.notes.add(content)
            logger.debug(f"Short-term note added ({len(self.notes)} total)")
            return WriteAck(tier=tier, content=content)

        if tier == MemoryTier.FILE:
            line = self._require_file().append(content)
            return WriteAck(tier=tier, content=line)

        vectors, embedder = self._require_semantic()
        # Two sequential calls; an insert failure propagates and the embedding is dropped
        embedding = await embedder.embed(content)
        record = await vectors.insert(content, embedding)
        return WriteAck(tier=tier, content=content, record_id=record.id)

    async def read(self, tier: MemoryTier, query: str | None = None) -> list[str]:
        """
        Read a tier.

        Short-term returns notes in insertion order; file returns its content
        verbatim as a single item (empty list if nothing stored); semantic
        returns the top-K matches for query in similarity order.
        """
        if tier == MemoryTier.SHORT_TERM:
            return self.notes.all()

        if tier == MemoryTier.FILE:
            content = self._require_file().read()
            return [content] if content else []

        if not query or not query.strip():
            raise ValidationError("Semantic memory read requires a query")
        vectors, embedder = self._require_semantic()
        embedding = await embedder.embed(query)
        hits = await vectors.query_similar(embedding, self.top_k, min_score=self.min_score)
        return [hit.content for hit in hits]

    def render_notes(self) -> str:
        return self.notes.render(self.render_limit)

    def render_file(self) -> str:
        if self.file is None:
            return ""
        return self.file.render(self.render_limit)

    async def close(self) -> None:
        """Release store handles."""
        if self.vectors is not None:
            await self.vectors.close()
