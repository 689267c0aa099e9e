"""SQLite vector store for semantic memory, cosine similarity via numpy."""

import json
import sqlite3
from datetime import datetime
from pathlib import Path
from uuid import uuid4

import aiosqlite
import numpy as np

from memoria.core.errors import ConfigurationError, ExternalServiceError
from memoria.core.logging import get_logger
from memoria.memory.base import MemoryRecord, ScoredRecord

logger = get_logger("memory.vector")


def _adapt_datetime(dt: datetime) -> str:
    """Convert datetime to ISO format string for SQLite storage."""
    return dt.isoformat()


def _convert_datetime(val: bytes) -> datetime:
    """Convert ISO format string from SQLite to datetime."""
    return datetime.fromisoformat(val.decode())


# Python 3.12 deprecates the implicit datetime adapters
sqlite3.register_adapter(datetime, _adapt_datetime)
sqlite3.register_converter("DATETIME", _convert_datetime)

SCHEMA = """
CREATE TABLE IF NOT EXISTS memory_records (
    id TEXT PRIMARY KEY,
    content TEXT NOT NULL,
    embedding TEXT NOT NULL,  -- JSON array of floats
    created_at DATETIME NOT NULL
);

-- Store-level settings (embedding dimension)
CREATE TABLE IF NOT EXISTS store_meta (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);
"""


def cosine_scores(matrix: np.ndarray, query: np.ndarray) -> np.ndarray:
    """Cosine similarity of each row of matrix against query."""
    norms = np.linalg.norm(matrix, axis=1) * np.linalg.norm(query)
    dots = matrix @ query
    with np.errstate(divide="ignore", invalid="ignore"):
        scores = np.where(norms > 0, dots / norms, 0.0)
    return scores


class SQLiteVectorStore:
    """Append-only record store queried by embedding similarity."""

    def __init__(self, db_path: Path, dimension: int | None = None):
        self.db_path = db_path
        self.dimension = dimension
        self._conn: aiosqlite.Connection | None = None

    async def connect(self) -> None:
        """Open database, create schema and validate embedding dimension.

        Raises:
            ConfigurationError: If the stored dimension differs from the configured one
        """
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = await aiosqlite.connect(
            self.db_path,
            detect_types=sqlite3.PARSE_DECLTYPES | sqlite3.PARSE_COLNAMES,
        )
        await self._conn.executescript(SCHEMA)
        await self._conn.commit()

        stored = await self._get_meta("dimension")
        if stored is not None:
            stored_dim = int(stored)
            if self.dimension is not None and self.dimension != stored_dim:
                await self.close()
                raise ConfigurationError(
                    f"Vector store {self.db_path} holds {stored_dim}-dim embeddings, "
                    f"configured embedder produces {self.dimension}"
                )
            self.dimension = stored_dim
        elif self.dimension is not None:
            await self._set_meta("dimension", str(self.dimension))

        logger.info(f"Connected to vector store: {self.db_path} (dim={self.dimension})")

    async def close(self) -> None:
        """Close database connection."""
        if self._conn:
            await self._conn.close()
            self._conn = None

    @property
    def conn(self) -> aiosqlite.Connection:
        if self._conn is None:
            raise RuntimeError("Vector store not connected. Call connect() first.")
        return self._conn

    async def _get_meta(self, key: str) -> str | None:
        async with self.conn.execute("SELECT value FROM store_meta WHERE key = ?", (key,)) as cursor:
            row = await cursor.fetchone()
            return row[0] if row else None

    async def _set_meta(self, key: str, value: str) -> None:
        await self.conn.execute(
            "INSERT OR REPLACE INTO store_meta (key, value) VALUES (?, ?)", (key, value)
        )
        await self.conn.commit()

    async def insert(self, content: str, embedding: list[float]) -> MemoryRecord:
        """Insert a new record.

        Raises:
            ExternalServiceError: If the write fails or the vector has the wrong size
        """
        if self.dimension is not None and len(embedding) != self.dimension:
            raise ExternalServiceError(
                "vector store",
                f"embedding has {len(embedding)} dimensions, store expects {self.dimension}",
            )

        record = MemoryRecord(id=str(uuid4()), content=content, embedding=list(embedding))
        try:
            await self.conn.execute(
                "INSERT INTO memory_records (id, content, embedding, created_at) VALUES (?, ?, ?, ?)",
                (record.id, record.content, json.dumps(record.embedding), record.created_at),
            )
            if self.dimension is None:
                self.dimension = len(embedding)
                await self.conn.execute(
                    "INSERT OR REPLACE INTO store_meta (key, value) VALUES ('dimension', ?)",
                    (str(self.dimension),),
                )
            await self.conn.commit()
        except sqlite3.Error as e:
            logger.error(f"Vector insert failed: {e}")
            raise ExternalServiceError("vector store", str(e)) from e

        logger.debug(f"Stored semantic record {record.id}")
        return record

    async def query_similar(
        self,
        embedding: list[float],
        k: int,
        min_score: float = 0.0,
    ) -> list[ScoredRecord]:
        """Top-k records by cosine similarity, score descending.

        Raises:
            ExternalServiceError: If the query fails or the vector has the wrong size
        """
        if k <= 0:
            return []

        if self.dimension is not None and len(embedding) != self.dimension:
            raise ExternalServiceError(
                "vector store",
                f"query has {len(embedding)} dimensions, store expects {self.dimension}",
            )

        try:
            async with self.conn.execute("SELECT content, embedding FROM memory_records") as cursor:
                rows = await cursor.fetchall()
        except sqlite3.Error as e:
            logger.error(f"Vector query failed: {e}")
            raise ExternalServiceError("vector store", str(e)) from e

        if not rows:
            return []

        matrix = np.array([json.loads(row[1]) for row in rows], dtype=float)
        query = np.asarray(embedding, dtype=float)
        scores = cosine_scores(matrix, query)

        # Stable sort keeps insertion order among equal scores
        order = np.argsort(-scores, kind="stable")[:k]
        results = [
            ScoredRecord(content=rows[i][0], score=float(scores[i]))
            for i in order
            if scores[i] >= min_score
        ]
        logger.debug(f"Similarity query returned {len(results)} of {len(rows)} records")
        return results

    async def count(self) -> int:
        async with self.conn.execute("SELECT COUNT(*) FROM memory_records") as cursor:
            row = await cursor.fetchone()
            return row[0] if row else 0
