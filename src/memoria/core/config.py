"""
Configuration management.

Loads settings from environment variables and .env file.
Prefix: MEMORIA_
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="MEMORIA_",
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # Storage
    data_dir: Path = Field(default=Path("data"), description="Data storage directory")
    long_term_file: str = Field(default="long_term_memory.txt", description="File tier name")
    vector_db_name: str = Field(default="memoria.db", description="SQLite vector store name")

    # Models (ids from configs/models.yaml)
    chat_model: str = Field(default="gpt-4o-mini", description="Model for decisions and answers")
    embedding_model: str = Field(
        default="text-embedding-3-small", description="Model for semantic memory"
    )
    max_tokens: int = Field(default=1024, description="Max tokens per completion")
    temperature: float = Field(default=0.7, description="Sampling temperature")

    # Semantic recall
    enable_semantic_memory: bool = Field(default=True, description="Connect the vector tier")
    semantic_top_k: int = Field(default=3, description="Records returned per similarity query")
    semantic_min_score: float = Field(
        default=0.0, description="Drop similarity hits scoring below this"
    )

    # Limits
    max_concurrent_tools: int | None = Field(
        default=None, description="Cap on tool calls executed at once (None = unbounded)"
    )
    context_note_limit: int | None = Field(
        default=None, description="Trailing notes/file lines rendered into context (None = all)"
    )

    # Console
    exit_command: str = Field(default="exit", description="Case-insensitive exit sentinel")

    @property
    def long_term_path(self) -> Path:
        return self.data_dir / self.long_term_file

    @property
    def vector_db_path(self) -> Path:
        return self.data_dir / self.vector_db_name


def get_settings() -> Settings:
    """Get settings instance."""
    return Settings()
