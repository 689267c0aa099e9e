"""Embedding service client."""

from typing import Protocol, runtime_checkable

from litellm import aembedding

from memoria.core.errors import ConfigurationError, ExternalServiceError
from memoria.core.logging import get_logger
from memoria.llm.litellm_adapter import ModelConfig, ModelRegistry

logger = get_logger("memory.embedding")


@runtime_checkable
class Embedder(Protocol):
    """Converts text to a fixed-length vector."""

    dimension: int | None

    async def embed(self, text: str) -> list[float]:
        """Embed text. Raises ExternalServiceError on failure."""
        ...


class LiteLLMEmbedder:
    """Embedder backed by litellm.aembedding."""

    def __init__(self, model: ModelConfig):
        if model.kind != "embedding":
            raise ConfigurationError(f"Model {model.model_id} is not an embedding model")
        self.model = model
        self.dimension: int | None = model.embedding_dim

    @classmethod
    def from_registry(cls, registry: ModelRegistry, model_id: str) -> "LiteLLMEmbedder":
        return cls(registry.require(model_id, "embedding"))

    async def embed(self, text: str) -> list[float]:
        params = self.model.call_params()
        try:
            response = await aembedding(input=[text], **params)
            vector = list(response.data[0]["embedding"])
        except Exception as e:
            logger.error(f"Embedding failed ({self.model.model_id}): {e}")
            raise ExternalServiceError("embedding", str(e)) from e

        if self.dimension is not None and len(vector) != self.dimension:
            raise ExternalServiceError(
                "embedding",
                f"expected {self.dimension} dimensions, got {len(vector)}",
            )
        return vector
