"""Agent service initialization.

Builds the memory agent and its collaborators (LLM, memory tiers, tool
registry) once at startup and wires them together explicitly.
"""

from memoria.agents.memory_agent import MemoryAgent
from memoria.core.config import Settings
from memoria.core.errors import ConfigurationError
from memoria.core.logging import get_logger
from memoria.llm.base import LLMConfig, LLMProvider
from memoria.llm.litellm_adapter import LiteLLMAdapter, ModelRegistry
from memoria.memory.adapter import MemoryAdapter
from memoria.memory.embedding import Embedder, LiteLLMEmbedder
from memoria.memory.file import FileMemory
from memoria.memory.vector import SQLiteVectorStore
from memoria.tools.builtin import register_all_builtin_tools
from memoria.tools.registry import ToolRegistry

logger = get_logger("core.agent_service")


async def create_memory_adapter(
    settings: Settings,
    embedder: Embedder | None = None,
) -> MemoryAdapter:
    """Create a memory adapter with a fresh short-term tier.

    The vector store is connected (and its dimension validated) only when an
    embedder is supplied.
    """
    vectors = None
    if embedder is not None:
        vectors = SQLiteVectorStore(settings.vector_db_path, dimension=embedder.dimension)
        await vectors.connect()

    return MemoryAdapter(
        file=FileMemory(settings.long_term_path),
        vectors=vectors,
        embedder=embedder,
        top_k=settings.semantic_top_k,
        min_score=settings.semantic_min_score,
        render_limit=settings.context_note_limit,
    )


async def create_memory_agent(
    settings: Settings,
    llm: LLMProvider | None = None,
    embedder: Embedder | None = None,
    model_registry: ModelRegistry | None = None,
) -> MemoryAgent:
    """Create a memory agent with all built-in tools registered.

    Args:
        settings: Application settings
        llm: LLM provider (defaults to litellm adapter over the model registry)
        embedder: Embedding client (defaults to litellm embedder when semantic memory is on)
        model_registry: Model registry (loaded from configs/models.yaml if needed)

    Returns:
        MemoryAgent ready to run

    Raises:
        ConfigurationError: On unknown or unavailable models, or a vector
            dimension mismatch
        DuplicateToolError: If tool registration collides
    """
    if not settings.enable_semantic_memory:
        embedder = None

    if llm is None or (embedder is None and settings.enable_semantic_memory):
        model_registry = model_registry or ModelRegistry()

    if llm is None:
        chat_model = model_registry.require(settings.chat_model, "chat")
        if not chat_model.is_available:
            raise ConfigurationError(
                f"Model {settings.chat_model} not available "
                f"(set {chat_model.auth_env or chat_model.base_url_env})"
            )
        llm = LiteLLMAdapter(model_registry)
    if embedder is None and settings.enable_semantic_memory:
        embedder = LiteLLMEmbedder.from_registry(model_registry, settings.embedding_model)

    memory = await create_memory_adapter(settings, embedder)

    registry = register_all_builtin_tools(ToolRegistry(), memory)
    logger.info(
        f"Memory agent ready: tiers={[t.value for t in memory.tiers]}, "
        f"tools={[t.name for t in registry.all()]}"
    )

    return MemoryAgent(
        llm=llm,
        memory=memory,
        registry=registry,
        llm_config=LLMConfig(
            model=settings.chat_model,
            max_tokens=settings.max_tokens,
            temperature=settings.temperature,
        ),
        exit_command=settings.exit_command,
        max_concurrent_tools=settings.max_concurrent_tools,
    )
