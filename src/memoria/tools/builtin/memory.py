"""Memory tools - the model's only way to write or search memory tiers."""

from memoria.core.logging import get_logger
from memoria.core.types import ActionResult
from memoria.memory.adapter import MemoryAdapter
from memoria.memory.base import MemoryTier
from memoria.tools.base import Tool, tool
from memoria.tools.registry import ToolRegistry

logger = get_logger("tools.builtin.memory")

NOTE_TOOL = "noteToMemory"
FILE_TOOL = "saveToLongTermMemory"
VECTOR_SAVE_TOOL = "saveToVectorMemory"
VECTOR_SEARCH_TOOL = "searchVectorMemory"


def build_memory_tools(memory: MemoryAdapter) -> list[Tool]:
    """Create memory tools bound to one adapter.

    Only tiers the adapter has configured get tools.
    """

    @tool(
        NOTE_TOOL,
        "Add a note to your list of notes. Notes last for this conversation only.",
        examples=['noteToMemory(note="flight is AA100")'],
    )
    async def note_to_memory(note: str) -> ActionResult:
        """
        note: The note to add to your list of notes
        """
        await memory.write(MemoryTier.SHORT_TERM, note)
        logger.info(f"Note added to memory: {note}")
        return ActionResult(success=True, data=f"Note added to memory: {note}")

    @tool(
        FILE_TOOL,
        "Save a note to long-term memory. It will be available in future conversations.",
        examples=['saveToLongTermMemory(note="user prefers window seats")'],
    )
    async def save_to_long_term_memory(note: str) -> ActionResult:
        """
        note: The note to keep across conversations
        """
        ack = await memory.write(MemoryTier.FILE, note)
        return ActionResult(success=True, data=f"Saved to long-term memory: {ack.content}")

    @tool(
        VECTOR_SAVE_TOOL,
        "Store information in semantic memory so it can be recalled later by meaning.",
        examples=['saveToVectorMemory(content="user is allergic to peanuts")'],
    )
    async def save_to_vector_memory(content: str) -> ActionResult:
        """
        content: The information to store
        """
        ack = await memory.write(MemoryTier.SEMANTIC, content)
        return ActionResult(
            success=True, data=f"Stored in semantic memory (id {ack.record_id}): {content}"
        )

    @tool(
        VECTOR_SEARCH_TOOL,
        "Search semantic memory for stored information related to a query.",
        examples=['searchVectorMemory(query="food allergies")'],
    )
    async def search_vector_memory(query: str) -> ActionResult:
        """
        query: What to look for
        """
        hits = await memory.read(MemoryTier.SEMANTIC, query)
        if not hits:
            return ActionResult(success=True, data="No related memories found.")
        return ActionResult(success=True, data="\n".join(f"- {hit}" for hit in hits))

    tools = [note_to_memory._tool]  # type: ignore[attr-defined]
    if memory.file is not None:
        tools.append(save_to_long_term_memory._tool)  # type: ignore[attr-defined]
    if memory.has_semantic:
        tools.append(save_to_vector_memory._tool)  # type: ignore[attr-defined]
        tools.append(search_vector_memory._tool)  # type: ignore[attr-defined]
    return tools


def register_memory_tools(registry: ToolRegistry, memory: MemoryAdapter) -> None:
    """Register memory tools for the adapter's configured tiers."""
    for memory_tool in build_memory_tools(memory):
        registry.register(memory_tool)
