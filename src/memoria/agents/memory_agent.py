"""Memory agent - tool-augmented conversation loop over tiered memory."""

import inspect
from collections.abc import Awaitable, Callable

from memoria.agents.base import ConversationState, TurnResult
from memoria.core.errors import ExternalServiceError, TranscriptOrderError
from memoria.core.logging import get_logger
from memoria.core.types import (
    AssistantMessage,
    Message,
    MessageDict,
    ToolResultMessage,
    Transcript,
    UserMessage,
)
from memoria.llm.base import LLMConfig, LLMProvider
from memoria.memory.adapter import MemoryAdapter
from memoria.tools.builtin.memory import FILE_TOOL, NOTE_TOOL, VECTOR_SAVE_TOOL, VECTOR_SEARCH_TOOL
from memoria.tools.dispatcher import ToolDispatcher
from memoria.tools.registry import ToolRegistry

logger = get_logger("agents.memory")

FALLBACK_IDENTITY = "You are a helpful assistant with a memory."

SYSTEM_TEMPLATE = """{identity}

## Notes (this conversation)
{notes}

## Long-term memory
{long_term}

## Tools
{tools}
{instructions}"""

TOOL_INSTRUCTIONS = {
    NOTE_TOOL: f"- Use {NOTE_TOOL} to remember something for the rest of this conversation.",
    FILE_TOOL: f"- Use {FILE_TOOL} for facts worth keeping in future conversations.",
    VECTOR_SAVE_TOOL: f"- Use {VECTOR_SAVE_TOOL} to store details you may need to look up by meaning.",
    VECTOR_SEARCH_TOOL: (
        f"- Semantic memory is not shown above; call {VECTOR_SEARCH_TOOL} to recall from it."
    ),
}

InputReader = Callable[[], "str | None | Awaitable[str | None]"]
OutputWriter = Callable[[str], "None | Awaitable[None]"]


async def _maybe_await(value):
    if inspect.isawaitable(value):
        return await value
    return value


class MemoryAgent:
    """Conversation loop driving model decisions, tool dispatch and memory.

    Turns run strictly one after another. Messages of a turn are staged and
    committed to the transcript only when the turn completes, so a failed
    model or store call leaves the transcript exactly as it was.
    """

    def __init__(
        self,
        llm: LLMProvider,
        memory: MemoryAdapter,
        registry: ToolRegistry,
        llm_config: LLMConfig,
        exit_command: str = "exit",
        max_concurrent_tools: int | None = None,
        identity: str = FALLBACK_IDENTITY,
    ):
        self.llm = llm
        self.memory = memory
        self.registry = registry
        self.llm_config = llm_config
        self.exit_command = exit_command.lower()
        self.identity = identity

        self.dispatcher = ToolDispatcher(registry, max_concurrency=max_concurrent_tools)
        self.transcript = Transcript()
        self.state = ConversationState.AWAITING_INPUT

    def is_exit(self, text: str) -> bool:
        return text.strip().lower() == self.exit_command

    def render_context(self) -> str:
        """Build the system prompt from current short-term and file memory.

        Semantic memory is deliberately absent; the model reaches it only
        through the search tool.
        """
        instructions = [
            TOOL_INSTRUCTIONS[t.name] for t in self.registry.all() if t.name in TOOL_INSTRUCTIONS
        ]
        return SYSTEM_TEMPLATE.format(
            identity=self.identity,
            notes=self.memory.render_notes() or "(no notes yet)",
            long_term=self.memory.render_file() or "(nothing stored yet)",
            tools=self.registry.get_context_string(),
            instructions="\n".join(instructions),
        )

    def _build_messages(self, system_prompt: str, staged: list[Message]) -> list[MessageDict]:
        return [{"role": "system", "content": system_prompt}, *self.transcript.to_llm_format(staged)]

    async def process(self, text: str) -> TurnResult:
        """
        Run one turn for a user message.

        Returns:
            TurnResult with the final assistant text

        Raises:
            ExternalServiceError: If a model, embedding or store call fails;
                nothing from the turn is committed to the transcript
        """
        if self.state == ConversationState.EXITED:
            raise RuntimeError("Conversation has exited")

        staged: list[Message] = [UserMessage(text=text)]
        try:
            self.state = ConversationState.RENDERING_CONTEXT
            system_prompt = self.render_context()
            logger.debug(f"System prompt: {len(system_prompt)} chars")

            self.state = ConversationState.REQUESTING_DECISION
            tools = self.registry.to_openai_tools() or None
            decision = await self.llm.complete(
                self._build_messages(system_prompt, staged), self.llm_config, tools=tools
            )
            cost = decision.cost_usd

            if not decision.has_tool_calls:
                staged.append(AssistantMessage(text=decision.content))
                self.transcript.extend(staged)
                self.state = ConversationState.DONE
                return TurnResult(text=decision.content, model=decision.model, cost_usd=cost)

            logger.info(
                f"Model requested {len(decision.tool_calls)} tool call(s): "
                f"{[tc.tool_name for tc in decision.tool_calls]}"
            )
            staged.append(
                AssistantMessage(
                    text=decision.content or None,
                    requested_tools=tuple(decision.tool_calls),
                )
            )
            try:
                self.transcript.check(staged)
            except TranscriptOrderError as e:
                # Reused or repeated tool call ids from the model
                raise ExternalServiceError("model", f"invalid tool calls: {e}") from e

            self.state = ConversationState.DISPATCHING_TOOLS
            results = await self.dispatcher.dispatch(decision.tool_calls)
            staged.extend(results)

            self.state = ConversationState.REQUESTING_FINAL_RESPONSE
            final = await self.llm.complete(
                self._build_messages(system_prompt, staged), self.llm_config, tools=None
            )
            cost += final.cost_usd

            final_text = final.content.strip()
            if not final_text:
                logger.warning("Empty final response from LLM, using tool results directly")
                final_text = self._format_results(results)

            staged.append(AssistantMessage(text=final_text))
            self.transcript.extend(staged)
            self.state = ConversationState.DONE
            return TurnResult(
                text=final_text, model=final.model, tool_results=results, cost_usd=cost
            )

        except ExternalServiceError as e:
            logger.error(f"Turn aborted in {self.state.value}: {e}")
            raise
        finally:
            if self.state != ConversationState.EXITED:
                self.state = ConversationState.AWAITING_INPUT

    @staticmethod
    def _format_results(results: list[ToolResultMessage]) -> str:
        return "\n".join(r.result_text for r in results)

    async def run(self, read_input: InputReader, write_output: OutputWriter) -> None:
        """
        Drive the conversation until the exit command or end of input.

        Args:
            read_input: Returns the next user line, or None at end of input
            write_output: Receives assistant replies and error reports
        """
        try:
            while True:
                self.state = ConversationState.AWAITING_INPUT
                line = await _maybe_await(read_input())
                if line is None or self.is_exit(line):
                    break

                line = line.strip()
                if not line:
                    continue

                try:
                    result = await self.process(line)
                except ExternalServiceError as e:
                    await _maybe_await(write_output(f"Error: {e}"))
                    continue
                except Exception as e:
                    logger.error(f"Turn failed: {e}", exc_info=True)
                    await _maybe_await(write_output(f"Error: {e}"))
                    continue

                await _maybe_await(write_output(result.text))
        finally:
            await self.close()

    async def close(self) -> None:
        """Release memory store handles and mark the loop exited."""
        if self.state == ConversationState.EXITED:
            return
        self.state = ConversationState.EXITED
        await self.memory.close()
        logger.info(f"Conversation closed after {len(self.transcript)} messages")
