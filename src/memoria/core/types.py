"""
Shared type definitions.

Core data structures used across modules: conversation messages, tool
invocations, action results and the append-only transcript.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, TypeAlias

from memoria.core.errors import TranscriptOrderError

JSONDict: TypeAlias = dict[str, Any]
MessageDict: TypeAlias = dict[str, Any]  # OpenAI chat message
ToolSpec: TypeAlias = dict[str, Any]  # OpenAI function tool definition


class Role(Enum):
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


@dataclass(frozen=True)
class ToolInvocation:
    """A single model-requested tool call within a turn."""

    id: str
    tool_name: str
    arguments_raw: str  # serialized JSON as produced by the model

    def to_llm_format(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": "function",
            "function": {"name": self.tool_name, "arguments": self.arguments_raw},
        }


@dataclass(frozen=True)
class UserMessage:
    text: str
    timestamp: datetime = field(default_factory=datetime.now)

    role = Role.USER

    def to_llm_format(self) -> MessageDict:
        return {"role": "user", "content": self.text}


@dataclass(frozen=True)
class AssistantMessage:
    text: str | None = None
    requested_tools: tuple[ToolInvocation, ...] = ()
    timestamp: datetime = field(default_factory=datetime.now)

    role = Role.ASSISTANT

    def to_llm_format(self) -> MessageDict:
        msg: MessageDict = {"role": "assistant", "content": self.text or ""}
        if self.requested_tools:
            # OpenAI expects null content alongside tool calls when there is no text
            msg["content"] = self.text or None
            msg["tool_calls"] = [inv.to_llm_format() for inv in self.requested_tools]
        return msg


@dataclass(frozen=True)
class ToolResultMessage:
    invocation_id: str
    tool_name: str
    result_text: str
    is_error: bool = False
    timestamp: datetime = field(default_factory=datetime.now)

    role = Role.TOOL

    def to_llm_format(self) -> MessageDict:
        return {
            "role": "tool",
            "tool_call_id": self.invocation_id,
            "name": self.tool_name,
            "content": self.result_text,
        }


Message: TypeAlias = UserMessage | AssistantMessage | ToolResultMessage


@dataclass
class ActionResult:
    """Result of an executed tool."""

    success: bool
    data: Any = None
    error: str | None = None


class Transcript:
    """Ordered, append-only message history owned by one conversation loop.

    Every append is checked against the tool ordering rules:
    - a ToolResultMessage must answer an outstanding invocation of the
      immediately preceding AssistantMessage
    - nothing else may be appended while invocations are outstanding
    - invocation ids are unique across the whole transcript
    """

    def __init__(self) -> None:
        self._messages: list[Message] = []
        self._outstanding: list[str] = []
        self._seen_ids: set[str] = set()

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self):
        return iter(self._messages)

    @property
    def messages(self) -> tuple[Message, ...]:
        return tuple(self._messages)

    @property
    def has_outstanding_invocations(self) -> bool:
        return bool(self._outstanding)

    def append(self, message: Message) -> None:
        """Append a single message."""
        self.extend([message])

    def extend(self, messages: Iterable[Message]) -> None:
        """Append a batch of messages, all or nothing."""
        batch = list(messages)
        outstanding, seen = self.check(batch)
        self._messages.extend(batch)
        self._outstanding = outstanding
        self._seen_ids = seen

    def check(self, messages: Iterable[Message]) -> tuple[list[str], set[str]]:
        """
        Validate messages as if appended, without mutating the transcript.

        Returns:
            (outstanding invocation ids, seen invocation ids) after the batch

        Raises:
            TranscriptOrderError: If the batch breaks ordering
        """
        outstanding = list(self._outstanding)
        seen = set(self._seen_ids)

        for msg in messages:
            if isinstance(msg, ToolResultMessage):
                if msg.invocation_id not in outstanding:
                    raise TranscriptOrderError(
                        f"Tool result {msg.invocation_id} ({msg.tool_name}) "
                        "has no outstanding invocation"
                    )
                outstanding.remove(msg.invocation_id)
                continue

            if outstanding:
                raise TranscriptOrderError(
                    f"Cannot append {msg.role.value} message while invocations "
                    f"are outstanding: {', '.join(outstanding)}"
                )

            if isinstance(msg, AssistantMessage):
                for inv in msg.requested_tools:
                    if inv.id in seen:
                        raise TranscriptOrderError(f"Duplicate invocation id: {inv.id}")
                    seen.add(inv.id)
                    outstanding.append(inv.id)

        return outstanding, seen

    def to_llm_format(self, pending: Iterable[Message] = ()) -> list[MessageDict]:
        """Render transcript (plus not-yet-committed messages) for the model.

        Raises:
            TranscriptOrderError: If any invocation would still lack its result
        """
        pending = list(pending)
        outstanding, _ = self.check(pending)
        if outstanding:
            raise TranscriptOrderError(
                f"Model request issued with unanswered invocations: {', '.join(outstanding)}"
            )
        return [m.to_llm_format() for m in [*self._messages, *pending]]
