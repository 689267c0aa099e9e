"""Dispatch model-requested tool invocations."""

import asyncio
import json
from collections.abc import Sequence
from datetime import datetime
from typing import Any

from memoria.core.errors import (
    ExecutorError,
    ExternalServiceError,
    MemoriaError,
    UnknownToolError,
    ValidationError,
)
from memoria.core.logging import get_logger
from memoria.core.types import ActionResult, ToolInvocation, ToolResultMessage
from memoria.tools.parser import ArgumentParser
from memoria.tools.registry import ToolRegistry

logger = get_logger("tools.dispatcher")

# Maximum length for logged content (characters)
MAX_LOG_LENGTH = 500


def _truncate_for_logging(result: ActionResult, max_len: int = MAX_LOG_LENGTH) -> str:
    """
    Create a truncated string representation of ActionResult for logging.

    Args:
        result: ActionResult to represent
        max_len: Maximum length of content fields

    Returns:
        Truncated string representation
    """
    if not result.success:
        # Errors are usually short, log them fully
        return repr(result)

    if result.data is None:
        return "ActionResult(success=True, data=None)"

    if isinstance(result.data, str):
        data = result.data
        if len(data) > max_len:
            data = f"{data[:max_len]}... [truncated, {len(data)} chars total]"
        return f"ActionResult(success=True, data={data!r})"

    if not isinstance(result.data, dict):
        return f"ActionResult(success=True, data={result.data!r})"

    truncated_data = {}
    for key, value in result.data.items():
        if isinstance(value, str) and len(value) > max_len:
            truncated_data[key] = f"{value[:max_len]}... [truncated, {len(value)} chars total]"
        else:
            truncated_data[key] = value

    return f"ActionResult(success=True, data={truncated_data})"


class DateTimeEncoder(json.JSONEncoder):
    """JSON encoder that handles datetime objects."""

    def default(self, obj: object) -> Any:
        if isinstance(obj, datetime):
            return obj.isoformat()
        return super().default(obj)


def format_result_data(data: Any) -> str:
    """Render successful tool output as text for the model."""
    if data is None:
        return "OK"
    if isinstance(data, str):
        return data
    return json.dumps(data, cls=DateTimeEncoder, ensure_ascii=False)


def _error_result(invocation: ToolInvocation, error: MemoriaError) -> ToolResultMessage:
    return ToolResultMessage(
        invocation_id=invocation.id,
        tool_name=invocation.tool_name,
        result_text=f"{type(error).__name__}: {error}",
        is_error=True,
    )


class ToolDispatcher:
    """Validates and executes tool invocations, one result per invocation.

    Unknown tools, bad arguments and executor failures become error result
    messages. ExternalServiceError is the exception: it aborts the batch
    once every sibling invocation has finished.
    """

    def __init__(self, registry: ToolRegistry, max_concurrency: int | None = None) -> None:
        """
        Initialize dispatcher.

        Args:
            registry: Tool registry to look up tools
            max_concurrency: Cap on concurrently running executors (None = unbounded)
        """
        self.registry = registry
        self._semaphore = asyncio.Semaphore(max_concurrency) if max_concurrency else None

    async def execute(self, invocation: ToolInvocation) -> ToolResultMessage:
        """
        Execute a single invocation.

        Returns:
            ToolResultMessage correlated to the invocation id

        Raises:
            ExternalServiceError: If the executor hit a failing external service
        """
        tool = self.registry.lookup(invocation.tool_name)
        if tool is None:
            available = ", ".join(t.name for t in self.registry.all()) or "(none)"
            logger.warning(f"Model requested unknown tool: {invocation.tool_name}")
            return _error_result(
                invocation,
                UnknownToolError(
                    f"Unknown tool '{invocation.tool_name}'. Available tools: {available}"
                ),
            )

        try:
            args = ArgumentParser.parse(invocation.arguments_raw)
        except ValidationError as e:
            return _error_result(invocation, e)

        valid, error = tool.validate_args(args)
        if not valid:
            logger.info(f"Invalid arguments for {tool.name}: {error}")
            return _error_result(
                invocation, ValidationError(f"Invalid arguments for {tool.name}: {error}")
            )

        try:
            logger.info(f"Executing tool: {tool.name} with args: {args}")
            if self._semaphore is not None:
                async with self._semaphore:
                    result = await tool.executor(**args)
            else:
                result = await tool.executor(**args)

            if not isinstance(result, ActionResult):
                raise TypeError(f"expected ActionResult, got {type(result).__name__}")
            logger.debug(f"Tool {tool.name} result: {_truncate_for_logging(result)}")

            if not result.success:
                return _error_result(
                    invocation, ExecutorError(result.error or "Tool reported failure")
                )
            result_text = format_result_data(result.data)
        except ExternalServiceError:
            raise
        except ValidationError as e:
            return _error_result(invocation, e)
        except Exception as e:
            logger.error(f"Tool {tool.name} failed: {e}", exc_info=True)
            return _error_result(invocation, ExecutorError(f"Tool execution failed: {e}"))

        return ToolResultMessage(
            invocation_id=invocation.id,
            tool_name=invocation.tool_name,
            result_text=result_text,
        )

    async def dispatch(self, invocations: Sequence[ToolInvocation]) -> list[ToolResultMessage]:
        """
        Execute invocations concurrently.

        Args:
            invocations: Invocations from one model decision

        Returns:
            Result messages in request order (not completion order)

        Raises:
            ExternalServiceError: First external failure, after all invocations settle
        """
        if not invocations:
            return []

        outcomes = await asyncio.gather(
            *(self.execute(inv) for inv in invocations),
            return_exceptions=True,
        )

        results: list[ToolResultMessage] = []
        external: list[ExternalServiceError] = []
        for invocation, outcome in zip(invocations, outcomes):
            if isinstance(outcome, ExternalServiceError):
                logger.error(f"Tool {invocation.tool_name} aborted the turn: {outcome}")
                external.append(outcome)
            elif isinstance(outcome, Exception):
                logger.error(f"Tool {invocation.tool_name} escaped execute: {outcome!r}")
                results.append(
                    _error_result(invocation, ExecutorError(f"Tool execution failed: {outcome}"))
                )
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                results.append(outcome)

        if external:
            raise external[0]

        logger.debug(f"Dispatched {len(results)} tool call(s): {[r.is_error for r in results]}")
        return results
