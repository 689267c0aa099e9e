"""System tools: clock access so notes can carry dates."""

from datetime import datetime, timezone

from memoria.core.types import ActionResult
from memoria.tools.base import tool
from memoria.tools.registry import ToolRegistry


@tool(
    "get_current_time",
    "Get the current date and time, e.g. to date a note before saving it",
    examples=["get_current_time()", "get_current_time(utc=true)"],
)
async def get_current_time(utc: bool = False) -> ActionResult:
    """
    utc: Report UTC instead of local time
    """
    now = datetime.now(timezone.utc) if utc else datetime.now().astimezone()
    return ActionResult(success=True, data=f"{now:%A, %Y-%m-%d %H:%M} ({now.tzname()})")


def register_system_tools(registry: ToolRegistry) -> None:
    registry.register(get_current_time._tool)  # type: ignore[attr-defined]
