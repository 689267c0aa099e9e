"""Base tool definitions and decorators."""

import inspect
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, TypeVar

import jsonschema

from memoria.core.types import ActionResult, JSONDict, ToolSpec

_ANNOTATION_TYPES = {
    str: "string",
    "str": "string",
    int: "integer",
    "int": "integer",
    float: "number",
    "float": "number",
    bool: "boolean",
    "bool": "boolean",
    dict: "object",
    "dict": "object",
    list: "array",
    "list": "array",
}


@dataclass
class ToolParameter:
    """Definition of a tool parameter."""

    name: str
    type: str  # "string", "integer", "number", "boolean", "object", "array"
    description: str
    required: bool = True
    default: Any = None
    schema: JSONDict | None = None  # extra JSON Schema keywords (enum, items, properties)

    def to_json_schema(self) -> JSONDict:
        prop: JSONDict = {"type": self.type, "description": self.description}
        if self.default is not None:
            prop["default"] = self.default
        if self.schema:
            prop.update(self.schema)
        return prop


@dataclass
class Tool:
    """Definition of a callable tool (name, description, schema, executor)."""

    name: str
    description: str
    parameters: list[ToolParameter]
    executor: Callable[..., Awaitable[ActionResult]]
    examples: list[str] = field(default_factory=list)

    def to_context_string(self) -> str:
        """Format tool for LLM context."""
        params_str = ", ".join(
            f"{p.name}: {p.type}" + ("" if p.required else " (optional)")
            for p in self.parameters
        )

        lines = [f"{self.name}({params_str})"]
        lines.append(f"  {self.description}")

        if self.examples:
            lines.append("  Examples:")
            for ex in self.examples:
                lines.append(f"    {ex}")

        return "\n".join(lines)

    def to_json_schema(self) -> JSONDict:
        """Parameter schema as a JSON Schema object."""
        return {
            "type": "object",
            "properties": {p.name: p.to_json_schema() for p in self.parameters},
            "required": [p.name for p in self.parameters if p.required],
            "additionalProperties": False,
        }

    def validate_args(self, args: Any) -> tuple[bool, str | None]:
        """
        Validate tool arguments against the parameter schema.

        Returns:
            (valid, error_message)
        """
        try:
            jsonschema.validate(args, self.to_json_schema())
        except jsonschema.ValidationError as e:
            location = ".".join(str(p) for p in e.absolute_path)
            prefix = f"{location}: " if location else ""
            return False, f"{prefix}{e.message}"
        return True, None

    def to_openai_function(self) -> ToolSpec:
        """
        Convert to OpenAI function calling format.

        Returns:
            Dict in OpenAI function format
        """
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.to_json_schema(),
            },
        }


F = TypeVar("F", bound=Callable[..., Awaitable[ActionResult]])


def _param_description(func: Callable, param_name: str) -> str:
    """Pull 'param_name: description' out of the docstring."""
    if func.__doc__:
        for line in func.__doc__.split("\n"):
            parts = line.split(":", 1)
            if len(parts) == 2 and parts[0].strip() == param_name:
                return parts[1].strip()
    return f"Parameter {param_name}"


def tool(
    name: str,
    description: str,
    examples: list[str] | None = None,
    schemas: dict[str, JSONDict] | None = None,
) -> Callable[[F], F]:
    """
    Decorator to turn a coroutine into a tool.

    Args:
        name: Tool name (e.g., "noteToMemory")
        description: Human-readable description shown to the model
        examples: Example usage strings
        schemas: Extra JSON Schema keywords per parameter

    Example:
        @tool("noteToMemory", "Add a note to your list of notes")
        async def note_to_memory(note: str) -> ActionResult:
            \"\"\"
            note: The note to add
            \"\"\"
    """

    def decorator(func: F) -> F:
        sig = inspect.signature(func)
        parameters = []

        for param_name, param in sig.parameters.items():
            if param_name in ("self", "cls"):
                continue

            param_type = "string"
            if param.annotation is not inspect.Parameter.empty:
                param_type = _ANNOTATION_TYPES.get(param.annotation, "string")

            required = param.default is inspect.Parameter.empty
            default = None if required else param.default

            parameters.append(
                ToolParameter(
                    name=param_name,
                    type=param_type,
                    description=_param_description(func, param_name),
                    required=required,
                    default=default,
                    schema=(schemas or {}).get(param_name),
                )
            )

        func._tool = Tool(  # type: ignore[attr-defined]
            name=name,
            description=description,
            parameters=parameters,
            executor=func,
            examples=examples or [],
        )
        return func

    return decorator
