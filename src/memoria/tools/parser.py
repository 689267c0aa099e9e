"""Parse raw tool call arguments produced by the model."""

import json
import re
from typing import Any

from memoria.core.errors import ValidationError
from memoria.core.logging import get_logger

logger = get_logger("tools.parser")

_FENCE = re.compile(r"^```(?:json)?\s*\n?(.*?)\n?```$", re.DOTALL)


class ArgumentParser:
    """Turn the model's serialized arguments into a dict."""

    @staticmethod
    def parse(raw: str | None) -> dict[str, Any]:
        """
        Parse an arguments blob.

        Accepts plain JSON objects, and JSON wrapped in a ``` fence (some
        local models do this). Empty input means no arguments.

        Raises:
            ValidationError: If the blob is not a JSON object
        """
        text = (raw or "").strip()
        if not text:
            return {}

        fenced = _FENCE.match(text)
        if fenced:
            text = fenced.group(1).strip()

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            logger.debug(f"Failed to parse arguments {text[:100]!r}: {e}")
            raise ValidationError(f"Arguments are not valid JSON: {e.msg}") from e

        if not isinstance(data, dict):
            raise ValidationError(
                f"Arguments must be a JSON object, got {type(data).__name__}"
            )
        return data
