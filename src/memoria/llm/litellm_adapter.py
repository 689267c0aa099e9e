"""LiteLLM adapter - unified interface for all LLM providers."""

import json
import os
from pathlib import Path
from typing import Any

import litellm
import yaml
from litellm import acompletion

from memoria.configs import MODELS_CONFIG
from memoria.core.errors import ConfigurationError, ExternalServiceError
from memoria.core.logging import get_logger
from memoria.core.types import MessageDict, ToolInvocation, ToolSpec
from memoria.llm.base import LLMConfig, LLMProvider, LLMResponse

logger = get_logger("llm.litellm_adapter")

# Disable LiteLLM's verbose logging
litellm.suppress_debug_info = True


class ModelConfig:
    """Model configuration from YAML."""

    def __init__(self, data: dict[str, Any]):
        self.model_id = data["model_id"]
        self.litellm_name = data["litellm_name"]
        self.provider = data["provider"]
        self.kind = data.get("kind", "chat")
        self.cost_per_1m_input = data.get("cost_per_1m_input", 0.0)
        self.cost_per_1m_output = data.get("cost_per_1m_output", 0.0)
        self.supports_tools = data.get("supports_tools", True)
        self.embedding_dim = data.get("embedding_dim")
        self.notes = data.get("notes", "")
        self.auth_env = data.get("auth_env")
        self.base_url_env = data.get("base_url_env")

    @property
    def api_key(self) -> str | None:
        """Get API key from environment."""
        if not self.auth_env:
            return None
        return os.getenv(self.auth_env)

    @property
    def base_url(self) -> str | None:
        """Get base URL from environment."""
        if not self.base_url_env:
            return None
        return os.getenv(self.base_url_env)

    @property
    def is_available(self) -> bool:
        """Check if model is available (has required credentials)."""
        if self.auth_env and not self.api_key:
            return False
        if self.base_url_env and not self.base_url:
            return False
        return True

    def call_params(self) -> dict[str, Any]:
        """Credential/endpoint params shared by completion and embedding calls."""
        params: dict[str, Any] = {"model": self.litellm_name}
        if self.api_key:
            params["api_key"] = self.api_key
        if self.base_url:
            params["api_base"] = self.base_url
        return params


class ModelRegistry:
    """Load and manage model configurations from YAML."""

    def __init__(self, config_path: Path | str = MODELS_CONFIG):
        with open(config_path) as f:
            data = yaml.safe_load(f)

        self.models = {m["model_id"]: ModelConfig(m) for m in data["models"]}

        logger.info(f"Loaded {len(self.models)} models from registry")
        available = [m.model_id for m in self.models.values() if m.is_available]
        logger.debug(f"Available models: {', '.join(available) or '(none)'}")

    def get(self, model_id: str) -> ModelConfig | None:
        """Get model config by ID."""
        return self.models.get(model_id)

    def require(self, model_id: str, kind: str) -> ModelConfig:
        """Get model config by ID, checking its kind.

        Raises:
            ConfigurationError: If the model is missing or of the wrong kind
        """
        model = self.models.get(model_id)
        if model is None:
            raise ConfigurationError(f"Model {model_id} not in registry")
        if model.kind != kind:
            raise ConfigurationError(f"Model {model_id} is a {model.kind} model, expected {kind}")
        return model


def parse_tool_calls(message: Any) -> list[ToolInvocation]:
    """Extract tool invocations from a litellm/OpenAI response message.

    Arguments are kept as raw text; parsing and validation belong to the
    dispatcher so that malformed arguments still yield a result message.
    """
    raw_calls = getattr(message, "tool_calls", None) or []
    invocations = []
    for tc in raw_calls:
        args = tc.function.arguments
        if not isinstance(args, str):
            args = json.dumps(args)
        invocations.append(
            ToolInvocation(id=tc.id, tool_name=tc.function.name, arguments_raw=args or "{}")
        )
    return invocations


class LiteLLMAdapter(LLMProvider):
    """Adapter for LiteLLM with unified interface."""

    def __init__(self, registry: ModelRegistry):
        self.registry = registry

    async def complete(
        self,
        messages: list[MessageDict],
        config: LLMConfig,
        tools: list[ToolSpec] | None = None,
    ) -> LLMResponse:
        """Call LiteLLM completion with model from registry.

        Args:
            messages: OpenAI-format messages
            config: LLM configuration (config.model is a registry id)
            tools: Optional tool definitions

        Returns:
            LLMResponse with standardized format
        """
        model_config = self.registry.require(config.model, "chat")

        if not model_config.is_available:
            raise ConfigurationError(
                f"Model {config.model} not available (missing credentials/config)"
            )

        params = model_config.call_params()
        params.update(
            messages=messages,
            max_tokens=config.max_tokens,
            temperature=config.temperature,
        )

        if tools and model_config.supports_tools:
            params["tools"] = tools
            params["tool_choice"] = "auto"

        logger.debug(
            f"LiteLLM request: model={model_config.litellm_name}, "
            f"messages={len(messages)}, tools={len(tools) if tools else 0}"
        )

        try:
            response = await acompletion(**params)
        except Exception as e:
            logger.error(f"LiteLLM error for {config.model}: {e}")
            raise ExternalServiceError("model", str(e)) from e

        message = response.choices[0].message
        content = message.content or ""
        tool_calls = parse_tool_calls(message)

        usage = getattr(response, "usage", None)
        input_tokens = usage.prompt_tokens if usage else 0
        output_tokens = usage.completion_tokens if usage else 0

        cost_usd = (
            (input_tokens / 1_000_000) * model_config.cost_per_1m_input
            + (output_tokens / 1_000_000) * model_config.cost_per_1m_output
        )

        logger.debug(
            f"LiteLLM response: model={response.model}, "
            f"tokens={input_tokens}+{output_tokens}, "
            f"tool_calls={len(tool_calls)}, cost=${cost_usd:.4f}"
        )

        return LLMResponse(
            content=content,
            model=response.model,
            provider=model_config.provider,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            cost_usd=cost_usd,
            tool_calls=tool_calls,
        )
