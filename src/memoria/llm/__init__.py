"""
LLM module - language model provider abstraction.

- base: LLMConfig, LLMResponse, provider interface
- litellm_adapter: litellm-backed provider with a YAML model registry

Model entries live in configs/models.yaml.
"""

from memoria.llm.base import LLMConfig, LLMProvider, LLMResponse

__all__ = ["LLMConfig", "LLMProvider", "LLMResponse"]
