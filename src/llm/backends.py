"""Factory for the configured suggestion oracle backend."""

from __future__ import annotations

import logging
from typing import Optional, Protocol

from .config import LLMConfig


class SuggestionOracleLike(Protocol):
    """Single blocking request/response call to the suggestion oracle."""
    def complete(self, prompt: str, *, prefix: str = "") -> str:
        ...


def build_oracle_backend(
    config: LLMConfig,
    *,
    logger: Optional[logging.Logger] = None,
) -> SuggestionOracleLike:
    logger = logger or logging.getLogger("llm")
    if config.backend == "llama":
        from .llama_backend import LlamaBackend

        logger.info("Using llama.cpp oracle (model: %s)", config.model_path)
        return LlamaBackend(config)

    from .anthropic_backend import AnthropicBackend

    logger.info("Using Anthropic oracle (model: %s)", config.model)
    return AnthropicBackend(config, logger=logger.getChild("anthropic"))
