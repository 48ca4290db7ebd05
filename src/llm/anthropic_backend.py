"""Anthropic Messages API backend for the suggestion oracle."""

from __future__ import annotations

import logging
from typing import Any, Optional

from .config import LLMConfig
from .errors import LLMDependencyError, OracleCallError


class AnthropicBackend:
    """Single-attempt completion against the Anthropic Messages API.

    A non-empty ``prefix`` is sent as a pre-filled assistant turn; the returned
    text is the continuation only, without the prefix.
    """

    def __init__(
        self,
        config: LLMConfig,
        *,
        client: Any = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._config = config
        self._logger = logger or logging.getLogger(__name__)
        self._client = client if client is not None else self._build_client(config)

    @staticmethod
    def _build_client(config: LLMConfig):
        try:
            import anthropic
        except ImportError as error:  # pragma: no cover - optional dependency
            raise LLMDependencyError(
                "Anthropic backend requires the anthropic package."
            ) from error

        return anthropic.Anthropic(
            api_key=config.api_key,
            timeout=config.timeout_seconds,
            max_retries=0,
        )

    def complete(self, prompt: str, *, prefix: str = "") -> str:
        messages: list[dict[str, str]] = [{"role": "user", "content": prompt}]
        if prefix:
            messages.append({"role": "assistant", "content": prefix})

        try:
            response = self._client.messages.create(
                model=self._config.model,
                max_tokens=self._config.max_tokens,
                temperature=self._config.temperature,
                messages=messages,
            )
        except Exception as error:
            raise OracleCallError(f"Anthropic request failed: {error}") from error

        blocks = getattr(response, "content", None) or []
        if not blocks or getattr(blocks[0], "type", None) != "text":
            raise OracleCallError("Anthropic response did not start with a text block.")

        if getattr(response, "stop_reason", None) == "max_tokens":
            self._logger.warning(
                "Oracle response hit max_tokens=%d and is likely truncated",
                self._config.max_tokens,
            )
        usage = getattr(response, "usage", None)
        if usage is not None:
            self._logger.debug(
                "Oracle usage: input=%s output=%s",
                getattr(usage, "input_tokens", "?"),
                getattr(usage, "output_tokens", "?"),
            )
        return blocks[0].text
