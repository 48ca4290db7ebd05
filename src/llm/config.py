from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .errors import LLMConfigurationError

SUPPORTED_BACKENDS = ("anthropic", "llama")


@dataclass(frozen=True)
class LLMConfig:
    """Configuration for the suggestion oracle."""

    backend: str = "anthropic"
    model: str = "claude-3-5-sonnet-latest"
    api_key: Optional[str] = None
    max_tokens: int = 4096
    temperature: float = 0.2
    timeout_seconds: float = 120.0
    model_path: str = ""
    n_threads: int = 4
    n_ctx: int = 8192
    n_batch: int = 256
    top_p: float = 0.9
    repeat_penalty: float = 1.1
    verbose: bool = False

    def __post_init__(self):
        """Validate configuration values."""
        if self.backend not in SUPPORTED_BACKENDS:
            raise LLMConfigurationError(
                f"backend must be one of {', '.join(SUPPORTED_BACKENDS)}, got: {self.backend}"
            )

        if self.backend == "anthropic":
            if not self.api_key or not self.api_key.strip():
                raise LLMConfigurationError("api_key is required for the anthropic backend")
            if not self.model.strip():
                raise LLMConfigurationError("model cannot be empty")
            if self.timeout_seconds <= 0:
                raise LLMConfigurationError(
                    f"timeout_seconds must be > 0, got: {self.timeout_seconds}"
                )

        if self.backend == "llama":
            if not self.model_path or not self.model_path.strip():
                raise LLMConfigurationError("model_path cannot be empty for the llama backend")
            model_file = Path(self.model_path)
            if not model_file.exists():
                raise LLMConfigurationError(f"Model file does not exist: {self.model_path}")
            if not model_file.is_file():
                raise LLMConfigurationError(f"Model path is not a file: {self.model_path}")
            if self.n_threads < 1:
                raise LLMConfigurationError(f"n_threads must be >= 1, got: {self.n_threads}")
            if self.n_ctx < 512:
                raise LLMConfigurationError(f"n_ctx must be >= 512, got: {self.n_ctx}")
            if self.n_batch < 1 or self.n_batch > self.n_ctx:
                raise LLMConfigurationError(
                    f"n_batch must be in [1, n_ctx={self.n_ctx}], got: {self.n_batch}"
                )
            if not 1.0 <= self.repeat_penalty <= 2.0:
                raise LLMConfigurationError(
                    f"repeat_penalty must be in [1.0, 2.0], got: {self.repeat_penalty}"
                )

        if self.max_tokens < 1:
            raise LLMConfigurationError(f"max_tokens must be >= 1, got: {self.max_tokens}")

        if not 0.0 <= self.temperature <= 1.0:
            raise LLMConfigurationError(
                f"temperature must be in [0.0, 1.0], got: {self.temperature}"
            )

        if not 0.0 <= self.top_p <= 1.0:
            raise LLMConfigurationError(f"top_p must be in [0.0, 1.0], got: {self.top_p}")

    @classmethod
    def from_settings(cls, settings, *, api_key: Optional[str] = None) -> "LLMConfig":
        return cls(
            backend=str(settings.backend),
            model=str(settings.model),
            api_key=api_key,
            max_tokens=int(settings.max_tokens),
            temperature=float(settings.temperature),
            timeout_seconds=float(settings.timeout_seconds),
            model_path=str(settings.model_path or ""),
            n_threads=int(settings.n_threads),
            n_ctx=int(settings.n_ctx),
            n_batch=int(settings.n_batch),
            top_p=float(settings.top_p),
            repeat_penalty=float(settings.repeat_penalty),
            verbose=bool(settings.verbose),
        )
