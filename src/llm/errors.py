class LLMError(Exception):
    """Base exception for the suggestion oracle integration."""


class LLMConfigurationError(LLMError):
    """Raised when oracle configuration is invalid."""


class LLMDependencyError(LLMError):
    """Raised when the selected backend library is not installed."""


class OracleCallError(LLMError):
    """Raised when the oracle request fails or returns no text."""


class MalformedOutputError(LLMError):
    """Raised when oracle output does not decode to the expected shape."""


class ValidationFailure(LLMError):
    """Raised for a single recommendation element that fails validation."""

    def __init__(self, index: int, field: str, message: str):
        super().__init__(f"recommendations[{index}].{field}: {message}")
        self.index = index
        self.field = field
        self.message = message
