from .backends import SuggestionOracleLike, build_oracle_backend
from .config import LLMConfig
from .errors import (
    LLMConfigurationError,
    LLMDependencyError,
    LLMError,
    MalformedOutputError,
    OracleCallError,
    ValidationFailure,
)
from .parser import SuggestionParser
from .request_builder import OracleRequestBuilder
from .types import (
    ActionType,
    CalendarAction,
    CreateAction,
    DeleteAction,
    MoveAction,
    OracleRequest,
    Recommendation,
    RecommendationPriority,
    ResponseShape,
)

__all__ = [
    "ActionType",
    "CalendarAction",
    "CreateAction",
    "DeleteAction",
    "LLMConfig",
    "LLMConfigurationError",
    "LLMDependencyError",
    "LLMError",
    "MalformedOutputError",
    "MoveAction",
    "OracleCallError",
    "OracleRequest",
    "OracleRequestBuilder",
    "Recommendation",
    "RecommendationPriority",
    "ResponseShape",
    "SuggestionOracleLike",
    "SuggestionParser",
    "ValidationFailure",
    "build_oracle_backend",
]
