"""LLM Client - Abstraction layer for LLM APIs"""

from .exceptions import (
    ErrorKind,
    LLMError,
    RateLimitError,
    APIKeyError,
    ModelLoadingError,
    ModelNotFoundError,
)
from .groq_client import GroqClient

__all__ = [
    "ErrorKind",
    "LLMError",
    "RateLimitError",
    "APIKeyError",
    "ModelLoadingError",
    "ModelNotFoundError",
    "GroqClient",
]
