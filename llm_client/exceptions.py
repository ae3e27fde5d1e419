"""Exceptions for LLM client"""

from enum import Enum


class ErrorKind(str, Enum):
    """Distinguishes inference failures for user-visible diagnostics"""
    RATE_LIMITED = "rate_limited"
    MODEL_LOADING = "model_loading"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
    UNKNOWN = "unknown"


class LLMError(Exception):
    """Base exception for LLM errors"""

    kind = ErrorKind.UNKNOWN


class RateLimitError(LLMError):
    """Raised when API rate limit is exceeded"""

    kind = ErrorKind.RATE_LIMITED

    def __init__(self, message: str = "API rate limit exceeded", retry_after: int = 60):
        super().__init__(message)
        self.retry_after = retry_after


class APIKeyError(LLMError):
    """Raised when API key is missing or invalid"""

    kind = ErrorKind.UNAUTHORIZED

    def __init__(self, message: str = "API key is missing or invalid"):
        super().__init__(message)


class ModelLoadingError(LLMError):
    """Raised when the model is temporarily unavailable"""

    kind = ErrorKind.MODEL_LOADING

    def __init__(self, message: str = "Model is loading"):
        super().__init__(message)


class ModelNotFoundError(LLMError):
    """Raised when the requested model does not exist"""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, message: str = "Model not found"):
        super().__init__(message)
