"""Groq API client"""

import logging
from typing import Optional

import groq

from .exceptions import (
    APIKeyError,
    LLMError,
    ModelLoadingError,
    ModelNotFoundError,
    RateLimitError,
)

logger = logging.getLogger(__name__)


class GroqClient:
    """Async client for Groq API"""

    DEFAULT_MODEL = "llama-3.3-70b-versatile"

    def __init__(
        self,
        api_key: Optional[str],
        model: Optional[str] = None,
        timeout: float = 30.0,
    ):
        """Initialize the Groq client

        Args:
            api_key: Groq API key, read once from startup configuration.
            model: Model to use (defaults to DEFAULT_MODEL)
            timeout: Per-request timeout in seconds

        Raises:
            APIKeyError: If no API key is provided
        """
        if not api_key:
            raise APIKeyError(
                "GROQ_API_KEY not found. Set it in the environment before starting the server."
            )
        self.api_key = api_key
        self.model = model or self.DEFAULT_MODEL
        self.timeout = timeout
        self._client = None

    def _get_client(self) -> groq.AsyncGroq:
        """Lazy initialization of Groq client"""
        if self._client is None:
            # Failures degrade to fallback text upstream, so the SDK must not retry.
            self._client = groq.AsyncGroq(
                api_key=self.api_key,
                timeout=self.timeout,
                max_retries=0,
            )
        return self._client

    async def get_response(
        self,
        prompt: str,
        system_prompt: str,
        max_tokens: int = 200,
        temperature: float = 0.7,
    ) -> str:
        """Get a response from Groq API

        Args:
            prompt: User prompt
            system_prompt: System prompt
            max_tokens: Maximum tokens in response
            temperature: Sampling temperature

        Returns:
            Response text

        Raises:
            RateLimitError: On HTTP 429
            ModelLoadingError: On HTTP 503
            APIKeyError: On HTTP 401/403
            ModelNotFoundError: On HTTP 404
            LLMError: For other API errors
        """
        client = self._get_client()

        try:
            response = await client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": prompt},
                ],
                max_tokens=max_tokens,
                temperature=temperature,
            )
        except groq.APIStatusError as e:
            raise _map_status_error(e) from e
        except groq.APIError as e:
            raise LLMError(f"Groq API error: {e}") from e

        if not response.choices:
            raise LLMError("Groq API returned no choices")
        content = response.choices[0].message.content
        if not content:
            raise LLMError("Groq API returned an empty completion")
        return content.strip()

    async def check_connection(self) -> bool:
        """Send a tiny request to confirm the key and model work"""
        try:
            await self.get_response("Say OK.", "Reply with one word.", max_tokens=5)
        except LLMError as e:
            logger.warning(str({"event": "connection_check_failed", "kind": e.kind.value, "error": str(e)}))
            return False
        return True


def _map_status_error(error: "groq.APIStatusError") -> LLMError:
    status = error.status_code
    if status == 429:
        retry_after = error.response.headers.get("retry-after", "60")
        try:
            seconds = int(float(retry_after))
        except ValueError:
            seconds = 60
        return RateLimitError(f"API rate limit exceeded: {error}", retry_after=seconds)
    if status == 503:
        return ModelLoadingError(f"Model is loading: {error}")
    if status in (401, 403):
        return APIKeyError("Invalid API key")
    if status == 404:
        return ModelNotFoundError(f"Model not found: {error}")
    return LLMError(f"Groq API error ({status}): {error}")
