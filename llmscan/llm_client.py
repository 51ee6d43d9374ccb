"""
LLM Client with an OpenAI/DeepSeek backend switch.

Both backends speak the OpenAI chat-completions protocol, so a single
ChatCompletionClient serves them; the Backend enum carries what differs
(endpoint, model, API key env var).  Callers depend on BaseLLMClient only,
which lets tests inject a scripted client without network access.
"""

import os
from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional, Union

import openai
from openai import OpenAI

from .logger import get_module_logger
from .exceptions import LLMClientError

logger = get_module_logger("llm_client")

# Backend calls can be slow for the 2000-token Markdown transform
DEFAULT_TIMEOUT = 90.0

# How much of a failed response body makes it into the log line
ERROR_BODY_PREVIEW = 150


class Backend(Enum):
    """Supported text-generation backends."""
    OPENAI = "openai"
    DEEPSEEK = "deepseek"

    @property
    def base_url(self) -> str:
        return _BACKEND_SETTINGS[self]["base_url"]

    @property
    def model(self) -> str:
        return _BACKEND_SETTINGS[self]["model"]

    @property
    def api_key_env(self) -> str:
        return _BACKEND_SETTINGS[self]["api_key_env"]


_BACKEND_SETTINGS = {
    Backend.OPENAI: {
        "base_url": "https://api.openai.com/v1",
        "model": "gpt-4o-mini",
        "api_key_env": "OPENAI_API_KEY",
    },
    Backend.DEEPSEEK: {
        "base_url": "https://api.deepseek.com",
        "model": "deepseek-coder",
        "api_key_env": "DEEPSEEK_API_KEY",
    },
}


class BaseLLMClient(ABC):
    """Abstract base class for LLM clients."""

    @abstractmethod
    def complete(self, prompt: str, max_tokens: int = 1000, temperature: float = 0.2) -> str:
        """
        Send a single-turn prompt and return the response text.

        Args:
            prompt: The user prompt
            max_tokens: Completion token limit
            temperature: Sampling temperature

        Returns:
            The assistant's response text

        Raises:
            LLMClientError: on any non-200 response, transport error or
                malformed payload
        """
        pass


class ChatCompletionClient(BaseLLMClient):
    """Chat-completions client for any OpenAI-compatible backend."""

    def __init__(
        self,
        backend: Backend,
        api_key: str,
        model: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT
    ):
        if not api_key:
            raise LLMClientError(
                f"{backend.value} API key not provided",
                provider=backend.value
            )
        self.backend = backend
        self.model = model or backend.model
        # No SDK-level retries: a failed call is reported once and the
        # scanner decides what to skip.
        self.client = OpenAI(
            api_key=api_key,
            base_url=backend.base_url,
            timeout=timeout,
            max_retries=0
        )

    def complete(self, prompt: str, max_tokens: int = 1000, temperature: float = 0.2) -> str:
        """Send prompt to the backend and return the response text."""
        provider = self.backend.value

        try:
            # with_raw_response keeps the HTTP status and body around so a
            # non-200 success code is rejected too, and errors can be logged.
            raw = self.client.chat.completions.with_raw_response.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=max_tokens,
                temperature=temperature
            )
        except openai.APIStatusError as e:
            body = e.response.text[:ERROR_BODY_PREVIEW]
            logger.error(f"AI API error ({provider}): HTTP {e.status_code} – {body}")
            raise LLMClientError(
                f"{provider} API returned HTTP {e.status_code}",
                provider=provider,
                details={"status_code": e.status_code, "body": body}
            )
        except openai.APIError as e:
            logger.error(f"AI API error ({provider}): {e}")
            raise LLMClientError(
                f"{provider} API call failed: {str(e)}",
                provider=provider,
                details={"error": str(e)}
            )

        body = raw.text[:ERROR_BODY_PREVIEW]
        if raw.status_code != 200:
            logger.error(f"AI API error ({provider}): HTTP {raw.status_code} – {body}")
            raise LLMClientError(
                f"{provider} API returned HTTP {raw.status_code}",
                provider=provider,
                details={"status_code": raw.status_code, "body": body}
            )

        # The SDK builds response models without validation, so a payload
        # missing choices/message/content only shows up on attribute access.
        try:
            content = raw.parse().choices[0].message.content
        except (AttributeError, IndexError, KeyError, TypeError, ValueError) as e:
            logger.error(f"AI API error ({provider}): malformed response – {body}")
            raise LLMClientError(
                f"Malformed {provider} response: {e}",
                provider=provider,
                details={"body": body}
            )

        if content is None:
            logger.error(f"AI API error ({provider}): response has no content – {body}")
            raise LLMClientError(
                f"{provider} response has no message content",
                provider=provider,
                details={"body": body}
            )
        return content


class LLMClient:
    """
    Factory class for creating LLM clients with backend switch.

    Usage:
        client = LLMClient.create(Backend.OPENAI, api_key="sk-...")
        client = LLMClient.create("deepseek", api_key="sk-...")
    """

    @staticmethod
    def create(
        backend: Union[Backend, str],
        api_key: Optional[str] = None,
        model: Optional[str] = None
    ) -> BaseLLMClient:
        """
        Create an LLM client for the specified backend.

        Args:
            backend: Backend member or its string value ("openai", "deepseek")
            api_key: API key (defaults to the backend's env var)
            model: Model override (defaults to the backend's model)

        Returns:
            Configured LLM client
        """
        if not isinstance(backend, Backend):
            try:
                backend = Backend(str(backend).strip().lower())
            except ValueError:
                logger.error(f"Error: Unsupported AI engine: {backend}")
                raise LLMClientError(
                    f"Unsupported AI engine: {backend}",
                    provider=str(backend)
                )

        logger.debug(f"Creating LLM client for backend: {backend.value} ({model or backend.model})")
        return ChatCompletionClient(
            backend,
            api_key=api_key or os.getenv(backend.api_key_env, ""),
            model=model
        )
