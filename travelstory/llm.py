"""Generation service client supporting OpenAI, Anthropic and Ollama"""

import logging
import os
from typing import Optional, Protocol

import anthropic
import openai
import requests
from anthropic import Anthropic
from openai import OpenAI

from .utils.retry import llm_retry

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30
SUPPORTED_PROVIDERS = ("openai", "anthropic", "ollama")


class GenerationError(Exception):
    """The text generation service failed or returned unusable output."""


class GenerationTimeoutError(GenerationError):
    """The text generation service did not answer within the timeout."""


class GenerationClient(Protocol):
    """Capability interface for the external text generation service."""

    def generate(
        self,
        system: str,
        user: str,
        max_tokens: int = 800,
        temperature: float = 0.7,
    ) -> str:
        ...


_TIMEOUT_EXCEPTIONS = (
    TimeoutError,
    openai.APITimeoutError,
    anthropic.APITimeoutError,
    requests.exceptions.Timeout,
)


class LLMClient:
    """Unified generation client over the configured provider"""

    def __init__(self, provider: str = "openai", timeout: Optional[float] = None):
        self.provider = provider.lower()
        self.timeout = timeout or DEFAULT_TIMEOUT_SECONDS

        if self.provider == "openai":
            self.client = OpenAI(
                api_key=os.getenv("OPENAI_API_KEY"),
                timeout=self.timeout,
                max_retries=0,
            )
            self.model = os.getenv("OPENAI_MODEL", "gpt-4o")
        elif self.provider == "anthropic":
            self.client = Anthropic(
                api_key=os.getenv("ANTHROPIC_API_KEY"),
                timeout=self.timeout,
                max_retries=0,
            )
            self.model = os.getenv("ANTHROPIC_MODEL", "claude-3-5-sonnet-latest")
        elif self.provider == "ollama":
            self.client = None
            self.base_url = os.getenv("OLLAMA_BASE_URL", "http://localhost:11434").rstrip("/")
            self.model = os.getenv("OLLAMA_MODEL", "llama3.1")
        else:
            raise ValueError(f"Unsupported LLM provider: {provider}")

    def generate(
        self,
        system: str,
        user: str,
        max_tokens: int = 800,
        temperature: float = 0.7,
    ) -> str:
        """Generate text using the configured provider

        Args:
            system: System instruction
            user: User prompt
            max_tokens: Output size ceiling
            temperature: Sampling temperature in [0, 1]

        Returns:
            Generated text

        Raises:
            GenerationTimeoutError: The call exceeded the timeout
            GenerationError: Any other failure, including an empty response
        """
        logger.info(
            "Generating with %s/%s (max_tokens=%s, temperature=%s)",
            self.provider,
            self.model,
            max_tokens,
            temperature,
        )
        try:
            text = self._complete(system, user, max_tokens, temperature)
        except _TIMEOUT_EXCEPTIONS as e:
            logger.error(f"LLM generation timed out after {self.timeout}s: {e}")
            raise GenerationTimeoutError(
                f"{self.provider} did not respond within {self.timeout}s"
            ) from e
        except Exception as e:
            logger.error(f"LLM generation failed: {e}")
            raise GenerationError(f"{self.provider} generation failed: {e}") from e

        if not text or not text.strip():
            logger.error("LLM returned an empty response")
            raise GenerationError(f"{self.provider} returned an empty response")

        return text

    @llm_retry()
    def _complete(self, system: str, user: str, max_tokens: int, temperature: float) -> Optional[str]:
        if self.provider == "openai":
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": user}
                ],
                temperature=temperature,
                max_tokens=max_tokens,
            )
            return response.choices[0].message.content

        if self.provider == "anthropic":
            response = self.client.messages.create(
                model=self.model,
                system=system,
                messages=[
                    {"role": "user", "content": user}
                ],
                temperature=temperature,
                max_tokens=max_tokens,
            )
            return "".join(
                block.text for block in response.content if getattr(block, "type", "text") == "text"
            )

        response = requests.post(
            f"{self.base_url}/api/chat",
            json={
                "model": self.model,
                "messages": [
                    {"role": "system", "content": system},
                    {"role": "user", "content": user},
                ],
                "stream": False,
                "options": {
                    "temperature": temperature,
                    "num_predict": max_tokens,
                },
            },
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.json().get("message", {}).get("content")
