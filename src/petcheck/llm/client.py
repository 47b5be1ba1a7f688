"""
Chat completion clients.

The rest of the application depends only on `CompletionClient.complete()`.
Provider SDKs are imported on first use so they stay optional extras.

Supports:
- Anthropic Claude API
- OpenAI API
"""

import importlib
from abc import ABC, abstractmethod
from typing import Any, Optional

from petcheck.config import LLMProvider, LLMSettings, get_settings
from petcheck.core.exceptions import CompletionError
from petcheck.core.logging import get_logger
from petcheck.llm.prompts import SYSTEM_PROMPT

logger = get_logger(__name__)


class CompletionClient(ABC):
    """Abstract chat completion capability."""

    @abstractmethod
    async def complete(self, prompt: str, context: Optional[str] = None) -> str:
        """
        Generate a completion.

        Args:
            prompt: The user's message.
            context: Background the model should take into account
                (e.g. the user's pets and recent records).

        Returns:
            Completion text.

        Raises:
            CompletionError: If the provider call fails.
        """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Provider name for logs and errors."""

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Model identifier sent to the provider."""


def build_system_prompt(context: Optional[str]) -> str:
    """Append request context to the base system prompt."""
    if not context:
        return SYSTEM_PROMPT
    return f"{SYSTEM_PROMPT}\n\n## Context\n{context}"


def _import_sdk(module: str) -> Any:
    try:
        return importlib.import_module(module)
    except ImportError:
        raise ImportError(f"{module} package required. Install with: pip install petcheck[llm]")


class _SDKClient(CompletionClient):
    """Shared key resolution and error wrapping for the provider SDK clients."""

    provider: LLMProvider
    key_env_var: str

    def __init__(self, settings: Optional[LLMSettings] = None):
        self.settings = settings or get_settings().llm
        self.api_key = self.settings.get_active_api_key(self.provider)
        if not self.api_key:
            raise ValueError(
                f"{self.provider_name} API key required. Set {self.key_env_var} "
                "or PETCHECK_LLM_API_KEY environment variable."
            )

    @abstractmethod
    async def _send(self, sdk: Any, system: str, prompt: str) -> str:
        """Make the SDK call and extract the reply text."""

    @abstractmethod
    def _api_error(self, sdk: Any) -> type[Exception]:
        """Base exception class the SDK raises for failed calls."""

    async def complete(self, prompt: str, context: Optional[str] = None) -> str:
        sdk = _import_sdk(self.provider.value)
        try:
            return await self._send(sdk, build_system_prompt(context), prompt)
        except self._api_error(sdk) as e:
            logger.error(f"{self.provider_name} completion failed ({self.model_name}): {e}")
            raise CompletionError(f"{self.provider_name} request failed", {"error": str(e)}) from e


class AnthropicClient(_SDKClient):
    """Claude via the Anthropic Messages API."""

    provider = LLMProvider.ANTHROPIC
    key_env_var = "PETCHECK_LLM_ANTHROPIC_API_KEY"

    @property
    def provider_name(self) -> str:
        return "Anthropic"

    @property
    def model_name(self) -> str:
        return self.settings.anthropic_model

    def _api_error(self, sdk: Any) -> type[Exception]:
        return sdk.APIError

    async def _send(self, sdk: Any, system: str, prompt: str) -> str:
        client = sdk.AsyncAnthropic(api_key=self.api_key, timeout=self.settings.timeout_seconds)
        response = await client.messages.create(
            model=self.model_name,
            max_tokens=self.settings.max_tokens,
            temperature=self.settings.temperature,
            system=system,
            messages=[{"role": "user", "content": prompt}],
        )
        return response.content[0].text


class OpenAIClient(_SDKClient):
    """GPT models via the OpenAI Chat Completions API."""

    provider = LLMProvider.OPENAI
    key_env_var = "PETCHECK_LLM_OPENAI_API_KEY"

    @property
    def provider_name(self) -> str:
        return "OpenAI"

    @property
    def model_name(self) -> str:
        return self.settings.openai_model

    def _api_error(self, sdk: Any) -> type[Exception]:
        return sdk.OpenAIError

    async def _send(self, sdk: Any, system: str, prompt: str) -> str:
        client = sdk.AsyncOpenAI(api_key=self.api_key, timeout=self.settings.timeout_seconds)
        response = await client.chat.completions.create(
            model=self.model_name,
            max_tokens=self.settings.max_tokens,
            temperature=self.settings.temperature,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
        )
        # Content is None when the reply was filtered or only made tool calls
        return response.choices[0].message.content or ""


_CLIENTS: dict[LLMProvider, type[_SDKClient]] = {
    LLMProvider.ANTHROPIC: AnthropicClient,
    LLMProvider.OPENAI: OpenAIClient,
}


def create_client(settings: Optional[LLMSettings] = None) -> CompletionClient:
    """
    Create the completion client for the configured provider.

    Raises:
        ValueError: If the provider is not supported or no API key is set.
    """
    settings = settings or get_settings().llm
    client_class = _CLIENTS.get(settings.provider)
    if client_class is None:
        raise ValueError(f"Unsupported LLM provider: {settings.provider}")
    return client_class(settings)
