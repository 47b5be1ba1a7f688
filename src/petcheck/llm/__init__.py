"""
Chat assistant integration.

Supports multiple providers:
- Anthropic Claude
- OpenAI GPT
"""

from petcheck.llm.assistant import PetHealthAssistant
from petcheck.llm.client import (
    AnthropicClient,
    CompletionClient,
    OpenAIClient,
    create_client,
)
from petcheck.llm.prompts import SYSTEM_PROMPT, build_context

__all__ = [
    "PetHealthAssistant",
    "AnthropicClient",
    "CompletionClient",
    "OpenAIClient",
    "create_client",
    "SYSTEM_PROMPT",
    "build_context",
]
