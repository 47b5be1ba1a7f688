"""
Pet health chat assistant.

Wraps a CompletionClient with per-user rate limiting and context built from
the user's pets and records.
"""

from typing import Optional

from petcheck.core.logging import get_logger
from petcheck.llm.client import CompletionClient
from petcheck.llm.prompts import build_context
from petcheck.storage.ratelimit import RateLimiter
from petcheck.storage.repository import PetRepository, RecordRepository

logger = get_logger(__name__)


class PetHealthAssistant:
    """Answers owner questions using their own pets and records as context."""

    def __init__(
        self,
        client: CompletionClient,
        rate_limiter: Optional[RateLimiter] = None,
    ):
        """
        Initialize the assistant.

        Args:
            client: Completion capability to delegate to.
            rate_limiter: Optional per-user limiter applied before each call.
        """
        self.client = client
        self.rate_limiter = rate_limiter

    async def chat(
        self,
        message: str,
        pets: PetRepository,
        records: RecordRepository,
    ) -> str:
        """
        Send a message and get a response.

        Raises:
            ValueError: If the message is blank.
            RateLimitExceededError: If the user exhausted their quota.
            CompletionError: If the provider call fails.
        """
        message = message.strip()
        if not message:
            raise ValueError("Message must not be empty")

        if self.rate_limiter is not None:
            self.rate_limiter.hit(pets.user_id)

        context = build_context(pets.get_all(), records.find())
        logger.debug(
            f"Chat via {self.client.provider_name}/{self.client.model_name}, "
            f"{len(context)} chars of context"
        )
        return await self.client.complete(message, context or None)
