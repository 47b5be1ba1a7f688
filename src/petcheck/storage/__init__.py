"""
Storage for pets, health records and rate-limit counters.
"""

from petcheck.config import Settings, StorageBackend, get_settings
from petcheck.storage.ratelimit import RateLimiter
from petcheck.storage.repository import PetRepository, RecordRepository, UserScopedRepository
from petcheck.storage.store import InMemoryStore, JSONFileStore, KeyValueStore


def create_store(settings: Settings | None = None) -> KeyValueStore:
    """Create the key-value store selected by settings."""
    settings = settings or get_settings()
    if settings.storage.backend == StorageBackend.JSON:
        return JSONFileStore(settings.resolve_data_file())
    return InMemoryStore()


__all__ = [
    "create_store",
    "InMemoryStore",
    "JSONFileStore",
    "KeyValueStore",
    "PetRepository",
    "RateLimiter",
    "RecordRepository",
    "UserScopedRepository",
]
