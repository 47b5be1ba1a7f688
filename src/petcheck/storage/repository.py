"""
Per-user repositories for pets and health records.

Each repository is scoped to one user id (the identity cookie) and keeps
its entities as a JSON list under a single key of the injected store.

Usage:
    from petcheck.storage import InMemoryStore, PetRepository

    pets = PetRepository(InMemoryStore(), user_id="3f2a...")
    pet = pets.add(Pet(name="Bori", breed="Maltese"))
"""

from collections.abc import Sequence
from typing import Any, Generic, Optional, TypeVar
from uuid import UUID

from pydantic import BaseModel

from petcheck.core.exceptions import DuplicatePetError
from petcheck.core.logging import get_logger
from petcheck.core.models import HealthRecord, Pet
from petcheck.storage.store import KeyValueStore

logger = get_logger(__name__)

T = TypeVar("T", bound=BaseModel)


class UserScopedRepository(Generic[T]):
    """Stores a list of models for one user under `users/<user_id>/<collection>`."""

    model_class: type[T]
    collection: str

    def __init__(self, store: KeyValueStore, user_id: str):
        if not user_id:
            raise ValueError("user_id is required")
        self.store = store
        self.user_id = user_id

    @property
    def key(self) -> str:
        return f"users/{self.user_id}/{self.collection}"

    def _load(self) -> list[T]:
        return [self.model_class.model_validate(item) for item in self.store.get(self.key, [])]

    def _save(self, entities: Sequence[T]) -> None:
        self.store.set(self.key, [e.model_dump(mode="json") for e in entities])

    def get(self, id: UUID) -> Optional[T]:
        """Get an entity by its ID."""
        for entity in self._load():
            if entity.id == id:
                return entity
        return None

    def get_all(self) -> list[T]:
        """Get all entities in insertion order."""
        return self._load()

    def delete(self, id: UUID) -> bool:
        """Delete an entity.

        Returns:
            True if deleted, False if not found.
        """
        entities = self._load()
        remaining = [e for e in entities if e.id != id]
        if len(remaining) == len(entities):
            return False
        self._save(remaining)
        logger.debug(f"Deleted {self.model_class.__name__} {id} for user {self.user_id}")
        return True

    def count(self) -> int:
        return len(self._load())


class PetRepository(UserScopedRepository[Pet]):
    """A user's registered pets. Names are unique per user."""

    model_class = Pet
    collection = "pets"

    def find_by_name(self, name: str) -> Optional[Pet]:
        name = name.strip()
        for pet in self._load():
            if pet.name == name:
                return pet
        return None

    def add(self, pet: Pet) -> Pet:
        """Register a pet.

        Raises:
            DuplicatePetError: If the user already has a pet with this name.
        """
        pets = self._load()
        if any(p.name == pet.name for p in pets):
            raise DuplicatePetError(pet.name)
        pets.append(pet)
        self._save(pets)
        logger.info(f"Registered pet {pet.name} ({pet.id})")
        return pet

    def update(self, id: UUID, **changes: Any) -> Optional[Pet]:
        """Apply field changes to a pet.

        Returns:
            The updated pet, or None if not found.

        Raises:
            DuplicatePetError: If renaming onto another pet's name.
        """
        pets = self._load()
        for i, pet in enumerate(pets):
            if pet.id != id:
                continue
            updated = Pet.model_validate({**pet.model_dump(), **changes, "id": pet.id})
            if any(p.name == updated.name and p.id != id for p in pets):
                raise DuplicatePetError(updated.name)
            pets[i] = updated
            self._save(pets)
            return updated
        return None

    def delete(self, id: UUID) -> bool:
        """Delete a pet and its health records."""
        deleted = super().delete(id)
        if deleted:
            RecordRepository(self.store, self.user_id).delete_for_pet(id)
        return deleted


class RecordRepository(UserScopedRepository[HealthRecord]):
    """A user's health records."""

    model_class = HealthRecord
    collection = "records"

    def add(self, record: HealthRecord) -> HealthRecord:
        records = self._load()
        records.append(record)
        self._save(records)
        logger.info(f"Saved health record {record.id} (score {record.health_score})")
        return record

    def find(self, pet_id: Optional[UUID] = None, limit: int = 100) -> list[HealthRecord]:
        """Get records newest first, optionally for one pet."""
        records = self._load()
        if pet_id is not None:
            records = [r for r in records if r.pet_id == pet_id]
        records.sort(key=lambda r: r.timestamp, reverse=True)
        return records[:limit]

    def delete_for_pet(self, pet_id: UUID) -> int:
        """Delete every record of a pet. Returns the number removed."""
        records = self._load()
        remaining = [r for r in records if r.pet_id != pet_id]
        removed = len(records) - len(remaining)
        if removed:
            self._save(remaining)
        return removed
