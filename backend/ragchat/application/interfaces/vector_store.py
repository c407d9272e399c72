"""Abstract interface (port) for the vector collection."""

from abc import ABC, abstractmethod

from ragchat.domain.entities import CollectionSpec, StoredRecord


class VectorStore(ABC):
    """Port for record persistence and nearest-neighbour search."""

    @abstractmethod
    async def create_collection(self, spec: CollectionSpec) -> None:
        """Create the collection if missing.

        Raises:
            CollectionConflictError: If it exists with different vector settings.
        """
        ...

    @abstractmethod
    async def insert(self, record: StoredRecord) -> str:
        """Insert a new record. Returns the id assigned by the store."""
        ...

    @abstractmethod
    async def upsert(self, record: StoredRecord) -> str:
        """Insert a record, replacing any existing record with the same id."""
        ...

    @abstractmethod
    async def find_similar(
        self, vector: list[float], *, limit: int = 10
    ) -> list[StoredRecord]:
        """Find the records nearest to ``vector``.

        Returns:
            Up to ``limit`` records ordered most similar first.

        Raises:
            VectorStoreError: If the query fails.
        """
        ...

    @abstractmethod
    async def count(self) -> int:
        """Return the number of records in the collection."""
        ...
