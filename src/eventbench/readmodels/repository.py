"""
Read model repository protocol.
"""

from typing import Protocol, TypeVar, runtime_checkable
from uuid import UUID

from eventbench.readmodels.base import ReadModel

TModel = TypeVar("TModel", bound=ReadModel)


@runtime_checkable
class ReadModelRepository(Protocol[TModel]):
    """
    Protocol for read model storage.

    Example:
        >>> async def show(repo: ReadModelRepository[OrderSummary], order_id: UUID):
        ...     summary = await repo.get_or_raise(order_id)
    """

    async def get(self, id: UUID) -> TModel | None:
        """Get a read model by ID, or None if it doesn't exist."""
        ...

    async def get_or_raise(self, id: UUID) -> TModel:
        """
        Get a read model by ID.

        Raises:
            ReadModelNotFoundError: If no read model has this ID
        """
        ...

    async def save(self, model: TModel) -> None:
        """Insert or replace a read model."""
        ...

    async def delete(self, id: UUID) -> bool:
        """Delete a read model, returning True if it existed."""
        ...

    async def exists(self, id: UUID) -> bool: ...

    async def find_all(self) -> list[TModel]:
        """All stored read models in insertion order."""
        ...

    async def count(self) -> int: ...

    async def clear(self) -> int:
        """Delete every read model, returning how many were removed."""
        ...


__all__ = ["ReadModelRepository", "TModel"]
