"""
In-memory implementation of the read model repository.

The test bench creates one of these for every read model it is asked about,
unless a test registers a different repository.
"""

import asyncio
from typing import Generic
from uuid import UUID

from eventbench.exceptions import ReadModelNotFoundError
from eventbench.observability import Tracer, create_tracer
from eventbench.observability.attributes import (
    ATTR_READMODEL_ID,
    ATTR_READMODEL_TYPE,
)
from eventbench.readmodels.repository import TModel


class InMemoryReadModelRepository(Generic[TModel]):
    """
    In-memory ReadModelRepository keyed by read model id.

    Stored models are copies, so mutating a model after saving it does not
    change what the repository holds until it is saved again.

    Example:
        >>> repo = InMemoryReadModelRepository(OrderSummary)
        >>> await repo.save(OrderSummary(id=order_id, status="pending"))
        >>> summary = await repo.get(order_id)
    """

    def __init__(
        self,
        model_class: type[TModel],
        tracer: Tracer | None = None,
        enable_tracing: bool = True,
    ) -> None:
        self._tracer = tracer or create_tracer(__name__, enable_tracing)
        self._enable_tracing = self._tracer.enabled
        self._model_class = model_class
        self._models: dict[UUID, TModel] = {}
        self._lock = asyncio.Lock()

    @property
    def model_class(self) -> type[TModel]:
        return self._model_class

    def bind_model_class(self, model_class: type[TModel]) -> None:
        """Switch to a more specific model class, revalidating stored models."""
        self._models = {
            id: (
                model
                if isinstance(model, model_class)
                else model_class.model_validate(model.model_dump())
            )
            for id, model in self._models.items()
        }
        self._model_class = model_class

    async def get(self, id: UUID) -> TModel | None:
        with self._tracer.span(
            "eventbench.readmodel.get",
            {
                ATTR_READMODEL_TYPE: self._model_class.__name__,
                ATTR_READMODEL_ID: str(id),
            },
        ):
            async with self._lock:
                model = self._models.get(id)
                return model.model_copy(deep=True) if model is not None else None

    async def get_or_raise(self, id: UUID) -> TModel:
        model = await self.get(id)
        if model is None:
            raise ReadModelNotFoundError(id, self._model_class.__name__)
        return model

    async def save(self, model: TModel) -> None:
        """Save or replace a read model (upsert semantics)."""
        with self._tracer.span(
            "eventbench.readmodel.save",
            {
                ATTR_READMODEL_TYPE: self._model_class.__name__,
                ATTR_READMODEL_ID: str(model.id),
            },
        ):
            async with self._lock:
                self._models[model.id] = model.model_copy(deep=True)

    async def delete(self, id: UUID) -> bool:
        with self._tracer.span(
            "eventbench.readmodel.delete",
            {
                ATTR_READMODEL_TYPE: self._model_class.__name__,
                ATTR_READMODEL_ID: str(id),
            },
        ):
            async with self._lock:
                return self._models.pop(id, None) is not None

    async def exists(self, id: UUID) -> bool:
        async with self._lock:
            return id in self._models

    async def find_all(self) -> list[TModel]:
        async with self._lock:
            return [model.model_copy(deep=True) for model in self._models.values()]

    async def count(self) -> int:
        async with self._lock:
            return len(self._models)

    async def clear(self) -> int:
        """Remove all read models (useful for test teardown)."""
        async with self._lock:
            count = len(self._models)
            self._models.clear()
            return count

    def __repr__(self) -> str:
        return f"InMemoryReadModelRepository({self._model_class.__name__}, count={len(self._models)})"


__all__ = ["InMemoryReadModelRepository"]
