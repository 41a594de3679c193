"""
Query bus.

Queries read state without changing it. Like commands, each query type has
exactly one handler, whose return value is the query result.
"""

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, ConfigDict

from eventbench.exceptions import QueryHandlerNotFoundError
from eventbench.messaging import MessageRouter
from eventbench.observability import Tracer, create_tracer


class Query(BaseModel):
    """
    Base class for queries.

    Example:
        >>> class GetOrder(Query):
        ...     order_id: UUID
    """

    model_config = ConfigDict(frozen=True)


class QueryBus(ABC):
    """Routes queries to the single handler registered for their type."""

    @abstractmethod
    def subscribe(self, handler: Any) -> None:
        pass

    @abstractmethod
    async def dispatch(self, query: Query) -> Any:
        pass


class SimpleQueryBus(QueryBus):
    """In-process query bus with one handler per query type."""

    def __init__(
        self,
        *,
        tracer: Tracer | None = None,
        enable_tracing: bool = True,
    ) -> None:
        self._router = MessageRouter(
            "query",
            not_found=QueryHandlerNotFoundError,
            tracer=tracer or create_tracer(__name__, enable_tracing),
        )

    def subscribe(self, handler: Any) -> None:
        self._router.subscribe(handler)

    async def dispatch(self, query: Query) -> Any:
        return await self._router.dispatch(query)

    def has_handler(self, query_type: type[Query]) -> bool:
        return self._router.has_handler(query_type)


__all__ = ["Query", "QueryBus", "SimpleQueryBus"]
