"""Queries and the query bus."""

from eventbench.queries.bus import Query, QueryBus, SimpleQueryBus

__all__ = ["Query", "QueryBus", "SimpleQueryBus"]
