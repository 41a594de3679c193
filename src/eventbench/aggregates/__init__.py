"""Event-sourced aggregates and their repository."""

from eventbench.aggregates.base import (
    AggregateRoot,
    DeclarativeAggregate,
    UnregisteredEventHandling,
)
from eventbench.aggregates.repository import (
    AggregateFactory,
    AggregateRepository,
    TAggregate,
)

__all__ = [
    "AggregateFactory",
    "AggregateRepository",
    "AggregateRoot",
    "DeclarativeAggregate",
    "TAggregate",
    "UnregisteredEventHandling",
]
