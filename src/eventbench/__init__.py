"""
eventbench - fluent, step-scheduled test bench for event-sourced Python code.

This library provides:
- Domain Event base class with Pydantic models
- Aggregates, an in-memory event store and an aggregate repository
- Command, query and event buses (including an asynchronous, recording event bus)
- Read models with an in-memory repository
- EventSourcingTestBench: given / when / then steps executed depth-first
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("eventbench")
except PackageNotFoundError:
    # Package not installed (running from source without install)
    __version__ = "0.0.0.dev0"

from eventbench.aggregates.base import AggregateRoot, DeclarativeAggregate
from eventbench.aggregates.repository import AggregateRepository
from eventbench.bus.asynchronous import AsynchronousEventBus
from eventbench.bus.interface import EventBus, EventHandlerFunc
from eventbench.bus.memory import InMemoryEventBus
from eventbench.bus.recording import RecordingEventBus
from eventbench.commands.bus import Command, CommandBus, SimpleCommandBus
from eventbench.events.base import DomainEvent
from eventbench.exceptions import (
    AggregateNotFoundError,
    CommandHandlerNotFoundError,
    DrainDepthExceededError,
    DuplicateHandlerError,
    EventBenchError,
    EventBusError,
    EventVersionError,
    HandlerNotFoundError,
    InvalidTimestampError,
    OptimisticLockError,
    QueryHandlerNotFoundError,
    ReadModelNotFoundError,
    UnhandledEventError,
    UnknownRepositoryReferenceError,
)
from eventbench.handlers import DeclarativeListener, handles
from eventbench.protocols import (
    EventHandler,
    EventSubscriber,
    FlexibleEventHandler,
    FlexibleEventSubscriber,
    SyncEventHandler,
)
from eventbench.queries.bus import Query, QueryBus, SimpleQueryBus
from eventbench.readmodels import InMemoryReadModelRepository, ReadModel, ReadModelRepository
from eventbench.stores.in_memory import InMemoryEventStore
from eventbench.stores.interface import (
    AppendResult,
    EventPublisher,
    EventStore,
    EventStream,
    ExpectedVersion,
)
from eventbench.types import AggregateId, CausationId, CorrelationId, EventId, TState, Version

__all__ = [
    "__version__",
    # Types
    "TState",
    "AggregateId",
    "EventId",
    "CorrelationId",
    "CausationId",
    "Version",
    # Events
    "DomainEvent",
    # Exceptions
    "EventBenchError",
    "OptimisticLockError",
    "AggregateNotFoundError",
    "EventVersionError",
    "UnhandledEventError",
    "EventBusError",
    "HandlerNotFoundError",
    "CommandHandlerNotFoundError",
    "QueryHandlerNotFoundError",
    "DuplicateHandlerError",
    "ReadModelNotFoundError",
    "InvalidTimestampError",
    "DrainDepthExceededError",
    "UnknownRepositoryReferenceError",
    # Handlers
    "handles",
    "DeclarativeListener",
    "EventHandler",
    "SyncEventHandler",
    "FlexibleEventHandler",
    "EventSubscriber",
    "FlexibleEventSubscriber",
    # Aggregates
    "AggregateRoot",
    "DeclarativeAggregate",
    "AggregateRepository",
    # Event store
    "EventStore",
    "EventStream",
    "AppendResult",
    "ExpectedVersion",
    "EventPublisher",
    "InMemoryEventStore",
    # Buses
    "EventBus",
    "EventHandlerFunc",
    "InMemoryEventBus",
    "AsynchronousEventBus",
    "RecordingEventBus",
    "Command",
    "CommandBus",
    "SimpleCommandBus",
    "Query",
    "QueryBus",
    "SimpleQueryBus",
    # Read models
    "ReadModel",
    "ReadModelRepository",
    "InMemoryReadModelRepository",
]
