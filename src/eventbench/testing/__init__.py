"""
Step-scheduled test bench for event-sourced applications.

Components:
    StepScheduler: Queues steps and drains them depth-first when awaited
    EventSourcingTestBench: given / when / then steps over in-memory buses,
        event stores and read model repositories
    Value, Factory, Construct: How handlers and repositories are provided
    BenchConfig: Clock, debugging and diagnostics settings

Example:
    >>> from eventbench.testing import Construct, EventSourcingTestBench
    >>>
    >>> await (
    ...     EventSourcingTestBench.create()
    ...     .given_command_handler(Construct(OrderCommandHandler, [OrderAggregate]))
    ...     .when_commands([PlaceOrder(order_id=order_id)])
    ...     .then_match_events([OrderPlaced(aggregate_id=order_id)])
    ... )

Note:
    This module is intended for test code only.
"""

from eventbench.testing.bench import EventSourcingTestBench
from eventbench.testing.config import EPOCH, BenchConfig, parse_timestamp
from eventbench.testing.context import (
    AggregateTestContext,
    AggregateTestContexts,
    ReadModelTestContext,
    ReadModelTestContexts,
)
from eventbench.testing.describer import SourceLocation, StepDescriber, StepDescription
from eventbench.testing.errors import ErrorChannel
from eventbench.testing.expectations import ErrorMatcher, assert_error_matches
from eventbench.testing.factory import DomainEventTestFactory
from eventbench.testing.output import IndentedLoggerAdapter, create_console_logger
from eventbench.testing.providers import Construct, Factory, Provider, Value
from eventbench.testing.queue import Step, StepQueue
from eventbench.testing.scheduler import StepScheduler
from eventbench.testing.sync import IdleSynchronizer

__all__ = [
    # Engine
    "StepScheduler",
    "Step",
    "StepQueue",
    "StepDescriber",
    "StepDescription",
    "SourceLocation",
    "ErrorChannel",
    "IdleSynchronizer",
    "ErrorMatcher",
    "assert_error_matches",
    # Bench
    "EventSourcingTestBench",
    "AggregateTestContext",
    "AggregateTestContexts",
    "ReadModelTestContext",
    "ReadModelTestContexts",
    "DomainEventTestFactory",
    # Providers
    "Value",
    "Factory",
    "Construct",
    "Provider",
    # Configuration and output
    "BenchConfig",
    "EPOCH",
    "parse_timestamp",
    "IndentedLoggerAdapter",
    "create_console_logger",
]
