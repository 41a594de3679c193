"""
Shared pytest fixtures for the eventbench tests.

- Sample data fixtures (order_id, user_id)
- Infrastructure fixtures (event_store, event_bus, mock_tracer)
- Test bench fixtures (bench, step_log)
"""

from __future__ import annotations

import logging
from uuid import UUID, uuid4

import pytest

from eventbench.bus.memory import InMemoryEventBus
from eventbench.observability import MockTracer
from eventbench.stores.in_memory import InMemoryEventStore
from eventbench.testing import BenchConfig, EventSourcingTestBench
from eventbench.testing.config import DEFAULT_STEP_LOGGER

# =============================================================================
# Sample Data Fixtures
# =============================================================================


@pytest.fixture
def order_id() -> UUID:
    """Provide a random order aggregate ID."""
    return uuid4()


@pytest.fixture
def user_id() -> UUID:
    """Provide a random user aggregate ID."""
    return uuid4()


# =============================================================================
# Infrastructure Fixtures
# =============================================================================


@pytest.fixture
def event_store() -> InMemoryEventStore:
    """Provide a fresh in-memory event store."""
    return InMemoryEventStore(enable_tracing=False)


@pytest.fixture
def event_bus() -> InMemoryEventBus:
    """Provide a fresh in-memory event bus."""
    return InMemoryEventBus(enable_tracing=False)


@pytest.fixture
def mock_tracer() -> MockTracer:
    return MockTracer()


# =============================================================================
# Test Bench Fixtures
# =============================================================================


@pytest.fixture
def bench() -> EventSourcingTestBench:
    """Provide a test bench with tracing disabled."""
    return EventSourcingTestBench(config=BenchConfig(enable_tracing=False))


@pytest.fixture
def step_log(caplog: pytest.LogCaptureFixture) -> pytest.LogCaptureFixture:
    """Capture step descriptions written to the step logger."""
    caplog.set_level(logging.INFO, logger=DEFAULT_STEP_LOGGER)
    return caplog
