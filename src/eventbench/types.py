"""Common type definitions for the eventbench library."""

from typing import TypeVar
from uuid import UUID

from pydantic import BaseModel

# Type variable for aggregate state
TState = TypeVar("TState", bound=BaseModel)

# Type aliases for clarity and documentation
AggregateId = UUID
EventId = UUID
CorrelationId = UUID
CausationId = UUID | None

# Version type for optimistic locking
Version = int
