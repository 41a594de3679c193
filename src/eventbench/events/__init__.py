"""Event primitives for the eventbench library."""

from eventbench.events.base import DomainEvent

__all__ = [
    "DomainEvent",
]
