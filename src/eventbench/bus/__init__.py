"""
Event bus implementations.

- InMemoryEventBus: in-process dispatch with handler error isolation
- AsynchronousEventBus: background dispatch reporting handler errors to a callback
- RecordingEventBus: decorator keeping every published event
"""

from eventbench.bus.asynchronous import AsynchronousEventBus, ErrorCallback
from eventbench.bus.interface import EventBus, EventHandlerFunc
from eventbench.bus.memory import InMemoryEventBus
from eventbench.bus.recording import RecordingEventBus

__all__ = [
    "AsynchronousEventBus",
    "ErrorCallback",
    "EventBus",
    "EventHandlerFunc",
    "InMemoryEventBus",
    "RecordingEventBus",
]
