"""
Handler infrastructure shared by aggregates, listeners and buses.

- handles: Decorator marking a method as the handler for one message type
- HandlerAdapter: Normalizes sync/async event listeners to one async interface
- HandlerRegistry: Discovers @handles methods and routes messages to them
- DeclarativeListener: Event bus subscriber built on HandlerRegistry
"""

from eventbench.handlers.adapter import HandlerAdapter, get_handler_name
from eventbench.handlers.decorators import (
    get_handled_message_type,
    handles,
    is_message_handler,
)
from eventbench.handlers.listener import DeclarativeListener
from eventbench.handlers.registry import (
    HandlerInfo,
    HandlerRegistry,
    HandlerSignatureError,
)

__all__ = [
    "DeclarativeListener",
    "HandlerAdapter",
    "HandlerInfo",
    "HandlerRegistry",
    "HandlerSignatureError",
    "get_handler_name",
    "handles",
    "get_handled_message_type",
    "is_message_handler",
]
