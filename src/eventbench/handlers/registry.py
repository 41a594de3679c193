"""
Handler registry for discovering and routing @handles methods.

The registry is the routing core shared by the command bus, the query bus
and DeclarativeListener: it scans an owner object for methods decorated with
@handles, validates them, and dispatches a message to the method registered
for its exact type, returning whatever the method returns.

Example:
    >>> class OrderQueries:
    ...     @handles(GetOrder)
    ...     async def get(self, query: GetOrder) -> OrderView:
    ...         ...
    >>>
    >>> registry = HandlerRegistry(OrderQueries())
    >>> registry.get_handled_types()
    [<class 'GetOrder'>]
    >>> view = await registry.dispatch(GetOrder(order_id=order_id))
"""

import inspect
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Literal

from eventbench.exceptions import UnhandledEventError
from eventbench.handlers.decorators import get_handled_message_type

logger = logging.getLogger(__name__)

UnregisteredMessageHandling = Literal["ignore", "warn", "error"]


class HandlerSignatureError(ValueError):
    """
    Raised when a @handles method has an invalid signature.

    Attributes:
        handler_name: Name of the handler method
        owner_name: Name of the class containing the handler
        message_type: The message type from @handles decorator
        param_count: Actual number of parameters (excluding self)
    """

    def __init__(
        self,
        handler_name: str,
        owner_name: str,
        message_type: type,
        param_count: int,
    ) -> None:
        self.handler_name = handler_name
        self.owner_name = owner_name
        self.message_type = message_type
        self.param_count = param_count

        type_name = message_type.__name__
        super().__init__(
            f"Handler '{handler_name}' in {owner_name} has invalid signature "
            f"for @handles({type_name}).\n\n"
            f"Expected:\n"
            f"  [async] def {handler_name}(self, message: {type_name})\n\n"
            f"Got: {param_count} parameter(s) (excluding self)"
        )


@dataclass
class HandlerInfo:
    """
    Metadata about a registered handler method.

    Attributes:
        message_type: The message class this handler processes
        handler_name: Name of the handler method
        handler: The bound handler method
        is_async: Whether the handler is a coroutine function
    """

    message_type: type
    handler_name: str
    handler: Callable[..., Any]
    is_async: bool


class HandlerRegistry:
    """
    Registry for discovering, validating, and routing @handles methods.

    Args:
        owner: The object containing @handles decorated methods
        unregistered_message_handling: How to treat messages with no handler:
            - "ignore": Silently ignore (default)
            - "warn": Log a warning
            - "error": Raise UnhandledEventError
    """

    def __init__(
        self,
        owner: Any,
        *,
        unregistered_message_handling: UnregisteredMessageHandling = "ignore",
    ) -> None:
        self._owner = owner
        self._owner_name = owner.__class__.__name__
        self._unregistered_message_handling = unregistered_message_handling
        self._handlers: dict[type, HandlerInfo] = {}

        self._discover_handlers()

    def _discover_handlers(self) -> None:
        for attr_name in dir(self._owner):
            if attr_name.startswith("__"):
                continue

            attr = getattr(self._owner, attr_name, None)
            if attr is None:
                continue

            message_type = get_handled_message_type(attr)
            if message_type is None or not isinstance(message_type, type):
                continue

            try:
                param_count = len(inspect.signature(attr).parameters)
            except (ValueError, TypeError):
                param_count = 1

            if param_count != 1:
                raise HandlerSignatureError(
                    handler_name=attr_name,
                    owner_name=self._owner_name,
                    message_type=message_type,
                    param_count=param_count,
                )

            self._handlers[message_type] = HandlerInfo(
                message_type=message_type,
                handler_name=attr_name,
                handler=attr,
                is_async=inspect.iscoroutinefunction(attr),
            )

            logger.debug(
                "Registered handler %s for %s",
                attr_name,
                message_type.__name__,
                extra={
                    "owner": self._owner_name,
                    "handler": attr_name,
                    "message_type": message_type.__name__,
                },
            )

    def get_handler(self, message_type: type) -> HandlerInfo | None:
        """Get the handler info for a specific message type."""
        return self._handlers.get(message_type)

    def has_handler(self, message_type: type) -> bool:
        """Check if a handler exists for the given message type."""
        return message_type in self._handlers

    def get_handled_types(self) -> list[type]:
        """Get every message type this registry routes, in discovery order."""
        return list(self._handlers)

    async def dispatch(self, message: Any) -> Any:
        """
        Dispatch a message to its registered handler.

        Args:
            message: The event, command or query to dispatch

        Returns:
            The handler's return value, or None if no handler is registered

        Raises:
            UnhandledEventError: If unregistered_message_handling="error" and no handler
        """
        handler_info = self._handlers.get(type(message))

        if handler_info is None:
            self._handle_unregistered_message(message)
            return None

        if handler_info.is_async:
            return await handler_info.handler(message)
        return handler_info.handler(message)

    def _handle_unregistered_message(self, message: Any) -> None:
        message_type = type(message)
        available_handlers = [mt.__name__ for mt in self._handlers]

        if self._unregistered_message_handling == "error":
            raise UnhandledEventError(
                event_type=message_type.__name__,
                event_id=getattr(message, "event_id", None),  # type: ignore[arg-type]
                handler_class=self._owner_name,
                available_handlers=available_handlers,
            )
        elif self._unregistered_message_handling == "warn":
            logger.warning(
                "No handler registered for %s in %s. Available handlers: %s.",
                message_type.__name__,
                self._owner_name,
                ", ".join(available_handlers) if available_handlers else "none",
                extra={
                    "owner": self._owner_name,
                    "message_type": message_type.__name__,
                    "available_handlers": available_handlers,
                },
            )

    @property
    def owner(self) -> Any:
        """Get the owner object."""
        return self._owner

    @property
    def handler_count(self) -> int:
        """Get the number of registered handlers."""
        return len(self._handlers)

    def __repr__(self) -> str:
        return f"HandlerRegistry({self._owner_name}, handlers={self.handler_count})"


__all__ = [
    "HandlerRegistry",
    "HandlerInfo",
    "HandlerSignatureError",
    "UnregisteredMessageHandling",
]
