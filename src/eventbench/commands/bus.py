"""
Command bus.

Commands are requests to change state. Each command type is routed to
exactly one handler, and the handler's return value is handed back to the
dispatcher.
"""

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, ConfigDict

from eventbench.exceptions import CommandHandlerNotFoundError
from eventbench.messaging import MessageRouter
from eventbench.observability import Tracer, create_tracer


class Command(BaseModel):
    """
    Base class for commands.

    Example:
        >>> class PlaceOrder(Command):
        ...     order_id: UUID
        ...     customer_id: UUID
    """

    model_config = ConfigDict(frozen=True)


class CommandBus(ABC):
    """Routes commands to the single handler registered for their type."""

    @abstractmethod
    def subscribe(self, handler: Any) -> None:
        """Register every @handles method of ``handler``."""
        pass

    @abstractmethod
    async def dispatch(self, command: Command) -> Any:
        """Run the handler for ``command`` and return its result."""
        pass


class SimpleCommandBus(CommandBus):
    """
    In-process command bus.

    Handlers are objects with @handles methods; subscribing a second handler
    for a command type raises DuplicateHandlerError, dispatching an unrouted
    command raises CommandHandlerNotFoundError.

    Example:
        >>> bus = SimpleCommandBus()
        >>> bus.subscribe(PlaceOrderHandler(repository))
        >>> order_id = await bus.dispatch(PlaceOrder(...))
    """

    def __init__(
        self,
        *,
        tracer: Tracer | None = None,
        enable_tracing: bool = True,
    ) -> None:
        self._router = MessageRouter(
            "command",
            not_found=CommandHandlerNotFoundError,
            tracer=tracer or create_tracer(__name__, enable_tracing),
        )

    def subscribe(self, handler: Any) -> None:
        self._router.subscribe(handler)

    async def dispatch(self, command: Command) -> Any:
        return await self._router.dispatch(command)

    def has_handler(self, command_type: type[Command]) -> bool:
        return self._router.has_handler(command_type)


__all__ = ["Command", "CommandBus", "SimpleCommandBus"]
