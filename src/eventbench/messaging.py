"""
Single-handler message routing shared by the command and query buses.
"""

import logging
from typing import Any

from eventbench.exceptions import DuplicateHandlerError, HandlerNotFoundError
from eventbench.handlers.adapter import get_handler_name
from eventbench.handlers.registry import HandlerRegistry
from eventbench.observability import Tracer
from eventbench.observability.attributes import (
    ATTR_HANDLER_NAME,
    ATTR_HANDLER_SUCCESS,
    ATTR_MESSAGE_TYPE,
)

logger = logging.getLogger(__name__)


class MessageRouter:
    """
    Maps each message type to the one registry that handles it.

    Args:
        kind: "command" or "query", used in span names and log messages
        not_found: Exception type raised for an unrouted message
        tracer: Tracer used for the dispatch span
    """

    def __init__(
        self,
        kind: str,
        *,
        not_found: type[HandlerNotFoundError],
        tracer: Tracer,
    ) -> None:
        self._kind = kind
        self._not_found = not_found
        self._tracer = tracer
        self._routes: dict[type, HandlerRegistry] = {}

    def subscribe(self, handler: Any) -> None:
        registry = HandlerRegistry(handler)
        handled = registry.get_handled_types()

        for message_type in handled:
            existing = self._routes.get(message_type)
            if existing is not None:
                raise DuplicateHandlerError(
                    message_type=message_type.__name__,
                    existing_handler=get_handler_name(existing.owner),
                    new_handler=get_handler_name(handler),
                )

        for message_type in handled:
            self._routes[message_type] = registry

        logger.debug(
            "Registered %s handler %s for %s",
            self._kind,
            get_handler_name(handler),
            ", ".join(t.__name__ for t in handled) or "nothing",
            extra={
                "handler": get_handler_name(handler),
                "message_types": [t.__name__ for t in handled],
            },
        )

    def has_handler(self, message_type: type) -> bool:
        return message_type in self._routes

    async def dispatch(self, message: Any) -> Any:
        message_type = type(message)
        registry = self._routes.get(message_type)
        if registry is None:
            raise self._not_found(
                message_type.__name__,
                sorted(t.__name__ for t in self._routes),
            )

        handler_name = get_handler_name(registry.owner)
        with self._tracer.span(
            f"eventbench.{self._kind}_bus.dispatch",
            {
                ATTR_MESSAGE_TYPE: message_type.__name__,
                ATTR_HANDLER_NAME: handler_name,
            },
        ) as span:
            logger.debug(
                "Dispatching %s %s to %s",
                self._kind,
                message_type.__name__,
                handler_name,
                extra={"message_type": message_type.__name__, "handler": handler_name},
            )
            result = await registry.dispatch(message)
            if span:
                span.set_attribute(ATTR_HANDLER_SUCCESS, True)
            return result
