"""Library exceptions for the eventbench package."""

from typing import Any
from uuid import UUID


class EventBenchError(Exception):
    """Base exception for eventbench library."""

    pass


class OptimisticLockError(EventBenchError):
    """Raised when there's a version conflict during event append."""

    def __init__(self, aggregate_id: UUID, expected_version: int, actual_version: int) -> None:
        self.aggregate_id = aggregate_id
        self.expected_version = expected_version
        self.actual_version = actual_version
        super().__init__(
            f"Optimistic lock error for aggregate {aggregate_id}: "
            f"expected version {expected_version}, but current version is {actual_version}"
        )


class AggregateNotFoundError(EventBenchError):
    """Raised when an aggregate cannot be found."""

    def __init__(self, aggregate_id: UUID, aggregate_type: str | None = None) -> None:
        self.aggregate_id = aggregate_id
        self.aggregate_type = aggregate_type
        type_info = f" of type {aggregate_type}" if aggregate_type else ""
        super().__init__(f"Aggregate{type_info} not found: {aggregate_id}")


class EventVersionError(EventBenchError):
    """
    Raised when event version validation fails during aggregate event application.

    Attributes:
        expected_version: The version that was expected (current version + 1)
        actual_version: The version found in the event
        event_id: ID of the event with invalid version
        aggregate_id: ID of the aggregate being updated
    """

    def __init__(
        self,
        expected_version: int,
        actual_version: int,
        event_id: UUID,
        aggregate_id: UUID,
    ) -> None:
        self.expected_version = expected_version
        self.actual_version = actual_version
        self.event_id = event_id
        self.aggregate_id = aggregate_id
        super().__init__(
            f"Event version mismatch for aggregate {aggregate_id}: "
            f"expected version {expected_version}, got {actual_version} "
            f"(event_id: {event_id})"
        )


class UnhandledEventError(EventBenchError):
    """
    Raised when an event has no registered handler and strict mode is enabled.

    This error occurs in DeclarativeAggregate when an event type is applied
    that has no @handles method and ``unregistered_event_handling`` is "error".

    Attributes:
        event_type: The name of the event type that wasn't handled
        event_id: ID of the unhandled event
        handler_class: Name of the aggregate class
        available_handlers: List of event type names that have handlers
    """

    def __init__(
        self,
        event_type: str,
        event_id: UUID,
        handler_class: str,
        available_handlers: list[str],
    ) -> None:
        self.event_type = event_type
        self.event_id = event_id
        self.handler_class = handler_class
        self.available_handlers = available_handlers
        handlers_str = ", ".join(available_handlers) if available_handlers else "none"
        super().__init__(
            f"No handler registered for event type '{event_type}' "
            f"in {handler_class}. "
            f"Available handlers: {handlers_str}. "
            f"Add @handles({event_type}) decorator or set "
            f"unregistered_event_handling='ignore' or 'warn'."
        )


class EventBusError(EventBenchError):
    """Raised when there's an error in the event bus."""

    pass


class HandlerNotFoundError(EventBenchError):
    """Raised when a bus has no handler subscribed for a message type."""

    kind = "message"

    def __init__(self, message_type: str, available: list[str] | None = None) -> None:
        self.message_type = message_type
        self.available = available or []
        known = ", ".join(self.available) if self.available else "none"
        super().__init__(
            f"No {self.kind} handler subscribed for {message_type}. Subscribed: {known}"
        )


class CommandHandlerNotFoundError(HandlerNotFoundError):
    """Raised when a command is dispatched that no handler accepts."""

    kind = "command"


class QueryHandlerNotFoundError(HandlerNotFoundError):
    """Raised when a query is dispatched that no handler accepts."""

    kind = "query"


class DuplicateHandlerError(EventBenchError):
    """Raised when a second handler is subscribed for the same command or query type."""

    def __init__(self, message_type: str, existing_handler: str, new_handler: str) -> None:
        self.message_type = message_type
        self.existing_handler = existing_handler
        self.new_handler = new_handler
        super().__init__(
            f"{new_handler} cannot handle {message_type}: "
            f"already handled by {existing_handler}"
        )


class ReadModelNotFoundError(EventBenchError):
    """Raised when a read model lookup by id finds nothing."""

    def __init__(self, model_id: Any, model_type: str | None = None) -> None:
        self.model_id = model_id
        self.model_type = model_type
        type_info = f" of type {model_type}" if model_type else ""
        super().__init__(f"Read model{type_info} not found: {model_id}")


class InvalidTimestampError(EventBenchError, ValueError):
    """Raised when a value cannot be parsed into a timezone-aware datetime."""

    def __init__(self, value: Any) -> None:
        self.value = value
        super().__init__(f"Invalid date format: {value!r}")


class DrainDepthExceededError(EventBenchError):
    """
    Raised when steps keep registering nested steps past the configured depth.

    Attributes:
        max_depth: The configured maximum nesting depth
        description: Description of the step being drained when the limit was hit
    """

    def __init__(self, max_depth: int, description: str) -> None:
        self.max_depth = max_depth
        self.description = description
        super().__init__(
            f"Step nesting exceeded {max_depth} levels; "
            f"last step registered from: {description.strip()}"
        )


class UnknownRepositoryReferenceError(EventBenchError):
    """Raised when a dependency reference does not name a known repository."""

    def __init__(self, reference: Any) -> None:
        self.reference = reference
        name = getattr(reference, "__name__", reference)
        super().__init__(
            f"{name!r} is neither an aggregate class nor a registered read model"
        )
