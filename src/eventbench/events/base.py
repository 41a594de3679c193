"""
Base class for domain events.

Events are immutable records of things that have happened. The test bench
stamps them with aggregate versions and the bench clock before storing or
publishing them, so the copy helpers below never mutate the original.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any, ClassVar, Self
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator

logger = logging.getLogger(__name__)


class DomainEvent(BaseModel):
    """
    Base class for all domain events with automatic event_type derivation.

    The event_type field is set to the class name unless a subclass declares
    its own default. A declared default that differs from the class name logs
    a warning unless ``suppress_event_type_warning`` is set.

    Attributes:
        event_id: Unique identifier for this event instance
        event_type: Type name of the event (auto-derived from class name if not set)
        event_version: Schema version for this event type
        occurred_at: When the event occurred (UTC timestamp)
        aggregate_id: ID of the aggregate this event belongs to
        aggregate_type: Type of aggregate (e.g., 'Order')
        aggregate_version: Version of aggregate after this event
        correlation_id: ID linking related events across aggregates
        causation_id: ID of the event that caused this event
        metadata: Additional event metadata dictionary

    Example:
        >>> class OrderCreated(DomainEvent):
        ...     aggregate_type: str = "Order"
        ...     order_number: str
        ...
        >>> event = OrderCreated(aggregate_id=uuid4(), order_number="ORD-001")
        >>> event.event_type
        'OrderCreated'
        >>> event.payload()
        {'order_number': 'ORD-001'}
    """

    model_config = ConfigDict(frozen=True)

    suppress_event_type_warning: ClassVar[bool] = False
    resolved_event_type: ClassVar[str] = "DomainEvent"

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier",
    )
    event_type: str = Field(
        default="",
        description="Type of event (auto-derived from class name if not set)",
    )
    event_version: int = Field(
        default=1,
        ge=1,
        description="Event schema version",
    )
    occurred_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="When event occurred (UTC)",
    )

    aggregate_id: UUID = Field(
        ...,
        description="ID of the aggregate this event belongs to",
    )
    aggregate_type: str = Field(
        default="Unknown",
        description="Type of aggregate (e.g., 'Order')",
    )
    aggregate_version: int = Field(
        default=1,
        ge=1,
        description="Version of aggregate after this event",
    )

    correlation_id: UUID = Field(
        default_factory=uuid4,
        description="ID linking related events across aggregates",
    )
    causation_id: UUID | None = Field(
        default=None,
        description="ID of the event that caused this event",
    )

    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event metadata",
    )

    @classmethod
    def __pydantic_init_subclass__(cls, **kwargs: Any) -> None:
        super().__pydantic_init_subclass__(**kwargs)

        declared = cls.model_fields["event_type"].default
        if isinstance(declared, str) and declared:
            cls.resolved_event_type = declared
            if declared != cls.__name__ and not cls.suppress_event_type_warning:
                logger.warning(
                    "Event class %s has event_type='%s' which differs from class name. "
                    "Set suppress_event_type_warning=True to silence this warning.",
                    cls.__name__,
                    declared,
                )
        else:
            cls.resolved_event_type = cls.__name__

    @model_validator(mode="before")
    @classmethod
    def _ensure_event_type(cls, data: Any) -> Any:
        """Fill event_type from the class when it is missing or empty."""
        if isinstance(data, dict) and not data.get("event_type"):
            data = dict(data)
            data["event_type"] = cls.resolved_event_type
        return data

    @classmethod
    def base_field_names(cls) -> frozenset[str]:
        """Names of the envelope fields shared by every event."""
        return frozenset(DomainEvent.model_fields)

    def payload(self) -> dict[str, Any]:
        """
        Return the fields declared by the concrete event class.

        Envelope fields (ids, versions, timestamps, metadata) are left out,
        which makes payloads comparable between an expected event built in a
        test and the stamped event that was actually published.
        """
        envelope = self.base_field_names()
        return {
            name: value
            for name, value in self.model_dump().items()
            if name not in envelope
        }

    def __str__(self) -> str:
        return (
            f"{self.event_type}(event_id={self.event_id}, "
            f"aggregate_id={self.aggregate_id}, "
            f"version={self.aggregate_version})"
        )

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"event_id={self.event_id!r}, "
            f"event_type={self.event_type!r}, "
            f"aggregate_id={self.aggregate_id!r}, "
            f"aggregate_type={self.aggregate_type!r}, "
            f"aggregate_version={self.aggregate_version}, "
            f"occurred_at={self.occurred_at!r})"
        )

    def with_causation(self, causing_event: DomainEvent) -> Self:
        """Copy of this event caused by ``causing_event`` (same correlation)."""
        return self.model_copy(
            update={
                "causation_id": causing_event.event_id,
                "correlation_id": causing_event.correlation_id,
            }
        )

    def with_metadata(self, **kwargs: Any) -> Self:
        """Copy of this event with extra metadata merged in."""
        return self.model_copy(update={"metadata": {**self.metadata, **kwargs}})

    def with_aggregate_version(self, version: int) -> Self:
        """
        Create a copy of this event with a specific aggregate version.

        Args:
            version: The aggregate version after this event

        Returns:
            New event instance with updated aggregate_version
        """
        return self.model_copy(update={"aggregate_version": version})

    def with_occurred_at(self, occurred_at: datetime) -> Self:
        """
        Create a copy of this event with a specific occurrence time.

        Args:
            occurred_at: Timezone-aware timestamp to record on the event

        Returns:
            New event instance with updated occurred_at
        """
        return self.model_copy(update={"occurred_at": occurred_at})

    def to_dict(self) -> dict[str, Any]:
        """Convert event to a JSON-compatible dictionary."""
        return self.model_dump(mode="json")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """
        Create event from dictionary.

        Raises:
            ValidationError: If data doesn't match event schema
        """
        return cls.model_validate(data)
