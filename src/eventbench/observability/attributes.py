"""
Standard span attributes for eventbench.

This module defines attribute constants used across all eventbench components
for consistent span naming. These follow OpenTelemetry semantic conventions
where applicable.

Example:
    >>> from eventbench.observability.attributes import (
    ...     ATTR_AGGREGATE_ID,
    ...     ATTR_EVENT_TYPE,
    ... )
    >>>
    >>> with tracer.span(
    ...     "eventbench.event_store.append_events",
    ...     {
    ...         ATTR_AGGREGATE_ID: str(aggregate_id),
    ...         ATTR_EVENT_TYPE: event.__class__.__name__,
    ...     },
    ... ):
    ...     pass
"""

# =============================================================================
# Aggregate Attributes
# =============================================================================

ATTR_AGGREGATE_ID = "eventbench.aggregate.id"
"""Unique identifier for the aggregate instance (UUID string)."""

ATTR_AGGREGATE_TYPE = "eventbench.aggregate.type"
"""Type name of the aggregate (e.g., 'Order', 'User')."""

# =============================================================================
# Event Attributes
# =============================================================================

ATTR_EVENT_ID = "eventbench.event.id"
"""Unique identifier for the event (UUID string)."""

ATTR_EVENT_TYPE = "eventbench.event.type"
"""Type name of the event (e.g., 'OrderCreated', 'UserRegistered')."""

ATTR_EVENT_COUNT = "eventbench.event.count"
"""Number of events in an operation (integer)."""

# =============================================================================
# Version Attributes
# =============================================================================

ATTR_VERSION = "eventbench.version"
"""Current version of an aggregate or stream (integer)."""

ATTR_EXPECTED_VERSION = "eventbench.expected_version"
"""Expected version for optimistic concurrency (integer)."""

ATTR_FROM_VERSION = "eventbench.from_version"
"""Starting version for event retrieval (integer)."""

# =============================================================================
# Handler Attributes
# =============================================================================

ATTR_HANDLER_NAME = "eventbench.handler.name"
"""Name of the handler class or function."""

ATTR_HANDLER_COUNT = "eventbench.handler.count"
"""Number of handlers invoked for an event (integer)."""

ATTR_HANDLER_SUCCESS = "eventbench.handler.success"
"""Whether the handler completed without raising (boolean)."""

# =============================================================================
# Message Attributes (commands and queries)
# =============================================================================

ATTR_MESSAGE_TYPE = "eventbench.message.type"
"""Type name of a dispatched command or query."""

# =============================================================================
# Read Model Attributes
# =============================================================================

ATTR_READMODEL_TYPE = "eventbench.readmodel.type"
"""Type name of the read model (e.g., 'OrderSummary')."""

ATTR_READMODEL_ID = "eventbench.readmodel.id"
"""Unique identifier of the read model instance (UUID string)."""

# =============================================================================
# Test Bench Attributes
# =============================================================================

ATTR_STEP_DESCRIPTION = "eventbench.step.description"
"""Human-readable description of a scheduled test step."""

ATTR_STEP_DEPTH = "eventbench.step.depth"
"""Nesting depth of a scheduled test step (integer)."""


__all__ = [
    "ATTR_AGGREGATE_ID",
    "ATTR_AGGREGATE_TYPE",
    "ATTR_EVENT_ID",
    "ATTR_EVENT_TYPE",
    "ATTR_EVENT_COUNT",
    "ATTR_VERSION",
    "ATTR_EXPECTED_VERSION",
    "ATTR_FROM_VERSION",
    "ATTR_HANDLER_NAME",
    "ATTR_HANDLER_COUNT",
    "ATTR_HANDLER_SUCCESS",
    "ATTR_MESSAGE_TYPE",
    "ATTR_READMODEL_TYPE",
    "ATTR_READMODEL_ID",
    "ATTR_STEP_DESCRIPTION",
    "ATTR_STEP_DEPTH",
]
