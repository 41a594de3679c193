"""
Observability utilities for eventbench.

Provides the composition-based tracer used by buses, stores, repositories and
the test bench, plus the standard span attribute names.

Note:
    OpenTelemetry is an optional dependency. All utilities in this module
    gracefully handle the case where OpenTelemetry is not installed.
"""

from eventbench.observability.attributes import (
    ATTR_AGGREGATE_ID,
    ATTR_AGGREGATE_TYPE,
    ATTR_EVENT_COUNT,
    ATTR_EVENT_ID,
    ATTR_EVENT_TYPE,
    ATTR_EXPECTED_VERSION,
    ATTR_FROM_VERSION,
    ATTR_HANDLER_COUNT,
    ATTR_HANDLER_NAME,
    ATTR_HANDLER_SUCCESS,
    ATTR_MESSAGE_TYPE,
    ATTR_READMODEL_ID,
    ATTR_READMODEL_TYPE,
    ATTR_STEP_DEPTH,
    ATTR_STEP_DESCRIPTION,
    ATTR_VERSION,
)
from eventbench.observability.tracer import (
    MockTracer,
    NullTracer,
    OpenTelemetryTracer,
    Tracer,
    create_tracer,
)
from eventbench.observability.tracing import OTEL_AVAILABLE, get_tracer, should_trace

__all__ = [
    # Availability
    "OTEL_AVAILABLE",
    "get_tracer",
    "should_trace",
    # Tracers
    "Tracer",
    "NullTracer",
    "OpenTelemetryTracer",
    "MockTracer",
    "create_tracer",
    # Attributes
    "ATTR_AGGREGATE_ID",
    "ATTR_AGGREGATE_TYPE",
    "ATTR_EVENT_COUNT",
    "ATTR_EVENT_ID",
    "ATTR_EVENT_TYPE",
    "ATTR_EXPECTED_VERSION",
    "ATTR_FROM_VERSION",
    "ATTR_HANDLER_COUNT",
    "ATTR_HANDLER_NAME",
    "ATTR_HANDLER_SUCCESS",
    "ATTR_MESSAGE_TYPE",
    "ATTR_READMODEL_ID",
    "ATTR_READMODEL_TYPE",
    "ATTR_STEP_DEPTH",
    "ATTR_STEP_DESCRIPTION",
    "ATTR_VERSION",
]
