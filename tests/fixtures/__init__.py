"""
Shared test fixtures for the eventbench library.

Usage:
    from tests.fixtures import (
        OrderAggregate,
        OrderPlaced,
        OrderSummary,
        OrderCommandHandler,
        PlaceOrder,
    )
"""

from tests.fixtures.aggregates import OrderAggregate, OrderState, UserAggregate, UserState
from tests.fixtures.events import (
    OrderCancelled,
    OrderPlaced,
    OrderShipped,
    UserLoggedIn,
    UserRegistered,
)
from tests.fixtures.handlers import (
    CancelOrder,
    FailingListener,
    GetOrderSummary,
    LoginCountProjector,
    OrderCommandHandler,
    OrderQueryHandler,
    OrderSummaryProjector,
    PlaceOrder,
    RecordingListener,
    ShipOrder,
)
from tests.fixtures.readmodels import OrderSummary, UserLogInStatistics

__all__ = [
    # Events
    "OrderPlaced",
    "OrderShipped",
    "OrderCancelled",
    "UserRegistered",
    "UserLoggedIn",
    # Aggregates
    "OrderAggregate",
    "OrderState",
    "UserAggregate",
    "UserState",
    # Read models
    "OrderSummary",
    "UserLogInStatistics",
    # Commands, queries and handlers
    "PlaceOrder",
    "ShipOrder",
    "CancelOrder",
    "GetOrderSummary",
    "OrderCommandHandler",
    "OrderQueryHandler",
    "OrderSummaryProjector",
    "LoginCountProjector",
    "RecordingListener",
    "FailingListener",
]
