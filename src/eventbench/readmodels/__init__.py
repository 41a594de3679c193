"""Read models and their repositories."""

from eventbench.readmodels.base import ReadModel
from eventbench.readmodels.in_memory import InMemoryReadModelRepository
from eventbench.readmodels.repository import ReadModelRepository, TModel

__all__ = [
    "InMemoryReadModelRepository",
    "ReadModel",
    "ReadModelRepository",
    "TModel",
]
