"""
Base class for read models.

Read models are denormalized views built by event listeners. Unlike
aggregates they are stored directly, so they are plain mutable pydantic
models compared by value in assertions.
"""

import re
from typing import ClassVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


def _camel_to_snake(name: str) -> str:
    """
    Convert CamelCase to snake_case.

    Examples:
        >>> _camel_to_snake("OrderSummary")
        'order_summary'
        >>> _camel_to_snake("HTTPResponse")
        'http_response'
    """
    s1 = re.sub(r"(.)([A-Z][a-z]+)", r"\1_\2", name)
    return re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", s1).lower()


class ReadModel(BaseModel):
    """
    Base class for read models.

    Attributes:
        id: Unique identifier for this read model instance

    Example:
        >>> class OrderSummary(ReadModel):
        ...     status: str = "pending"
        ...     item_count: int = 0
        ...
        >>> OrderSummary.reference_name()
        'order_summary'
    """

    model_config = ConfigDict(
        from_attributes=True,
        # NOT frozen - listeners update read models in place before saving
    )

    id: UUID = Field(
        ...,
        description="Unique identifier for this read model",
    )

    # Class-level name override, used when repositories are referenced by name
    __reference_name__: ClassVar[str | None] = None

    @classmethod
    def reference_name(cls) -> str:
        """
        Name used to reference this read model's repository.

        Returns __reference_name__ if explicitly set, otherwise the class name in
        snake_case.
        """
        if cls.__reference_name__:
            return cls.__reference_name__
        return _camel_to_snake(cls.__name__)

    def get_id(self) -> UUID:
        return self.id
