"""Pydantic models for the GraphQL response envelope."""
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


THROTTLED_MESSAGE = "Throttled"


class _Envelope(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ThrottleStatus(_Envelope):
    maximum_available: float = 0.0
    currently_available: float = 0.0
    restore_rate: float = 0.0


class QueryCost(_Envelope):
    """Cost accounting returned under extensions.cost."""

    requested_query_cost: float = 0.0
    actual_query_cost: Optional[float] = None
    throttle_status: ThrottleStatus = Field(default_factory=ThrottleStatus)


class ResponseExtensions(_Envelope):
    cost: Optional[QueryCost] = None


class GraphQLErrorLocation(_Envelope):
    line: int
    column: int


class GraphQLErrorItem(_Envelope):
    message: str
    locations: list[GraphQLErrorLocation] = Field(default_factory=list)
    path: Optional[list[Any]] = None
    extensions: Optional[dict[str, Any]] = None


class GraphQLResponse(_Envelope):
    """Decoded body of a 2xx GraphQL response."""

    data: Optional[dict[str, Any]] = None
    errors: list[GraphQLErrorItem] = Field(default_factory=list)
    extensions: Optional[ResponseExtensions] = None

    @field_validator("errors", mode="before")
    @classmethod
    def _null_errors(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def first_error_message(self) -> Optional[str]:
        return self.errors[0].message if self.errors else None

    @property
    def is_throttled(self) -> bool:
        """Throttled when the first error says so and a cost envelope came back."""
        return (
            self.first_error_message == THROTTLED_MESSAGE
            and self.extensions is not None
            and self.extensions.cost is not None
        )
