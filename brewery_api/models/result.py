from datetime import datetime, timezone
from typing import Annotated, Any, Generic, List, Literal, TypeVar, Union

from pydantic import BaseModel, Field, TypeAdapter

T = TypeVar("T")


class Ok(BaseModel, Generic[T]):
    """Successful outcome carrying the operation's value."""

    type: Literal["ok"] = "ok"
    value: T


class Err(BaseModel):
    """Failed outcome with a summary message and one entry per violation."""

    type: Literal["error"] = "error"
    message: str
    errors: List[str] = Field(default_factory=list)


# The "type" tag discriminates the variants on both serialisation and parsing
ServiceResult = Annotated[Union[Ok[Any], Err], Field(discriminator="type")]

service_result_adapter: TypeAdapter[Union[Ok[Any], Err]] = TypeAdapter(ServiceResult)


class ErrorResponse(BaseModel):
    """
    Uniform error envelope returned for every non-2xx response.
    """

    status: int
    message: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    path: str
    errors: List[str] = Field(default_factory=list)


class CountResponse(BaseModel):
    count: int
