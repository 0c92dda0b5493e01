from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_serializer
from pydantic.alias_generators import to_camel

from brewery_api.models.entities import as_utc
from brewery_api.validators.constraints import (
    CustomerName,
    CustomerNameFragment,
    EntityId,
    IdList,
    Page,
    PageSize,
)

_REQUEST_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")


class CustomerCreate(BaseModel):
    customer_name: CustomerName

    model_config = _REQUEST_CONFIG


class CustomerUpdate(BaseModel):
    """
    Partial update for one customer, identified by id.
    """

    id: EntityId
    customer_name: Optional[CustomerName] = None

    model_config = _REQUEST_CONFIG


class CustomerSearchRequest(BaseModel):
    page: Optional[Page] = None
    size: Optional[PageSize] = None
    ids: Optional[IdList] = None
    customer_name: Optional[CustomerName] = None
    customer_name_contains: Optional[CustomerNameFragment] = None

    model_config = _REQUEST_CONFIG


class CustomerResponse(BaseModel):
    id: int
    customer_name: str
    version: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        extra="ignore",
    )

    @field_serializer("created_at", "updated_at", when_used="json")
    def serialize_timestamp(self, value: datetime) -> datetime:
        return as_utc(value)
