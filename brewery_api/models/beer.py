from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_serializer, model_validator
from pydantic.alias_generators import to_camel

from brewery_api.models.entities import as_utc
from brewery_api.validators.constraints import (
    BeerName,
    BeerStyle,
    EntityId,
    IdList,
    Page,
    PageSize,
    Price,
    Quantity,
    Upc,
)

_REQUEST_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")


class BeerCreate(BaseModel):
    """
    Fields a client needs to provide to create a beer.
    """

    beer_name: BeerName
    beer_style: BeerStyle
    upc: Upc  # 12-digit universal product code
    quantity_on_hand: Quantity
    price: Price

    model_config = _REQUEST_CONFIG


class BeerUpdate(BaseModel):
    """
    Partial update for one beer, identified by id.

    Only fields that are present and non-null overwrite stored values.
    """

    id: EntityId
    beer_name: Optional[BeerName] = None
    beer_style: Optional[BeerStyle] = None
    upc: Optional[Upc] = None
    quantity_on_hand: Optional[Quantity] = None
    price: Optional[Price] = None

    model_config = _REQUEST_CONFIG


class BeerSearchRequest(BaseModel):
    """
    Search filters for beers. Every filter is optional and all supplied
    filters must match. The *_contains filters match every whitespace
    separated word independently.
    """

    page: Optional[Page] = None
    size: Optional[PageSize] = None
    ids: Optional[IdList] = None
    beer_name: Optional[BeerName] = None
    beer_name_contains: Optional[BeerName] = None
    beer_style: Optional[BeerStyle] = None
    beer_style_contains: Optional[BeerStyle] = None
    upc: Optional[Upc] = None
    quantity_on_hand: Optional[Quantity] = None
    min_price: Optional[Price] = None
    max_price: Optional[Price] = None

    model_config = _REQUEST_CONFIG

    @model_validator(mode="after")
    def check_price_range(self) -> "BeerSearchRequest":
        if (
            self.min_price is not None
            and self.max_price is not None
            and self.max_price <= self.min_price
        ):
            raise ValueError("Maximum price must be greater than minimum price")
        return self


class BeerResponse(BaseModel):
    """
    All beer fields plus system-generated fields.
    This is what clients receive when creating or searching beers.
    """

    id: int
    beer_name: str
    beer_style: str
    upc: str
    quantity_on_hand: int
    price: Decimal
    version: int  # optimistic concurrency counter, bumped on every patch
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        extra="ignore",
    )

    @field_serializer("price", when_used="json")
    def serialize_price(self, price: Decimal) -> float:
        return float(price)

    @field_serializer("created_at", "updated_at", when_used="json")
    def serialize_timestamp(self, value: datetime) -> datetime:
        return as_utc(value)
