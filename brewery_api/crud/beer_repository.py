from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional, Sequence

from sqlalchemy.sql.elements import ColumnElement

from brewery_api.crud.base_repository import BaseRepository, contains_all_words
from brewery_api.models.beer import BeerUpdate
from brewery_api.models.entities import Beer


@dataclass
class BeerFilters:
    ids: Optional[Sequence[int]] = None
    beer_name: Optional[str] = None
    beer_name_contains: Optional[str] = None
    beer_style: Optional[str] = None
    beer_style_contains: Optional[str] = None
    upc: Optional[str] = None
    quantity_on_hand: Optional[int] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None


class BeerRepository(BaseRepository[Beer, BeerUpdate, BeerFilters]):
    entity_class = Beer

    def build_conditions(self, filters: BeerFilters) -> List[ColumnElement[bool]]:
        conditions: List[ColumnElement[bool]] = []

        if filters.ids is not None:
            conditions.append(Beer.id.in_(filters.ids))
        if filters.beer_name is not None:
            conditions.append(Beer.beer_name == filters.beer_name)
        if filters.beer_name_contains:
            conditions.extend(contains_all_words(Beer.beer_name, filters.beer_name_contains))
        if filters.beer_style is not None:
            conditions.append(Beer.beer_style == filters.beer_style)
        if filters.beer_style_contains:
            conditions.extend(contains_all_words(Beer.beer_style, filters.beer_style_contains))
        if filters.upc is not None:
            conditions.append(Beer.upc == filters.upc)
        if filters.quantity_on_hand is not None:
            conditions.append(Beer.quantity_on_hand == filters.quantity_on_hand)
        if filters.min_price is not None:
            conditions.append(Beer.price >= filters.min_price)
        if filters.max_price is not None:
            conditions.append(Beer.price <= filters.max_price)

        return conditions
