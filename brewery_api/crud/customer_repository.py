from dataclasses import dataclass
from typing import List, Optional, Sequence

from sqlalchemy.sql.elements import ColumnElement

from brewery_api.crud.base_repository import BaseRepository, contains_all_words
from brewery_api.models.customer import CustomerUpdate
from brewery_api.models.entities import Customer


@dataclass
class CustomerFilters:
    ids: Optional[Sequence[int]] = None
    customer_name: Optional[str] = None
    customer_name_contains: Optional[str] = None


class CustomerRepository(BaseRepository[Customer, CustomerUpdate, CustomerFilters]):
    entity_class = Customer

    def build_conditions(self, filters: CustomerFilters) -> List[ColumnElement[bool]]:
        conditions: List[ColumnElement[bool]] = []

        if filters.ids is not None:
            conditions.append(Customer.id.in_(filters.ids))
        if filters.customer_name is not None:
            conditions.append(Customer.customer_name == filters.customer_name)
        if filters.customer_name_contains:
            conditions.extend(
                contains_all_words(Customer.customer_name, filters.customer_name_contains)
            )

        return conditions
