from typing import Annotated, List

from pydantic import Field, TypeAdapter

from brewery_api.models.beer import BeerCreate, BeerSearchRequest, BeerUpdate
from brewery_api.validators.constraints import MAX_BATCH_SIZE

beer_create_list_validator: TypeAdapter[List[BeerCreate]] = TypeAdapter(
    Annotated[List[BeerCreate], Field(min_length=1, max_length=MAX_BATCH_SIZE)]
)

beer_update_list_validator: TypeAdapter[List[BeerUpdate]] = TypeAdapter(
    Annotated[List[BeerUpdate], Field(min_length=1, max_length=MAX_BATCH_SIZE)]
)

beer_search_request_validator: TypeAdapter[BeerSearchRequest] = TypeAdapter(BeerSearchRequest)
