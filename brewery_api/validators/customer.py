from typing import Annotated, List

from pydantic import Field, TypeAdapter

from brewery_api.models.customer import CustomerCreate, CustomerSearchRequest, CustomerUpdate
from brewery_api.validators.constraints import MAX_BATCH_SIZE

customer_create_list_validator: TypeAdapter[List[CustomerCreate]] = TypeAdapter(
    Annotated[List[CustomerCreate], Field(min_length=1, max_length=MAX_BATCH_SIZE)]
)

customer_update_list_validator: TypeAdapter[List[CustomerUpdate]] = TypeAdapter(
    Annotated[List[CustomerUpdate], Field(min_length=1, max_length=MAX_BATCH_SIZE)]
)

customer_search_request_validator: TypeAdapter[CustomerSearchRequest] = TypeAdapter(
    CustomerSearchRequest
)
