from brewery_api.crud.customer_repository import CustomerFilters, CustomerRepository
from brewery_api.mappers.customer import customer_create_to_entity, customer_to_response
from brewery_api.models.customer import (
    CustomerCreate,
    CustomerResponse,
    CustomerSearchRequest,
    CustomerUpdate,
)
from brewery_api.models.entities import Customer
from brewery_api.services.base_service import CrudService


class CustomerService(
    CrudService[
        Customer,
        CustomerCreate,
        CustomerUpdate,
        CustomerSearchRequest,
        CustomerResponse,
        CustomerFilters,
    ]
):
    def __init__(self, repository: CustomerRepository):
        super().__init__(repository)

    def to_entity(self, create_dto: CustomerCreate) -> Customer:
        return customer_create_to_entity(create_dto)

    def to_response(self, entity: Customer) -> CustomerResponse:
        return customer_to_response(entity)

    def to_filters(self, search_request: CustomerSearchRequest) -> CustomerFilters:
        return CustomerFilters(
            ids=search_request.ids,
            customer_name=search_request.customer_name,
            customer_name_contains=search_request.customer_name_contains,
        )
