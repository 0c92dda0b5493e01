from brewery_api.mappers.common import entity_fields
from brewery_api.models.customer import CustomerCreate, CustomerResponse
from brewery_api.models.entities import Customer


def customer_create_to_entity(customer_create: CustomerCreate) -> Customer:
    return Customer(**entity_fields(customer_create, Customer))


def customer_to_response(customer: Customer) -> CustomerResponse:
    return CustomerResponse.model_validate(customer)
