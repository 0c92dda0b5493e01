from typing import List

from fastapi import APIRouter, Body, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from brewery_api.crud.customer_repository import CustomerRepository
from brewery_api.db import get_session_factory
from brewery_api.logging_config import get_child_logger
from brewery_api.models.customer import (
    CustomerCreate,
    CustomerResponse,
    CustomerSearchRequest,
    CustomerUpdate,
)
from brewery_api.models.result import CountResponse
from brewery_api.routes.common import (
    database_errors_as_http,
    json_array_response,
    result_response,
    validate_and_execute,
)
from brewery_api.services.customer_service import CustomerService
from brewery_api.validators.common import id_list_validator
from brewery_api.validators.constraints import MAX_BATCH_SIZE, EntityId
from brewery_api.validators.customer import (
    customer_create_list_validator,
    customer_update_list_validator,
)

logger = get_child_logger("routes.customer")

CUSTOMER_PATH = "/api/v2/customer"

router = APIRouter(prefix=CUSTOMER_PATH, tags=["customer"])


def get_customer_service(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> CustomerService:
    return CustomerService(CustomerRepository(session_factory))


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=List[CustomerResponse],
)
async def create_customers(
    request: Request,
    customers: List[CustomerCreate] = Body(..., min_length=1, max_length=MAX_BATCH_SIZE),
    service: CustomerService = Depends(get_customer_service),
) -> Response:
    with database_errors_as_http("customer creation"):
        result = await validate_and_execute(
            customers, customer_create_list_validator, service.create_entities
        )
    return result_response(request, result, status.HTTP_201_CREATED)


@router.patch("")
async def patch_customers(
    request: Request,
    updates: List[CustomerUpdate] = Body(..., min_length=1, max_length=MAX_BATCH_SIZE),
    service: CustomerService = Depends(get_customer_service),
) -> Response:
    with database_errors_as_http("customer update"):
        result = await validate_and_execute(
            updates, customer_update_list_validator, service.update_entities
        )
    return result_response(request, result, status.HTTP_200_OK)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def delete_customers(
    request: Request,
    ids: List[EntityId] = Body(..., min_length=1, max_length=MAX_BATCH_SIZE),
    service: CustomerService = Depends(get_customer_service),
) -> Response:
    with database_errors_as_http("customer deletion"):
        result = await validate_and_execute(ids, id_list_validator, service.delete_entities)
    return result_response(request, result, status.HTTP_204_NO_CONTENT)


@router.post("/get", response_model=List[CustomerResponse])
async def get_customers(
    search_request: CustomerSearchRequest = Body(...),
    service: CustomerService = Depends(get_customer_service),
) -> Response:
    logger.info("Handling customer search request")
    return await json_array_response(
        service.list_entities(search_request), "customer search"
    )


@router.post("/count", response_model=CountResponse)
async def count_customers(
    search_request: CustomerSearchRequest = Body(...),
    service: CustomerService = Depends(get_customer_service),
) -> CountResponse:
    with database_errors_as_http("customer count"):
        count = await service.count_entities(search_request)
    return CountResponse(count=count)
