from typing import List

from fastapi import APIRouter, Body, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from brewery_api.crud.beer_repository import BeerRepository
from brewery_api.db import get_session_factory
from brewery_api.logging_config import get_child_logger, tracer
from brewery_api.models.beer import BeerCreate, BeerResponse, BeerSearchRequest, BeerUpdate
from brewery_api.models.result import CountResponse
from brewery_api.routes.common import (
    database_errors_as_http,
    json_array_response,
    result_response,
    validate_and_execute,
)
from brewery_api.services.beer_service import BeerService
from brewery_api.validators.beer import beer_create_list_validator, beer_update_list_validator
from brewery_api.validators.common import id_list_validator
from brewery_api.validators.constraints import MAX_BATCH_SIZE, EntityId

logger = get_child_logger("routes.beer")

BEER_PATH = "/api/v2/beer"

router = APIRouter(prefix=BEER_PATH, tags=["beer"])


def get_beer_service(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> BeerService:
    return BeerService(BeerRepository(session_factory))


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=List[BeerResponse],
)
async def create_beers(
    request: Request,
    beers: List[BeerCreate] = Body(
        ...,
        min_length=1,
        max_length=MAX_BATCH_SIZE,
        description="List of beers to create (1-100)",
    ),
    service: BeerService = Depends(get_beer_service),
) -> Response:
    with tracer.start_as_current_span("api_create_beers") as span:
        span.set_attribute("batch.size", len(beers))

        logger.info(
            f"Handling batch create request for {len(beers)} beers",
            extra={"batch_size": len(beers)},
        )

        with database_errors_as_http("beer creation", batch_size=len(beers)):
            result = await validate_and_execute(
                beers, beer_create_list_validator, service.create_entities
            )

        if result.type == "ok":
            span.set_attribute("batch.success_count", len(result.value))
            logger.info(f"Successfully created {len(result.value)} beers")
        else:
            span.set_attribute("error", True)
            span.set_attribute("error.type", "validation_error")

        return result_response(request, result, status.HTTP_201_CREATED)


@router.patch("")
async def patch_beers(
    request: Request,
    updates: List[BeerUpdate] = Body(
        ...,
        min_length=1,
        max_length=MAX_BATCH_SIZE,
        description="Partial updates, each identified by id (1-100)",
    ),
    service: BeerService = Depends(get_beer_service),
) -> Response:
    with database_errors_as_http("beer update"):
        result = await validate_and_execute(
            updates, beer_update_list_validator, service.update_entities
        )
    return result_response(request, result, status.HTTP_200_OK)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def delete_beers(
    request: Request,
    ids: List[EntityId] = Body(
        ...,
        min_length=1,
        max_length=MAX_BATCH_SIZE,
        description="Ids of the beers to delete (1-100)",
    ),
    service: BeerService = Depends(get_beer_service),
) -> Response:
    with database_errors_as_http("beer deletion"):
        result = await validate_and_execute(ids, id_list_validator, service.delete_entities)
    return result_response(request, result, status.HTTP_204_NO_CONTENT)


@router.post("/get", response_model=List[BeerResponse])
async def get_beers(
    search_request: BeerSearchRequest = Body(..., description="Search filters"),
    service: BeerService = Depends(get_beer_service),
) -> Response:
    logger.info(
        "Handling beer search request",
        extra={
            "page": search_request.page,
            "size": search_request.size,
            "has_ids": search_request.ids is not None,
        },
    )

    return await json_array_response(
        service.list_entities(search_request), "beer search"
    )


@router.post("/count", response_model=CountResponse)
async def count_beers(
    search_request: BeerSearchRequest = Body(..., description="Search filters"),
    service: BeerService = Depends(get_beer_service),
) -> CountResponse:
    with database_errors_as_http("beer count"):
        count = await service.count_entities(search_request)
    return CountResponse(count=count)
