from brewery_api.crud.beer_repository import BeerFilters, BeerRepository
from brewery_api.mappers.beer import beer_create_to_entity, beer_to_response
from brewery_api.models.beer import BeerCreate, BeerResponse, BeerSearchRequest, BeerUpdate
from brewery_api.models.entities import Beer
from brewery_api.services.base_service import CrudService


class BeerService(
    CrudService[Beer, BeerCreate, BeerUpdate, BeerSearchRequest, BeerResponse, BeerFilters]
):
    def __init__(self, repository: BeerRepository):
        super().__init__(repository)

    def to_entity(self, create_dto: BeerCreate) -> Beer:
        return beer_create_to_entity(create_dto)

    def to_response(self, entity: Beer) -> BeerResponse:
        return beer_to_response(entity)

    def to_filters(self, search_request: BeerSearchRequest) -> BeerFilters:
        return BeerFilters(
            ids=search_request.ids,
            beer_name=search_request.beer_name,
            beer_name_contains=search_request.beer_name_contains,
            beer_style=search_request.beer_style,
            beer_style_contains=search_request.beer_style_contains,
            upc=search_request.upc,
            quantity_on_hand=search_request.quantity_on_hand,
            min_price=search_request.min_price,
            max_price=search_request.max_price,
        )
