from brewery_api.mappers.common import entity_fields
from brewery_api.models.beer import BeerCreate, BeerResponse
from brewery_api.models.entities import Beer


def beer_create_to_entity(beer_create: BeerCreate) -> Beer:
    return Beer(**entity_fields(beer_create, Beer))


def beer_to_response(beer: Beer) -> BeerResponse:
    return BeerResponse.model_validate(beer)
