import pytest

from brewery_api.routes.beer_route import BEER_PATH
from tests import beer_payload


async def create(client, count=3):
    response = await client.post(BEER_PATH, json=[beer_payload(i) for i in range(count)])
    assert response.status_code == 201
    return response.json()


async def search(client, body=None):
    response = await client.post(f"{BEER_PATH}/get", json=body or {})
    assert response.status_code == 200
    return response.json()


async def test_batch_lifecycle(client):
    created = await create(client)
    ids = [beer["id"] for beer in created]
    assert len(set(ids)) == 3
    assert all(beer["version"] == 0 for beer in created)

    response = await client.patch(BEER_PATH, json=[{"id": ids[0], "quantityOnHand": 500}])
    assert response.status_code == 200

    [patched] = await search(client, {"ids": [ids[0]]})
    assert patched["quantityOnHand"] == 500
    assert patched["version"] == 1
    assert patched["beerName"] == created[0]["beerName"]

    response = await client.request("DELETE", BEER_PATH, json=ids)
    assert response.status_code == 204
    assert response.content == b""

    assert await search(client, {"ids": ids}) == []


async def test_create_returns_wire_shaped_beers(client):
    [beer] = await create(client, 1)

    assert set(beer) == {
        "id",
        "beerName",
        "beerStyle",
        "upc",
        "quantityOnHand",
        "price",
        "version",
        "createdAt",
        "updatedAt",
    }
    assert beer["price"] == 12.5
    assert beer["upc"] == "000000000000"


async def test_search_filters_and_pages(client):
    await client.post(
        BEER_PATH,
        json=[
            beer_payload(0, beerName="Hazy Golden IPA", price=4),
            beer_payload(1, beerName="Golden Stout", price=8),
            beer_payload(2, beerName="Hazy Red", price=12),
        ],
    )

    result = await search(client, {"beerNameContains": "Golden Hazy"})
    assert [beer["beerName"] for beer in result] == ["Hazy Golden IPA"]

    result = await search(client, {"minPrice": 4, "maxPrice": 8})
    assert [beer["price"] for beer in result] == [4.0, 8.0]

    result = await search(client, {"page": 2, "size": 2})
    assert [beer["beerName"] for beer in result] == ["Hazy Red"]


async def test_count(client):
    await create(client, 4)

    response = await client.post(f"{BEER_PATH}/count", json={"beerStyle": "IPA"})
    assert response.status_code == 200
    assert response.json() == {"count": 4}


@pytest.mark.parametrize(
    "payload",
    [
        [],
        [beer_payload(i) for i in range(101)],
        [beer_payload(upc="12345")],
        [beer_payload(price=0)],
        [beer_payload(sparkle=True)],
        {"beerName": "not a list"},
    ],
)
async def test_invalid_create_is_rejected_with_envelope(client, payload):
    response = await client.post(BEER_PATH, json=payload)

    assert response.status_code == 400
    body = response.json()
    assert body["status"] == 400
    assert body["path"] == BEER_PATH
    assert body["message"].startswith("Validation failed")
    assert body["errors"]
    assert "timestamp" in body

    assert await search(client) == []


async def test_one_bad_item_rejects_the_whole_batch(client):
    payload = [beer_payload(0), beer_payload(1, upc="abcdefghijkl")]

    response = await client.post(BEER_PATH, json=payload)

    assert response.status_code == 400
    assert response.json()["errors"] == ["1.upc: Value error, UPC must contain only numbers"]
    assert await search(client) == []


@pytest.mark.parametrize(
    "method, path, payload",
    [
        ("PATCH", BEER_PATH, []),
        ("PATCH", BEER_PATH, [{"id": 0, "beerName": "x"}]),
        ("DELETE", BEER_PATH, []),
        ("DELETE", BEER_PATH, [0]),
        ("POST", f"{BEER_PATH}/get", {"minPrice": 10, "maxPrice": 5}),
        ("POST", f"{BEER_PATH}/get", {"size": 1001}),
        ("POST", f"{BEER_PATH}/count", {"page": 0}),
    ],
)
async def test_invalid_requests_are_rejected(client, method, path, payload):
    response = await client.request(method, path, json=payload)

    assert response.status_code == 400
    assert response.json()["path"] == path


async def test_malformed_json_is_rejected(client):
    response = await client.post(
        BEER_PATH, content=b"[{", headers={"Content-Type": "application/json"}
    )

    assert response.status_code == 400
    assert response.json()["message"].startswith("Validation failed")


async def test_patch_and_delete_of_unknown_ids_succeed(client):
    response = await client.patch(BEER_PATH, json=[{"id": 404, "quantityOnHand": 1}])
    assert response.status_code == 200

    response = await client.request("DELETE", BEER_PATH, json=[404])
    assert response.status_code == 204


async def test_store_failure_maps_to_500(broken_client):
    response = await broken_client.post(BEER_PATH, json=[beer_payload()])

    assert response.status_code == 500
    body = response.json()
    assert body["message"] == "A database error occurred."
    assert body["path"] == BEER_PATH


async def test_search_store_failure_maps_to_500(broken_client):
    response = await broken_client.post(f"{BEER_PATH}/get", json={})

    assert response.status_code == 500
    assert response.json()["message"] == "A database error occurred."


async def test_created_beers_read_back_unchanged(client):
    payload = [
        beer_payload(0, price=0.01),
        beer_payload(1, price=999_999_999.99),
        beer_payload(2, price=12.5, quantityOnHand=0),
        beer_payload(3, price=7, beerName="Ünïcode Bräu"),
    ]
    response = await client.post(BEER_PATH, json=payload)
    assert response.status_code == 201
    created = response.json()

    fetched = await search(client, {"ids": [beer["id"] for beer in created]})

    assert fetched == created
    assert [beer["price"] for beer in fetched] == [0.01, 999_999_999.99, 12.5, 7.0]
    assert all(beer["createdAt"].endswith("Z") for beer in fetched)


async def test_price_with_more_than_two_decimals_is_rejected(client):
    response = await client.post(BEER_PATH, json=[beer_payload(price=12.999)])

    assert response.status_code == 400
    [error] = response.json()["errors"]
    assert error.startswith("0.price: ")

    assert await search(client) == []


async def test_request_bodies_are_published_in_openapi(client):
    response = await client.get("/api/openapi.json")
    assert response.status_code == 200
    paths = response.json()["paths"]

    def body_schema(path, method):
        return str(paths[path][method]["requestBody"]["content"]["application/json"]["schema"])

    assert "BeerCreate" in body_schema(BEER_PATH, "post")
    assert "BeerUpdate" in body_schema(BEER_PATH, "patch")
    assert "BeerSearchRequest" in body_schema(f"{BEER_PATH}/get", "post")
    assert "'minItems': 1" in body_schema(BEER_PATH, "delete")
