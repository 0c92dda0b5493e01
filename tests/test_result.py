from pydantic import BaseModel

from brewery_api.exceptions import ValidationFailedError
from brewery_api.models.result import Err, Ok, service_result_adapter
from brewery_api.routes.common import stream_json_array, validate_and_execute, validation_failed_message
from brewery_api.validators.common import id_list_validator


class Item(BaseModel):
    name: str


async def _items(*names):
    for name in names:
        yield Item(name=name)


async def _collect(chunks) -> bytes:
    return b"".join([chunk async for chunk in chunks])


def test_service_result_is_discriminated_by_type():
    ok = service_result_adapter.validate_python({"type": "ok", "value": [1, 2]})
    err = service_result_adapter.validate_python({"type": "error", "message": "bad", "errors": ["x"]})

    assert isinstance(ok, Ok)
    assert ok.value == [1, 2]
    assert isinstance(err, Err)
    assert err.errors == ["x"]


def test_service_result_serializes_with_its_tag():
    assert service_result_adapter.dump_python(Err(message="bad")) == {
        "type": "error",
        "message": "bad",
        "errors": [],
    }
    assert Ok(value=3).model_dump() == {"type": "ok", "value": 3}


def test_validation_failed_message_lists_every_error():
    assert validation_failed_message(["a: x", "b: y"]) == "Validation failed: a: x, b: y"


def test_validation_failed_error_messages_omit_empty_paths():
    error = ValidationFailedError([("", "too short"), ("0.upc", "bad")])
    assert error.messages == ["too short", "0.upc: bad"]
    assert error.message == "Validation failed"


async def test_validate_and_execute_runs_action_on_valid_payload():
    calls = []

    async def action(ids):
        calls.append(ids)
        return len(ids)

    result = await validate_and_execute([1, 2, 3], id_list_validator, action)

    assert result == Ok(value=3)
    assert calls == [[1, 2, 3]]


async def test_validate_and_execute_skips_action_on_invalid_payload():
    async def action(ids):
        raise AssertionError("must not run")

    result = await validate_and_execute([], id_list_validator, action)

    assert isinstance(result, Err)
    assert result.message == "Validation failed"
    assert len(result.errors) == 1


async def test_stream_json_array_emits_valid_json():
    assert await _collect(stream_json_array(_items())) == b"[]"
    assert await _collect(stream_json_array(_items("a", "b"))) == b'[{"name":"a"},{"name":"b"}]'
