from contextlib import contextmanager
from typing import Any, AsyncIterator, Awaitable, Callable, Iterator, List, Optional, TypeVar, Union

from fastapi import HTTPException, Request, Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import BaseModel, TypeAdapter

from brewery_api.exceptions import DatabaseError, ValidationFailedError
from brewery_api.logging_config import get_child_logger
from brewery_api.models.result import Err, ErrorResponse, Ok
from brewery_api.validators.common import parse_payload

logger = get_child_logger("routes")

T = TypeVar("T")
R = TypeVar("R")


def validation_failed_message(errors: List[str]) -> str:
    return f"Validation failed: {', '.join(errors)}"


def error_response(
    request: Request,
    status_code: int,
    message: str,
    errors: Optional[List[str]] = None,
) -> JSONResponse:
    body = ErrorResponse(
        status=status_code,
        message=message,
        path=request.url.path,
        errors=errors or [],
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


async def validate_and_execute(
    payload: Any,
    validator: TypeAdapter[T],
    action: Callable[[T], Awaitable[R]],
) -> Union[Ok[R], Err]:
    """
    Validate ``payload`` and run ``action`` on the typed result.

    The action never runs for an invalid payload, so nothing reaches the
    store unless every constraint holds.
    """
    try:
        data = parse_payload(validator, payload)
    except ValidationFailedError as e:
        return Err(message=e.message, errors=e.messages)
    return Ok(value=await action(data))


def result_response(
    request: Request,
    result: Union[Ok[Any], Err],
    success_status: int = status.HTTP_200_OK,
) -> Response:
    if result.type == "error":
        return error_response(
            request,
            status.HTTP_400_BAD_REQUEST,
            validation_failed_message(result.errors),
            result.errors,
        )
    if result.value is None:
        return Response(status_code=success_status)
    return JSONResponse(status_code=success_status, content=jsonable_encoder(result.value))


@contextmanager
def database_errors_as_http(operation: str, **context: Any) -> Iterator[None]:
    try:
        yield
    except DatabaseError as e:
        logger.error(
            f"Database error during {operation}",
            extra={"error": str(e), **context},
            exc_info=e.original_exception,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="A database error occurred.",
        )


async def _chain(first: BaseModel, rest: AsyncIterator[BaseModel]) -> AsyncIterator[BaseModel]:
    yield first
    async for item in rest:
        yield item


async def stream_json_array(items: AsyncIterator[BaseModel]) -> AsyncIterator[bytes]:
    """
    Encode DTOs as one JSON array, emitting each element as it arrives.

    Errors raised by ``items`` once the first chunk is sent cannot change
    the response status; the client sees a truncated array. Use
    :func:`json_array_response` to surface failures on the first element.
    """
    yield b"["
    first = True
    async for item in items:
        if not first:
            yield b","
        yield item.model_dump_json(by_alias=True).encode()
        first = False
    yield b"]"


async def json_array_response(
    items: AsyncIterator[BaseModel], operation: str
) -> StreamingResponse:
    """
    Stream ``items`` as a JSON array.

    The first element is fetched before the response starts so that a
    failing query still yields a 500 envelope instead of a truncated body.
    A failure on a later element still truncates the array.
    """
    with database_errors_as_http(operation):
        try:
            head = await items.__anext__()
        except StopAsyncIteration:
            return StreamingResponse(iter([b"[]"]), media_type="application/json")
    return StreamingResponse(
        stream_json_array(_chain(head, items)), media_type="application/json"
    )
