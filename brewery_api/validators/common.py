from typing import Any, List, TypeVar

from pydantic import TypeAdapter, ValidationError

from brewery_api.exceptions import FieldError, ValidationFailedError
from brewery_api.validators.constraints import IdList

T = TypeVar("T")

id_list_validator: TypeAdapter[List[int]] = TypeAdapter(IdList)


def _field_path(loc) -> str:
    return ".".join(str(part) for part in loc)


def to_field_errors(exc: ValidationError) -> List[FieldError]:
    return [(_field_path(error["loc"]), error["msg"]) for error in exc.errors()]


def request_field_errors(errors: List[dict]) -> List[FieldError]:
    """
    Convert FastAPI request validation errors to (path, message) pairs.

    The leading ``body`` location is dropped so paths match the ones
    reported by :func:`collect_errors`; a JSON syntax error has no path.
    """
    field_errors: List[FieldError] = []
    for error in errors:
        loc = tuple(error["loc"])
        if error.get("type") == "json_invalid":
            loc = ()
        elif loc[:1] == ("body",):
            loc = loc[1:]
        field_errors.append((_field_path(loc), error["msg"]))
    return field_errors


def collect_errors(validator: TypeAdapter[Any], payload: Any) -> List[FieldError]:
    """
    Run a validator over a raw (JSON-decoded) payload.

    Returns every violated constraint as a (path, message) pair; an empty
    list means the payload is valid. Pure, performs no I/O.
    """
    try:
        validator.validate_python(payload)
    except ValidationError as exc:
        return to_field_errors(exc)
    return []


def parse_payload(validator: TypeAdapter[T], payload: Any) -> T:
    """
    Validate a raw payload and return it as typed DTOs.

    Raises:
        ValidationFailedError: with all violations if the payload is invalid
    """
    try:
        return validator.validate_python(payload)
    except ValidationError as exc:
        raise ValidationFailedError(to_field_errors(exc)) from exc
