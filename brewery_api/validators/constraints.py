"""
Reusable field constraints for request DTOs.

Each alias bundles the bounds for one kind of field so that create,
update and search payloads enforce identical rules.
"""
from decimal import Decimal
from typing import Annotated, List
import re

from pydantic import AfterValidator, Field

MAX_BATCH_SIZE = 100
MAX_PAGE = 1000
MAX_PAGE_SIZE = 1000
MAX_QUANTITY = 1000
MAX_PRICE = Decimal("1000000000")
PRICE_SCALE = 2

# str.isdigit() accepts non-ASCII digits, so match the range explicitly
UPC_PATTERN = re.compile(r"[0-9]{12}")
NAME_PUNCTUATION = frozenset("-.")


def not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be blank")
    return value


def upc_digits(value: str) -> str:
    if not UPC_PATTERN.fullmatch(value):
        raise ValueError("UPC must contain only numbers")
    return value


def person_name_characters(value: str) -> str:
    if not all(ch.isalpha() or ch.isspace() or ch in NAME_PUNCTUATION for ch in value):
        raise ValueError("Customer name can only contain letters, spaces, hyphens, and periods")
    return value


EntityId = Annotated[int, Field(ge=1)]
Page = Annotated[int, Field(ge=1, le=MAX_PAGE)]
PageSize = Annotated[int, Field(ge=1, le=MAX_PAGE_SIZE)]
IdList = Annotated[List[EntityId], Field(min_length=1, max_length=MAX_BATCH_SIZE)]

BeerName = Annotated[str, Field(max_length=50), AfterValidator(not_blank)]
BeerStyle = Annotated[str, Field(max_length=30), AfterValidator(not_blank)]
Upc = Annotated[str, Field(min_length=12, max_length=12), AfterValidator(upc_digits)]
Quantity = Annotated[int, Field(ge=0, le=MAX_QUANTITY)]
# same scale as the beer.price column
Price = Annotated[Decimal, Field(gt=0, le=MAX_PRICE, decimal_places=PRICE_SCALE)]

CustomerName = Annotated[
    str,
    Field(max_length=100),
    AfterValidator(not_blank),
    AfterValidator(person_name_characters),
]
CustomerNameFragment = Annotated[str, Field(max_length=100), AfterValidator(not_blank)]
