from typing import Any, Dict, Set, Type

from pydantic import BaseModel
from sqlalchemy import inspect

from brewery_api.models.entities import Base

# Assigned by the store, never copied from a payload
STORE_MANAGED_FIELDS = frozenset({"id", "version", "created_at", "updated_at"})


def column_names(entity_class: Type[Base]) -> Set[str]:
    return {attr.key for attr in inspect(entity_class).column_attrs}


def entity_fields(dto: BaseModel, entity_class: Type[Base]) -> Dict[str, Any]:
    """
    Fields of a creation DTO that map onto columns of ``entity_class``.

    DTO fields without a matching column are dropped rather than rejected.
    """
    columns = column_names(entity_class) - STORE_MANAGED_FIELDS
    return {key: value for key, value in dto.model_dump().items() if key in columns}


def changed_fields(dto: BaseModel, entity_class: Type[Base]) -> Dict[str, Any]:
    """Non-null fields of a partial-update DTO, keyed by column name."""
    columns = column_names(entity_class) - STORE_MANAGED_FIELDS
    return {
        key: value
        for key, value in dto.model_dump(exclude_none=True).items()
        if key in columns
    }
