import abc
from contextlib import aclosing
from typing import AsyncIterator, Generic, List, TypeVar

from pydantic import BaseModel

from brewery_api.crud.base_repository import DEFAULT_PAGE, DEFAULT_PAGE_SIZE, BaseRepository

E = TypeVar("E")  # entity
C = TypeVar("C", bound=BaseModel)  # create DTO
U = TypeVar("U", bound=BaseModel)  # update DTO
S = TypeVar("S", bound=BaseModel)  # search request
R = TypeVar("R", bound=BaseModel)  # response DTO
F = TypeVar("F")  # repository filters


class CrudService(abc.ABC, Generic[E, C, U, S, R, F]):
    """
    Orchestrates one repository for the HTTP layer: turns search requests
    into repository filters and maps entities to response DTOs.
    """

    default_page_size: int = DEFAULT_PAGE_SIZE

    def __init__(self, repository: BaseRepository[E, U, F]):
        self.repository = repository

    @abc.abstractmethod
    def to_entity(self, create_dto: C) -> E:
        raise NotImplementedError

    @abc.abstractmethod
    def to_response(self, entity: E) -> R:
        raise NotImplementedError

    @abc.abstractmethod
    def to_filters(self, search_request: S) -> F:
        raise NotImplementedError

    async def list_entities(self, search_request: S) -> AsyncIterator[R]:
        """
        Lazily map one page of matching entities to response DTOs.

        Mapping happens per row as the caller consumes the iterator, so the
        repository's single-pass contract carries over unchanged.
        """
        rows = self.repository.query(
            self.to_filters(search_request),
            page=search_request.page or DEFAULT_PAGE,
            size=search_request.size or self.default_page_size,
        )
        async with aclosing(rows):
            async for entity in rows:
                yield self.to_response(entity)

    async def count_entities(self, search_request: S) -> int:
        return await self.repository.count(self.to_filters(search_request))

    async def create_entities(self, create_dtos: List[C]) -> List[R]:
        entities = await self.repository.insert([self.to_entity(dto) for dto in create_dtos])
        return [self.to_response(entity) for entity in entities]

    async def update_entities(self, update_dtos: List[U]) -> None:
        await self.repository.patch(update_dtos)

    async def delete_entities(self, ids: List[int]) -> None:
        await self.repository.delete(ids)
