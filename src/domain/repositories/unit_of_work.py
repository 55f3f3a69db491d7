"""Unit of Work protocol."""

from types import TracebackType
from typing import Protocol

from domain.repositories.document_store import IDocumentStore


class IUnitOfWork(Protocol):
    """One store transaction, used as ``async with uow: ...``.

    Writes made through ``documents`` are discarded unless ``commit`` is
    awaited before the block exits.
    """

    documents: IDocumentStore

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...

    async def __aenter__(self) -> "IUnitOfWork": ...

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None: ...
