"""Unit of work over one SQLAlchemy session."""

from types import TracebackType

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from infrastructure.database.repositories.sqlalchemy_document_repo import (
    SQLAlchemyDocumentRepository,
    translate_store_errors,
)


class SQLAlchemyUnitOfWork:
    """Opens a session on enter; rolls back on error and closes on exit.

    Nothing is persisted unless :meth:`commit` is called inside the block.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        self._session: AsyncSession | None = None
        self._documents: SQLAlchemyDocumentRepository | None = None

    @property
    def documents(self) -> SQLAlchemyDocumentRepository:
        if self._documents is None:
            raise RuntimeError("UnitOfWork not initialized. Use as context manager.")
        return self._documents

    async def commit(self) -> None:
        if self._session is not None:
            with translate_store_errors():
                await self._session.commit()

    async def rollback(self) -> None:
        if self._session is not None:
            with translate_store_errors():
                await self._session.rollback()

    async def __aenter__(self) -> "SQLAlchemyUnitOfWork":
        self._session = self._session_factory()
        self._documents = SQLAlchemyDocumentRepository(self._session)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        session, self._session, self._documents = self._session, None, None
        if session is None:
            return
        try:
            if exc_type is not None:
                await session.rollback()
        finally:
            await session.close()
