"""SQLAlchemy implementation of the document store."""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import StoreUnavailableError
from infrastructure.database.models import DocumentModel


@contextmanager
def translate_store_errors() -> Iterator[None]:
    """Re-raise driver and connection failures as StoreUnavailableError."""
    try:
        yield
    except SQLAlchemyError as e:
        raise StoreUnavailableError(f"Document store error: {type(e).__name__}") from e
    except OSError as e:
        raise StoreUnavailableError(f"Document store unreachable: {e}") from e


class SQLAlchemyDocumentRepository:
    """SQLAlchemy implementation of IDocumentStore."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, collection: str, id: str) -> dict[str, Any] | None:
        """Get a document by ID."""
        with translate_store_errors():
            model = await self._session.get(DocumentModel, (collection, id))
        return dict(model.data) if model else None

    async def put(
        self,
        collection: str,
        id: str,
        doc: dict[str, Any],
        merge: bool = False,
    ) -> None:
        """Create or overwrite a document (shallow merge when ``merge``)."""
        with translate_store_errors():
            model = await self._session.get(DocumentModel, (collection, id))
            if model is None:
                self._session.add(DocumentModel(collection=collection, id=id, data=dict(doc)))
            elif merge:
                # Assign a new dict so the JSON column is flagged dirty
                model.data = {**model.data, **doc}
            else:
                model.data = dict(doc)
            await self._session.flush()

    async def query(
        self,
        collection: str,
        field: str,
        value: Any,
        limit: int = 1,
    ) -> list[tuple[str, dict[str, Any]]]:
        """Equality query on a top-level field, oldest documents first."""
        element = DocumentModel.data[field]
        if isinstance(value, bool):
            condition = element.as_boolean() == value
        elif isinstance(value, int):
            condition = element.as_integer() == value
        else:
            condition = element.as_string() == str(value)

        stmt = (
            select(DocumentModel)
            .where(DocumentModel.collection == collection, condition)
            .order_by(DocumentModel.created_at, DocumentModel.id)
            .limit(limit)
        )
        with translate_store_errors():
            result = await self._session.execute(stmt)
            return [(model.id, dict(model.data)) for model in result.scalars()]
