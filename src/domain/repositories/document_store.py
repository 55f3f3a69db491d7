"""Document store protocol."""

from typing import Any, Protocol


class IDocumentStore(Protocol):
    """Whole-document key/value store grouped into collections."""

    async def get(self, collection: str, id: str) -> dict[str, Any] | None:
        """Get a document by ID."""
        ...

    async def put(
        self,
        collection: str,
        id: str,
        doc: dict[str, Any],
        merge: bool = False,
    ) -> None:
        """Write a document.

        With ``merge`` the top-level keys of ``doc`` are merged into the stored
        document, otherwise the stored document is replaced.
        """
        ...

    async def query(
        self,
        collection: str,
        field: str,
        value: Any,
        limit: int = 1,
    ) -> list[tuple[str, dict[str, Any]]]:
        """Find ``(id, document)`` pairs whose ``field`` equals ``value``, oldest first."""
        ...
