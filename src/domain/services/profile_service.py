"""Profile service: merge-upsert engine and lookups."""

import asyncio
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone
from typing import Any

import structlog

from core.exceptions import ProfileNotFoundError, StoreUnavailableError, ValidationError
from domain.entities.profile import Profile
from domain.services.profile_normalizer import ProfilePatch, normalize, require_id
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()

DEFAULT_COLLECTION = "profiles"
DEFAULT_TIMEOUT_SECONDS = 5.0
TIMESTAMP_STEP = timedelta(microseconds=1)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class SaveResult:
    """Outcome of a save: the stored profile plus the input keys not applied."""

    profile: Profile
    rejected: list[str] = field(default_factory=list)
    ignored: list[str] = field(default_factory=list)


def next_timestamp(now: datetime, previous: datetime | None) -> datetime:
    """Return ``now`` unless it would not move past ``previous``."""
    if previous is not None and now <= previous:
        return previous + TIMESTAMP_STEP
    return now


def apply_patch(current: Profile, patch: ProfilePatch) -> Profile:
    """Overwrite the fields present in ``patch``; everything else is kept."""
    styling = replace(current.styling, **patch.styling) if patch.styling else current.styling
    return replace(current, styling=styling, **patch.fields)


class ProfileService:
    """Service layer for Profile persistence.

    Writes are read-merge-write against the document store and are not atomic
    across requests: two concurrent saves of the same profile race and the
    last one to write wins.
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        collection: str = DEFAULT_COLLECTION,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._uow_factory = uow_factory
        self._collection = collection
        self._timeout = timeout
        self._clock = clock

    # --- Writes ---

    async def save(
        self,
        profile_id: Any,
        raw: Any,
        timeout: float | None = None,
    ) -> SaveResult:
        """Normalize raw client input and merge it into the stored profile."""
        patch = normalize(profile_id, raw)
        if patch.rejected or patch.ignored:
            logger.info(
                "profile_fields_dropped",
                profile_id=patch.id,
                rejected=patch.rejected,
                ignored=patch.ignored,
            )
        profile = await self.upsert(patch.id, patch, timeout=timeout)
        return SaveResult(profile=profile, rejected=patch.rejected, ignored=patch.ignored)

    async def upsert(
        self,
        profile_id: Any,
        patch: ProfilePatch,
        timeout: float | None = None,
    ) -> Profile:
        """Merge ``patch`` into the stored profile, creating it if needed.

        Raises:
            ValidationError: If the id is empty. Nothing is written.
            StoreUnavailableError: If the store fails or the timeout expires.
        """
        profile_id = require_id(profile_id)
        if patch.id != profile_id:
            raise ValidationError("Patch does not belong to this profile", field="id")

        async with self._bounded("upsert", profile_id, timeout):
            async with self._uow_factory() as uow:
                doc = await uow.documents.get(self._collection, profile_id)
                current = (
                    Profile.from_document(profile_id, doc)
                    if doc is not None
                    else Profile(id=profile_id)
                )

                merged = apply_patch(current, patch)
                merged.updated_at = next_timestamp(self._clock(), current.updated_at)

                await uow.documents.put(
                    self._collection, profile_id, merged.to_document(), merge=False
                )
                await uow.commit()

        logger.info(
            "profile_saved",
            profile_id=profile_id,
            created=doc is None,
            fields=sorted(patch.fields),
            styling=sorted(patch.styling),
        )
        return merged

    # --- Reads ---

    async def get_by_id(self, profile_id: Any, timeout: float | None = None) -> Profile:
        """Get a profile by its primary id."""
        profile_id = require_id(profile_id)
        async with self._bounded("get_by_id", profile_id, timeout):
            async with self._uow_factory() as uow:
                doc = await uow.documents.get(self._collection, profile_id)
        if doc is None:
            raise ProfileNotFoundError(profile_id)
        return Profile.from_document(profile_id, doc)

    async def get_by_username(self, username: Any, timeout: float | None = None) -> Profile:
        """Get a profile by username.

        Usernames are not guaranteed unique; when several profiles share one,
        the earliest created profile is returned.
        """
        if not isinstance(username, str) or not username.strip():
            raise ValidationError("Username is required", field="name")
        username = username.strip()

        async with self._bounded("get_by_username", username, timeout):
            async with self._uow_factory() as uow:
                matches = await uow.documents.query(
                    self._collection, "username", username, limit=1
                )
        if not matches:
            raise ProfileNotFoundError(username, lookup="username")

        profile_id, doc = matches[0]
        return Profile.from_document(profile_id, doc)

    async def check_store(self, timeout: float | None = None) -> None:
        """Round-trip the profile collection once; raises StoreUnavailableError."""
        async with self._bounded("check_store", self._collection, timeout):
            async with self._uow_factory() as uow:
                await uow.documents.query(self._collection, "username", "", limit=1)

    @asynccontextmanager
    async def _bounded(
        self, operation: str, key: str, timeout: float | None
    ) -> AsyncIterator[None]:
        """Bound every store interaction of an operation by one timeout."""
        limit = self._timeout if timeout is None else timeout
        try:
            async with asyncio.timeout(limit):
                yield
        except TimeoutError as e:
            logger.error("store_timeout", operation=operation, key=key, timeout=limit)
            raise StoreUnavailableError(
                f"Document store did not respond within {limit}s"
            ) from e
        except StoreUnavailableError:
            logger.error("store_unavailable", operation=operation, key=key)
            raise
