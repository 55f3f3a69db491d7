"""Profile domain entity."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from domain.entities.profile_fields import (
    MISSING,
    PROFILE_FIELDS,
    STYLING_FIELDS,
    STYLING_KEY,
    coerce_styling,
    coerce_value,
)


@dataclass
class ProfileStyling:
    """Named style attributes of a profile page."""

    background_type: str = "default"
    background_value: str = "default"
    font: str = "default"
    font_color: str = "default"
    cursor: str = "default"
    trail_effect: bool = False
    trail_color: str = "default"
    hover_effect: str = "default"
    layout: str = "default"

    def to_document(self) -> dict[str, Any]:
        return {spec.key: getattr(self, spec.attr) for spec in STYLING_FIELDS}


@dataclass
class Profile:
    """Domain entity for a user's public profile."""

    id: str
    username: str | None = None
    display_name: str = ""
    bio: str = ""
    links: list[str] = field(default_factory=list)
    pfp_url: str | None = None
    banner_url: str | None = None
    song_embed: str | None = None
    autoplay_song: bool = False
    sections: list[Any] = field(default_factory=list)
    styling: ProfileStyling = field(default_factory=ProfileStyling)
    updated_at: datetime | None = None

    @property
    def resolved_display_name(self) -> str:
        """Display name, falling back to the username when never set."""
        return self.display_name or self.username or ""

    @classmethod
    def from_document(cls, profile_id: str, doc: Mapping[str, Any]) -> "Profile":
        """Hydrate a stored document of any schema revision.

        Every declared field is coerced again on read, so records written
        before a rule existed (``links`` stored as a string, style attributes
        stored flat at the top level) come back in canonical shape.
        """
        values: dict[str, Any] = {}
        for spec in PROFILE_FIELDS:
            value, accepted = coerce_value(spec, doc.get(spec.key, MISSING))
            values[spec.attr] = value if accepted else spec.default_value()

        nested = doc.get(STYLING_KEY)
        styling_source = {k: doc[k] for k in _STYLING_KEYS if k in doc}
        if isinstance(nested, Mapping):
            styling_source.update(nested)

        return cls(
            id=profile_id,
            styling=ProfileStyling(**coerce_styling(styling_source)),
            updated_at=parse_timestamp(doc.get("updatedAt")),
            **values,
        )

    def to_document(self) -> dict[str, Any]:
        """Serialize to the stored (and wire) document shape."""
        doc: dict[str, Any] = {"id": self.id}
        for spec in PROFILE_FIELDS:
            doc[spec.key] = getattr(self, spec.attr)
        doc[STYLING_KEY] = self.styling.to_document()
        doc["updatedAt"] = self.updated_at.isoformat() if self.updated_at else None
        return doc


_STYLING_KEYS = tuple(spec.key for spec in STYLING_FIELDS)


def parse_timestamp(raw: Any) -> datetime | None:
    """Parse a stored timestamp; naive values are taken as UTC."""
    if isinstance(raw, datetime):
        value = raw
    elif isinstance(raw, str) and raw:
        try:
            value = datetime.fromisoformat(raw)
        except ValueError:
            return None
    else:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value
