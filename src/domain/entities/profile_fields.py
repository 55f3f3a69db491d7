"""Declared profile fields and their coercion rules.

Every revision of the profile document is described by one table: a field
that a record does not carry simply reads as its declared default.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

LIST_DELIMITER = ","


class _Missing:
    """Marker for a key that is absent from the input."""

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


class FieldKind(StrEnum):
    """How a raw input value is turned into its stored shape."""

    LIST = "list"
    BOOL = "bool"
    STRING = "string"
    NULLABLE_STRING = "nullable_string"


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """A declared profile field.

    ``key`` is the name used on the wire and in stored documents, ``attr`` the
    attribute name on the :class:`~domain.entities.profile.Profile` entity.
    """

    key: str
    attr: str
    kind: FieldKind
    default: Any = None
    # Surrounding whitespace is dropped; used for keys that are looked up by equality.
    trim: bool = False

    def default_value(self) -> Any:
        if self.kind is FieldKind.LIST:
            return list(self.default or [])
        if self.kind is FieldKind.BOOL:
            return bool(self.default)
        return self.default


PROFILE_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec("username", "username", FieldKind.NULLABLE_STRING, trim=True),
    FieldSpec("displayName", "display_name", FieldKind.STRING, ""),
    FieldSpec("bio", "bio", FieldKind.STRING, ""),
    FieldSpec("links", "links", FieldKind.LIST),
    FieldSpec("pfpUrl", "pfp_url", FieldKind.NULLABLE_STRING),
    FieldSpec("bannerUrl", "banner_url", FieldKind.NULLABLE_STRING),
    FieldSpec("songEmbed", "song_embed", FieldKind.NULLABLE_STRING),
    FieldSpec("autoplaySong", "autoplay_song", FieldKind.BOOL, False),
    FieldSpec("sections", "sections", FieldKind.LIST),
)

STYLING_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec("backgroundType", "background_type", FieldKind.STRING, "default"),
    FieldSpec("backgroundValue", "background_value", FieldKind.STRING, "default"),
    FieldSpec("font", "font", FieldKind.STRING, "default"),
    FieldSpec("fontColor", "font_color", FieldKind.STRING, "default"),
    FieldSpec("cursor", "cursor", FieldKind.STRING, "default"),
    FieldSpec("trailEffect", "trail_effect", FieldKind.BOOL, False),
    FieldSpec("trailColor", "trail_color", FieldKind.STRING, "default"),
    FieldSpec("hoverEffect", "hover_effect", FieldKind.STRING, "default"),
    FieldSpec("layout", "layout", FieldKind.STRING, "default"),
)

PROFILE_FIELDS_BY_KEY: dict[str, FieldSpec] = {spec.key: spec for spec in PROFILE_FIELDS}
STYLING_FIELDS_BY_KEY: dict[str, FieldSpec] = {spec.key: spec for spec in STYLING_FIELDS}

STYLING_KEY = "styling"


def coerce_list(raw: Any, spec: FieldSpec) -> tuple[Any, bool]:
    if raw is MISSING or raw is None:
        return spec.default_value(), True
    if isinstance(raw, (list, tuple)):
        return list(raw), True
    if isinstance(raw, str):
        items = [item.strip() for item in raw.split(LIST_DELIMITER)]
        return [item for item in items if item], True
    return None, False


def coerce_bool(raw: Any, spec: FieldSpec) -> tuple[Any, bool]:
    if raw is MISSING:
        return spec.default_value(), True
    return bool(raw), True


def coerce_string(raw: Any, spec: FieldSpec) -> tuple[Any, bool]:
    if raw is MISSING or raw is None or raw == "":
        return spec.default_value(), True
    if isinstance(raw, str):
        value = raw.strip() if spec.trim else raw
        return (value, True) if value else (spec.default_value(), True)
    # bool is an int subclass but "True" is never a meaningful bio or url
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return str(raw), True
    return None, False


def coerce_nullable_string(raw: Any, spec: FieldSpec) -> tuple[Any, bool]:
    if raw is MISSING or raw is None or raw == "":
        return None, True
    return coerce_string(raw, spec)


_COERCERS = {
    FieldKind.LIST: coerce_list,
    FieldKind.BOOL: coerce_bool,
    FieldKind.STRING: coerce_string,
    FieldKind.NULLABLE_STRING: coerce_nullable_string,
}


def coerce_value(spec: FieldSpec, raw: Any = MISSING) -> tuple[Any, bool]:
    """Coerce ``raw`` according to ``spec``. Never raises."""
    return _COERCERS[spec.kind](raw, spec)


def lookup_field(field_name: str) -> FieldSpec | None:
    """Find a declared field by wire key, profile fields first."""
    return PROFILE_FIELDS_BY_KEY.get(field_name) or STYLING_FIELDS_BY_KEY.get(field_name)


def coerce(field_name: str, raw: Any = MISSING) -> tuple[Any, bool]:
    """Coerce a raw value for a named field.

    Returns ``(canonical_value, accepted)``. Undeclared field names are never
    accepted.
    """
    spec = lookup_field(field_name)
    if spec is None:
        return None, False
    return coerce_value(spec, raw)


def coerce_styling(raw: Mapping[str, Any]) -> dict[str, Any]:
    """Coerce every styling attribute, filling defaults for the absent ones."""
    styling: dict[str, Any] = {}
    for spec in STYLING_FIELDS:
        value, accepted = coerce_value(spec, raw.get(spec.key, MISSING))
        styling[spec.attr] = value if accepted else spec.default_value()
    return styling
