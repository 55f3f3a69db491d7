"""Turns loosely typed client input into a canonical profile patch."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from core.exceptions import ValidationError
from domain.entities.profile_fields import (
    PROFILE_FIELDS_BY_KEY,
    STYLING_FIELDS_BY_KEY,
    STYLING_KEY,
    FieldSpec,
    coerce_value,
)


@dataclass
class ProfilePatch:
    """Fields to overwrite on a stored profile, keyed by entity attribute.

    Only fields that were present in the input and survived coercion appear
    in ``fields`` and ``styling``.
    """

    id: str
    fields: dict[str, Any] = field(default_factory=dict)
    styling: dict[str, Any] = field(default_factory=dict)
    rejected: list[str] = field(default_factory=list)
    ignored: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.fields and not self.styling


def require_id(profile_id: Any) -> str:
    """Validate the caller-supplied profile id."""
    if not isinstance(profile_id, str) or not profile_id.strip():
        raise ValidationError("Profile id is required", field="id")
    return profile_id.strip()


def normalize(profile_id: Any, raw: Mapping[str, Any] | None) -> ProfilePatch:
    """Build a :class:`ProfilePatch` from raw input.

    Raises:
        ValidationError: If the id is missing or the payload is not an object.

    A field whose value cannot be coerced is listed in ``rejected`` and left
    out of the patch; the rest of the payload is still applied.
    """
    patch = ProfilePatch(id=require_id(profile_id))
    if raw is None:
        return patch
    if not isinstance(raw, Mapping):
        raise ValidationError("Profile payload must be a JSON object")

    for key, value in raw.items():
        if key == STYLING_KEY:
            continue
        spec = PROFILE_FIELDS_BY_KEY.get(key)
        if spec is not None:
            _apply(patch.fields, patch.rejected, spec, value)
            continue
        # Older clients send style attributes flat at the top level.
        spec = STYLING_FIELDS_BY_KEY.get(key)
        if spec is not None:
            _apply(patch.styling, patch.rejected, spec, value)
            continue
        patch.ignored.append(key)

    if STYLING_KEY in raw:
        nested = raw[STYLING_KEY]
        if isinstance(nested, Mapping):
            for key, value in nested.items():
                spec = STYLING_FIELDS_BY_KEY.get(key)
                if spec is None:
                    patch.ignored.append(f"{STYLING_KEY}.{key}")
                    continue
                _apply(patch.styling, patch.rejected, spec, value, prefix=f"{STYLING_KEY}.")
        elif nested is not None:
            patch.rejected.append(STYLING_KEY)

    return patch


def _apply(
    target: dict[str, Any],
    rejected: list[str],
    spec: FieldSpec,
    value: Any,
    prefix: str = "",
) -> None:
    coerced, accepted = coerce_value(spec, value)
    if accepted:
        target[spec.attr] = coerced
    else:
        rejected.append(f"{prefix}{spec.key}")
