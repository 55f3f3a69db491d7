"""Pydantic schemas for Profile API."""

from dataclasses import asdict
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from domain.entities.profile import Profile


class CamelModel(BaseModel):
    """Serializes with the camelCase keys existing clients expect."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StylingResponse(CamelModel):
    """Schema for profile styling attributes."""

    background_type: str = "default"
    background_value: str = "default"
    font: str = "default"
    font_color: str = "default"
    cursor: str = "default"
    trail_effect: bool = False
    trail_color: str = "default"
    hover_effect: str = "default"
    layout: str = "default"


class ProfileResponse(CamelModel):
    """Schema for Profile response."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": "Xk2fP9aQ",
                "username": "neon",
                "displayName": "Neon",
                "bio": "hi",
                "links": ["https://github.com/neon"],
                "pfpUrl": None,
                "bannerUrl": None,
                "songEmbed": None,
                "autoplaySong": False,
                "sections": [],
                "styling": {"font": "default", "trailEffect": True},
                "updatedAt": "2026-01-28T10:00:00+00:00",
            }
        },
    )

    id: str
    username: str | None = None
    display_name: str = ""
    bio: str = ""
    links: list[str] = Field(default_factory=list)
    pfp_url: str | None = None
    banner_url: str | None = None
    song_embed: str | None = None
    autoplay_song: bool = False
    sections: list[Any] = Field(default_factory=list)
    styling: StylingResponse = Field(default_factory=StylingResponse)
    updated_at: datetime | None = None

    @classmethod
    def from_entity(cls, profile: Profile) -> "ProfileResponse":
        return cls(
            id=profile.id,
            username=profile.username,
            display_name=profile.resolved_display_name,
            bio=profile.bio,
            links=[str(link) for link in profile.links],
            pfp_url=profile.pfp_url,
            banner_url=profile.banner_url,
            song_embed=profile.song_embed,
            autoplay_song=profile.autoplay_song,
            sections=profile.sections,
            styling=StylingResponse(**asdict(profile.styling)),
            updated_at=profile.updated_at,
        )


class ProfileDetailResponse(BaseModel):
    """Schema for single Profile."""

    data: ProfileResponse


class ProfileSaveResponse(BaseModel):
    """Schema for a successful save."""

    message: str = "Profile saved successfully!"
    data: ProfileResponse
    rejected_fields: list[str] = Field(default_factory=list)
    ignored_fields: list[str] = Field(default_factory=list)


def to_legacy_document(profile: Profile) -> dict[str, Any]:
    """Render a profile the way first-revision clients read it.

    Those clients expect the style attributes (``font``, ``cursor``,
    ``trailEffect``...) at the top level instead of under ``styling``.
    """
    doc = ProfileResponse.from_entity(profile).model_dump(
        mode="json", by_alias=True, exclude={"styling"}
    )
    doc.update(profile.styling.to_document())
    return doc
