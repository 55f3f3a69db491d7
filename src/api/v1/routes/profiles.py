"""Profile API routes."""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Query, Request

from api.v1.dependencies import get_profile_service
from api.v1.schemas.common import ErrorResponse
from api.v1.schemas.profile import (
    ProfileDetailResponse,
    ProfileResponse,
    ProfileSaveResponse,
)
from core.config import settings
from core.rate_limit import limiter
from domain.services.profile_service import ProfileService

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.get(
    "/by-username",
    response_model=ProfileDetailResponse,
    summary="Find a profile by username",
    responses={
        400: {"model": ErrorResponse, "description": "Username is required"},
        404: {"model": ErrorResponse, "description": "Profile not found"},
    },
)
@limiter.limit(settings.rate_limit_default)  # type: ignore[untyped-decorator]
async def get_profile_by_username(
    request: Request,
    name: Annotated[str | None, Query(description="Username to look up")] = None,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Get the profile registered under a username."""
    profile = await service.get_by_username(name)
    return ProfileDetailResponse(data=ProfileResponse.from_entity(profile))


@router.get(
    "/{profile_id}",
    response_model=ProfileDetailResponse,
    summary="Get a profile",
    responses={404: {"model": ErrorResponse, "description": "Profile not found"}},
)
@limiter.limit(settings.rate_limit_default)  # type: ignore[untyped-decorator]
async def get_profile(
    request: Request,
    profile_id: str,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Get a profile by its id.

    An id spelled ``by-username`` is routed to the username lookup instead;
    such a profile can only be read through the legacy ``/api/getProfile`` path.
    """
    profile = await service.get_by_id(profile_id)
    return ProfileDetailResponse(data=ProfileResponse.from_entity(profile))


@router.put(
    "/{profile_id}",
    response_model=ProfileSaveResponse,
    summary="Create or update a profile",
    responses={
        200: {"description": "Profile saved"},
        400: {"model": ErrorResponse, "description": "Missing id or malformed payload"},
        500: {"model": ErrorResponse, "description": "Document store unavailable"},
    },
)
@limiter.limit(settings.rate_limit_default)  # type: ignore[untyped-decorator]
async def save_profile(
    request: Request,
    profile_id: str,
    body: Annotated[Any, Body()] = None,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileSaveResponse:
    """Merge the submitted fields into the profile.

    Fields left out of the body keep their stored values. Values that cannot
    be coerced are skipped and listed in ``rejected_fields``; unknown keys are
    listed in ``ignored_fields``. A body that is not a JSON object is
    rejected with 400.
    """
    result = await service.save(profile_id, body)
    return ProfileSaveResponse(
        data=ProfileResponse.from_entity(result.profile),
        rejected_fields=result.rejected,
        ignored_fields=result.ignored,
    )
