"""Routes kept at the paths and response shapes of the first API revision.

Older front-ends still call these; new clients should use ``/api/v1``.
"""

from collections.abc import Mapping
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Request, status
from fastapi.responses import PlainTextResponse

from api.v1.dependencies import get_identity_provider, get_profile_service
from api.v1.routes.auth import require_credentials
from api.v1.schemas.auth import Credentials, LoginResponse, RegisterResponse
from api.v1.schemas.common import MessageResponse
from api.v1.schemas.profile import to_legacy_document
from core.config import settings
from core.rate_limit import limiter
from domain.services.profile_service import ProfileService
from infrastructure.auth.provider import IIdentityProvider

router = APIRouter(tags=["legacy"])


@router.get("/", response_class=PlainTextResponse, include_in_schema=False)
async def root() -> str:
    return f"{settings.app_name} running"


@router.get(
    "/api/findProfile",
    response_model=dict[str, Any],
    summary="Find a profile by username (legacy)",
)
@limiter.limit(settings.rate_limit_default)  # type: ignore[untyped-decorator]
async def find_profile(
    request: Request,
    username: str | None = None,
    service: ProfileService = Depends(get_profile_service),
) -> dict[str, Any]:
    """Look a profile up by username; style attributes come back flat."""
    profile = await service.get_by_username(username)
    return to_legacy_document(profile)


@router.get(
    "/api/getProfile/{profile_id}",
    response_model=dict[str, Any],
    summary="Get a profile by id (legacy)",
)
@limiter.limit(settings.rate_limit_default)  # type: ignore[untyped-decorator]
async def get_profile(
    request: Request,
    profile_id: str,
    service: ProfileService = Depends(get_profile_service),
) -> dict[str, Any]:
    """Read a profile by id; style attributes come back flat."""
    profile = await service.get_by_id(profile_id)
    return to_legacy_document(profile)


@router.post(
    "/api/saveProfile",
    response_model=MessageResponse,
    summary="Save a profile, id taken from the body (legacy)",
)
@limiter.limit(settings.rate_limit_default)  # type: ignore[untyped-decorator]
async def save_profile(
    request: Request,
    body: Annotated[Any, Body()] = None,
    service: ProfileService = Depends(get_profile_service),
) -> MessageResponse:
    uid = body.get("uid") if isinstance(body, Mapping) else None
    await service.save(uid, body)
    return MessageResponse(message="Profile saved successfully!")


@router.post(
    "/auth/registerUser",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register an account (legacy)",
)
@limiter.limit(settings.rate_limit_default)  # type: ignore[untyped-decorator]
async def register_user(
    request: Request,
    body: Credentials,
    provider: IIdentityProvider = Depends(get_identity_provider),
) -> RegisterResponse:
    email, password = require_credentials(body)
    user = await provider.create_user(email, password)
    return RegisterResponse(uid=user.uid, verification_link=user.verification_link)


@router.post(
    "/auth/loginUser",
    response_model=LoginResponse,
    summary="Sign in (legacy)",
)
@limiter.limit(settings.rate_limit_default)  # type: ignore[untyped-decorator]
async def login_user(
    request: Request,
    body: Credentials,
    provider: IIdentityProvider = Depends(get_identity_provider),
) -> LoginResponse:
    """Check email and password.

    The first revision accepted an email alone; that is no longer enough and
    requests without a password get 400.
    """
    email, password = require_credentials(body)
    user = await provider.sign_in(email, password)
    return LoginResponse(uid=user.uid, email=user.email or email)
