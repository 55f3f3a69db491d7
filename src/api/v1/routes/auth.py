"""Account API routes, delegated to the identity provider."""

from fastapi import APIRouter, Depends, Request, status

from api.v1.dependencies import get_identity_provider
from api.v1.schemas.auth import Credentials, LoginResponse, RegisterResponse
from core.config import settings
from core.exceptions import ValidationError
from core.rate_limit import limiter
from infrastructure.auth.provider import IIdentityProvider

router = APIRouter(prefix="/auth", tags=["auth"])


def require_credentials(body: Credentials) -> tuple[str, str]:
    if not body.email or not body.password:
        raise ValidationError("Email and password are required.")
    return body.email, body.password


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register an account",
    responses={
        201: {"description": "Account created"},
        400: {"description": "Missing credentials or rejected by the identity provider"},
    },
)
@limiter.limit(settings.rate_limit_default)  # type: ignore[untyped-decorator]
async def register(
    request: Request,
    body: Credentials,
    provider: IIdentityProvider = Depends(get_identity_provider),
) -> RegisterResponse:
    """Create an account and return its uid, the id its profile is saved under."""
    email, password = require_credentials(body)
    user = await provider.create_user(email, password)
    return RegisterResponse(uid=user.uid, verification_link=user.verification_link)


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Sign in",
    responses={400: {"description": "Invalid credentials"}},
)
@limiter.limit(settings.rate_limit_default)  # type: ignore[untyped-decorator]
async def login(
    request: Request,
    body: Credentials,
    provider: IIdentityProvider = Depends(get_identity_provider),
) -> LoginResponse:
    """Check credentials and return the account uid."""
    email, password = require_credentials(body)
    user = await provider.sign_in(email, password)
    return LoginResponse(uid=user.uid, email=user.email or email)
